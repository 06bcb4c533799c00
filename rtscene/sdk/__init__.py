from .api import decode, decode_root, load, parse_document

__all__ = ["decode", "decode_root", "load", "parse_document"]
