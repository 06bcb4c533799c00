from __future__ import annotations

import codecs
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class SceneFormat(str, Enum):
    JSON = "json"
    XML = "xml"
    AUTO = "auto"

    @classmethod
    def _missing_(cls, value: object) -> Optional["SceneFormat"]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SceneFormat":
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return cls.JSON
        if suffix == ".xml":
            return cls.XML
        return cls.AUTO


FormatHint = Union[SceneFormat, str, None]


def detect_format(data: bytes, hint: FormatHint = None) -> SceneFormat:
    """Classify ``data`` as JSON or XML.

    A hint other than ``auto`` wins outright. Otherwise a leading UTF-8 BOM
    and whitespace are skipped and a ``<`` selects XML; everything else,
    including an empty buffer, is JSON.
    """
    if hint is not None:
        fmt = SceneFormat(hint)
        if fmt is not SceneFormat.AUTO:
            return fmt
    body = bytes(data)
    if body.startswith(codecs.BOM_UTF8):
        body = body[len(codecs.BOM_UTF8):]
    body = body.lstrip()
    return SceneFormat.XML if body[:1] == b"<" else SceneFormat.JSON
