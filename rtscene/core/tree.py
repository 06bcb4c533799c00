"""Generic Value Tree shared by the JSON and XML front ends.

A node is one of ``None``, ``str``, a number, a ``list`` of nodes or a
``dict`` mapping strings to nodes (insertion ordered). Trees are built once
per document and never modified afterwards.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from .errors import DecodingFailed

Node = Union[None, str, int, float, bool, List[Any], Dict[str, Any]]

DEFAULT_ROOT_KEY = "Scene"


def kind_of(node: Node) -> str:
    if node is None:
        return "null"
    if isinstance(node, bool):
        return "boolean"
    if isinstance(node, str):
        return "string"
    if isinstance(node, (int, float)):
        return "number"
    if isinstance(node, list):
        return "list"
    if isinstance(node, dict):
        return "map"
    return type(node).__name__


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite constant {name} is not allowed")


def parse_json(data: bytes, allow_nan: bool = False) -> Node:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodingFailed(f"JSON input is not valid UTF-8: {exc}") from exc
    try:
        if allow_nan:
            return json.loads(text)
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodingFailed(f"malformed JSON: {exc}") from exc


def wrap_root(tree: Node, root_key: Optional[str]) -> Node:
    """Wrap ``tree`` under ``root_key`` unless it already carries that key."""
    if not root_key:
        return tree
    if isinstance(tree, dict) and root_key in tree:
        return tree
    return {root_key: tree}
