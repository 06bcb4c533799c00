"""Lenient conversions from generic tree nodes to typed values.

Every function returns ``None`` when no supported representation matches;
the caller decides between a default and a typed failure. Numbers may always
arrive as whitespace-trimmed numeric strings. Booleans are never numbers.
Only whitespace separates vector and list components.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple, Union

from .tree import Node
from .utils import Vec3

VertexRef = Tuple[Optional[int], Optional[Vec3]]


def _is_number(value: Node) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_float(value: Node) -> Optional[float]:
    if _is_number(value):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def to_int(value: Node) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            value = to_float(text)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def to_string(value: Node) -> Optional[str]:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return str(value)
    return None


def to_tokens(value: Node) -> Optional[List[Union[str, int, float]]]:
    """Split a whitespace separated string, or accept a flat list of scalars."""
    if isinstance(value, str):
        return list(value.split())
    if isinstance(value, list):
        if all(isinstance(item, str) or _is_number(item) for item in value):
            return list(value)
    return None


def _vec3_from(items: List[Node]) -> Optional[Vec3]:
    if len(items) < 3:
        return None
    xyz = [to_float(item) for item in items[:3]]
    if any(c is None for c in xyz):
        return None
    return (xyz[0], xyz[1], xyz[2])


def to_vec3(value: Node) -> Optional[Vec3]:
    """``"x y z"`` (extra tokens ignored), then ``[x, y, z]``, then ``{x, y, z}``."""
    if isinstance(value, str):
        return _vec3_from(value.split())
    if isinstance(value, list):
        return _vec3_from(value)
    if isinstance(value, dict):
        if all(axis in value for axis in ("x", "y", "z")):
            return _vec3_from([value["x"], value["y"], value["z"]])
    return None


def to_vertex_ref(value: Node) -> Optional[VertexRef]:
    """A lone integer is a 1-based vertex index; anything else must be a vector."""
    if isinstance(value, str) and len(value.split()) == 1:
        index = to_int(value)
        if index is not None:
            return index, None
    elif _is_number(value):
        index = to_int(value)
        if index is not None:
            return index, None
    xyz = to_vec3(value)
    if xyz is not None:
        return None, xyz
    return None


def is_finite(value: object) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, tuple):
        return all(is_finite(item) for item in value)
    return True
