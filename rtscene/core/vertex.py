from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .coerce import is_finite, to_float, to_string
from .errors import InvalidVertexData
from .tree import Node, kind_of
from .utils import Vec3, as_vec3
from .wire import DecodeContext


def split_payload(node: Node, ctx: DecodeContext, default_type: str) -> Tuple[Node, str]:
    """Unwrap the ``{"_data": ..., "_type": ...}`` envelope used by JSON scenes.

    XML scenes deliver the bare payload (text collapse drops the attributes).
    """
    if isinstance(node, dict):
        kind = to_string(node.get("_type")) if node.get("_type") is not None else None
        return node.get("_data"), kind or default_type
    return node, default_type


def flatten_rows(payload: Node, ctx: DecodeContext, unit: str = "components", exact: bool = False) -> List[Node]:
    """Flatten a string, flat list, list of rows or list of row strings into tokens.

    List rows need at least 3 entries; with ``exact`` they need exactly 3.
    """
    if isinstance(payload, str):
        return list(payload.split())
    if not isinstance(payload, list):
        raise InvalidVertexData(f"expected rows of numbers, got {kind_of(payload)}", ctx.path_str)
    tokens: List[Node] = []
    for index, row in enumerate(payload):
        if isinstance(row, list):
            if len(row) < 3 or (exact and len(row) != 3):
                raise InvalidVertexData(f"row has {len(row)} {unit}, expected 3", ctx.item(index).path_str)
            tokens.extend(row[:3])
        elif isinstance(row, str):
            tokens.extend(row.split())
        else:
            tokens.append(row)
    return tokens


@dataclass(frozen=True, eq=False)
class VertexData:
    """Shared vertex storage: 0-based internally, addressed 1-based by primitives."""

    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float64))
    type: str = "xyz"

    def __post_init__(self) -> None:
        pts = np.array(self.points, dtype=np.float64).reshape(-1, 3)
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __getitem__(self, index: int) -> Vec3:
        return as_vec3(self.points[index])

    def resolve(self, index: int, ctx: Optional[DecodeContext] = None) -> Vec3:
        """Look up a 1-based vertex reference; out-of-range is fatal."""
        count = len(self)
        if not 1 <= index <= count:
            path = ctx.path_str if ctx is not None else None
            raise InvalidVertexData(f"vertex index {index} outside [1, {count}]", path)
        return as_vec3(self.points[index - 1])

    @classmethod
    def from_node(cls, node: Node, ctx: Optional[DecodeContext] = None) -> "VertexData":
        ctx = ctx if ctx is not None else DecodeContext()
        if node is None:
            return cls()
        payload, kind = split_payload(node, ctx, "xyz")
        if payload is None:
            return cls(type=kind)
        values = []
        for index, token in enumerate(flatten_rows(payload, ctx)):
            value = to_float(token)
            if value is None:
                raise InvalidVertexData(f"vertex component {token!r} is not a number", ctx.item(index).path_str)
            if not ctx.allow_nan and not is_finite(value):
                raise InvalidVertexData(f"vertex component {token!r} is not finite", ctx.item(index).path_str)
            values.append(value)
        if len(values) % 3:
            raise InvalidVertexData(f"{len(values)} components do not form whole xyz rows", ctx.path_str)
        return cls(points=np.asarray(values, dtype=np.float64), type=kind)
