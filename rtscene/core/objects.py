from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .coerce import to_int, to_vertex_ref
from .errors import ExpectedVector, ExpectedValue, InvalidVertexData
from .tree import Node, kind_of
from .utils import Vec3, as_vec3, ensure_unit_vectors
from .vertex import flatten_rows, split_payload
from .wire import DecodeContext, WireField, WireModel


class Primitive(WireModel):
    """Fields shared by every scene object."""

    id: Optional[str] = None
    material: Optional[str] = None

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "id": WireField("_id", "string"),
        "material": WireField("Material", "string"),
    }


def read_vertex_ref(data: Dict[str, Node], key: str, ctx: DecodeContext) -> Tuple[Optional[int], Optional[Vec3]]:
    """Read an index-or-vector field and resolve an index against the vertex store.

    Absent or unusable values fall back to vertex 1.
    """
    sub = ctx.child(key)
    ref = to_vertex_ref(data[key]) if data.get(key) is not None else None
    if ref is None:
        if data.get(key) is not None:
            sub.note(f"unrecognized vertex reference {data[key]!r}; using vertex 1")
        ref = (1, None)
    index, xyz = ref
    if index is not None and ctx.vertices is not None:
        xyz = ctx.vertices.resolve(index, sub)
    return index, xyz


class Sphere(Primitive):
    kind: Literal["sphere"] = "sphere"
    center_index: Optional[int] = None
    center: Optional[Vec3] = None
    radius: float = 1.0

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        **Primitive.WIRE_FIELDS,
        "radius": WireField("Radius", "scalar", 1.0),
    }

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        values["center_index"], values["center"] = read_vertex_ref(data, "Center", ctx)
        return values


class Plane(Primitive):
    kind: Literal["plane"] = "plane"
    point_index: Optional[int] = None
    point: Optional[Vec3] = None
    normal: Vec3 = (0.0, 0.0, 1.0)

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        **Primitive.WIRE_FIELDS,
        "normal": WireField("Normal", "vec3", (0.0, 0.0, 1.0)),
    }

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        values["point_index"], values["point"] = read_vertex_ref(data, "Point", ctx)
        return values


class Triangle(Primitive):
    """Triangle addressed by three 1-based vertex indices.

    ``prepare()`` caches the edge vectors ``e1 = v1 - v0``, ``e2 = v2 - v0``
    and the unit normal the first time it runs; later calls are no-ops.
    """

    kind: Literal["triangle"] = "triangle"
    indices: Tuple[int, int, int]
    vertices: Optional[Tuple[Vec3, Vec3, Vec3]] = None

    _e1: Optional[Vec3] = PrivateAttr(default=None)
    _e2: Optional[Vec3] = PrivateAttr(default=None)
    _normal: Optional[Vec3] = PrivateAttr(default=None)
    _prepared: bool = PrivateAttr(default=False)

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        **Primitive.WIRE_FIELDS,
        "indices": WireField("Indices", "ints", required=True),
    }

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        sub = ctx.child("Indices")
        indices = values["indices"]
        if len(indices) < 3:
            raise ExpectedVector(f"expected 3 vertex indices, got {len(indices)}", sub.path_str)
        if len(indices) > 3:
            sub.note(f"{len(indices)} indices given; keeping the first 3")
        values["indices"] = tuple(indices[:3])
        if ctx.vertices is not None:
            values["vertices"] = tuple(ctx.vertices.resolve(i, sub) for i in values["indices"])
        return values

    def prepare(self) -> "Triangle":
        if self._prepared:
            return self
        if self.vertices is None:
            raise InvalidVertexData("triangle vertices are unresolved", self.id)
        v0, v1, v2 = (np.asarray(v, dtype=np.float64) for v in self.vertices)
        e1 = v1 - v0
        e2 = v2 - v0
        self._e1 = as_vec3(e1)
        self._e2 = as_vec3(e2)
        self._normal = as_vec3(ensure_unit_vectors(np.cross(e1, e2)[None, :])[0])
        self._prepared = True
        return self

    @property
    def is_prepared(self) -> bool:
        return self._prepared

    @property
    def e1(self) -> Vec3:
        return self.prepare()._e1

    @property
    def e2(self) -> Vec3:
        return self.prepare()._e2

    @property
    def normal(self) -> Vec3:
        return self.prepare()._normal


class Face(BaseModel):
    """Flat list of 1-based vertex indices, three per triangle."""

    model_config = ConfigDict(frozen=True)

    indices: Tuple[int, ...] = ()
    type: str = "triangle"

    def triplets(self) -> List[Tuple[int, int, int]]:
        idx = self.indices
        return [(idx[i], idx[i + 1], idx[i + 2]) for i in range(0, len(idx), 3)]

    @classmethod
    def from_node(cls, node: Node, ctx: Optional[DecodeContext] = None) -> "Face":
        ctx = ctx if ctx is not None else DecodeContext()
        payload, kind = split_payload(node, ctx, "triangle")
        if not isinstance(payload, (str, list)):
            raise ExpectedVector(f"expected face indices, got {kind_of(payload)}", ctx.path_str)
        indices = []
        for index, token in enumerate(flatten_rows(payload, ctx, "indices", exact=True)):
            value = to_int(token)
            if value is None:
                raise ExpectedValue(f"expected an integer, got {token!r}", ctx.item(index).path_str)
            indices.append(value)
        if len(indices) % 3:
            raise InvalidVertexData(f"{len(indices)} face indices are not a multiple of 3", ctx.path_str)
        return cls(indices=tuple(indices), type=kind)


class Mesh(Primitive):
    kind: Literal["mesh"] = "mesh"
    faces: Face = Field(default_factory=Face)
    triangles: Tuple[Triangle, ...] = ()

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        sub = ctx.child("Faces")
        if data.get("Faces") is None:
            raise ExpectedVector("expected face indices: field is missing", sub.path_str)
        faces = Face.from_node(data["Faces"], sub)
        triangles = []
        for number, triplet in enumerate(faces.triplets()):
            vertices = None
            if ctx.vertices is not None:
                face_ctx = sub.item(number)
                vertices = tuple(ctx.vertices.resolve(i, face_ctx) for i in triplet)
            triangles.append(Triangle(material=values["material"], indices=triplet, vertices=vertices))
        values["faces"] = faces
        values["triangles"] = tuple(triangles)
        return values


SceneObject = Annotated[
    Union[Plane, Sphere, Triangle, Mesh],
    Field(discriminator="kind"),
]
