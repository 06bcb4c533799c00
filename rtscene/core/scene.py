from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .objects import Mesh, Plane, SceneObject, Sphere, Triangle
from .tree import Node
from .utils import ZERO3, Vec3
from .vertex import VertexData
from .wire import DecodeContext, WireField, WireModel, one_or_many


class Camera(WireModel):
    id: Optional[str] = None
    position: Vec3 = ZERO3
    gaze: Vec3 = ZERO3
    up: Vec3 = ZERO3
    near_plane: Tuple[float, float, float, float] = (-1.0, 1.0, -1.0, 1.0)  # l r b t
    near_distance: float = 1.0
    image_resolution: Tuple[int, int] = (512, 512)
    num_samples: int = 1
    image_name: str = "image.png"

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "id": WireField("_id", "string"),
        "position": WireField("Position", "vec3", ZERO3),
        "gaze": WireField("Gaze", "vec3", ZERO3),
        "up": WireField("Up", "vec3", ZERO3),
        "near_plane": WireField("NearPlane", "scalars", (-1.0, 1.0, -1.0, 1.0), size=4),
        "near_distance": WireField("NearDistance", "scalar", 1.0),
        "image_resolution": WireField("ImageResolution", "ints", (512, 512), size=2),
        "num_samples": WireField("NumSamples", "int", 1),
        "image_name": WireField("ImageName", "string", "image.png"),
    }


class Material(WireModel):
    id: Optional[str] = None
    type: Optional[str] = None
    ambient: Vec3 = ZERO3
    diffuse: Vec3 = ZERO3
    specular: Vec3 = ZERO3
    phong_exponent: float = 1.0
    mirror: Vec3 = ZERO3
    refraction_index: float = 1.5
    absorption: Vec3 = ZERO3

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "id": WireField("_id", "string"),
        "type": WireField("_type", "string"),
        "ambient": WireField("AmbientReflectance", "vec3", ZERO3),
        "diffuse": WireField("DiffuseReflectance", "vec3", ZERO3),
        "specular": WireField("SpecularReflectance", "vec3", ZERO3),
        "phong_exponent": WireField("PhongExponent", "scalar", 1.0),
        "mirror": WireField("MirrorReflectance", "vec3", ZERO3),
        "refraction_index": WireField("RefractionIndex", "scalar", 1.5),
        "absorption": WireField("AbsorptionCoefficient", "vec3", ZERO3, aliases=("AbsorptionIndex",)),
    }


class PointLight(WireModel):
    id: Optional[str] = None
    position: Vec3 = ZERO3
    intensity: Vec3 = ZERO3

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "id": WireField("_id", "string"),
        "position": WireField("Position", "vec3", ZERO3),
        "intensity": WireField("Intensity", "vec3", ZERO3),
    }


class Lights(WireModel):
    ambient: Vec3 = ZERO3
    points: List[PointLight] = Field(default_factory=list)

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "ambient": WireField("AmbientLight", "vec3", ZERO3),
    }

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        values["points"] = one_or_many(PointLight.from_node, data.get("PointLight"), ctx.child("PointLight"))
        return values


class Scene(BaseModel):
    """Root aggregate produced by the scene assembler.

    Built by :func:`rtscene.runtime.builders.assemble_scene`; ``WIRE_FIELDS``
    covers only the global parameters.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    max_recursion_depth: int = 6
    background_color: Vec3 = ZERO3
    shadow_ray_epsilon: float = 1e-3
    intersection_test_epsilon: float = 1e-6
    cameras: List[Camera] = Field(default_factory=list)
    lights: Lights = Field(default_factory=Lights)
    materials: List[Material] = Field(default_factory=list)
    vertex_data: VertexData = Field(default_factory=VertexData)
    objects: List[SceneObject] = Field(default_factory=list)

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "max_recursion_depth": WireField("MaxRecursionDepth", "int", 6),
        "background_color": WireField("BackgroundColor", "vec3", ZERO3),
        "shadow_ray_epsilon": WireField("ShadowRayEpsilon", "scalar", 1e-3),
        "intersection_test_epsilon": WireField("IntersectionTestEpsilon", "scalar", 1e-6),
    }

    def objects_of(self, kind: str) -> List[Any]:
        return [obj for obj in self.objects if obj.kind == kind]

    @property
    def spheres(self) -> List[Sphere]:
        return self.objects_of("sphere")

    @property
    def planes(self) -> List[Plane]:
        return self.objects_of("plane")

    @property
    def triangles(self) -> List[Triangle]:
        return self.objects_of("triangle")

    @property
    def meshes(self) -> List[Mesh]:
        return self.objects_of("mesh")

    def material(self, material_id: Optional[str]) -> Optional[Material]:
        for material in self.materials:
            if material.id == material_id:
                return material
        return None
