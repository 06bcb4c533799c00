from __future__ import annotations

from typing import Any, Callable, Dict, List, Type

from ..core.errors import DecodingFailed
from ..core.objects import Mesh, Plane, Primitive, Sphere, Triangle
from ..core.scene import Camera, Lights, Material, Scene
from ..core.tree import Node, kind_of
from ..core.utils import get_logger
from ..core.vertex import VertexData
from ..core.wire import DecodeContext, one_or_many, read_fields

_log = get_logger()

OBJECT_REGISTRY: Dict[str, Type[Primitive]] = {
    "Sphere": Sphere,
    "Triangle": Triangle,
    "Mesh": Mesh,
    "Plane": Plane,
}


def build_section(
    data: Dict[str, Node],
    section: str,
    entry: str,
    decode: Callable[[Node, DecodeContext], Any],
    ctx: DecodeContext,
) -> List[Any]:
    """Decode ``data[section][entry]`` as one entry or a list of entries."""
    node = data.get(section)
    if node is None:
        return []
    sub = ctx.child(section)
    if not isinstance(node, dict):
        sub.note(f"expected a map holding {entry} entries, got {kind_of(node)}; section ignored")
        return []
    return one_or_many(decode, node.get(entry), sub.child(entry))


def build_lights(data: Dict[str, Node], ctx: DecodeContext) -> Lights:
    node = data.get("Lights")
    if node is None:
        return Lights()
    try:
        return Lights.from_node(node, ctx.child("Lights"))
    except DecodingFailed as exc:
        ctx.child("Lights").note(f"lights ignored: {exc.message}")
        return Lights()


def build_objects(data: Dict[str, Node], ctx: DecodeContext) -> List[Primitive]:
    """Decode every registered primitive tag under ``Objects``, in document order.

    ``ctx`` must already carry the scene's vertex store. Unknown tags are skipped.
    """
    node = data.get("Objects")
    if node is None:
        return []
    sub = ctx.child("Objects")
    if not isinstance(node, dict):
        sub.note(f"expected a map of object tags, got {kind_of(node)}; section ignored")
        return []
    objects: List[Primitive] = []
    for tag, entries in node.items():
        cls = OBJECT_REGISTRY.get(tag)
        if cls is None:
            sub.child(tag).note(f"unknown object tag '{tag}' ignored")
            continue
        objects.extend(one_or_many(cls.from_node, entries, sub.child(tag)))
    return objects


def assemble_scene(node: Node, ctx: DecodeContext) -> Scene:
    """Build a Scene: globals, then cameras/lights/materials, then vertices, then objects."""
    if not isinstance(node, dict):
        raise DecodingFailed(f"expected a scene map, got {kind_of(node)}", ctx.path_str)
    values = read_fields(Scene.WIRE_FIELDS, node, ctx)
    cameras = build_section(node, "Cameras", "Camera", Camera.from_node, ctx)
    lights = build_lights(node, ctx)
    materials = build_section(node, "Materials", "Material", Material.from_node, ctx)
    vertex_data = VertexData.from_node(node.get("VertexData"), ctx.child("VertexData"))
    objects = build_objects(node, ctx.with_vertices(vertex_data))
    _log.debug(
        "Assembled scene: %d cameras, %d lights, %d materials, %d vertices, %d objects",
        len(cameras), len(lights.points), len(materials), len(vertex_data), len(objects),
    )
    return Scene(
        **values,
        cameras=cameras,
        lights=lights,
        materials=materials,
        vertex_data=vertex_data,
        objects=objects,
    )


ROOT_BUILDERS: Dict[type, Callable[[Node, DecodeContext], Any]] = {
    Scene: assemble_scene,
    VertexData: VertexData.from_node,
}


def build_node(target: type, node: Node, ctx: DecodeContext) -> Any:
    builder = ROOT_BUILDERS.get(target)
    if builder is None:
        from_node = getattr(target, "from_node", None)
        if from_node is None:
            raise TypeError(f"{target!r} cannot be decoded from a scene document")
        builder = from_node
    return builder(node, ctx)
