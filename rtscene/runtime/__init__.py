from .builders import OBJECT_REGISTRY, assemble_scene, build_node

__all__ = ["OBJECT_REGISTRY", "assemble_scene", "build_node"]
