"""rtscene – ray-tracing scene decoder.

Turns loosely typed JSON or XML scene descriptions into one typed scene graph:
- Format sniffing and the XML-to-tree front end (core.sniff, core.xmltree)
- Lenient per-field coercion driven by field tables (core.coerce, core.wire)
- Typed models: Scene, Camera, Material, Lights, VertexData (core.scene, core.vertex)
- Closed primitive union: Plane, Sphere, Triangle, Mesh (core.objects)
- Object registry and scene assembler (runtime.builders)
- decode / load entry points (sdk)
"""

from .core.diagnostics import Issue, IssueCollector
from .core.errors import (
    SceneError, DecodeError, LoadError,
    ExpectedValue, ExpectedVector, InvalidVertexData, DecodingFailed, UnreadableSource,
)
from .core.objects import Face, Mesh, Plane, SceneObject, Sphere, Triangle
from .core.scene import Camera, Lights, Material, PointLight, Scene
from .core.sniff import SceneFormat, detect_format
from .core.source import ByteSource, FileSource
from .core.tree import DEFAULT_ROOT_KEY
from .core.vertex import VertexData
from .sdk import decode, load, parse_document

__version__ = "0.1.0"
