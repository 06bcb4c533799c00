from __future__ import annotations

from typing import Optional


class SceneError(Exception):
    """Base class for every failure raised while decoding or loading a scene.

    ``path`` is the dotted field path (``Scene.Objects.Triangle[2].Indices``)
    of the value that failed, when one is known.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.message = message
        self.path = path or None
        super().__init__(f"{self.path}: {message}" if self.path else message)


class DecodeError(SceneError):
    pass


class ExpectedValue(DecodeError):
    """A required scalar, integer or string field had no usable representation."""


class ExpectedVector(DecodeError):
    """A required vector or list field had no usable representation."""


class InvalidVertexData(DecodeError):
    """Vertex storage is malformed or a vertex index is out of range."""


class DecodingFailed(DecodeError):
    """Structural failure: malformed JSON/XML, or a node of the wrong shape."""


class LoadError(SceneError):
    pass


class UnreadableSource(LoadError):
    """The byte source could not deliver the document."""
