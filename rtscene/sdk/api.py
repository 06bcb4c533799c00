from __future__ import annotations

from pathlib import Path
from typing import Optional, Type, TypeVar, Union

from ..config import LoaderConfig
from ..core.diagnostics import IssueCollector
from ..core.errors import DecodingFailed
from ..core.scene import Scene
from ..core.sniff import FormatHint, SceneFormat, detect_format
from ..core.source import ByteSource, FileSource
from ..core.tree import DEFAULT_ROOT_KEY, Node, parse_json, wrap_root
from ..core.utils import get_logger
from ..core.wire import DecodeContext
from ..core.xmltree import build_tree
from ..runtime.builders import build_node

_log = get_logger()

T = TypeVar("T")

Source = Union[bytes, bytearray, memoryview, str, Path, ByteSource]


def parse_document(
    data: bytes,
    fmt: FormatHint = SceneFormat.JSON,
    root_key: Optional[str] = DEFAULT_ROOT_KEY,
    *,
    collector: Optional[IssueCollector] = None,
    allow_nan: bool = False,
) -> Node:
    """Turn raw bytes into a generic tree; XML trees are wrapped under ``root_key``."""
    resolved = detect_format(data, fmt)
    if resolved is SceneFormat.XML:
        return wrap_root(build_tree(data, collector=collector), root_key)
    return parse_json(bytes(data), allow_nan=allow_nan)


def decode_root(target: Type[T], document: Node, root_key: Optional[str], ctx: DecodeContext) -> T:
    """Decode ``{root_key: body}`` first, then the document itself as a bare body.

    Only a structural failure of the first attempt moves on to the second;
    the second attempt's failure propagates.
    """
    if root_key:
        try:
            if not isinstance(document, dict) or root_key not in document:
                raise DecodingFailed(f"root key '{root_key}' not found", ctx.path_str)
            return build_node(target, document[root_key], ctx.child(root_key))
        except DecodingFailed as exc:
            _log.debug("Keyed decode failed (%s); trying bare document", exc)
    return build_node(target, document, ctx)


def decode(
    target: Type[T],
    data: bytes,
    root_key: Optional[str] = DEFAULT_ROOT_KEY,
    *,
    fmt: FormatHint = SceneFormat.JSON,
    collector: Optional[IssueCollector] = None,
    allow_nan: bool = False,
) -> T:
    """Decode ``data`` (JSON unless ``fmt`` says otherwise) into ``target``.

    Parameters
    ----------
    target:
        :class:`~rtscene.core.scene.Scene` or any model with ``from_node``.
    data:
        The complete document.
    root_key:
        Key the body is expected under; ``None`` decodes the document as a bare body.
    fmt:
        ``json``, ``xml`` or ``auto`` (sniff).
    collector:
        Optional :class:`IssueCollector` receiving non-fatal notices.
    """
    document = parse_document(data, fmt, root_key, collector=collector, allow_nan=allow_nan)
    ctx = DecodeContext(collector=collector, allow_nan=allow_nan)
    return decode_root(target, document, root_key, ctx)


def _read_source(source: Source, fmt: SceneFormat, cfg: LoaderConfig) -> tuple[bytes, SceneFormat]:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), fmt
    if isinstance(source, (str, Path)):
        if fmt is SceneFormat.AUTO:
            fmt = SceneFormat.from_path(source)
        source = FileSource(Path(source), max_bytes=cfg.max_bytes)
    return source.read(), fmt


def load(
    source: Source,
    root_key: Optional[str] = DEFAULT_ROOT_KEY,
    *,
    fmt: FormatHint = None,
    target: Type[T] = Scene,
    collector: Optional[IssueCollector] = None,
    config: Optional[LoaderConfig] = None,
) -> T:
    """Load a scene from raw bytes, a file path or any :class:`ByteSource`.

    ``fmt`` defaults to the config's format (``auto``). For paths, ``auto``
    is narrowed by the file extension before falling back to sniffing.
    """
    cfg = config or LoaderConfig()
    requested = SceneFormat(fmt if fmt is not None else cfg.format)
    data, hint = _read_source(source, requested, cfg)
    resolved = detect_format(data, hint)
    _log.debug("Loading %d bytes as %s", len(data), resolved.value)
    return decode(target, data, root_key, fmt=resolved, collector=collector, allow_nan=cfg.allow_nan)
