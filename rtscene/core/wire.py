from __future__ import annotations

from dataclasses import dataclass, replace
from typing import (TYPE_CHECKING, Any, Callable, ClassVar, Dict, List,
                    Mapping, Optional, Tuple, TypeVar)

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, model_validator

from .coerce import is_finite, to_float, to_int, to_string, to_tokens, to_vec3
from .diagnostics import IssueCollector
from .errors import DecodingFailed, ExpectedValue, ExpectedVector
from .tree import Node, kind_of
from .utils import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .vertex import VertexData

_log = get_logger()

CONTEXT_KEY = "rtscene"

T = TypeVar("T")


@dataclass(frozen=True)
class DecodeContext:
    """Where a decode currently is, plus the per-call shared state."""

    path: Tuple[str, ...] = ()
    collector: Optional[IssueCollector] = None
    vertices: Optional["VertexData"] = None
    allow_nan: bool = False

    @property
    def path_str(self) -> str:
        out = ""
        for segment in self.path:
            if segment.startswith("[") or not out:
                out += segment
            else:
                out += "." + segment
        return out

    def child(self, key: str) -> "DecodeContext":
        return replace(self, path=self.path + (key,))

    def item(self, index: int) -> "DecodeContext":
        return replace(self, path=self.path + (f"[{index}]",))

    def with_vertices(self, vertices: "VertexData") -> "DecodeContext":
        return replace(self, vertices=vertices)

    def note(self, message: str) -> None:
        if self.collector is not None:
            self.collector.record(self.path_str, message)
        else:
            _log.debug("%s: %s", self.path_str or "<root>", message)


SCALAR_KINDS = ("scalar", "int", "string")


def _read_scalar(value: Node, wf: "WireField", ctx: DecodeContext) -> Any:
    if wf.kind == "scalar":
        out = to_float(value)
    elif wf.kind == "int":
        out = to_int(value)
    elif wf.kind == "string":
        out = to_string(value)
    else:
        out = to_vec3(value)
    if out is not None and not ctx.allow_nan and not is_finite(out):
        return None
    return out


def _read_numbers(value: Node, wf: "WireField", ctx: DecodeContext) -> Any:
    tokens = to_tokens(value)
    if tokens is None:
        return None
    parse = to_int if wf.kind == "ints" else to_float
    numbers = []
    for index, token in enumerate(tokens):
        number = parse(token)
        if number is None or (not ctx.allow_nan and not is_finite(number)):
            if wf.required:
                raise ExpectedValue(f"expected a number, got {token!r}", ctx.item(index).path_str)
            return None
        numbers.append(number)
    if wf.size:
        if len(numbers) < wf.size:
            return None
        return tuple(numbers[:wf.size])
    return tuple(numbers)


_READERS: Dict[str, Callable[[Node, "WireField", DecodeContext], Any]] = {
    "scalar": _read_scalar,
    "int": _read_scalar,
    "string": _read_scalar,
    "vec3": _read_scalar,
    "scalars": _read_numbers,
    "ints": _read_numbers,
}


@dataclass(frozen=True)
class WireField:
    """One row of a model's field table: wire key, coercion kind and default.

    Optional fields never raise: an unusable value resolves to ``default``
    and a notice is recorded. Required fields raise ExpectedValue (scalar,
    int, string) or ExpectedVector (vec3, scalars, ints).
    """

    key: str
    kind: str = "scalar"
    default: Any = None
    required: bool = False
    size: int = 0
    aliases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in _READERS:
            raise ValueError(f"Unknown wire field kind '{self.kind}'")

    def _locate(self, data: Mapping[str, Node]) -> Optional[str]:
        for key in (self.key,) + self.aliases:
            if data.get(key) is not None:
                return key
        return None

    def _failure(self, detail: str, ctx: DecodeContext) -> Exception:
        error = ExpectedValue if self.kind in SCALAR_KINDS else ExpectedVector
        return error(f"expected {self.kind} value: {detail}", ctx.path_str)

    def read(self, data: Mapping[str, Node], ctx: DecodeContext) -> Any:
        key = self._locate(data)
        if key is None:
            if self.required:
                raise self._failure("field is missing", ctx.child(self.key))
            return self.default
        sub = ctx.child(key)
        value = data[key]
        out = _READERS[self.kind](value, self, sub)
        if out is not None:
            return out
        if self.required:
            raise self._failure(f"unrecognized {kind_of(value)} {value!r}", sub)
        sub.note(f"unrecognized {self.kind} value {value!r}; using default {self.default!r}")
        return self.default


def read_fields(fields: Mapping[str, WireField], data: Mapping[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
    return {name: wf.read(data, ctx) for name, wf in fields.items()}


def context_of(info: ValidationInfo) -> Optional[DecodeContext]:
    if isinstance(info.context, dict):
        ctx = info.context.get(CONTEXT_KEY)
        if isinstance(ctx, DecodeContext):
            return ctx
    return None


class WireModel(BaseModel):
    """Frozen model decoded from a generic tree map through ``WIRE_FIELDS``.

    Plain keyword construction bypasses the wire table; only ``from_node``
    (which supplies a DecodeContext) runs the lenient coercions.
    """

    model_config = ConfigDict(frozen=True)

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {}

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any, info: ValidationInfo) -> Any:
        ctx = context_of(info)
        if ctx is None or isinstance(data, BaseModel):
            return data
        if not isinstance(data, dict):
            raise ValueError(f"expected a map for {cls.__name__}, got {kind_of(data)}")
        values = read_fields(cls.WIRE_FIELDS, data, ctx)
        return cls._finish(values, data, ctx)

    @classmethod
    def _finish(cls, values: Dict[str, Any], data: Dict[str, Node], ctx: DecodeContext) -> Dict[str, Any]:
        return values

    @classmethod
    def from_node(cls: type[T], node: Node, ctx: Optional[DecodeContext] = None) -> T:
        ctx = ctx if ctx is not None else DecodeContext()
        try:
            return cls.model_validate(node, context={CONTEXT_KEY: ctx})
        except ValidationError as exc:
            first = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            raise DecodingFailed(f"cannot decode {cls.__name__}: {first}", ctx.path_str) from exc


def _as_list(decode: Callable[[Node, DecodeContext], T], node: Node, ctx: DecodeContext) -> List[T]:
    if not isinstance(node, list):
        raise DecodingFailed(f"expected a list, got {kind_of(node)}", ctx.path_str)
    return [decode(item, ctx.item(index)) for index, item in enumerate(node)]


def _as_single(decode: Callable[[Node, DecodeContext], T], node: Node, ctx: DecodeContext) -> List[T]:
    return [decode(node, ctx)]


def one_or_many(decode: Callable[[Node, DecodeContext], T], node: Node, ctx: DecodeContext) -> List[T]:
    """Decode a collection that may be a list of entries or one bare entry.

    A list is tried first, then a single entry; when both fail on shape the
    collection is empty. Typed failures other than DecodingFailed propagate.
    """
    if node is None:
        return []
    failure: Optional[DecodingFailed] = None
    for attempt in (_as_list, _as_single):
        try:
            return attempt(decode, node, ctx)
        except DecodingFailed as exc:
            failure = exc
    ctx.note(f"collection ignored: {failure.message if failure else 'unusable'}")
    return []
