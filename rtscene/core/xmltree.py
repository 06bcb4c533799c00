"""XML front end: turns an XML scene into the same tree the JSON front end yields.

The document is consumed as a stream of start/text/end tokens pulled from an
lxml pull parser; a stack of open elements is the only builder state. For
every element:

- ``id`` and ``type`` attributes become the ``_id`` and ``_type`` keys;
- an element without child elements collapses to its trimmed text (any
  attributes are then dropped, which is recorded as a notice); without text
  it stays a map of its attributes, possibly empty;
- an element with child elements stays a map and its loose text is dropped;
- a tag repeated among siblings turns into a list on its second occurrence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Set

from lxml import etree

from .diagnostics import IssueCollector
from .errors import DecodingFailed
from .tree import Node
from .utils import get_logger

_log = get_logger()

ATTRIBUTE_KEYS: Dict[str, str] = {"id": "_id", "type": "_type"}

START, TEXT, END = "start", "text", "end"

_CHUNK_SIZE = 64 * 1024


class Token(NamedTuple):
    kind: str
    tag: str = ""
    attrs: Mapping[str, str] = MappingProxyType({})
    text: str = ""


def _local_name(elem: etree._Element) -> str:
    return etree.QName(elem).localname


def _drain(parser: etree.XMLPullParser) -> Iterator[Token]:
    for event, elem in parser.read_events():
        if event == "start":
            yield Token(START, tag=_local_name(elem), attrs=dict(elem.attrib))
            continue
        parts = [elem.text or ""]
        parts.extend(child.tail or "" for child in elem)
        yield Token(TEXT, text="".join(parts))
        yield Token(END, tag=_local_name(elem))
        elem.clear(keep_tail=True)


def iter_tokens(data: bytes) -> Iterator[Token]:
    """Yield start/text/end tokens for ``data``; malformed input raises DecodingFailed."""
    parser = etree.XMLPullParser(
        events=("start", "end"),
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )
    try:
        for offset in range(0, len(data), _CHUNK_SIZE):
            parser.feed(data[offset:offset + _CHUNK_SIZE])
            yield from _drain(parser)
        parser.close()
    except etree.XMLSyntaxError as exc:
        raise DecodingFailed(f"malformed XML: {exc}") from exc
    yield from _drain(parser)


@dataclass
class _Open:
    tag: str
    node: Dict[str, Node] = field(default_factory=dict)
    text: List[str] = field(default_factory=list)
    attributes: int = 0
    children: int = 0
    repeated: Set[str] = field(default_factory=set)


def _attach(parent: _Open, tag: str, value: Node) -> None:
    parent.children += 1
    if tag in parent.repeated:
        parent.node[tag].append(value)
    elif tag in parent.node:
        parent.node[tag] = [parent.node[tag], value]
        parent.repeated.add(tag)
    else:
        parent.node[tag] = value


def _finish(frame: _Open, path: str, collector: Optional[IssueCollector]) -> Node:
    if frame.children:
        return frame.node
    text = "".join(frame.text).strip()
    if not text:
        return frame.node
    if frame.attributes and collector is not None:
        dropped = ", ".join(sorted(frame.node))
        collector.record(path, f"text element discards attributes ({dropped})")
    return text


def build_tree(data: bytes, collector: Optional[IssueCollector] = None) -> Dict[str, Node]:
    """Build the generic tree for an XML document.

    The returned map holds the document element under its tag name, e.g.
    ``{"Scene": {...}}``. No partial tree is returned on malformed input.
    """
    document = _Open(tag="")
    stack: List[_Open] = [document]
    for token in iter_tokens(bytes(data)):
        if token.kind == START:
            frame = _Open(tag=token.tag)
            for attr, key in ATTRIBUTE_KEYS.items():
                if attr in token.attrs:
                    frame.node[key] = token.attrs[attr]
            frame.attributes = len(frame.node)
            stack.append(frame)
        elif token.kind == TEXT:
            stack[-1].text.append(token.text)
        else:
            path = ".".join(f.tag for f in stack[1:])
            frame = stack.pop()
            _attach(stack[-1], frame.tag, _finish(frame, path, collector))
    if len(stack) != 1:
        raise DecodingFailed("XML document ended with unclosed elements")
    _log.debug("Built XML tree with root keys %s", list(document.node))
    return document.node
