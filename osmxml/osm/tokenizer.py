from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import BinaryIO

from lxml import etree

DEFAULT_CHUNK_SIZE = 64 * 1024


class EventKind(Enum):
    START = "start"
    EMPTY = "empty"
    END = "end"
    EOF = "eof"


@dataclass(frozen=True)
class XmlEvent:
    kind: EventKind
    name: str = ""
    attrs: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def start(cls, name: str, **attrs: str) -> XmlEvent:
        return cls(EventKind.START, name, list(attrs.items()))

    @classmethod
    def empty(cls, name: str, **attrs: str) -> XmlEvent:
        return cls(EventKind.EMPTY, name, list(attrs.items()))

    @classmethod
    def end(cls, name: str) -> XmlEvent:
        return cls(EventKind.END, name)


EOF_EVENT = XmlEvent(EventKind.EOF)


def _release(element: etree._Element) -> None:
    # attributes were captured at the start event, nothing below is needed again
    element.clear(keep_tail=True)
    parent = element.getparent()
    if parent is None:
        return
    while element.getprevious() is not None:
        del parent[0]


def _drain(parser: etree.XMLPullParser) -> Generator[XmlEvent, None, None]:
    for action, element in parser.read_events():
        if action == "start":
            yield XmlEvent(EventKind.START, element.tag, list(element.attrib.items()))
        else:
            yield XmlEvent(EventKind.END, element.tag)
            _release(element)


def _advance(parser: etree.XMLPullParser, data: bytes | None) -> Generator[XmlEvent, None, None]:
    try:
        if data is None:
            parser.close()
        else:
            parser.feed(data)
    except etree.XMLSyntaxError:
        # elements completed before the error in this chunk still count
        yield from _drain(parser)
        raise
    yield from _drain(parser)


def read_events(source: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Generator[XmlEvent, None, None]:
    """Tokenize an OSM XML byte stream incrementally.

    Raises ``lxml.etree.XMLSyntaxError`` for malformed input, including
    undecodable attribute bytes, after every event parsed before the error
    has been yielded.
    """
    parser = etree.XMLPullParser(
        events=("start", "end"),
        resolve_entities=False,
        huge_tree=True,
        remove_comments=True,
        remove_pis=True,
    )

    fed = False
    while True:
        data = source.read(chunk_size)
        if not data:
            break
        fed = True
        yield from _advance(parser, data)

    # an empty stream is an empty document, not a syntax error
    if fed:
        yield from _advance(parser, None)
    yield EOF_EVENT
