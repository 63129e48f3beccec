from __future__ import annotations

import logging
from collections.abc import Generator
from collections.abc import Iterable
from dataclasses import dataclass

from osmxml.filters import ReadFilter
from osmxml.osm.attrs import ParsedAttrs
from osmxml.osm.attrs import collect_attrs
from osmxml.osm.errors import StructureError
from osmxml.osm.tokenizer import EventKind
from osmxml.osm.tokenizer import XmlEvent
from osmxml.osm.types import ObjType

logger = logging.getLogger(__name__)

OBJECT_NAMES = frozenset(kind.value for kind in ObjType)
CHILD_NAMES = frozenset({"nd", "tag", "member"})


@dataclass(frozen=True)
class RawElement:
    name: str
    attrs: ParsedAttrs


RawGroup = list[RawElement]


class ElementAssembler:
    """Groups tokenizer events into one buffered list per top-level object.

    Outside of an object the assembler is idle. Opening a node, way or
    relation enters the object state; its children are buffered until the
    matching close hands the whole group out. Objects whose kind is skipped
    by ``filter`` are tracked but never buffered.
    """

    def __init__(self, read_filter: ReadFilter | None = None) -> None:
        self.filter = read_filter or ReadFilter()
        self._kind: ObjType | None = None
        self._skipping = False
        self._nested = 0
        self._buffer: RawGroup = []

    @property
    def current_kind(self) -> ObjType | None:
        return self._kind

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def feed(self, event: XmlEvent) -> RawGroup | StructureError | None:
        match event.kind:
            case EventKind.START:
                return self._open(event)
            case EventKind.EMPTY:
                opened = self._open(event)
                closed = self._close(event.name)
                return opened or closed
            case EventKind.END:
                return self._close(event.name)
            case _:
                return None

    def _open(self, event: XmlEvent) -> StructureError | None:
        name = event.name
        if self._kind is None:
            if name in CHILD_NAMES:
                return self._structure_error("nd/tag/member outside of node/way/relation")
            if name not in OBJECT_NAMES:
                return None
            self._kind = ObjType(name)
            self._skipping = self.filter.skips(self._kind)
            if not self._skipping:
                self._buffer.append(RawElement(name, collect_attrs(event.attrs)))
            return None

        if name in OBJECT_NAMES:
            # drop the enclosing object, resume once it closes
            self._nested += 1
            self._skipping = True
            self._buffer = []
            return self._structure_error("node/way/relation inside another")

        if not self._skipping:
            self._buffer.append(RawElement(name, collect_attrs(event.attrs)))
        return None

    def _close(self, name: str) -> RawGroup | None:
        if self._kind is None or name not in OBJECT_NAMES:
            return None
        if self._nested:
            self._nested -= 1
            return None

        group, skipping = self._buffer, self._skipping
        self._kind = None
        self._skipping = False
        self._buffer = []
        if skipping:
            return None
        return group

    def _structure_error(self, msg: str) -> StructureError:
        logger.warning("Skipping mis-nested element: %s", msg)
        return StructureError(msg)


def assemble(
    events: Iterable[XmlEvent], assembler: ElementAssembler | None = None
) -> Generator[RawGroup | StructureError, None, None]:
    assembler = assembler or ElementAssembler()
    for event in events:
        if event.kind is EventKind.EOF:
            return
        result = assembler.feed(event)
        if result is not None:
            yield result
