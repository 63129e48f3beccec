from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import BinaryIO

import fsspec
from lxml import etree

from osmxml.background import QUEUE_CAPACITY
from osmxml.background import BackgroundItems
from osmxml.filters import ReadFilter
from osmxml.osm.assembler import ElementAssembler
from osmxml.osm.assembler import assemble
from osmxml.osm.elements import decode_group
from osmxml.osm.errors import InputFormatError
from osmxml.osm.errors import OsmReadError
from osmxml.osm.errors import StructureError
from osmxml.osm.errors import XmlSyntaxError
from osmxml.osm.tokenizer import DEFAULT_CHUNK_SIZE
from osmxml.osm.tokenizer import read_events
from osmxml.osm.types import ObjType
from osmxml.osm.types import OsmElement
from osmxml.osm.types import OsmNode
from osmxml.osm.types import OsmRelation
from osmxml.osm.types import OsmWay

logger = logging.getLogger(__name__)

OsmXmlItem = OsmElement | OsmReadError

# exact suffix match, compressed suffixes first
SUFFIX_COMPRESSION: list[tuple[str, str | None]] = [
    (".osm.gz", "gzip"),
    (".osm.bz2", "bz2"),
    (".osm", None),
]


def compression_for(path: str) -> str | None:
    for suffix, compression in SUFFIX_COMPRESSION:
        if path.endswith(suffix):
            return compression
    raise InputFormatError("file is not .osm format")


@dataclass
class ReaderConfig:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    queue_capacity: int = QUEUE_CAPACITY


class OsmXmlReader:
    """Forward-only reader turning an OSM XML stream into nodes, ways and relations.

    Iterating yields one item per completed object. Per-object problems
    (malformed values, missing attributes, mis-nested elements) are yielded
    as ``OsmReadError`` values instead of being raised, so a consumer may
    decide to carry on. The ``map_*`` drivers stop at the first error and
    raise it; they close the reader whether or not they finish.
    """

    def __init__(
        self,
        source: BinaryIO,
        config: ReaderConfig | None = None,
        read_filter: ReadFilter | None = None,
        owns_source: bool = False,
    ) -> None:
        self.source = source
        self.config = config or ReaderConfig()
        self.assembler = ElementAssembler(read_filter)
        self._owns_source = owns_source
        self._events = read_events(source, self.config.chunk_size)
        self._groups = assemble(self._events, self.assembler)
        self._done = False
        self._closed = False

    @classmethod
    def from_path(
        cls, path: str, config: ReaderConfig | None = None, read_filter: ReadFilter | None = None
    ) -> OsmXmlReader:
        compression = compression_for(path)
        logger.debug("Opening %s (compression: %s)", path, compression or "none")
        source = fsspec.open(path, "rb", compression=compression).open()
        return cls(source, config=config, read_filter=read_filter, owns_source=True)

    @property
    def read_filter(self) -> ReadFilter:
        return self.assembler.filter

    @read_filter.setter
    def read_filter(self, value: ReadFilter) -> None:
        self.assembler.filter = value

    def __iter__(self) -> OsmXmlReader:
        return self

    def __next__(self) -> OsmXmlItem:
        if self._done:
            raise StopIteration

        try:
            result = next(self._groups, None)
        except etree.XMLSyntaxError as error:
            self.close()
            return XmlSyntaxError(str(error))

        if result is None:
            self.close()
            raise StopIteration
        if isinstance(result, StructureError):
            return result
        try:
            return decode_group(result)
        except OsmReadError as error:
            return error

    def close(self) -> None:
        self._done = True
        if self._closed:
            return
        self._closed = True
        self._groups.close()
        self._events.close()
        if self._owns_source:
            self.source.close()

    def __enter__(self) -> OsmXmlReader:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    def _dispatch(
        self,
        node_cb: Callable[[OsmNode], Any] | None,
        way_cb: Callable[[OsmWay], Any] | None,
        relation_cb: Callable[[OsmRelation], Any] | None,
    ) -> None:
        try:
            for item in self:
                match item:
                    case OsmReadError():
                        raise item
                    case OsmNode():
                        if node_cb is not None:
                            node_cb(item)
                    case OsmWay():
                        if way_cb is not None:
                            way_cb(item)
                    case OsmRelation():
                        if relation_cb is not None:
                            relation_cb(item)
        finally:
            self.close()

    def map_nodes(self, callback: Callable[[OsmNode], Any]) -> None:
        self.read_filter = ReadFilter.only(ObjType.NODE)
        self._dispatch(callback, None, None)

    def map_ways(self, callback: Callable[[OsmWay], Any]) -> None:
        self.read_filter = ReadFilter.only(ObjType.WAY)
        self._dispatch(None, callback, None)

    def map_relations(self, callback: Callable[[OsmRelation], Any]) -> None:
        self.read_filter = ReadFilter.only(ObjType.RELATION)
        self._dispatch(None, None, callback)

    def map_all(
        self,
        node_cb: Callable[[OsmNode], Any] | None = None,
        way_cb: Callable[[OsmWay], Any] | None = None,
        relation_cb: Callable[[OsmRelation], Any] | None = None,
    ) -> None:
        self.read_filter = ReadFilter.for_callbacks(node_cb, way_cb, relation_cb)
        self._dispatch(node_cb, way_cb, relation_cb)

    def in_background(self) -> BackgroundItems[OsmXmlItem]:
        """Hand this reader to a producer thread; iterate the returned object instead."""
        logger.debug("Reading in background, queue capacity %d", self.config.queue_capacity)
        return BackgroundItems(self, capacity=self.config.queue_capacity)
