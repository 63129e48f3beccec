from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from dataclasses import dataclass
from dataclasses import field

from tqdm import tqdm

from osmxml.filters import ReadFilter
from osmxml.osm.errors import InputFormatError
from osmxml.osm.errors import OsmReadError
from osmxml.osm.types import ObjType
from osmxml.osm.types import OsmNode
from osmxml.osm.types import OsmRelation
from osmxml.osm.types import OsmWay
from osmxml.reader import OsmXmlItem
from osmxml.reader import OsmXmlReader


@dataclass
class Stats:
    counts: Counter[ObjType] = field(default_factory=Counter)

    def update(self, item: OsmXmlItem) -> None:
        match item:
            case OsmReadError():
                raise item
            case OsmNode():
                self.counts[ObjType.NODE] += 1
            case OsmWay():
                self.counts[ObjType.WAY] += 1
            case OsmRelation():
                self.counts[ObjType.RELATION] += 1

    def __str__(self) -> str:
        return ", ".join(f"{kind.value}s: {self.counts[kind]}" for kind in ObjType)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Count the nodes, ways and relations of an OSM XML extract")
    parser.add_argument("filename", type=str, help="Path to the .osm, .osm.gz or .osm.bz2 file")
    parser.add_argument("--skip_nodes", action="store_true", help="Do not read nodes")
    parser.add_argument("--skip_ways", action="store_true", help="Do not read ways")
    parser.add_argument("--skip_relations", action="store_true", help="Do not read relations")
    parser.add_argument("--background", action="store_true", help="Parse on a background thread")
    parser.add_argument("--no_progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def count_elements(filename: str, read_filter: ReadFilter, background: bool, progress: bool) -> Stats:
    stats = Stats()
    reader = OsmXmlReader.from_path(filename, read_filter=read_filter)
    items = reader.in_background() if background else reader
    with items, tqdm(unit_scale=True, disable=not progress) as pbar:
        for item in items:
            stats.update(item)
            pbar.update(1)
    return stats


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    read_filter = ReadFilter(
        skip_nodes=args.skip_nodes,
        skip_ways=args.skip_ways,
        skip_relations=args.skip_relations,
    )

    try:
        stats = count_elements(args.filename, read_filter, args.background, not args.no_progress)
    except (InputFormatError, OsmReadError, OSError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    print(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
