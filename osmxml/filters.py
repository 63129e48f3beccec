from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from osmxml.osm.types import ObjType


@dataclass(frozen=True)
class ReadFilter:
    skip_nodes: bool = False
    skip_ways: bool = False
    skip_relations: bool = False

    def skips(self, kind: ObjType) -> bool:
        match kind:
            case ObjType.NODE:
                return self.skip_nodes
            case ObjType.WAY:
                return self.skip_ways
            case ObjType.RELATION:
                return self.skip_relations

    @classmethod
    def only(cls, kind: ObjType) -> ReadFilter:
        return cls(
            skip_nodes=kind is not ObjType.NODE,
            skip_ways=kind is not ObjType.WAY,
            skip_relations=kind is not ObjType.RELATION,
        )

    @classmethod
    def for_callbacks(
        cls,
        node_cb: Callable[..., Any] | None = None,
        way_cb: Callable[..., Any] | None = None,
        relation_cb: Callable[..., Any] | None = None,
    ) -> ReadFilter:
        return cls(
            skip_nodes=node_cb is None,
            skip_ways=way_cb is None,
            skip_relations=relation_cb is None,
        )
