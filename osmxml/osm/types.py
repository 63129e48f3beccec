from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum

OsmTags = dict[str, str]


class ObjType(Enum):
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


@dataclass(frozen=True)
class OsmAttrs:
    id: int | None = None
    timestamp: str | None = None
    uid: int | None = None
    user: str | None = None
    visible: bool | None = None
    deleted: bool | None = None
    version: int | None = None
    changeset: int | None = None

    @classmethod
    def default(cls) -> OsmAttrs:
        return cls()


@dataclass(frozen=True)
class OsmNode:
    attrs: OsmAttrs
    lat: float
    lon: float
    tags: OsmTags = field(default_factory=dict)

    @property
    def id(self) -> int | None:
        return self.attrs.id


@dataclass(frozen=True)
class OsmWay:
    attrs: OsmAttrs
    tags: OsmTags = field(default_factory=dict)
    nodes: list[int] = field(default_factory=list)

    @property
    def id(self) -> int | None:
        return self.attrs.id


@dataclass(frozen=True)
class OsmRelationMember:
    type: ObjType
    ref: int
    role: str


@dataclass(frozen=True)
class OsmRelation:
    attrs: OsmAttrs
    tags: OsmTags = field(default_factory=dict)
    members: list[OsmRelationMember] = field(default_factory=list)

    @property
    def id(self) -> int | None:
        return self.attrs.id


OsmElement = OsmNode | OsmWay | OsmRelation
