from __future__ import annotations

from collections.abc import Sequence

from osmxml.osm.assembler import RawElement
from osmxml.osm.attrs import ParsedAttrs
from osmxml.osm.attrs import decode_attrs
from osmxml.osm.attrs import parse_float32
from osmxml.osm.attrs import parse_int
from osmxml.osm.attrs import parse_obj_type
from osmxml.osm.attrs import required
from osmxml.osm.types import OsmElement
from osmxml.osm.types import OsmNode
from osmxml.osm.types import OsmRelation
from osmxml.osm.types import OsmRelationMember
from osmxml.osm.types import OsmTags
from osmxml.osm.types import OsmWay


def decode_tags(children: Sequence[RawElement]) -> OsmTags:
    tags = OsmTags()
    for child in children:
        if child.name != "tag":
            continue
        key = child.attrs.get("k")
        value = child.attrs.get("v")
        if key is not None and value is not None:
            tags[key] = value
    return tags


def decode_node_refs(children: Sequence[RawElement]) -> list[int]:
    # a <nd> without ref is dropped, unlike a <member> without ref
    return [parse_int(child.attrs["ref"]) for child in children if child.name == "nd" and "ref" in child.attrs]


def decode_member(attrs: ParsedAttrs) -> OsmRelationMember:
    member_type = parse_obj_type(required(attrs, "type", "member element has no 'type' attribute"))
    member_ref = parse_int(required(attrs, "ref", "member element has no 'ref' attribute"))
    member_role = required(attrs, "role", "member element has no 'role' attribute")
    return OsmRelationMember(type=member_type, ref=member_ref, role=member_role)


def decode_node(head: RawElement, children: Sequence[RawElement]) -> OsmNode:
    attrs = decode_attrs(head.attrs)
    lon = parse_float32(required(head.attrs, "lon", "node has no longitude"))
    lat = parse_float32(required(head.attrs, "lat", "node has no latitude"))
    return OsmNode(attrs=attrs, lat=lat, lon=lon, tags=decode_tags(children))


def decode_way(head: RawElement, children: Sequence[RawElement]) -> OsmWay:
    return OsmWay(
        attrs=decode_attrs(head.attrs),
        tags=decode_tags(children),
        nodes=decode_node_refs(children),
    )


def decode_relation(head: RawElement, children: Sequence[RawElement]) -> OsmRelation:
    return OsmRelation(
        attrs=decode_attrs(head.attrs),
        tags=decode_tags(children),
        members=[decode_member(child.attrs) for child in children if child.name == "member"],
    )


def decode_group(group: Sequence[RawElement]) -> OsmElement:
    """Build one OSM object from its opening element followed by its children.

    Raises an ``OsmReadError`` subclass when a value is malformed or a
    required attribute is missing; nothing is returned in that case.
    """
    head, children = group[0], group[1:]
    match head.name:
        case "node":
            return decode_node(head, children)
        case "way":
            return decode_way(head, children)
        case "relation":
            return decode_relation(head, children)
        case _:
            raise ValueError(f"Unknown element type: {head.name}")
