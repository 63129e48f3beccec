from __future__ import annotations

from osmxml.filters import ReadFilter
from osmxml.osm.assembler import ElementAssembler
from osmxml.osm.assembler import RawElement
from osmxml.osm.assembler import assemble
from osmxml.osm.errors import StructureError
from osmxml.osm.tokenizer import EOF_EVENT
from osmxml.osm.tokenizer import XmlEvent
from osmxml.osm.types import ObjType


def way_events(way_id: str = "5") -> list[XmlEvent]:
    return [
        XmlEvent.start("way", id=way_id),
        XmlEvent.empty("nd", ref="1"),
        XmlEvent.empty("nd", ref="2"),
        XmlEvent.empty("tag", k="hw", v="primary"),
        XmlEvent.end("way"),
    ]


def relation_events() -> list[XmlEvent]:
    return [
        XmlEvent.start("relation", id="9"),
        XmlEvent.empty("member", type="way", ref="5", role="outer"),
        XmlEvent.empty("tag", k="type", v="route"),
        XmlEvent.end("relation"),
    ]


def test_group_is_emitted_on_close():
    assembler = ElementAssembler()
    results = [assembler.feed(event) for event in way_events()]

    assert results[:-1] == [None, None, None, None]
    assert results[-1] == [
        RawElement("way", {"id": "5"}),
        RawElement("nd", {"ref": "1"}),
        RawElement("nd", {"ref": "2"}),
        RawElement("tag", {"k": "hw", "v": "primary"}),
    ]
    assert assembler.current_kind is None


def test_start_and_end_children_are_buffered_like_empty_ones():
    events = [
        XmlEvent.start("way", id="5"),
        XmlEvent.start("nd", ref="1"),
        XmlEvent.end("nd"),
        XmlEvent.end("way"),
    ]
    assert list(assemble(events)) == [[RawElement("way", {"id": "5"}), RawElement("nd", {"ref": "1"})]]


def test_empty_object_is_emitted_immediately():
    assembler = ElementAssembler()
    result = assembler.feed(XmlEvent.empty("node", id="1", lat="1.0", lon="2.0"))

    assert result == [RawElement("node", {"id": "1", "lat": "1.0", "lon": "2.0"})]
    assert assembler.current_kind is None


def test_assembler_tracks_open_object_kind():
    assembler = ElementAssembler()
    assembler.feed(XmlEvent.start("relation", id="9"))
    assert assembler.current_kind is ObjType.RELATION


def test_non_osm_elements_are_ignored_while_idle():
    events = [XmlEvent.start("osm"), XmlEvent.empty("bounds", minlat="0"), *way_events(), XmlEvent.end("osm")]
    groups = list(assemble(events))
    assert len(groups) == 1
    assert groups[0][0].name == "way"


def test_skipped_object_is_never_buffered():
    assembler = ElementAssembler(ReadFilter(skip_relations=True))
    for event in relation_events():
        assert assembler.feed(event) is None
        assert assembler.buffered == 0
    assert assembler.current_kind is None


def test_skipping_is_per_kind():
    events = relation_events() + way_events() + [XmlEvent.empty("node", id="1", lat="0", lon="0")]
    groups = list(assemble(events, ElementAssembler(ReadFilter(skip_relations=True, skip_nodes=True))))
    assert [group[0].name for group in groups] == ["way"]


def test_filter_change_applies_to_next_object():
    assembler = ElementAssembler()
    assembler.feed(XmlEvent.start("way", id="5"))
    assembler.filter = ReadFilter(skip_ways=True)
    assert assembler.feed(XmlEvent.end("way")) == [RawElement("way", {"id": "5"})]

    for event in way_events("6"):
        assert assembler.feed(event) is None


def test_child_outside_object_is_a_structure_error():
    events = [XmlEvent.empty("tag", k="a", v="b"), *way_events()]
    results = list(assemble(events))

    assert results[0] == StructureError("nd/tag/member outside of node/way/relation")
    assert results[1][0] == RawElement("way", {"id": "5"})


def test_nested_object_abandons_outer_and_resynchronizes():
    events = [
        XmlEvent.start("way", id="1"),
        XmlEvent.empty("nd", ref="1"),
        XmlEvent.start("node", id="2", lat="0", lon="0"),
        XmlEvent.empty("tag", k="a", v="b"),
        XmlEvent.end("node"),
        XmlEvent.empty("nd", ref="2"),
        XmlEvent.end("way"),
        *way_events("3"),
    ]
    results = list(assemble(events))

    assert len(results) == 2
    assert results[0] == StructureError("node/way/relation inside another")
    assert results[1][0] == RawElement("way", {"id": "3"})


def test_nested_empty_object_is_reported_once():
    events = [
        XmlEvent.start("way", id="1"),
        XmlEvent.empty("node", id="2"),
        XmlEvent.end("way"),
    ]
    assert list(assemble(events)) == [StructureError("node/way/relation inside another")]


def test_assemble_stops_at_eof():
    events = [*way_events("1"), EOF_EVENT, *way_events("2")]
    groups = list(assemble(events))
    assert [group[0].attrs["id"] for group in groups] == ["1"]
