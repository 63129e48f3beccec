from __future__ import annotations

import bz2
import gzip
from collections.abc import Callable
from pathlib import Path

import pytest

SAMPLE_OSM = b"""<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <bounds minlat="0.0" minlon="0.0" maxlat="2.0" maxlon="2.0"/>
  <node id="1" lat="1.0" lon="2.0" version="3" changeset="42" uid="7" user="alice" visible="true"
        timestamp="2016-09-14T20:53:20Z">
    <tag k="a" v="b"/>
  </node>
  <node id="2" lat="1.5" lon="0.5"/>
  <node id="3" lat="-1.25" lon="0.25"><tag k="name" v="Caf&#233; &amp; Bar"/></node>
  <way id="5">
    <nd ref="1"/>
    <nd ref="2"/>
    <tag k="hw" v="primary"/>
  </way>
  <way id="6" visible="false">
    <nd ref="3"/>
    <nd ref="1"/>
    <nd ref="3"/>
  </way>
  <relation id="9">
    <member type="way" ref="5" role="outer"/>
    <member type="node" ref="1" role=""/>
    <tag k="type" v="multipolygon"/>
  </relation>
</osm>
"""


@pytest.fixture
def sample_osm() -> bytes:
    return SAMPLE_OSM


@pytest.fixture
def osm_file(tmp_path: Path) -> Callable[..., Path]:
    """Write OSM XML to ``tmp_path`` compressed according to the suffix."""

    def write(data: bytes = SAMPLE_OSM, suffix: str = ".osm") -> Path:
        path = tmp_path / f"extract{suffix}"
        if suffix.endswith(".gz"):
            data = gzip.compress(data)
        elif suffix.endswith(".bz2"):
            data = bz2.compress(data)
        path.write_bytes(data)
        return path

    return write


@pytest.fixture
def osm_xml() -> Callable[[str], bytes]:
    """Wrap element markup into a minimal OSM document."""

    def wrap(body: str) -> bytes:
        return f'<?xml version="1.0" encoding="UTF-8"?><osm version="0.6">{body}</osm>'.encode()

    return wrap
