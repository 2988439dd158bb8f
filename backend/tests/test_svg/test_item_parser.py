"""Tests for the SVG item collector."""

from __future__ import annotations

import pytest

from itemspread.svg.parser import parse_svg_items
from tests.conftest import MIXED_SVG, OVERLAP_SVG


def _by_id(doc):
    return {item.id: item for item in doc.items}


def test_collects_drawable_elements():
    doc = parse_svg_items(MIXED_SVG)
    assert [item.id for item in doc.items] == ["r1", "c1", "e1", "l1", "p1", "path1", "plain-group"]


def test_bounding_boxes():
    items = _by_id(parse_svg_items(MIXED_SVG))
    assert items["r1"].bbox == (10.0, 20.0, 40.0, 60.0)
    assert items["c1"].bbox == (95.0, 95.0, 105.0, 105.0)
    assert items["e1"].bbox == (30.0, 140.0, 70.0, 160.0)
    assert items["l1"].bbox == (10.0, 170.0, 60.0, 190.0)
    assert items["p1"].bbox == (150.0, 10.0, 190.0, 40.0)
    assert items["path1"].bbox == pytest.approx((120.0, 120.0, 160.0, 140.0))


def test_skipped_elements_reported():
    doc = parse_svg_items(MIXED_SVG)
    assert doc.skipped["def-dot"] == "inside <defs>"
    assert doc.skipped["moved"] == "has transform"
    assert doc.skipped["hidden"] == "hidden"
    assert doc.skipped["in-group"] == "inside transformed group"
    assert doc.skipped["E2"] == "inside <clippath>"


def test_source_tracking():
    doc = parse_svg_items(OVERLAP_SVG)
    for item in doc.items:
        start, end = item.source_span
        assert doc.svg_raw[start:end] == item.source_tag
        assert item.source_tag.startswith(f"<{item.tag}")


def test_generated_ids_for_anonymous_elements():
    doc = parse_svg_items(OVERLAP_SVG)
    assert [item.id for item in doc.items] == ["a", "b", "c", "E4"]


def test_duplicate_ids_get_generated_ids():
    svg = '<svg><rect id="x" width="1" height="1"/><rect id="x" x="5" width="1" height="1"/></svg>'
    doc = parse_svg_items(svg)
    assert [item.id for item in doc.items] == ["x", "E2"]


def test_unreadable_geometry_skipped():
    svg = '<svg><rect id="pct" width="50%" height="10"/><circle id="nor" cx="1" cy="1"/></svg>'
    doc = parse_svg_items(svg)
    assert doc.items == []
    assert doc.skipped["pct"].startswith("unreadable geometry")
    assert doc.skipped["nor"].startswith("unreadable geometry")


def test_px_lengths_and_single_quotes():
    svg = "<svg><rect id='r' x='2px' y='3' width='4px' height='5'/></svg>"
    item = parse_svg_items(svg).items[0]
    assert item.bbox == (2.0, 3.0, 6.0, 8.0)


def test_style_hidden():
    svg = '<svg><circle id="h" cx="1" cy="1" r="1" style="display: none"/></svg>'
    assert parse_svg_items(svg).skipped == {"h": "hidden"}


def test_to_item():
    item = parse_svg_items(OVERLAP_SVG).items[0].to_item()
    assert item.id == "a"
    assert item.center == (50.0, 50.0)


def test_empty_document():
    doc = parse_svg_items("<svg></svg>")
    assert doc.items == []
    assert doc.skipped == {}


def test_generated_ids_skip_explicit_ids():
    svg = '<svg><rect id="E2" width="10" height="10"/><rect x="1" y="1" width="10" height="10"/></svg>'
    doc = parse_svg_items(svg)
    assert [item.id for item in doc.items] == ["E2", "E2_2"]


def test_generated_ids_skip_ids_declared_later():
    svg = (
        '<svg><rect width="1" height="1"/>'
        '<rect id="E1" x="5" width="1" height="1"/>'
        '<rect id="E1" x="9" width="1" height="1"/></svg>'
    )
    ids = [item.id for item in parse_svg_items(svg).items]
    assert ids == ["E1_2", "E1", "E3"]
    assert len(set(ids)) == len(ids)
