"""SVG item collector — regex facade plus svgpathtools for path bounds.

Collects the drawable elements of an SVG document with their bounding boxes,
so they can be distributed like any other item. Elements whose on-canvas
position cannot be read from their own attributes are skipped and reported:
anything with a ``transform``, anything hidden, and anything nested in a
container that is not rendered in place (defs, clip paths, masks, ...) or in a
transformed/hidden group.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import numpy as np
from svgpathtools import parse_path

from itemspread.engine.items import Item
from itemspread.utils.geometry import Bounds, bounds_of

logger = logging.getLogger(__name__)

_ELEMENT_RE = re.compile(
    r"<(rect|circle|ellipse|line|polyline|polygon|path|image|use)\b[^>]*>",
    re.IGNORECASE,
)
_CONTAINER_RE = re.compile(
    r"<(/?)(g|defs|clipPath|mask|symbol|pattern|marker)\b([^>]*?)(/?)>",
    re.IGNORECASE,
)
_ATTR_RE = re.compile(r"([\w:-]+)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")
_ANY_ID_RE = re.compile(r"\bid\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px)?\s*$")

# Containers whose children are never rendered in place
_NON_RENDERED = {"defs", "clippath", "mask", "symbol", "pattern", "marker"}


@dataclass
class SvgItem:
    """One movable element and where it sits in the source text."""

    id: str
    tag: str
    bbox: Bounds
    attributes: dict[str, str] = field(default_factory=dict)
    source_tag: str = ""
    source_span: tuple[int, int] = (0, 0)

    def to_item(self) -> Item:
        return Item(id=self.id, bbox=self.bbox)


@dataclass
class SvgDocument:
    svg_raw: str
    items: list[SvgItem] = field(default_factory=list)
    # element id → reason it was not collected
    skipped: dict[str, str] = field(default_factory=dict)

    def get_item(self, item_id: str) -> SvgItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


def parse_svg_items(svg_text: str) -> SvgDocument:
    """Collect movable elements of ``svg_text`` in document order."""
    doc = SvgDocument(svg_raw=svg_text)
    excluded = _excluded_spans(svg_text)
    # generated IDs must not collide with any explicit id in the document
    reserved = {dq or sq for dq, sq in _ANY_ID_RE.findall(svg_text)}
    seen: set[str] = set()

    for index, match in enumerate(_ELEMENT_RE.finditer(svg_text)):
        tag_text = match.group(0)
        tag_name = match.group(1).lower()
        attrs = _extract_attrs(tag_text)
        element_id = attrs.get("id") or ""
        if not element_id or element_id in seen:
            element_id = _generated_id(index + 1, seen | reserved)
        seen.add(element_id)

        reason = _skip_reason(match.start(), attrs, excluded)
        if reason is None:
            try:
                box = _element_bbox(tag_name, attrs)
            except (KeyError, ValueError, IndexError) as e:
                box = None
                reason = f"unreadable geometry ({e})"
            else:
                if box is None:
                    reason = "no geometry"

        if reason is not None:
            doc.skipped[element_id] = reason
            logger.debug("Skipping <%s> %s: %s", tag_name, element_id, reason)
            continue

        doc.items.append(
            SvgItem(
                id=element_id,
                tag=tag_name,
                bbox=box,
                attributes=attrs,
                source_tag=tag_text,
                source_span=(match.start(), match.end()),
            )
        )

    logger.info("Collected %d SVG items (%d skipped)", len(doc.items), len(doc.skipped))
    return doc


def _generated_id(number: int, taken: set[str]) -> str:
    """``E<n>``, or ``E<n>_2``, ``E<n>_3``, ... when that is already taken."""
    candidate = f"E{number}"
    suffix = 2
    while candidate in taken:
        candidate = f"E{number}_{suffix}"
        suffix += 1
    return candidate


def _extract_attrs(tag_text: str) -> dict[str, str]:
    """Extract attributes from an SVG tag string (either quote style)."""
    attrs: dict[str, str] = {}
    for m in _ATTR_RE.finditer(tag_text):
        value = m.group(2) if m.group(2) is not None else m.group(3)
        attrs[m.group(1)] = value
    return attrs


def _excluded_spans(svg_text: str) -> list[tuple[int, int, str]]:
    """Spans of containers whose children must not be moved, with the reason."""
    spans: list[tuple[int, int, str]] = []
    stack: list[tuple[str, int, str | None]] = []

    for m in _CONTAINER_RE.finditer(svg_text):
        closing, name, attr_text, self_closing = m.groups()
        name = name.lower()
        if self_closing:
            continue
        if not closing:
            stack.append((name, m.end(), _container_reason(name, _extract_attrs(attr_text))))
            continue
        # pop up to the matching open tag; tolerate sloppy nesting
        while stack:
            open_name, open_end, reason = stack.pop()
            if reason is not None:
                spans.append((open_end, m.start(), reason))
            if open_name == name:
                break

    return spans


def _container_reason(name: str, attrs: dict[str, str]) -> str | None:
    if name in _NON_RENDERED:
        return f"inside <{name}>"
    if "transform" in attrs:
        return "inside transformed group"
    if _is_hidden(attrs):
        return "inside hidden group"
    return None


def _skip_reason(
    offset: int,
    attrs: dict[str, str],
    excluded: list[tuple[int, int, str]],
) -> str | None:
    for start, end, reason in excluded:
        if start <= offset < end:
            return reason
    if "transform" in attrs:
        return "has transform"
    if _is_hidden(attrs):
        return "hidden"
    return None


def _is_hidden(attrs: dict[str, str]) -> bool:
    if attrs.get("display", "").strip() == "none":
        return True
    if attrs.get("visibility", "").strip() == "hidden":
        return True
    style = attrs.get("style", "").replace(" ", "")
    return "display:none" in style or "visibility:hidden" in style


def _length(attrs: dict[str, str], name: str, default: float | None = None) -> float:
    """Read a user-unit length. Percentages and absolute units are rejected."""
    raw = attrs.get(name)
    if raw is None:
        if default is None:
            raise KeyError(name)
        return default
    m = _LENGTH_RE.match(raw)
    if not m:
        raise ValueError(f"{name}={raw!r}")
    return float(m.group(1))


def _element_bbox(tag: str, attrs: dict[str, str]) -> Bounds | None:
    if tag in ("rect", "image", "use"):
        x, y = _length(attrs, "x", 0.0), _length(attrs, "y", 0.0)
        return (x, y, x + _length(attrs, "width"), y + _length(attrs, "height"))

    if tag == "circle":
        cx, cy, r = _length(attrs, "cx", 0.0), _length(attrs, "cy", 0.0), _length(attrs, "r")
        return (cx - r, cy - r, cx + r, cy + r)

    if tag == "ellipse":
        cx, cy = _length(attrs, "cx", 0.0), _length(attrs, "cy", 0.0)
        rx, ry = _length(attrs, "rx"), _length(attrs, "ry")
        return (cx - rx, cy - ry, cx + rx, cy + ry)

    if tag == "line":
        pts = np.array([
            [_length(attrs, "x1", 0.0), _length(attrs, "y1", 0.0)],
            [_length(attrs, "x2", 0.0), _length(attrs, "y2", 0.0)],
        ])
        return bounds_of(pts)

    if tag in ("polyline", "polygon"):
        numbers = [float(v) for v in _NUMBER_RE.findall(attrs.get("points", ""))]
        if len(numbers) < 2:
            return None
        pts = np.array(numbers[: len(numbers) // 2 * 2]).reshape(-1, 2)
        return bounds_of(pts)

    if tag == "path":
        d = attrs.get("d", "").strip()
        if not d:
            return None
        path = parse_path(d)
        if len(path) == 0:
            return None
        # svgpathtools orders it (xmin, xmax, ymin, ymax)
        xmin, xmax, ymin, ymax = path.bbox()
        return (float(xmin), float(ymin), float(xmax), float(ymax))

    return None
