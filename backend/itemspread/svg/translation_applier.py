"""Surgical translation applier — splices translate() transforms into the original SVG."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from itemspread.engine.items import Translation
from itemspread.svg.parser import SvgDocument

logger = logging.getLogger(__name__)

_TAG_END_RE = re.compile(r"\s*/?>$")


def apply_translations(doc: SvgDocument, translations: Sequence[Translation]) -> str:
    """Return ``doc.svg_raw`` with each translated element moved.

    Translations reference items by ID. The original text is spliced at the
    character offsets stored during parsing, so untouched elements remain
    byte-identical. Zero translations leave their element alone. Two
    translations that target the same element raise ValueError.
    """
    item_map = {item.id: item for item in doc.items}

    # (offset, length, replacement)
    splices: list[tuple[int, int, str]] = []

    for t in translations:
        item = item_map.get(t.id)
        if item is None:
            logger.warning("Translation for unknown item %r, skipping", t.id)
            continue
        if item.source_span == (0, 0):
            logger.warning("Translation: no source_span for %s, skipping", t.id)
            continue
        if t.is_zero:
            continue

        new_tag = _with_translate(item.source_tag, t.dx, t.dy)
        start, end = item.source_span
        splices.append((start, end - start, new_tag))

    if not splices:
        return doc.svg_raw

    # Descending offsets so earlier splices don't shift later ones
    splices.sort(key=lambda s: s[0], reverse=True)

    # Overlapping splices would cut into each other's replacement text
    for (offset, _, _), (prev_offset, prev_length, _) in zip(splices[:-1], splices[1:]):
        if prev_offset + prev_length > offset:
            raise ValueError(f"Overlapping translation targets at offset {offset}")

    result = doc.svg_raw
    for offset, length, replacement in splices:
        result = result[:offset] + replacement + result[offset + length:]

    logger.info("Applied %d translations", len(splices))
    return result


def format_number(value: float) -> str:
    """Compact SVG number: 4 decimals max, no trailing zeros, no '-0'."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _with_translate(source_tag: str, dx: float, dy: float) -> str:
    """Insert a transform attribute just before the tag's closing ``>`` or ``/>``.

    The parser never collects elements that already carry a transform, so this
    only ever adds the attribute.
    """
    m = _TAG_END_RE.search(source_tag)
    if m is None:
        return source_tag
    attr = f' transform="translate({format_number(dx)} {format_number(dy)})"'
    return source_tag[: m.start()] + attr + source_tag[m.start():]
