"""Conversion of pixel-space glyph records into normalized glyph data."""

from __future__ import annotations

import math
from typing import List

from atlastext.text.glyph import FontMetrics, GlyphData, GlyphMap, GlyphRecord

UV_EPSILON = 1e-6


def normalize_glyph(record: GlyphRecord, metrics: FontMetrics) -> GlyphData:
    """
    Normalize one glyph record against the font header.

    No clamping is applied: malformed input produces out-of-range values,
    see validate_glyph().
    """
    font_height = metrics.size
    scale_w = metrics.scale_w
    scale_h = metrics.scale_h

    # descriptor origin is top-left, atlas uv origin is bottom-left
    y = scale_h - (record.y + record.height)

    uv_rect = (
        record.x / scale_w,
        y / scale_h,
        record.width / scale_w,
        record.height / scale_h,
    )

    size = (record.width / font_height, record.height / font_height)

    normalised_base = metrics.base / font_height
    offset = (
        record.xoffset / font_height,
        normalised_base - size[1] - (record.yoffset / font_height),
    )

    return GlyphData(
        character=record.character,
        uv_rect=uv_rect,
        size=size,
        offset=offset,
        xadvance=record.xadvance / font_height,
        lookup_offset=0.0,
    )


def validate_glyph(glyph: GlyphData, epsilon: float = UV_EPSILON) -> List[str]:
    """Return range-invariant violations for a glyph (empty list if valid)."""
    problems = []
    values = (*glyph.uv_rect, *glyph.size, *glyph.offset, glyph.xadvance)
    if not all(math.isfinite(value) for value in values):
        return [f"non-finite metrics {values}"]
    u, v, w, h = glyph.uv_rect
    if w < 0 or h < 0:
        problems.append(f"negative uv size ({w}, {h})")
    if u < -epsilon or v < -epsilon:
        problems.append(f"uv origin ({u}, {v}) below 0")
    if u + w > 1.0 + epsilon or v + h > 1.0 + epsilon:
        problems.append(f"uv rect ({u}, {v}, {w}, {h}) exceeds 1")
    if glyph.size[0] < 0 or glyph.size[1] < 0:
        problems.append(f"negative size {glyph.size}")
    return problems


def normalize_glyphs(metrics: FontMetrics) -> GlyphMap:
    """Normalize every record of a parsed descriptor."""
    return GlyphMap(normalize_glyph(record, metrics) for record in metrics.records)
