"""Glyph records (pixel space) and normalized glyph data."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import numpy as np


@dataclass(frozen=True)
class GlyphRecord:
    """
    One ``char`` line of the descriptor, in atlas pixels.

    ``y`` is measured from the top edge of the atlas image.
    """

    character: int
    x: float
    y: float
    width: float
    height: float
    xoffset: float
    yoffset: float
    xadvance: float


@dataclass(frozen=True)
class FontMetrics:
    """
    Header values of a descriptor plus its glyph records in file order.

    Attributes:
        face: Font face name from the info line.
        size: Nominal pixel height, divisor for all normalized glyph metrics.
        line_height: Distance between baselines in pixels.
        base: Distance from the top of a line to the baseline in pixels.
        scale_w: Atlas width in pixels.
        scale_h: Atlas height in pixels.
        records: Glyph records in the order they appear in the file.
    """

    face: str
    size: float
    line_height: float
    base: float
    scale_w: float
    scale_h: float
    records: Tuple[GlyphRecord, ...] = ()

    @property
    def normalised_line_height(self) -> float:
        return self.line_height / self.size


@dataclass(frozen=True)
class GlyphData:
    """
    Render-ready glyph.

    Attributes:
        character: Code point, unique key in a GlyphMap.
        uv_rect: (origin.x, origin.y, size.x, size.y) in [0, 1] atlas space,
            origin at the bottom-left corner of the atlas.
        size: Glyph box size divided by font pixel height.
        offset: Placement offset relative to the baseline, divided by font pixel height.
        xadvance: Cursor advance after this glyph, divided by font pixel height.
        lookup_offset: Row of this glyph in the font lookup table (assigned by Font).
    """

    character: int
    uv_rect: Tuple[float, float, float, float]
    size: Tuple[float, float]
    offset: Tuple[float, float]
    xadvance: float
    lookup_offset: float = 0.0

    # Column count of GlyphMap.to_array()
    PACKED_WIDTH = 10

    def packed(self) -> Tuple[float, ...]:
        return (*self.uv_rect, *self.size, *self.offset, self.xadvance, self.lookup_offset)


class GlyphMap(Mapping):
    """
    Read-only mapping ``character -> GlyphData``.

    Iteration is in ascending character order. Lookup goes through a sorted
    key list with binary search.
    """

    __slots__ = ("_codes", "_glyphs")

    def __init__(self, glyphs: Iterable[GlyphData] = ()):
        by_code = {}
        for glyph in glyphs:
            if glyph.character in by_code:
                raise ValueError(f"Duplicate glyph for character {glyph.character}")
            by_code[glyph.character] = glyph
        self._codes = sorted(by_code)
        self._glyphs = tuple(by_code[c] for c in self._codes)

    def _index(self, character: int) -> int:
        if not isinstance(character, int):
            return -1
        i = bisect_left(self._codes, character)
        if i < len(self._codes) and self._codes[i] == character:
            return i
        return -1

    def __getitem__(self, character: int) -> GlyphData:
        i = self._index(character)
        if i < 0:
            raise KeyError(character)
        return self._glyphs[i]

    def __contains__(self, character) -> bool:
        return self._index(character) >= 0

    def __iter__(self) -> Iterator[int]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __repr__(self) -> str:
        return f"GlyphMap({len(self)} glyphs)"

    def lookup(self, char: str | int) -> GlyphData | None:
        """Glyph for a one-character string or a code point, None if absent."""
        code = ord(char) if isinstance(char, str) else char
        i = self._index(code)
        return self._glyphs[i] if i >= 0 else None

    def glyphs(self) -> Tuple[GlyphData, ...]:
        """Glyphs in ascending character order."""
        return self._glyphs

    def to_array(self) -> np.ndarray:
        """
        Pack glyphs into a float32 table of shape (N, 10).

        Columns: uv_rect (4), size (2), offset (2), xadvance, lookup_offset.
        Rows follow ascending character order.
        """
        if not self._glyphs:
            return np.zeros((0, GlyphData.PACKED_WIDTH), dtype=np.float32)
        return np.array([g.packed() for g in self._glyphs], dtype=np.float32)
