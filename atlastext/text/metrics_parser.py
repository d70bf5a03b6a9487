"""
Reader for text bitmap-font descriptors (BMFont / Unity3d text export).

Layout of a descriptor::

    info face="Roboto" size=64 ...
    common lineHeight=76 base=60 scaleW=512 scaleH=512 ...
    page id=0 file="roboto.png"
    chars count=95
    char id=32 x=0 y=0 width=0 height=0 xoffset=0 yoffset=0 xadvance=16 ...
    ...

Token positions are fixed. Trailing tokens on a line are ignored, as is
anything after the declared number of ``char`` lines (kerning blocks).
"""

from __future__ import annotations

import math
import shlex
from pathlib import Path
from typing import List, Sequence, Tuple

from atlastext import log
from atlastext.text.errors import (
    FontFileNotFoundError,
    FontParseError,
    GlyphCountMismatchError,
)
from atlastext.text.glyph import FontMetrics, GlyphMap, GlyphRecord
from atlastext.text.normalizer import normalize_glyphs, validate_glyph

CHAR_KEYS = ("id", "x", "y", "width", "height", "xoffset", "yoffset", "xadvance")
MAX_CHARACTER = 0xFFFF


class _LineReader:
    """Tokenizes descriptor lines and converts ``key=value`` pairs with error context."""

    def __init__(self, path: str | Path, lines: Sequence[str]):
        self.path = path
        self.lines = lines
        self.lineno = 0

    def fail(self, message: str) -> FontParseError:
        return FontParseError(message, path=self.path, line=self.lineno)

    def next_line(self, what: str) -> str:
        if self.lineno >= len(self.lines):
            self.lineno += 1
            raise self.fail(f"unexpected end of file, expected {what} line")
        line = self.lines[self.lineno]
        self.lineno += 1
        return line

    def tokens(self, line: str, tag: str, keys: Sequence[str]) -> List[str]:
        """Split a line, check its tag and return the values of ``keys`` in order."""
        try:
            tokens = shlex.split(line)
        except ValueError as exc:
            raise self.fail(f"cannot tokenize {tag} line: {exc}") from exc

        if not tokens or tokens[0] != tag:
            found = tokens[0] if tokens else "empty line"
            raise self.fail(f"expected '{tag}' line, found '{found}'")
        if len(tokens) < len(keys) + 1:
            raise self.fail(
                f"'{tag}' line has {len(tokens) - 1} fields, expected at least {len(keys)}"
            )

        values = []
        for token, key in zip(tokens[1:], keys):
            name, sep, value = token.partition("=")
            if not sep or name != key:
                raise self.fail(f"expected '{key}=<value>' in '{tag}' line, found '{token}'")
            values.append(value)
        return values

    def number(self, value: str, key: str) -> float:
        try:
            number = float(value)
        except ValueError:
            raise self.fail(f"'{key}' is not a number: '{value}'") from None
        if not math.isfinite(number):
            raise self.fail(f"'{key}' is not a finite number: '{value}'")
        return number

    def integer(self, value: str, key: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise self.fail(f"'{key}' is not an integer: '{value}'") from None

    def count_tagged(self, tag: str) -> int:
        """Number of consecutive lines from the current position starting with ``tag``."""
        count = 0
        for line in self.lines[self.lineno:]:
            if line.split(None, 1)[:1] != [tag]:
                break
            count += 1
        return count

    def positive(self, value: str, key: str) -> float:
        number = self.number(value, key)
        if not number > 0:
            raise self.fail(f"'{key}' must be positive, got {value}")
        return number


def _read_lines(path: str | Path) -> List[str]:
    if not path:
        raise FontFileNotFoundError("Font metrics path is empty")
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            lines = f.read().splitlines()
    except OSError as exc:
        raise FontFileNotFoundError(f"Cannot open font metrics file: {path}") from exc
    except UnicodeDecodeError as exc:
        raise FontParseError(f"not a text file: {exc}", path=path) from exc

    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def parse_font_metrics(path: str | Path) -> FontMetrics:
    """
    Parse a descriptor file into header metrics and raw glyph records.

    Raises:
        FontFileNotFoundError: path is empty or the file cannot be opened.
        FontParseError: malformed header or glyph line, duplicate glyph id.
        GlyphCountMismatchError: fewer glyph lines than ``chars count`` declares.
    """
    reader = _LineReader(path, _read_lines(path))

    face, size = reader.tokens(reader.next_line("info"), "info", ("face", "size"))
    font_height = reader.positive(size, "size")

    line_height, base, scale_w, scale_h = reader.tokens(
        reader.next_line("common"), "common", ("lineHeight", "base", "scaleW", "scaleH")
    )
    line_height = reader.number(line_height, "lineHeight")
    base = reader.number(base, "base")
    scale_w = reader.positive(scale_w, "scaleW")
    scale_h = reader.positive(scale_h, "scaleH")

    # single-page atlas, page line carries nothing we use
    reader.next_line("page")

    (count,) = reader.tokens(reader.next_line("chars"), "chars", ("count",))
    count = reader.integer(count, "count")
    if count < 0:
        raise reader.fail(f"'count' must not be negative, got {count}")

    available = reader.count_tagged("char")
    if available < count:
        raise GlyphCountMismatchError(count, available, path=path)

    records = []
    seen = set()
    for _ in range(count):
        values = reader.tokens(reader.next_line("char"), "char", CHAR_KEYS)
        character = reader.integer(values[0], "id")
        if not 0 <= character <= MAX_CHARACTER:
            raise reader.fail(f"character id {character} outside 0..{MAX_CHARACTER}")
        if character in seen:
            raise reader.fail(f"duplicate character id {character}")
        seen.add(character)

        x, y, width, height, xoffset, yoffset, xadvance = (
            reader.number(value, key) for value, key in zip(values[1:], CHAR_KEYS[1:])
        )
        records.append(
            GlyphRecord(
                character=character,
                x=x,
                y=y,
                width=width,
                height=height,
                xoffset=xoffset,
                yoffset=yoffset,
                xadvance=xadvance,
            )
        )

    return FontMetrics(
        face=face,
        size=font_height,
        line_height=line_height,
        base=base,
        scale_w=scale_w,
        scale_h=scale_h,
        records=tuple(records),
    )


def read_font_metrics(path: str | Path) -> Tuple[GlyphMap, float, float]:
    """
    Parse and normalize a descriptor.

    Returns:
        (glyph_map, font_pixel_height, normalised_line_height)

    Raises:
        FontParseError: also raised for glyphs whose uv rectangle falls
            outside the atlas or whose size is negative.
    """
    log.debug(f"[Font] Reading metrics: {path}")
    metrics = parse_font_metrics(path)
    glyphs = build_glyph_map(metrics, path)
    return glyphs, metrics.size, metrics.normalised_line_height


def build_glyph_map(metrics: FontMetrics, path: str | Path | None = None) -> GlyphMap:
    """Normalize parsed records, rejecting glyphs that break the uv/size range."""
    glyphs = normalize_glyphs(metrics)
    for glyph in glyphs.glyphs():
        problems = validate_glyph(glyph)
        if problems:
            raise FontParseError(
                f"glyph {glyph.character}: " + "; ".join(problems),
                path=path,
            )
    return glyphs
