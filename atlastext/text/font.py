"""Font - atlas image, normalized glyph map and the per-font technique cache."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Dict, Tuple, Type, TypeVar

import numpy as np

from atlastext import log
from atlastext.file_paths import find_file
from atlastext.text.errors import AtlasLoadError, FontFileNotFoundError, TextError
from atlastext.text.glyph import GlyphMap
from atlastext.text.metrics_parser import build_glyph_map, parse_font_metrics
from atlastext.text.options import FontOptions
from atlastext.text.technique import Technique
from atlastext.visualization.render.texture_data import TextureData

T = TypeVar("T", bound=Technique)


class Font:
    """
    Loaded bitmap font.

    Attributes:
        name: Font name it was resolved from.
        atlas: Atlas image, shared with the GPU layer.
        glyphs: Normalized glyphs keyed by character code. Each glyph's
            lookup_offset is its row in ``lookup_table()``.
        font_height: Font pixel height.
        normalised_line_height: Line height divided by font pixel height.
        options: Options the font was loaded with; techniques read shader
            search paths and the graphics backend from here.

    The glyph map is immutable. The technique cache is filled during
    single-threaded setup; guard it externally if setup is ever threaded.
    """

    def __init__(
        self,
        atlas: TextureData,
        glyphs: GlyphMap,
        font_height: float,
        normalised_line_height: float,
        options: FontOptions | None = None,
        name: str = "",
    ):
        if not font_height > 0:
            raise ValueError(f"font_height must be positive, got {font_height}")
        self.name = name
        self.atlas = atlas
        self.glyphs = GlyphMap(
            replace(glyph, lookup_offset=float(row)) for row, glyph in enumerate(glyphs.glyphs())
        )
        self.font_height = font_height
        self.normalised_line_height = normalised_line_height
        self.options = options if options is not None else FontOptions()
        self._techniques: Dict[type, Technique] = {}
        self._lookup_table: np.ndarray | None = None

    def __repr__(self) -> str:
        return f"Font({self.name!r}, {len(self.glyphs)} glyphs, height={self.font_height})"

    @property
    def techniques(self) -> Tuple[Technique, ...]:
        """Built techniques in build order."""
        return tuple(self._techniques.values())

    def technique(self, cls: Type[T]) -> T | None:
        """
        Get or create the technique of exactly type ``cls``.

        Repeated calls with the same type return the same instance. A failed
        construction is logged and returns None; nothing is cached for it.
        """
        tech = self._techniques.get(cls)
        if tech is not None:
            return tech

        try:
            tech = cls(self)
        except TextError as e:
            log.error(e, f"[Font] Could not create {cls.__name__} for font '{self.name}'")
            return None

        self._techniques[cls] = tech
        return tech

    def lookup_table(self) -> np.ndarray:
        """Glyph table (N, 10) float32, see GlyphMap.to_array()."""
        if self._lookup_table is None:
            self._lookup_table = self.glyphs.to_array()
            self._lookup_table.setflags(write=False)
        return self._lookup_table


def _load_atlas(path: Path, options: FontOptions) -> TextureData:
    loader = options.image_loader or TextureData.from_file
    try:
        atlas = loader(path)
    except (OSError, ValueError) as e:
        raise AtlasLoadError(f"Could not read texture file: {path}: {e}") from e
    if atlas is None:
        raise AtlasLoadError(f"Could not read texture file: {path}")
    return atlas


def resolve_font_files(name: str, options: FontOptions) -> Tuple[Path, Path]:
    """
    Locate ``(atlas_path, metrics_path)`` for a font name.

    Raises FontFileNotFoundError if either file is missing.
    """
    subdir = Path(options.font_subdir) if options.font_subdir else Path()

    metrics_name = subdir / f"{name}.txt"
    metrics_path = find_file(metrics_name, options.paths)
    if metrics_path is None:
        raise FontFileNotFoundError(f"Could not find font metrics file: {metrics_name}")

    for ext in options.image_extensions:
        atlas_path = find_file(subdir / f"{name}{ext}", options.paths)
        if atlas_path is not None:
            return atlas_path, metrics_path

    tried = ", ".join(str(subdir / f"{name}{ext}") for ext in options.image_extensions)
    raise FontFileNotFoundError(f"Could not find font texture file: {tried}")


def read_font(name: str, options: FontOptions | None = None) -> Font:
    """
    Load a font by name from the search paths.

    Raises:
        FontFileNotFoundError: descriptor or atlas missing.
        AtlasLoadError: atlas cannot be decoded.
        FontParseError: descriptor is malformed.
    """
    if options is None:
        options = FontOptions.from_env()

    atlas_path, metrics_path = resolve_font_files(name, options)
    atlas = _load_atlas(atlas_path, options)

    metrics = parse_font_metrics(metrics_path)
    glyphs = build_glyph_map(metrics, metrics_path)

    if (atlas.width, atlas.height) != (int(metrics.scale_w), int(metrics.scale_h)):
        log.warn(
            f"[Font] Atlas {atlas_path} is {atlas.width}x{atlas.height}, "
            f"metrics declare {metrics.scale_w:g}x{metrics.scale_h:g}"
        )

    font = Font(
        atlas=atlas,
        glyphs=glyphs,
        font_height=metrics.size,
        normalised_line_height=metrics.normalised_line_height,
        options=options,
        name=name,
    )
    log.info(f"[Font] Loaded '{name}': {len(font.glyphs)} glyphs, size {metrics.size:g}")
    return font


load_font = read_font
