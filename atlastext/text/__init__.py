"""Font-resource subsystem: metrics parsing, glyph model, Font, techniques, layout."""

from atlastext.text.errors import (
    AtlasLoadError,
    FontFileNotFoundError,
    FontParseError,
    GlyphCountMismatchError,
    ShaderCompilationError,
    ShaderUnavailableError,
    TextError,
)
from atlastext.text.glyph import FontMetrics, GlyphData, GlyphMap, GlyphRecord
from atlastext.text.metrics_parser import parse_font_metrics, read_font_metrics
from atlastext.text.normalizer import normalize_glyph, normalize_glyphs
from atlastext.text.options import FontOptions
from atlastext.text.technique import Technique
from atlastext.text.font import Font, load_font, read_font
from atlastext.text.standard_text import StandardText
from atlastext.text.layout import TextMesh, layout_text, measure_text

__all__ = [
    "AtlasLoadError",
    "FontFileNotFoundError",
    "FontParseError",
    "GlyphCountMismatchError",
    "ShaderCompilationError",
    "ShaderUnavailableError",
    "TextError",
    "FontMetrics",
    "GlyphData",
    "GlyphMap",
    "GlyphRecord",
    "parse_font_metrics",
    "read_font_metrics",
    "normalize_glyph",
    "normalize_glyphs",
    "FontOptions",
    "Technique",
    "Font",
    "load_font",
    "read_font",
    "StandardText",
    "TextMesh",
    "layout_text",
    "measure_text",
]
