"""
atlastext - bitmap-font text rendering from a pre-baked glyph atlas.

Main modules:
- text - descriptor parsing, glyph normalization, Font and techniques, layout
- visualization - backend-neutral pipeline descriptions, OpenGL backend
"""

from atlastext.text import Font, FontOptions, StandardText, layout_text, read_font

__version__ = '0.1.0'

__all__ = [
    'Font',
    'FontOptions',
    'StandardText',
    'layout_text',
    'read_font',
]
