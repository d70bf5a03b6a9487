import numpy as np
import pytest

from atlastext.text import GlyphData, GlyphMap


def _glyph(code, advance=0.5):
    return GlyphData(
        character=code,
        uv_rect=(0.0, 0.0, 0.1, 0.1),
        size=(0.5, 0.5),
        offset=(0.0, 0.0),
        xadvance=advance,
    )


def test_iteration_is_ascending():
    glyphs = GlyphMap([_glyph(90), _glyph(65), _glyph(32)])
    assert list(glyphs) == [32, 65, 90]
    assert [g.character for g in glyphs.glyphs()] == [32, 65, 90]


def test_lookup_by_char_and_code():
    glyphs = GlyphMap([_glyph(65, 0.25), _glyph(66)])
    assert glyphs.lookup("A").xadvance == 0.25
    assert glyphs.lookup(65) is glyphs[65]
    assert glyphs.lookup("Z") is None
    assert 66 in glyphs
    assert 67 not in glyphs
    with pytest.raises(KeyError):
        glyphs[67]


def test_duplicate_character_rejected():
    with pytest.raises(ValueError):
        GlyphMap([_glyph(65), _glyph(65)])


def test_to_array_layout():
    glyphs = GlyphMap([_glyph(66, 0.75), _glyph(65, 0.25)])
    table = glyphs.to_array()

    assert table.dtype == np.float32
    assert table.shape == (2, GlyphData.PACKED_WIDTH)
    assert table[0, 8] == pytest.approx(0.25)
    assert table[1, 8] == pytest.approx(0.75)
    np.testing.assert_allclose(table[0, :4], [0.0, 0.0, 0.1, 0.1], rtol=1e-6)


def test_empty_map():
    glyphs = GlyphMap()
    assert len(glyphs) == 0
    assert glyphs.lookup("A") is None
    assert glyphs.to_array().shape == (0, GlyphData.PACKED_WIDTH)
