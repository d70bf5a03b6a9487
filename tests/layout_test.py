import numpy as np
import pytest

from atlastext.text import layout_text, measure_text


def test_single_glyph_quad(font):
    mesh = layout_text(font, "A")

    assert mesh.quad_count == 1
    assert mesh.vertices.dtype == np.float32
    assert mesh.indices.dtype == np.uint16
    assert list(mesh.indices) == [0, 1, 2, 2, 3, 0]

    # offset (0.03125, 0.109375), size (0.46875, 0.625)
    np.testing.assert_allclose(
        mesh.vertices,
        [
            [0.03125, 0.109375, 0.0],
            [0.5, 0.109375, 0.0],
            [0.5, 0.734375, 0.0],
            [0.03125, 0.734375, 0.0],
        ],
    )
    # uv rect (0.0390625, 0.765625, 0.1171875, 0.15625)
    np.testing.assert_allclose(
        mesh.texcoords,
        [
            [0.0390625, 0.765625],
            [0.15625, 0.765625],
            [0.15625, 0.921875],
            [0.0390625, 0.921875],
        ],
    )


def test_cursor_advances_and_space_emits_no_quad(font):
    mesh = layout_text(font, "A B")

    assert mesh.quad_count == 2
    # A advances 35/64, space advances 16/64, then B's xoffset 3/64
    expected_x = 0.546875 + 0.25 + 3 / 64
    assert mesh.vertices[4, 0] == pytest.approx(expected_x)
    assert list(mesh.indices[6:]) == [4, 5, 6, 6, 7, 4]


def test_newline_moves_down_one_line(font):
    mesh = layout_text(font, "A\nA")

    assert mesh.quad_count == 2
    assert mesh.vertices[4, 0] == pytest.approx(mesh.vertices[0, 0])
    assert mesh.vertices[4, 1] == pytest.approx(mesh.vertices[0, 1] - 1.25)


def test_position_color_and_scale(font):
    mesh = layout_text(font, "A", position=(10.0, 20.0, -1.0), color=(1.0, 0.0, 0.5), scale=2.0)

    np.testing.assert_allclose(mesh.vertices[0], [10.0625, 20.21875, -1.0])
    assert mesh.vertices[2, 0] - mesh.vertices[0, 0] == pytest.approx(0.9375)
    np.testing.assert_allclose(mesh.colors, [[1.0, 0.0, 0.5]] * 4)


def test_missing_glyphs_are_skipped(font):
    mesh = layout_text(font, "AzA")

    assert mesh.quad_count == 2
    assert mesh.vertices[4, 0] == pytest.approx(0.546875 + 0.03125)


def test_empty_text(font):
    mesh = layout_text(font, "")

    assert mesh.quad_count == 0
    assert mesh.vertices.shape == (0, 3)
    assert mesh.colors.shape == (0, 3)
    assert mesh.texcoords.shape == (0, 2)
    assert mesh.indices.shape == (0,)


def test_vertex_arrays_follow_binding_order(font):
    mesh = layout_text(font, "AB")
    vertices, colors, texcoords = mesh.vertex_arrays()
    assert vertices is mesh.vertices
    assert colors is mesh.colors
    assert texcoords is mesh.texcoords


def test_large_text_switches_to_32bit_indices(font):
    mesh = layout_text(font, "A" * 16400)
    assert mesh.quad_count == 16400
    assert mesh.indices.dtype == np.uint32
    assert mesh.indices.max() == 16400 * 4 - 1


def test_measure_text(font):
    assert measure_text(font, "") == (0.0, 0.0)

    width, height = measure_text(font, "AB")
    assert width == pytest.approx(0.546875 + 0.5)
    assert height == pytest.approx(1.25)

    width, height = measure_text(font, "A\nAB z", scale=2.0)
    assert width == pytest.approx((0.546875 + 0.5 + 0.25) * 2.0)
    assert height == pytest.approx(2.5 * 2.0)
