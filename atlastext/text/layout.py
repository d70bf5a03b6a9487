"""
Text layout: string + Font -> quad mesh.

Coordinates are in font units (1.0 = font pixel height) multiplied by
``scale``. The cursor starts on the baseline at ``position``, moves right by
each glyph's xadvance and down by the line height on ``\\n``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from atlastext import log

if TYPE_CHECKING:
    from atlastext.text.font import Font


@dataclass
class TextMesh:
    """
    Vertex streams in StandardText binding order plus triangle indices.

    Attributes:
        vertices: float32 (N, 3) quad corners.
        colors: float32 (N, 3) per-vertex color.
        texcoords: float32 (N, 2) atlas coordinates.
        indices: uint16 (M,) triangle list, uint32 above 65535 vertices.
    """

    vertices: np.ndarray
    colors: np.ndarray
    texcoords: np.ndarray
    indices: np.ndarray

    @property
    def quad_count(self) -> int:
        return len(self.vertices) // 4

    @property
    def index_count(self) -> int:
        return len(self.indices)

    def vertex_arrays(self) -> List[np.ndarray]:
        return [self.vertices, self.colors, self.texcoords]


# two CCW triangles over corners bottom-left, bottom-right, top-right, top-left
_QUAD_INDICES = np.array([0, 1, 2, 2, 3, 0], dtype=np.uint32)


def layout_text(
    font: "Font",
    text: str,
    position: Sequence[float] = (0.0, 0.0, 0.0),
    color: Sequence[float] = (1.0, 1.0, 1.0),
    scale: float = 1.0,
) -> TextMesh:
    """
    Build one quad per visible glyph of ``text``.

    Characters missing from the font are skipped without advancing the
    cursor. Glyphs with zero area (space) advance the cursor but emit no quad.
    """
    origin_x, origin_y, z = (float(v) for v in position)
    line_step = font.normalised_line_height * scale

    corners: List[Tuple[float, float, float, float]] = []
    uvs: List[Tuple[float, float, float, float]] = []
    missing = set()

    cursor_x, cursor_y = origin_x, origin_y
    for char in text:
        if char == "\n":
            cursor_x = origin_x
            cursor_y -= line_step
            continue

        glyph = font.glyphs.lookup(char)
        if glyph is None:
            missing.add(char)
            continue

        width, height = glyph.size
        if width > 0 and height > 0:
            x0 = cursor_x + glyph.offset[0] * scale
            y0 = cursor_y + glyph.offset[1] * scale
            corners.append((x0, y0, x0 + width * scale, y0 + height * scale))
            u, v, du, dv = glyph.uv_rect
            uvs.append((u, v, u + du, v + dv))

        cursor_x += glyph.xadvance * scale

    if missing:
        log.debug(f"[Text] Font '{font.name}' has no glyphs for {sorted(missing)!r}")

    quads = len(corners)
    vertices = np.zeros((quads * 4, 3), dtype=np.float32)
    texcoords = np.zeros((quads * 4, 2), dtype=np.float32)
    if quads:
        c = np.array(corners, dtype=np.float32)
        t = np.array(uvs, dtype=np.float32)
        vertices[0::4, 0], vertices[0::4, 1] = c[:, 0], c[:, 1]
        vertices[1::4, 0], vertices[1::4, 1] = c[:, 2], c[:, 1]
        vertices[2::4, 0], vertices[2::4, 1] = c[:, 2], c[:, 3]
        vertices[3::4, 0], vertices[3::4, 1] = c[:, 0], c[:, 3]
        vertices[:, 2] = z
        texcoords[0::4] = t[:, [0, 1]]
        texcoords[1::4] = t[:, [2, 1]]
        texcoords[2::4] = t[:, [2, 3]]
        texcoords[3::4] = t[:, [0, 3]]

    colors = np.tile(np.asarray(color, dtype=np.float32).reshape(1, 3), (quads * 4, 1))

    index_type = np.uint16 if quads * 4 <= 0xFFFF else np.uint32
    indices = (np.arange(quads, dtype=np.uint32)[:, None] * 4 + _QUAD_INDICES).reshape(-1).astype(index_type)

    return TextMesh(vertices=vertices, colors=colors, texcoords=texcoords, indices=indices)


def measure_text(font: "Font", text: str, scale: float = 1.0) -> Tuple[float, float]:
    """
    (width, height) of the laid-out block: widest line's advance sum by
    number of lines times the line height.
    """
    if not text:
        return (0.0, 0.0)

    lines = text.split("\n")
    width = 0.0
    for line in lines:
        advance = 0.0
        for char in line:
            glyph = font.glyphs.lookup(char)
            if glyph is not None:
                advance += glyph.xadvance
        width = max(width, advance)

    return (width * scale, len(lines) * font.normalised_line_height * scale)
