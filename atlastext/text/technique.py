"""Technique base class: one concrete way of drawing glyphs of a Font."""

from __future__ import annotations

import weakref
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from atlastext.text.font import Font
    from atlastext.visualization.render.pipeline import BindDescriptorSet, BindGraphicsPipeline


class Technique:
    """
    Pipeline state + resource bindings for rendering text of one Font.

    Subclasses are built through ``Font.technique(cls)``, which calls
    ``cls(font)`` and caches the result. A technique keeps only a weak
    reference to its Font; the Font owns the technique.
    """

    def __init__(self, font: "Font"):
        self._font_ref = weakref.ref(font)
        self.bind_graphics_pipeline: "BindGraphicsPipeline | None" = None
        self.bind_descriptor_set: "BindDescriptorSet | None" = None

    @property
    def font(self) -> "Font | None":
        return self._font_ref()

    def state_commands(self) -> List[object]:
        """State commands to record ahead of the text geometry, in order."""
        return [c for c in (self.bind_graphics_pipeline, self.bind_descriptor_set) if c is not None]

    def __repr__(self) -> str:
        font = self.font
        name = font.name if font is not None else "<released>"
        return f"{type(self).__name__}(font={name!r})"
