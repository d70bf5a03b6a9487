"""TextureGPU - GPU resource wrapper for texture rendering."""

from __future__ import annotations

from typing import Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from atlastext.visualization.platform.backends.base import GPUTextureHandle, GraphicsBackend
    from atlastext.visualization.render.texture_data import TextureData


class TextureGPU:
    """
    Uploads one TextureData lazily, once per GL context.

    The CPU data is shared with whoever else holds it (a Font keeps the same
    TextureData), this object only owns the GPU copies.

    Usage:
        texture_gpu = TextureGPU(texture_data)
        texture_gpu.bind(graphics, unit=0, context_key=ctx)
    """

    def __init__(self, texture_data: "TextureData", mipmap: bool = False, clamp: bool = True):
        self.texture_data = texture_data
        self.mipmap = mipmap
        self.clamp = clamp
        self._handles: Dict[int | None, "GPUTextureHandle"] = {}

    def handle(self, graphics: "GraphicsBackend", context_key: int | None = None) -> "GPUTextureHandle":
        """GPU handle for this context, uploading on first use."""
        handle = self._handles.get(context_key)
        if handle is None:
            data, size = self.texture_data.get_upload_data()
            handle = graphics.create_texture(
                data,
                size,
                channels=self.texture_data.channels,
                mipmap=self.mipmap,
                clamp=self.clamp,
            )
            self._handles[context_key] = handle
        return handle

    def bind(self, graphics: "GraphicsBackend", unit: int = 0, context_key: int | None = None) -> None:
        self.handle(graphics, context_key).bind(unit)

    def delete(self) -> None:
        """Explicitly delete all GPU resources."""
        for handle in self._handles.values():
            handle.delete()
        self._handles.clear()
