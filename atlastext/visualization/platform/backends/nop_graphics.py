"""Graphics backend that records calls instead of talking to a GPU."""

from __future__ import annotations

from typing import Any, List, Tuple

from atlastext.visualization.platform.backends.base import (
    GPUTextureHandle,
    GraphicsBackend,
    ShaderHandle,
)


class NOPShaderHandle(ShaderHandle):
    def __init__(self, vertex_source: str, fragment_source: str, geometry_source: str | None = None):
        self.vertex_source = vertex_source
        self.fragment_source = fragment_source
        self.geometry_source = geometry_source
        self.uniforms: dict = {}
        self.in_use = False
        self.deleted = False

    def use(self):
        self.in_use = True

    def delete(self):
        self.deleted = True

    def set_uniform_matrix4(self, name: str, matrix):
        self.uniforms[name] = matrix

    def set_uniform_int(self, name: str, value: int):
        self.uniforms[name] = int(value)


class NOPTextureHandle(GPUTextureHandle):
    def __init__(self, image_data, size: Tuple[int, int], channels: int, mipmap: bool, clamp: bool):
        self.image_data = image_data
        self.size = size
        self.channels = channels
        self.mipmap = mipmap
        self.clamp = clamp
        self.bound_unit: int | None = None
        self.deleted = False

    def bind(self, unit: int = 0):
        self.bound_unit = unit

    def delete(self):
        self.deleted = True


class NOPGraphicsBackend(GraphicsBackend):
    """
    No-op backend. Every state call is appended to ``calls`` as
    ``(method_name, *args)``; shaders and textures are plain records.
    """

    def __init__(self):
        self.calls: List[Tuple[Any, ...]] = []
        self.shaders: List[NOPShaderHandle] = []
        self.textures: List[NOPTextureHandle] = []

    def ensure_ready(self):
        self.calls.append(("ensure_ready",))

    def set_depth_test(self, enabled: bool):
        self.calls.append(("set_depth_test", enabled))

    def set_depth_mask(self, enabled: bool):
        self.calls.append(("set_depth_mask", enabled))

    def set_cull_face(self, enabled: bool):
        self.calls.append(("set_cull_face", enabled))

    def set_blend(self, enabled: bool):
        self.calls.append(("set_blend", enabled))

    def set_blend_func(self, src: str, dst: str, src_alpha: str | None = None, dst_alpha: str | None = None):
        self.calls.append(("set_blend_func", src, dst, src_alpha, dst_alpha))

    def set_polygon_mode(self, mode: str):
        self.calls.append(("set_polygon_mode", mode))

    def create_shader(self, vertex_source: str, fragment_source: str, geometry_source: str | None = None) -> ShaderHandle:
        shader = NOPShaderHandle(vertex_source, fragment_source, geometry_source)
        self.shaders.append(shader)
        return shader

    def create_texture(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False) -> GPUTextureHandle:
        texture = NOPTextureHandle(image_data, size, channels, mipmap, clamp)
        self.textures.append(texture)
        return texture

    def finish(self) -> None:
        self.calls.append(("finish",))
