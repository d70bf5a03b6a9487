"""Backend interfaces decoupling rendering code from specific libraries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple


@dataclass
class RenderState:
    """
    Full fixed-function state applied before a draw.

    All values are absolute, there is no "keep as it was".
    """

    polygon_mode: str = "fill"
    cull: bool = True
    depth_test: bool = True
    depth_write: bool = True
    blend: bool = False
    blend_src: str = "src_alpha"
    blend_dst: str = "one_minus_src_alpha"
    blend_src_alpha: str = "one"
    blend_dst_alpha: str = "zero"


class ShaderHandle(ABC):
    """Backend-specific shader program."""

    @abstractmethod
    def use(self):
        ...

    @abstractmethod
    def delete(self):
        ...

    @abstractmethod
    def set_uniform_matrix4(self, name: str, matrix):
        ...

    @abstractmethod
    def set_uniform_int(self, name: str, value: int):
        ...


class GPUTextureHandle(ABC):
    """Backend GPU texture object."""

    @abstractmethod
    def bind(self, unit: int = 0):
        ...

    @abstractmethod
    def delete(self):
        ...


class GraphicsBackend(ABC):
    """Abstract graphics backend (OpenGL, Vulkan, etc.)."""

    @abstractmethod
    def ensure_ready(self):
        ...

    @abstractmethod
    def set_depth_test(self, enabled: bool):
        ...

    @abstractmethod
    def set_depth_mask(self, enabled: bool):
        ...

    @abstractmethod
    def set_cull_face(self, enabled: bool):
        ...

    @abstractmethod
    def set_blend(self, enabled: bool):
        ...

    @abstractmethod
    def set_blend_func(self, src: str, dst: str, src_alpha: str | None = None, dst_alpha: str | None = None):
        ...

    @abstractmethod
    def set_polygon_mode(self, mode: str):  # "fill" / "line"
        ...

    @abstractmethod
    def create_shader(self, vertex_source: str, fragment_source: str, geometry_source: str | None = None) -> ShaderHandle:
        """
        Compile and link a program.

        Raises ShaderCompilationError if any stage fails to compile or link.
        """
        ...

    @abstractmethod
    def create_texture(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False) -> GPUTextureHandle:
        ...

    def apply_render_state(self, state: RenderState):
        """
        Apply the complete render state.
        """
        self.set_polygon_mode(state.polygon_mode)
        self.set_cull_face(state.cull)
        self.set_depth_test(state.depth_test)
        self.set_depth_mask(state.depth_write)
        self.set_blend(state.blend)
        if state.blend:
            self.set_blend_func(state.blend_src, state.blend_dst, state.blend_src_alpha, state.blend_dst_alpha)

    @abstractmethod
    def finish(self) -> None:
        """
        Wait for GPU to complete all commands (blocking).
        Equivalent to glFinish().
        """
        ...
