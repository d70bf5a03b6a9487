"""Backend interfaces and the no-op implementation.

The OpenGL backend needs PyOpenGL and a current context; import it from
``atlastext.visualization.platform.backends.opengl`` directly.
"""

from .base import (
    GraphicsBackend,
    GPUTextureHandle,
    RenderState,
    ShaderHandle,
)
from .nop_graphics import NOPGraphicsBackend

__all__ = [
    "GraphicsBackend",
    "GPUTextureHandle",
    "RenderState",
    "ShaderHandle",
    "NOPGraphicsBackend",
]
