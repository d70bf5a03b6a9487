"""OpenGL graphics backend on PyOpenGL.

This file contains:
- Shader program and texture handles
- OpenGLGraphicsBackend implementing GraphicsBackend
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
from OpenGL import GL as gl

from atlastext.text.errors import ShaderCompilationError
from atlastext.visualization.platform.backends.base import (
    GPUTextureHandle,
    GraphicsBackend,
    ShaderHandle,
)

_BLEND_FACTORS = {
    "zero": gl.GL_ZERO,
    "one": gl.GL_ONE,
    "src_alpha": gl.GL_SRC_ALPHA,
    "one_minus_src_alpha": gl.GL_ONE_MINUS_SRC_ALPHA,
    "dst_alpha": gl.GL_DST_ALPHA,
    "one_minus_dst_alpha": gl.GL_ONE_MINUS_DST_ALPHA,
    "src_color": gl.GL_SRC_COLOR,
    "one_minus_src_color": gl.GL_ONE_MINUS_SRC_COLOR,
}

_TEXTURE_FORMATS = {
    1: gl.GL_RED,
    2: gl.GL_RG,
    3: gl.GL_RGB,
    4: gl.GL_RGBA,
}

_INTERNAL_FORMATS = {
    1: gl.GL_R8,
    2: gl.GL_RG8,
    3: gl.GL_RGB8,
    4: gl.GL_RGBA8,
}


def _info_log(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _compile_stage(stage_type, source: str, stage_name: str) -> int:
    shader = gl.glCreateShader(stage_type)
    gl.glShaderSource(shader, source)
    gl.glCompileShader(shader)
    if not gl.glGetShaderiv(shader, gl.GL_COMPILE_STATUS):
        message = _info_log(gl.glGetShaderInfoLog(shader))
        gl.glDeleteShader(shader)
        raise ShaderCompilationError(f"{stage_name} shader compilation failed:\n{message}")
    return shader


class OpenGLShaderHandle(ShaderHandle):
    """Linked GL program with a uniform location cache."""

    def __init__(self, vertex_source: str, fragment_source: str, geometry_source: str | None = None):
        stages = [_compile_stage(gl.GL_VERTEX_SHADER, vertex_source, "vertex")]
        try:
            stages.append(_compile_stage(gl.GL_FRAGMENT_SHADER, fragment_source, "fragment"))
            if geometry_source:
                stages.append(_compile_stage(gl.GL_GEOMETRY_SHADER, geometry_source, "geometry"))
        except ShaderCompilationError:
            for shader in stages:
                gl.glDeleteShader(shader)
            raise

        program = gl.glCreateProgram()
        for shader in stages:
            gl.glAttachShader(program, shader)
        gl.glLinkProgram(program)
        for shader in stages:
            gl.glDetachShader(program, shader)
            gl.glDeleteShader(shader)

        if not gl.glGetProgramiv(program, gl.GL_LINK_STATUS):
            message = _info_log(gl.glGetProgramInfoLog(program))
            gl.glDeleteProgram(program)
            raise ShaderCompilationError(f"Program link failed:\n{message}")

        self._program: int | None = program
        self._uniforms: Dict[str, int] = {}

    def _location(self, name: str) -> int:
        loc = self._uniforms.get(name)
        if loc is None:
            loc = gl.glGetUniformLocation(self._program, name)
            self._uniforms[name] = loc
        return loc

    def use(self):
        gl.glUseProgram(self._program)

    def delete(self):
        if self._program is not None:
            gl.glDeleteProgram(self._program)
            self._program = None
            self._uniforms.clear()

    def set_uniform_matrix4(self, name: str, matrix):
        data = np.asarray(matrix, dtype=np.float32).reshape(4, 4)
        # numpy is row-major, GL expects column-major
        gl.glUniformMatrix4fv(self._location(name), 1, gl.GL_TRUE, data)

    def set_uniform_int(self, name: str, value: int):
        gl.glUniform1i(self._location(name), int(value))


class OpenGLTextureHandle(GPUTextureHandle):
    """Owned GL_TEXTURE_2D."""

    def __init__(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False):
        if channels not in _TEXTURE_FORMATS:
            raise ValueError(f"Unsupported channel count: {channels}")
        w, h = size
        data = np.ascontiguousarray(image_data, dtype=np.uint8)

        self._tex_id: int | None = gl.glGenTextures(1)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self._tex_id)
        gl.glPixelStorei(gl.GL_UNPACK_ALIGNMENT, 1)
        gl.glTexImage2D(
            gl.GL_TEXTURE_2D, 0, _INTERNAL_FORMATS[channels],
            w, h, 0, _TEXTURE_FORMATS[channels], gl.GL_UNSIGNED_BYTE, data
        )

        if mipmap:
            gl.glGenerateMipmap(gl.GL_TEXTURE_2D)
            min_filter = gl.GL_LINEAR_MIPMAP_LINEAR
        else:
            min_filter = gl.GL_LINEAR
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, min_filter)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)

        wrap = gl.GL_CLAMP_TO_EDGE if clamp else gl.GL_REPEAT
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, wrap)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, wrap)
        gl.glBindTexture(gl.GL_TEXTURE_2D, 0)

    def get_id(self) -> int:
        return self._tex_id or 0

    def bind(self, unit: int = 0):
        gl.glActiveTexture(gl.GL_TEXTURE0 + unit)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self._tex_id or 0)

    def delete(self):
        if self._tex_id is not None:
            gl.glDeleteTextures(1, [self._tex_id])
            self._tex_id = None


class OpenGLGraphicsBackend(GraphicsBackend):
    """GraphicsBackend for the GL context current on the calling thread."""

    def __init__(self):
        self._ready = False

    def ensure_ready(self):
        if self._ready:
            return
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glDepthFunc(gl.GL_LESS)
        gl.glEnable(gl.GL_CULL_FACE)
        gl.glCullFace(gl.GL_BACK)
        gl.glFrontFace(gl.GL_CCW)
        self._ready = True

    def set_depth_test(self, enabled: bool):
        if enabled:
            gl.glEnable(gl.GL_DEPTH_TEST)
        else:
            gl.glDisable(gl.GL_DEPTH_TEST)

    def set_depth_mask(self, enabled: bool):
        gl.glDepthMask(gl.GL_TRUE if enabled else gl.GL_FALSE)

    def set_cull_face(self, enabled: bool):
        if enabled:
            gl.glEnable(gl.GL_CULL_FACE)
        else:
            gl.glDisable(gl.GL_CULL_FACE)

    def set_blend(self, enabled: bool):
        if enabled:
            gl.glEnable(gl.GL_BLEND)
        else:
            gl.glDisable(gl.GL_BLEND)

    def set_blend_func(self, src: str, dst: str, src_alpha: str | None = None, dst_alpha: str | None = None):
        gl.glBlendFuncSeparate(
            _BLEND_FACTORS[src],
            _BLEND_FACTORS[dst],
            _BLEND_FACTORS[src_alpha or src],
            _BLEND_FACTORS[dst_alpha or dst],
        )
        gl.glBlendEquation(gl.GL_FUNC_ADD)

    def set_polygon_mode(self, mode: str):
        gl.glPolygonMode(gl.GL_FRONT_AND_BACK, gl.GL_LINE if mode == "line" else gl.GL_FILL)

    def create_shader(self, vertex_source: str, fragment_source: str, geometry_source: str | None = None) -> ShaderHandle:
        return OpenGLShaderHandle(vertex_source, fragment_source, geometry_source)

    def create_texture(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False) -> GPUTextureHandle:
        return OpenGLTextureHandle(image_data, size, channels=channels, mipmap=mipmap, clamp=clamp)

    def finish(self) -> None:
        gl.glFinish()
