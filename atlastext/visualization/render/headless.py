"""
HeadlessContext - hidden GLFW window providing an OpenGL context.

Used for offscreen work (texture upload, shader compilation, tests) without
showing a window. GLFW is initialised by the first live context and
terminated when the last one is destroyed.

Usage:
    with HeadlessContext() as context:
        graphics = OpenGLGraphicsBackend()
        graphics.ensure_ready()
        ...
"""

from __future__ import annotations

_live_contexts = 0


def live_context_count() -> int:
    """Number of HeadlessContext windows not yet destroyed."""
    return _live_contexts


class HeadlessContext:
    """
    Invisible GLFW window owning an OpenGL 3.3 core context.

    ``context_key`` identifies this context to per-context GPU caches
    (TextureGPU, ShaderProgram).
    """

    def __init__(self, width: int = 1, height: int = 1):
        global _live_contexts
        import glfw

        if not glfw.init():
            raise RuntimeError("Failed to initialize GLFW")

        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, glfw.TRUE)
        glfw.window_hint(glfw.VISIBLE, glfw.FALSE)

        window = glfw.create_window(width, height, "atlastext-headless", None, None)
        if not window:
            if _live_contexts == 0:
                glfw.terminate()
            raise RuntimeError("Failed to create headless GLFW window")

        glfw.make_context_current(window)
        self._window = window
        self.context_key = id(self)
        _live_contexts += 1

    @property
    def alive(self) -> bool:
        return self._window is not None

    def destroy(self) -> None:
        """Destroy the window; terminates GLFW with the last live context. Idempotent."""
        global _live_contexts
        if self._window is None:
            return
        import glfw

        glfw.destroy_window(self._window)
        self._window = None
        _live_contexts -= 1
        if _live_contexts == 0:
            glfw.terminate()

    def __enter__(self) -> "HeadlessContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.destroy()
