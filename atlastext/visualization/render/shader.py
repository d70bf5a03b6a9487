"""Shader stages read from the search paths and compiled through the graphics backend."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, TYPE_CHECKING

from atlastext import log
from atlastext.file_paths import find_file
from atlastext.text.errors import ShaderCompilationError

if TYPE_CHECKING:
    from atlastext.visualization.platform.backends.base import GraphicsBackend, ShaderHandle


STAGE_EXTENSIONS = {
    ".vert": "vertex",
    ".frag": "fragment",
    ".geom": "geometry",
}


@dataclass(frozen=True)
class ShaderStage:
    """GLSL source for one pipeline stage."""

    stage: str
    source: str
    name: str = ""
    entry_point: str = "main"


def read_shader_stage(filename: str | Path, paths: Iterable[str | Path]) -> ShaderStage | None:
    """
    Find and read a shader stage by logical name, e.g. ``shaders/text.vert``.

    The stage kind comes from the file extension. Returns None if the file
    is not found in any of ``paths`` or cannot be read.
    """
    filename = Path(filename)
    stage = STAGE_EXTENSIONS.get(filename.suffix)
    if stage is None:
        log.error(f"[Shader] Unknown shader stage extension: {filename}")
        return None

    path = find_file(filename, paths)
    if path is None:
        log.warn(f"[Shader] Shader file not found: {filename}")
        return None

    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.error(e, f"[Shader] Cannot read {path}")
        return None

    return ShaderStage(stage=stage, source=source, name=str(filename))


class ShaderProgram:
    """
    Set of stages compiled lazily into one program per GL context.
    """

    def __init__(self, stages: Iterable[ShaderStage]):
        self.stages: Dict[str, ShaderStage] = {}
        for stage in stages:
            if stage.stage in self.stages:
                raise ValueError(f"Duplicate {stage.stage} stage: {stage.name}")
            self.stages[stage.stage] = stage
        for required in ("vertex", "fragment"):
            if required not in self.stages:
                raise ValueError(f"Shader program requires a {required} stage")
        self._handles: Dict[int | None, "ShaderHandle"] = {}

    @property
    def is_compiled(self) -> bool:
        return len(self._handles) > 0

    def ensure_ready(self, graphics: "GraphicsBackend", context_key: int | None = None) -> "ShaderHandle":
        """
        Compile for this context if not done yet.

        Raises ShaderCompilationError, with the stage names added to the message.
        """
        handle = self._handles.get(context_key)
        if handle is not None:
            return handle

        geometry = self.stages.get("geometry")
        try:
            handle = graphics.create_shader(
                self.stages["vertex"].source,
                self.stages["fragment"].source,
                geometry.source if geometry else None,
            )
        except ShaderCompilationError as e:
            names = ", ".join(s.name or s.stage for s in self.stages.values())
            raise ShaderCompilationError(f"[{names}] {e}") from e

        self._handles[context_key] = handle
        return handle

    def delete(self) -> None:
        for handle in self._handles.values():
            handle.delete()
        self._handles.clear()
