"""Search-path helpers for fonts, shaders and other data files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

ENV_FILE_PATH = "ATLASTEXT_FILE_PATH"

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"


def get_env_paths(variable: str = ENV_FILE_PATH) -> List[Path]:
    """Directories listed in an environment variable (os.pathsep separated)."""
    value = os.environ.get(variable, "")
    return [Path(p) for p in value.split(os.pathsep) if p]


def find_file(filename: str | Path, paths: Iterable[str | Path]) -> Path | None:
    """
    First ``<dir>/<filename>`` that exists, searching ``paths`` in order.

    An absolute ``filename`` is returned as is when it exists.
    """
    filename = Path(filename)
    if filename.is_absolute():
        return filename if filename.is_file() else None

    for directory in paths:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    return None
