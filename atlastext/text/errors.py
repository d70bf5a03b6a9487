"""Errors raised while loading fonts and building text techniques."""

from __future__ import annotations

from pathlib import Path


class TextError(Exception):
    """Base class for every font / technique load failure."""


class FontFileNotFoundError(TextError, FileNotFoundError):
    """Descriptor or atlas file could not be found or opened."""


class FontParseError(TextError, ValueError):
    """
    Malformed descriptor content.

    Attributes:
        path: Descriptor file the error was found in (may be None).
        line: 1-based line number, or None when not line-specific.
    """

    def __init__(self, message: str, path: str | Path | None = None, line: int | None = None):
        self.path = str(path) if path is not None else None
        self.line = line
        location = ""
        if self.path is not None:
            location = self.path
            if line is not None:
                location += f":{line}"
            location += ": "
        super().__init__(f"{location}{message}")


class GlyphCountMismatchError(FontParseError):
    """Fewer glyph lines are available than the ``chars count`` line declares."""

    def __init__(self, declared: int, available: int, path: str | Path | None = None):
        self.declared = declared
        self.available = available
        super().__init__(
            f"declared {declared} glyphs but only {available} glyph lines are present",
            path=path,
        )


class AtlasLoadError(TextError):
    """Atlas image exists but could not be decoded."""


class ShaderUnavailableError(TextError):
    """A required shader stage could not be found."""


class ShaderCompilationError(TextError, RuntimeError):
    """Raised when GLSL compilation or program linking fails."""
