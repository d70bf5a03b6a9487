"""FontOptions - explicit configuration passed to font loading and techniques."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Tuple, TYPE_CHECKING

from atlastext.file_paths import ENV_FILE_PATH, RESOURCES_DIR, get_env_paths

if TYPE_CHECKING:
    from atlastext.visualization.platform.backends.base import GraphicsBackend
    from atlastext.visualization.render.texture_data import TextureData


@dataclass
class FontOptions:
    """
    Where to look for files and which collaborators to use.

    Attributes:
        paths: Search directories, first match wins.
        font_subdir: Subdirectory of each search directory holding fonts
            ("" to look in the search directories themselves).
        image_extensions: Atlas image extensions tried in order.
        image_loader: Callable ``path -> TextureData`` replacing the Pillow loader.
        graphics: Backend used to compile technique shaders eagerly. When None,
            compilation is deferred to the first time a pipeline is bound.
        context_key: GL context key used with ``graphics``.
    """

    paths: List[Path] = field(default_factory=list)
    font_subdir: str = "fonts"
    image_extensions: Tuple[str, ...] = (".png",)
    image_loader: Callable[[Path], "TextureData"] | None = None
    graphics: "GraphicsBackend | None" = None
    context_key: int | None = None

    def __post_init__(self):
        self.paths = [Path(p) for p in self.paths]

    @classmethod
    def from_env(cls, variable: str = ENV_FILE_PATH, **kwargs) -> "FontOptions":
        """
        Explicit ``paths``, then ``$ATLASTEXT_FILE_PATH``, then the bundled
        resources directory (which holds the default text shaders).
        """
        paths = [Path(p) for p in kwargs.pop("paths", [])] + get_env_paths(variable)
        paths.append(RESOURCES_DIR)
        return cls(paths=paths, **kwargs)

