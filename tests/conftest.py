from pathlib import Path

import pytest
from PIL import Image

from atlastext.file_paths import RESOURCES_DIR
from atlastext.text import FontOptions, read_font

DESCRIPTOR = "\n".join(
    [
        'info face="Test Sans" size=64 bold=0 italic=0',
        "common lineHeight=80 base=52 scaleW=256 scaleH=256 pages=1 packed=0",
        'page id=0 file="test.png"',
        "chars count=3",
        "char id=32 x=0 y=0 width=0 height=0 xoffset=0 yoffset=0 xadvance=16 page=0 chnl=15",
        "char id=65 x=10 y=20 width=30 height=40 xoffset=2 yoffset=5 xadvance=35 page=0 chnl=15",
        "char id=66 x=50 y=20 width=28 height=40 xoffset=3 yoffset=5 xadvance=32 page=0 chnl=15",
        "",
    ]
)


def write_font(directory: Path, name: str = "test", descriptor: str = DESCRIPTOR, size=(256, 256)) -> Path:
    """Write <directory>/fonts/<name>.txt and <name>.png, return the fonts dir."""
    fonts = directory / "fonts"
    fonts.mkdir(parents=True, exist_ok=True)
    (fonts / f"{name}.txt").write_text(descriptor, encoding="utf-8")
    image = Image.new("RGBA", size, (255, 255, 255, 0))
    image.putpixel((10, 20), (255, 255, 255, 255))
    image.save(fonts / f"{name}.png")
    return fonts


@pytest.fixture
def descriptor_file(tmp_path):
    path = tmp_path / "test.txt"
    path.write_text(DESCRIPTOR, encoding="utf-8")
    return path


@pytest.fixture
def font_root(tmp_path):
    write_font(tmp_path)
    return tmp_path


@pytest.fixture
def options(font_root):
    return FontOptions(paths=[font_root, RESOURCES_DIR])


@pytest.fixture
def font(options):
    return read_font("test", options)
