"""
Command-line entry point: load a bitmap font and report on it.

Usage:
    python -m atlastext roboto --path assets --text "Hello" --technique
"""

import argparse
import logging
import sys

from atlastext import log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlastext",
        description="Load a bitmap font (atlas image + metrics descriptor) and print its metrics",
    )
    parser.add_argument(
        "font",
        type=str,
        help="Font name, resolved to <path>/<subdir>/<font>.txt and <font>.png",
    )
    parser.add_argument(
        "--path", "-p",
        action="append",
        default=[],
        help="Search directory (repeatable, searched before $ATLASTEXT_FILE_PATH)",
    )
    parser.add_argument(
        "--subdir",
        type=str,
        default="fonts",
        help="Font subdirectory inside each search directory (default: fonts)",
    )
    parser.add_argument(
        "--text", "-t",
        type=str,
        default=None,
        help="Lay out this string and print the mesh size",
    )
    parser.add_argument(
        "--technique",
        action="store_true",
        help="Build the StandardText technique",
    )
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Compile the technique shaders in a hidden GLFW window (implies --technique)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(format="%(levelname)s %(message)s")
    log.set_level("DEBUG" if args.verbose else "INFO")

    from atlastext.text import FontOptions, StandardText, TextError, layout_text, measure_text, read_font

    context = None
    options = FontOptions.from_env(paths=args.path, font_subdir=args.subdir)

    try:
        if args.compile:
            from atlastext.visualization.platform.backends.opengl import OpenGLGraphicsBackend
            from atlastext.visualization.render.headless import HeadlessContext

            try:
                context = HeadlessContext()
            except RuntimeError as e:
                log.error(e, "[atlastext] No OpenGL context")
                return 1
            options.graphics = OpenGLGraphicsBackend()
            options.context_key = context.context_key

        try:
            font = read_font(args.font, options)
        except TextError as e:
            log.error(f"[atlastext] {type(e).__name__}: {e}")
            return 1

        print(f"font = {font.name}")
        print(f"glyphs = {len(font.glyphs)}")
        print(f"font height = {font.font_height:g}")
        print(f"normalised line height = {font.normalised_line_height:g}")
        print(f"atlas = {font.atlas.width}x{font.atlas.height}")

        if args.technique or args.compile:
            technique = font.technique(StandardText)
            print(f"technique = {technique}")
            if technique is None:
                return 1

        if args.text is not None:
            mesh = layout_text(font, args.text)
            width, height = measure_text(font, args.text)
            print(f"quads = {mesh.quad_count}, indices = {mesh.index_count}")
            print(f"extent = {width:g} x {height:g}")
    finally:
        if context is not None:
            context.destroy()

    return 0


if __name__ == "__main__":
    sys.exit(main())
