import unittest
from pathlib import Path
import tempfile

from atlastext.file_paths import RESOURCES_DIR
from atlastext.text import FontOptions, ShaderCompilationError, StandardText, layout_text, read_font
from atlastext.visualization.render.pipeline import RecordState

from conftest import write_font


class TestOpenGLText(unittest.TestCase):

    def _create_headless_or_skip(self):
        """
        Create a HeadlessContext or skip the test when GLFW / OpenGL is not
        available (no display in CI, missing libraries).
        """
        try:
            from atlastext.visualization.render.headless import HeadlessContext
            return HeadlessContext()
        except ImportError as exc:
            self.skipTest(f"OpenGL bindings unavailable: {exc}")
        except RuntimeError as exc:
            if "GLFW" in str(exc):
                self.skipTest(f"GLFW unavailable for headless rendering: {exc}")
            raise

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        write_font(self.root)

    def tearDown(self):
        self._tmp.cleanup()

    def test_standard_text_compiles_and_binds(self):
        context = self._create_headless_or_skip()
        try:
            from atlastext.visualization.platform.backends.opengl import OpenGLGraphicsBackend

            graphics = OpenGLGraphicsBackend()
            graphics.ensure_ready()
            options = FontOptions(
                paths=[self.root, RESOURCES_DIR],
                graphics=graphics,
                context_key=context.context_key,
            )
            font = read_font("test", options)

            technique = font.technique(StandardText)
            self.assertIsNotNone(technique)

            state = RecordState(graphics, context_key=context.context_key)
            for command in technique.state_commands():
                command.record(state)
            graphics.finish()

            self.assertIsNotNone(state.shader)
            descriptor = technique.bind_descriptor_set.descriptor_set.descriptors[0]
            handle = descriptor.gpu.handle(graphics, context.context_key)
            self.assertNotEqual(handle.get_id(), 0)

            mesh = layout_text(font, "AB")
            self.assertEqual(mesh.quad_count, 2)

            technique.graphics_pipeline.program.delete()
            descriptor.gpu.delete()
            self.assertEqual(handle.get_id(), 0)
        finally:
            context.destroy()

    def test_context_destroy_is_idempotent_and_releases_glfw(self):
        from atlastext.visualization.render.headless import live_context_count

        before = live_context_count()
        context = self._create_headless_or_skip()
        with context:
            self.assertTrue(context.alive)
            self.assertEqual(live_context_count(), before + 1)
        self.assertFalse(context.alive)
        self.assertEqual(live_context_count(), before)
        context.destroy()
        self.assertEqual(live_context_count(), before)

    def test_bad_source_raises_compilation_error(self):
        context = self._create_headless_or_skip()
        try:
            from atlastext.visualization.platform.backends.opengl import OpenGLGraphicsBackend

            graphics = OpenGLGraphicsBackend()
            with self.assertRaises(ShaderCompilationError):
                graphics.create_shader("#version 330 core\nvoid main() { oops }", "#version 330 core\nvoid main() {}")
        finally:
            context.destroy()


if __name__ == "__main__":
    unittest.main()
