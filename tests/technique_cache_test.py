import pytest

from atlastext.text import (
    FontOptions,
    ShaderCompilationError,
    ShaderUnavailableError,
    StandardText,
    Technique,
    read_font,
)
from atlastext.visualization.platform.backends import NOPGraphicsBackend
from atlastext.visualization.render.pipeline import (
    COMBINED_IMAGE_SAMPLER,
    STAGE_FRAGMENT,
    STAGE_VERTEX,
    ColorBlendState,
    RasterizationState,
    RecordState,
    VertexInputState,
)


class OutlineText(Technique):
    """Second technique type used to check per-type caching."""

    built = 0

    def __init__(self, font):
        super().__init__(font)
        type(self).built += 1


class BrokenText(Technique):
    attempts = 0

    def __init__(self, font):
        super().__init__(font)
        type(self).attempts += 1
        raise ShaderUnavailableError("no shaders for this one")


class StandardTextVariant(StandardText):
    pass


class FailingGraphicsBackend(NOPGraphicsBackend):
    def create_shader(self, vertex_source, fragment_source, geometry_source=None):
        raise ShaderCompilationError("0:1: syntax error")


def test_same_type_returns_same_instance(font):
    first = font.technique(StandardText)
    second = font.technique(StandardText)

    assert first is not None
    assert first is second
    assert font.techniques == (first,)


def test_distinct_types_are_distinct_instances(font):
    OutlineText.built = 0
    standard = font.technique(StandardText)
    outline = font.technique(OutlineText)

    assert standard is not outline
    assert isinstance(outline, OutlineText)
    assert font.techniques == (standard, outline)
    assert font.technique(StandardText) is standard
    assert font.technique(OutlineText) is outline
    assert OutlineText.built == 1


def test_cache_is_keyed_by_exact_type(font):
    standard = font.technique(StandardText)
    variant = font.technique(StandardTextVariant)

    assert type(variant) is StandardTextVariant
    assert variant is not standard


def test_cache_is_per_font(options):
    a = read_font("test", options)
    b = read_font("test", options)
    assert a.technique(StandardText) is not b.technique(StandardText)


def test_failed_construction_returns_none_and_is_not_cached(font):
    BrokenText.attempts = 0

    assert font.technique(BrokenText) is None
    assert font.techniques == ()
    assert font.technique(BrokenText) is None
    assert BrokenText.attempts == 2


def test_missing_shaders(font_root):
    font = read_font("test", FontOptions(paths=[font_root]))

    assert font.technique(StandardText) is None
    with pytest.raises(ShaderUnavailableError):
        StandardText(font)


def test_eager_compilation(font_root):
    from atlastext.file_paths import RESOURCES_DIR

    graphics = NOPGraphicsBackend()
    font = read_font("test", FontOptions(paths=[font_root, RESOURCES_DIR], graphics=graphics))

    technique = font.technique(StandardText)
    assert technique is not None
    assert len(graphics.shaders) == 1
    assert "u_atlas" in graphics.shaders[0].fragment_source
    assert technique.graphics_pipeline.program.is_compiled


def test_compile_failure(font_root):
    from atlastext.file_paths import RESOURCES_DIR

    font = read_font(
        "test",
        FontOptions(paths=[font_root, RESOURCES_DIR], graphics=FailingGraphicsBackend()),
    )

    assert font.technique(StandardText) is None
    with pytest.raises(ShaderCompilationError) as info:
        StandardText(font)
    assert "shaders/text.vert" in str(info.value)


def test_technique_does_not_keep_font_alive(options):
    font = read_font("test", options)
    technique = font.technique(StandardText)
    assert technique.font is font

    del font
    import gc
    gc.collect()
    assert technique.font is None


def test_standard_text_pipeline_description(font):
    technique = font.technique(StandardText)
    pipeline = technique.graphics_pipeline

    (set_layout,) = pipeline.layout.set_layouts
    (binding,) = set_layout.bindings
    assert (binding.binding, binding.descriptor_type, binding.descriptor_count, binding.stage_flags) == (
        0, COMBINED_IMAGE_SAMPLER, 1, STAGE_FRAGMENT,
    )

    (push_constants,) = pipeline.layout.push_constant_ranges
    assert (push_constants.stage_flags, push_constants.offset, push_constants.size) == (STAGE_VERTEX, 0, 128)

    vertex_input = pipeline.state(VertexInputState)
    assert [(b.binding, b.stride) for b in vertex_input.bindings] == [(0, 12), (1, 12), (2, 8)]
    assert [(a.location, a.binding, a.format) for a in vertex_input.attributes] == [
        (0, 0, "r32g32b32_sfloat"),
        (1, 1, "r32g32b32_sfloat"),
        (2, 2, "r32g32_sfloat"),
    ]

    (attachment,) = pipeline.state(ColorBlendState).attachments
    assert attachment.blend_enable
    assert attachment.src_color_blend_factor == "src_alpha"
    assert attachment.dst_color_blend_factor == "one_minus_src_alpha"
    assert (attachment.src_alpha_blend_factor, attachment.dst_alpha_blend_factor) == ("one", "zero")

    assert pipeline.state(RasterizationState).cull_mode == "none"

    render_state = pipeline.render_state()
    assert render_state.cull is False
    assert render_state.blend is True
    assert render_state.depth_test is True


def test_descriptor_samples_font_atlas(font):
    technique = font.technique(StandardText)
    (descriptor,) = technique.bind_descriptor_set.descriptor_set.descriptors
    assert descriptor.image is font.atlas
    assert descriptor.binding == 0


def test_recording_state_commands(font):
    technique = font.technique(StandardText)
    graphics = NOPGraphicsBackend()
    state = RecordState(graphics, context_key=7)

    commands = technique.state_commands()
    assert commands == [technique.bind_graphics_pipeline, technique.bind_descriptor_set]
    for command in commands:
        command.record(state)

    assert state.bound == commands
    assert ("set_cull_face", False) in graphics.calls
    assert ("set_blend", True) in graphics.calls
    assert ("set_blend_func", "src_alpha", "one_minus_src_alpha", "one", "zero") in graphics.calls

    (shader,) = graphics.shaders
    assert shader.in_use
    assert shader.uniforms["u_atlas"] == 0

    (texture,) = graphics.textures
    assert texture.size == (256, 256)
    assert texture.bound_unit == 0
    assert texture.clamp is True

    # second recording in the same context reuses the uploads
    technique.bind_graphics_pipeline.record(state)
    technique.bind_descriptor_set.record(state)
    assert len(graphics.shaders) == 1
    assert len(graphics.textures) == 1


def test_recording_pushes_view_matrices(font):
    import numpy as np

    technique = font.technique(StandardText)
    graphics = NOPGraphicsBackend()
    projection = np.diag([2.0, 2.0, 1.0, 1.0]).astype(np.float32)
    modelview = np.identity(4, dtype=np.float32)
    modelview[0, 3] = 5.0
    state = RecordState(graphics, projection=projection, modelview=modelview)

    technique.bind_graphics_pipeline.record(state)

    (shader,) = graphics.shaders
    assert shader.uniforms["u_projection"] is projection
    assert shader.uniforms["u_modelview"] is modelview
    assert "uniform mat4 u_projection" in shader.vertex_source


def test_default_view_matrices_are_identity(font):
    import numpy as np

    technique = font.technique(StandardText)
    graphics = NOPGraphicsBackend()
    technique.bind_graphics_pipeline.record(RecordState(graphics))

    (shader,) = graphics.shaders
    np.testing.assert_array_equal(shader.uniforms["u_projection"], np.identity(4))
    np.testing.assert_array_equal(shader.uniforms["u_modelview"], np.identity(4))


def test_delete_releases_gpu_objects(font):
    technique = font.technique(StandardText)
    graphics = NOPGraphicsBackend()
    for command in technique.state_commands():
        command.record(RecordState(graphics, context_key=1))

    technique.graphics_pipeline.program.delete()
    technique.bind_descriptor_set.descriptor_set.descriptors[0].gpu.delete()

    assert graphics.shaders[0].deleted
    assert graphics.textures[0].deleted
    assert not technique.graphics_pipeline.program.is_compiled
