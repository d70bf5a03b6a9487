"""StandardText - alpha-blended textured quads sampling the font atlas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from atlastext import log
from atlastext.text.errors import ShaderUnavailableError
from atlastext.text.technique import Technique
from atlastext.visualization.render.pipeline import (
    COLOR_RGBA,
    COMBINED_IMAGE_SAMPLER,
    STAGE_FRAGMENT,
    STAGE_VERTEX,
    BindDescriptorSet,
    BindGraphicsPipeline,
    ColorBlendAttachment,
    ColorBlendState,
    DepthStencilState,
    DescriptorImage,
    DescriptorSet,
    DescriptorSetLayout,
    DescriptorSetLayoutBinding,
    GraphicsPipeline,
    InputAssemblyState,
    MultisampleState,
    PipelineLayout,
    PushConstantRange,
    RasterizationState,
    Sampler,
    VertexInputAttribute,
    VertexInputBinding,
    VertexInputState,
)
from atlastext.visualization.render.shader import ShaderProgram, read_shader_stage

if TYPE_CHECKING:
    from atlastext.text.font import Font

VERTEX_SHADER = "shaders/text.vert"
FRAGMENT_SHADER = "shaders/text.frag"

ATLAS_BINDING = 0
ATLAS_UNIFORM = "u_atlas"

# projection and modelview matrices
PUSH_CONSTANT_SIZE = 128

# float32 vec3 / vec2 strides
VEC3_STRIDE = 12
VEC2_STRIDE = 8


class StandardText(Technique):
    """
    Position/color/texcoord vertex streams, source-over alpha blending,
    no back-face culling, one combined image sampler for the atlas.

    Raises ShaderUnavailableError when a shader stage cannot be found and
    ShaderCompilationError when ``font.options.graphics`` is set and the
    program fails to compile.
    """

    def __init__(self, font: "Font"):
        super().__init__(font)
        options = font.options

        vertex_shader = read_shader_stage(VERTEX_SHADER, options.paths)
        fragment_shader = read_shader_stage(FRAGMENT_SHADER, options.paths)
        log.debug(f"[StandardText] vertexShader = {vertex_shader and vertex_shader.name}")
        log.debug(f"[StandardText] fragmentShader = {fragment_shader and fragment_shader.name}")

        if vertex_shader is None or fragment_shader is None:
            missing = [
                name for name, stage in ((VERTEX_SHADER, vertex_shader), (FRAGMENT_SHADER, fragment_shader))
                if stage is None
            ]
            raise ShaderUnavailableError(f"Could not create shaders: {', '.join(missing)} not found")

        program = ShaderProgram([vertex_shader, fragment_shader])
        if options.graphics is not None:
            program.ensure_ready(options.graphics, options.context_key)

        descriptor_set_layout = DescriptorSetLayout((
            DescriptorSetLayoutBinding(ATLAS_BINDING, COMBINED_IMAGE_SAMPLER, 1, STAGE_FRAGMENT),
        ))

        push_constant_ranges = (
            PushConstantRange(STAGE_VERTEX, 0, PUSH_CONSTANT_SIZE),
        )

        vertex_input = VertexInputState(
            bindings=(
                VertexInputBinding(0, VEC3_STRIDE, "vertex"),  # vertex data
                VertexInputBinding(1, VEC3_STRIDE, "vertex"),  # colour data
                VertexInputBinding(2, VEC2_STRIDE, "vertex"),  # tex coord data
            ),
            attributes=(
                VertexInputAttribute(0, 0, "r32g32b32_sfloat", 0),
                VertexInputAttribute(1, 1, "r32g32b32_sfloat", 0),
                VertexInputAttribute(2, 2, "r32g32_sfloat", 0),
            ),
        )

        blending = ColorBlendState((
            ColorBlendAttachment(
                blend_enable=True,
                color_write_mask=COLOR_RGBA,
                src_color_blend_factor="src_alpha",
                dst_color_blend_factor="one_minus_src_alpha",
                color_blend_op="add",
                src_alpha_blend_factor="one",
                dst_alpha_blend_factor="zero",
                alpha_blend_op="add",
            ),
        ))

        pipeline_states = (
            vertex_input,
            InputAssemblyState(),
            MultisampleState(),
            blending,
            RasterizationState(cull_mode="none"),
            DepthStencilState(),
        )

        pipeline_layout = PipelineLayout((descriptor_set_layout,), push_constant_ranges)
        self.graphics_pipeline = GraphicsPipeline(pipeline_layout, program, pipeline_states)
        self.bind_graphics_pipeline = BindGraphicsPipeline(self.graphics_pipeline)

        self.texture = DescriptorImage(
            Sampler(),
            font.atlas,
            binding=ATLAS_BINDING,
            uniform_name=ATLAS_UNIFORM,
        )
        descriptor_set = DescriptorSet(descriptor_set_layout, [self.texture])
        self.bind_descriptor_set = BindDescriptorSet("graphics", pipeline_layout, 0, descriptor_set)
