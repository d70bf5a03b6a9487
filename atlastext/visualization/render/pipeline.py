"""
Backend-neutral graphics pipeline and descriptor descriptions.

Objects here describe GPU state; nothing touches the GPU until a ``Bind*``
command is recorded against a GraphicsBackend:

    state = RecordState(graphics, context_key)
    for command in technique.state_commands():
        command.record(state)
    # ... draw geometry ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from atlastext.visualization.platform.backends.base import RenderState
from atlastext.visualization.render.shader import ShaderProgram
from atlastext.visualization.render.texture_gpu import TextureGPU

if TYPE_CHECKING:
    from atlastext.visualization.platform.backends.base import GraphicsBackend, ShaderHandle
    from atlastext.visualization.render.texture_data import TextureData


# Stage flags
STAGE_VERTEX = 0x1
STAGE_FRAGMENT = 0x10

# Descriptor types
COMBINED_IMAGE_SAMPLER = "combined_image_sampler"

# Color write mask bits
COLOR_R = 0x1
COLOR_G = 0x2
COLOR_B = 0x4
COLOR_A = 0x8
COLOR_RGBA = COLOR_R | COLOR_G | COLOR_B | COLOR_A

VERTEX_FORMAT_SIZES = {
    "r32_sfloat": 4,
    "r32g32_sfloat": 8,
    "r32g32b32_sfloat": 12,
    "r32g32b32a32_sfloat": 16,
}


# --- Layouts ---

@dataclass(frozen=True)
class DescriptorSetLayoutBinding:
    binding: int
    descriptor_type: str
    descriptor_count: int
    stage_flags: int


@dataclass(frozen=True)
class DescriptorSetLayout:
    bindings: Tuple[DescriptorSetLayoutBinding, ...]

    def __post_init__(self):
        numbers = [b.binding for b in self.bindings]
        if len(numbers) != len(set(numbers)):
            raise ValueError(f"Duplicate binding numbers in descriptor set layout: {numbers}")

    def binding(self, number: int) -> DescriptorSetLayoutBinding | None:
        for b in self.bindings:
            if b.binding == number:
                return b
        return None


@dataclass(frozen=True)
class PushConstantRange:
    stage_flags: int
    offset: int
    size: int


@dataclass(frozen=True)
class PipelineLayout:
    set_layouts: Tuple[DescriptorSetLayout, ...]
    push_constant_ranges: Tuple[PushConstantRange, ...] = ()


# --- Pipeline states ---

@dataclass(frozen=True)
class VertexInputBinding:
    binding: int
    stride: int
    input_rate: str = "vertex"


@dataclass(frozen=True)
class VertexInputAttribute:
    location: int
    binding: int
    format: str
    offset: int = 0


@dataclass(frozen=True)
class VertexInputState:
    bindings: Tuple[VertexInputBinding, ...]
    attributes: Tuple[VertexInputAttribute, ...]

    def __post_init__(self):
        known = {b.binding for b in self.bindings}
        for attribute in self.attributes:
            if attribute.binding not in known:
                raise ValueError(f"Attribute {attribute.location} refers to unknown binding {attribute.binding}")
            if attribute.format not in VERTEX_FORMAT_SIZES:
                raise ValueError(f"Unknown vertex format: {attribute.format}")


@dataclass(frozen=True)
class InputAssemblyState:
    topology: str = "triangle_list"
    primitive_restart: bool = False


@dataclass(frozen=True)
class MultisampleState:
    samples: int = 1
    sample_shading: bool = False


@dataclass(frozen=True)
class ColorBlendAttachment:
    blend_enable: bool = False
    color_write_mask: int = COLOR_RGBA
    src_color_blend_factor: str = "one"
    dst_color_blend_factor: str = "zero"
    color_blend_op: str = "add"
    src_alpha_blend_factor: str = "one"
    dst_alpha_blend_factor: str = "zero"
    alpha_blend_op: str = "add"


@dataclass(frozen=True)
class ColorBlendState:
    attachments: Tuple[ColorBlendAttachment, ...] = (ColorBlendAttachment(),)


@dataclass(frozen=True)
class RasterizationState:
    cull_mode: str = "back"  # "none" / "front" / "back"
    polygon_mode: str = "fill"
    front_face: str = "ccw"


@dataclass(frozen=True)
class DepthStencilState:
    depth_test: bool = True
    depth_write: bool = True
    depth_compare_op: str = "less"
    stencil_test: bool = False


class GraphicsPipeline:
    """Pipeline layout + shader program + fixed-function states."""

    def __init__(self, layout: PipelineLayout, program: ShaderProgram, states: Sequence[object]):
        self.layout = layout
        self.program = program
        self.states = tuple(states)

    def state(self, cls):
        """First state of the given class, None if absent."""
        for s in self.states:
            if isinstance(s, cls):
                return s
        return None

    def render_state(self) -> RenderState:
        """Collapse the pipeline states into the backend's RenderState."""
        rasterization = self.state(RasterizationState) or RasterizationState()
        depth = self.state(DepthStencilState) or DepthStencilState()
        blending = self.state(ColorBlendState) or ColorBlendState()
        attachment = blending.attachments[0] if blending.attachments else ColorBlendAttachment()

        return RenderState(
            polygon_mode=rasterization.polygon_mode,
            cull=rasterization.cull_mode != "none",
            depth_test=depth.depth_test,
            depth_write=depth.depth_write,
            blend=attachment.blend_enable,
            blend_src=attachment.src_color_blend_factor,
            blend_dst=attachment.dst_color_blend_factor,
            blend_src_alpha=attachment.src_alpha_blend_factor,
            blend_dst_alpha=attachment.dst_alpha_blend_factor,
        )

    def compile(self, graphics: "GraphicsBackend", context_key: int | None = None) -> "ShaderHandle":
        return self.program.ensure_ready(graphics, context_key)


# --- Descriptors ---

@dataclass(frozen=True)
class Sampler:
    min_filter: str = "linear"
    mag_filter: str = "linear"
    address_mode: str = "clamp_to_edge"
    mipmap: bool = False


class DescriptorImage:
    """Texture + sampler bound at ``binding``; ``uniform_name`` is the GLSL sampler it feeds."""

    descriptor_type = COMBINED_IMAGE_SAMPLER

    def __init__(
        self,
        sampler: Sampler,
        image: "TextureData",
        binding: int = 0,
        array_element: int = 0,
        uniform_name: str = "u_texture",
    ):
        self.sampler = sampler
        self.image = image
        self.binding = binding
        self.array_element = array_element
        self.uniform_name = uniform_name
        self.gpu = TextureGPU(
            image,
            mipmap=sampler.mipmap,
            clamp=sampler.address_mode == "clamp_to_edge",
        )

    def bind(self, state: "RecordState") -> None:
        unit = self.binding + self.array_element
        self.gpu.bind(state.graphics, unit=unit, context_key=state.context_key)
        if state.shader is not None:
            state.shader.set_uniform_int(self.uniform_name, unit)


class DescriptorSet:
    def __init__(self, layout: DescriptorSetLayout, descriptors: Sequence[DescriptorImage]):
        for descriptor in descriptors:
            slot = layout.binding(descriptor.binding)
            if slot is None:
                raise ValueError(f"Descriptor binding {descriptor.binding} is not in the layout")
            if slot.descriptor_type != descriptor.descriptor_type:
                raise ValueError(
                    f"Descriptor binding {descriptor.binding} expects {slot.descriptor_type}, "
                    f"got {descriptor.descriptor_type}"
                )
        self.layout = layout
        self.descriptors: List[DescriptorImage] = list(descriptors)


# --- State commands ---

@dataclass
class RecordState:
    """
    Current graphics backend, context and bound program while recording.

    ``projection`` and ``modelview`` are the 4x4 matrices pushed to the
    vertex stage when a pipeline is bound (the 128-byte push constant range).
    """

    graphics: "GraphicsBackend"
    context_key: int | None = None
    shader: "ShaderHandle | None" = None
    projection: np.ndarray = field(default_factory=lambda: np.identity(4, dtype=np.float32))
    modelview: np.ndarray = field(default_factory=lambda: np.identity(4, dtype=np.float32))
    bound: list = field(default_factory=list)


class BindGraphicsPipeline:
    def __init__(
        self,
        pipeline: GraphicsPipeline,
        projection_uniform: str = "u_projection",
        modelview_uniform: str = "u_modelview",
    ):
        self.pipeline = pipeline
        self.projection_uniform = projection_uniform
        self.modelview_uniform = modelview_uniform

    def record(self, state: RecordState) -> None:
        shader = self.pipeline.compile(state.graphics, state.context_key)
        shader.use()
        if self.pipeline.layout.push_constant_ranges:
            shader.set_uniform_matrix4(self.projection_uniform, state.projection)
            shader.set_uniform_matrix4(self.modelview_uniform, state.modelview)
        state.graphics.apply_render_state(self.pipeline.render_state())
        state.shader = shader
        state.bound.append(self)


class BindDescriptorSet:
    def __init__(self, bind_point: str, layout: PipelineLayout, first_set: int, descriptor_set: DescriptorSet):
        if first_set >= len(layout.set_layouts):
            raise ValueError(f"Pipeline layout has no descriptor set {first_set}")
        if layout.set_layouts[first_set] != descriptor_set.layout:
            raise ValueError("Descriptor set layout does not match the pipeline layout")
        self.bind_point = bind_point
        self.layout = layout
        self.first_set = first_set
        self.descriptor_set = descriptor_set

    def record(self, state: RecordState) -> None:
        for descriptor in self.descriptor_set.descriptors:
            descriptor.bind(state)
        state.bound.append(self)
