from typing import List

from ..ir.types import PortType, ShaderMode, ShaderType
from .base import ShaderNode
from .input import BuiltinPort, S, V, T, SPATIAL, CANVAS, PARTICLES, VTX, FRG, LGT

# "NAME:swizzle" assigns only the listed components of the input.
OUTPUT_PORTS: List[BuiltinPort] = [
    # Spatial, Vertex
    BuiltinPort(SPATIAL, VTX, V, "vertex", "VERTEX"),
    BuiltinPort(SPATIAL, VTX, V, "normal", "NORMAL"),
    BuiltinPort(SPATIAL, VTX, V, "tangent", "TANGENT"),
    BuiltinPort(SPATIAL, VTX, V, "binormal", "BINORMAL"),
    BuiltinPort(SPATIAL, VTX, V, "uv", "UV:xy"),
    BuiltinPort(SPATIAL, VTX, V, "uv2", "UV2:xy"),
    BuiltinPort(SPATIAL, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(SPATIAL, VTX, S, "alpha", "COLOR.a"),
    BuiltinPort(SPATIAL, VTX, S, "roughness", "ROUGHNESS"),

    # Spatial, Fragment
    BuiltinPort(SPATIAL, FRG, V, "albedo", "ALBEDO"),
    BuiltinPort(SPATIAL, FRG, S, "alpha", "ALPHA"),
    BuiltinPort(SPATIAL, FRG, S, "metallic", "METALLIC"),
    BuiltinPort(SPATIAL, FRG, S, "roughness", "ROUGHNESS"),
    BuiltinPort(SPATIAL, FRG, S, "specular", "SPECULAR"),
    BuiltinPort(SPATIAL, FRG, V, "emission", "EMISSION"),
    BuiltinPort(SPATIAL, FRG, S, "ao", "AO"),
    BuiltinPort(SPATIAL, FRG, V, "normal", "NORMAL"),
    BuiltinPort(SPATIAL, FRG, V, "normalmap", "NORMALMAP"),
    BuiltinPort(SPATIAL, FRG, S, "normalmap_depth", "NORMALMAP_DEPTH"),
    BuiltinPort(SPATIAL, FRG, S, "rim", "RIM"),
    BuiltinPort(SPATIAL, FRG, S, "rim_tint", "RIM_TINT"),
    BuiltinPort(SPATIAL, FRG, S, "clearcoat", "CLEARCOAT"),
    BuiltinPort(SPATIAL, FRG, S, "clearcoat_gloss", "CLEARCOAT_GLOSS"),
    BuiltinPort(SPATIAL, FRG, S, "anisotropy", "ANISOTROPY"),
    BuiltinPort(SPATIAL, FRG, V, "anisotropy_flow", "ANISOTROPY_FLOW:xy"),
    BuiltinPort(SPATIAL, FRG, S, "subsurf_scatter", "SSS_STRENGTH"),
    BuiltinPort(SPATIAL, FRG, V, "transmission", "TRANSMISSION"),
    BuiltinPort(SPATIAL, FRG, S, "alpha_scissor", "ALPHA_SCISSOR"),
    BuiltinPort(SPATIAL, FRG, S, "ao_light_affect", "AO_LIGHT_AFFECT"),

    # Spatial, Light
    BuiltinPort(SPATIAL, LGT, V, "diffuse", "DIFFUSE_LIGHT"),
    BuiltinPort(SPATIAL, LGT, V, "specular", "SPECULAR_LIGHT"),

    # Canvas Item, Vertex
    BuiltinPort(CANVAS, VTX, V, "vertex", "VERTEX:xy"),
    BuiltinPort(CANVAS, VTX, V, "uv", "UV:xy"),
    BuiltinPort(CANVAS, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(CANVAS, VTX, S, "alpha", "COLOR.a"),

    # Canvas Item, Fragment
    BuiltinPort(CANVAS, FRG, V, "color", "COLOR.rgb"),
    BuiltinPort(CANVAS, FRG, S, "alpha", "COLOR.a"),
    BuiltinPort(CANVAS, FRG, V, "normal", "NORMAL"),
    BuiltinPort(CANVAS, FRG, V, "normalmap", "NORMALMAP"),
    BuiltinPort(CANVAS, FRG, S, "normalmap_depth", "NORMALMAP_DEPTH"),

    # Canvas Item, Light
    BuiltinPort(CANVAS, LGT, V, "light", "LIGHT.rgb"),
    BuiltinPort(CANVAS, LGT, S, "light_alpha", "LIGHT.a"),

    # Particles, Vertex
    BuiltinPort(PARTICLES, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(PARTICLES, VTX, S, "alpha", "COLOR.a"),
    BuiltinPort(PARTICLES, VTX, V, "velocity", "VELOCITY"),
    BuiltinPort(PARTICLES, VTX, V, "custom", "CUSTOM.rgb"),
    BuiltinPort(PARTICLES, VTX, S, "custom_alpha", "CUSTOM.a"),
    BuiltinPort(PARTICLES, VTX, T, "transform", "TRANSFORM"),
]


class ShaderNodeOutput(ShaderNode):
    """
    Sink of a stage. Its inputs mirror the built-ins the stage may write.

    Always lives under node id 0 and cannot be removed.
    """
    kind = "output"
    caption = "Output"

    def __init__(self, shader_mode: ShaderMode = ShaderMode.SPATIAL,
                 shader_type: ShaderType = ShaderType.FRAGMENT):
        super().__init__()
        self.shader_mode = shader_mode
        self.shader_type = shader_type

    def _ports(self) -> List[BuiltinPort]:
        return [p for p in OUTPUT_PORTS if p.mode == self.shader_mode and p.stage == self.shader_type]

    def get_input_port_count(self) -> int:
        return len(self._ports())

    def get_input_port_type(self, port: int) -> PortType:
        return self._ports()[port].type

    def get_input_port_name(self, port: int) -> str:
        return self._ports()[port].name

    def get_input_port_string(self, port: int) -> str:
        """Target built-in written by the given input, without swizzle."""
        return self._ports()[port].string.split(":")[0]

    def find_input_port(self, name: str) -> int:
        for i, port in enumerate(self._ports()):
            if port.name == name:
                return i
        return -1

    def get_output_port_count(self) -> int:
        return 0

    def is_port_separator(self, index: int) -> bool:
        # Separate the shading parameters from the normal-related ones
        if self.shader_mode == ShaderMode.SPATIAL and self.shader_type == ShaderType.FRAGMENT:
            name = self.get_input_port_name(index)
            return name in ("normal", "rim", "alpha_scissor")
        return False

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        code = ""
        for i, port in enumerate(self._ports()):
            if not input_vars[i]:
                continue
            if ":" in port.string:
                target, swizzle = port.string.split(":")
                code += f"\t{target} = {input_vars[i]}.{swizzle};\n"
            else:
                code += f"\t{port.string} = {input_vars[i]};\n"
        return code
