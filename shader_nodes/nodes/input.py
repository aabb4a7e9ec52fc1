from typing import List, NamedTuple, Optional

from ..ir.types import PortType, ShaderMode, ShaderType
from .base import ShaderNode

S = PortType.SCALAR
V = PortType.VECTOR
T = PortType.TRANSFORM

SPATIAL = ShaderMode.SPATIAL
CANVAS = ShaderMode.CANVAS_ITEM
PARTICLES = ShaderMode.PARTICLES

VTX = ShaderType.VERTEX
FRG = ShaderType.FRAGMENT
LGT = ShaderType.LIGHT


class BuiltinPort(NamedTuple):
    mode: Optional[ShaderMode]   # None matches every mode
    stage: Optional[ShaderType]  # None matches every stage
    type: PortType
    name: str
    string: str


INPUT_PORTS: List[BuiltinPort] = [
    # Spatial, Vertex
    BuiltinPort(SPATIAL, VTX, V, "vertex", "VERTEX"),
    BuiltinPort(SPATIAL, VTX, V, "normal", "NORMAL"),
    BuiltinPort(SPATIAL, VTX, V, "tangent", "TANGENT"),
    BuiltinPort(SPATIAL, VTX, V, "binormal", "BINORMAL"),
    BuiltinPort(SPATIAL, VTX, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "uv2", "vec3(UV2,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(SPATIAL, VTX, S, "alpha", "COLOR.a"),
    BuiltinPort(SPATIAL, VTX, S, "point_size", "POINT_SIZE"),
    BuiltinPort(SPATIAL, VTX, T, "world", "WORLD_MATRIX"),
    BuiltinPort(SPATIAL, VTX, T, "modelview", "MODELVIEW_MATRIX"),
    BuiltinPort(SPATIAL, VTX, T, "camera", "CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, VTX, T, "inv_camera", "INV_CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, VTX, T, "projection", "PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, VTX, T, "inv_projection", "INV_PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, VTX, S, "time", "TIME"),
    BuiltinPort(SPATIAL, VTX, V, "viewport_size", "vec3(VIEWPORT_SIZE,0.0)"),

    # Spatial, Fragment
    BuiltinPort(SPATIAL, FRG, V, "fragcoord", "FRAGCOORD.xyz"),
    BuiltinPort(SPATIAL, FRG, V, "vertex", "VERTEX"),
    BuiltinPort(SPATIAL, FRG, V, "normal", "NORMAL"),
    BuiltinPort(SPATIAL, FRG, V, "tangent", "TANGENT"),
    BuiltinPort(SPATIAL, FRG, V, "binormal", "BINORMAL"),
    BuiltinPort(SPATIAL, FRG, V, "view", "VIEW"),
    BuiltinPort(SPATIAL, FRG, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "uv2", "vec3(UV2,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "color", "COLOR.rgb"),
    BuiltinPort(SPATIAL, FRG, S, "alpha", "COLOR.a"),
    BuiltinPort(SPATIAL, FRG, V, "point_coord", "vec3(POINT_COORD,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "screen_uv", "vec3(SCREEN_UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, S, "side", "float(FRONT_FACING ? 1.0 : 0.0)"),
    BuiltinPort(SPATIAL, FRG, T, "world", "WORLD_MATRIX"),
    BuiltinPort(SPATIAL, FRG, T, "inv_camera", "INV_CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, FRG, T, "camera", "CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, FRG, T, "projection", "PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, FRG, T, "inv_projection", "INV_PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, FRG, S, "time", "TIME"),
    BuiltinPort(SPATIAL, FRG, V, "viewport_size", "vec3(VIEWPORT_SIZE,0.0)"),

    # Spatial, Light
    BuiltinPort(SPATIAL, LGT, V, "fragcoord", "FRAGCOORD.xyz"),
    BuiltinPort(SPATIAL, LGT, V, "normal", "NORMAL"),
    BuiltinPort(SPATIAL, LGT, V, "view", "VIEW"),
    BuiltinPort(SPATIAL, LGT, V, "light", "LIGHT"),
    BuiltinPort(SPATIAL, LGT, V, "light_color", "LIGHT_COLOR"),
    BuiltinPort(SPATIAL, LGT, V, "attenuation", "ATTENUATION"),
    BuiltinPort(SPATIAL, LGT, V, "albedo", "ALBEDO"),
    BuiltinPort(SPATIAL, LGT, V, "transmission", "TRANSMISSION"),
    BuiltinPort(SPATIAL, LGT, S, "roughness", "ROUGHNESS"),
    BuiltinPort(SPATIAL, LGT, V, "diffuse", "DIFFUSE_LIGHT"),
    BuiltinPort(SPATIAL, LGT, V, "specular", "SPECULAR_LIGHT"),
    BuiltinPort(SPATIAL, LGT, T, "world", "WORLD_MATRIX"),
    BuiltinPort(SPATIAL, LGT, T, "inv_camera", "INV_CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, LGT, T, "camera", "CAMERA_MATRIX"),
    BuiltinPort(SPATIAL, LGT, T, "projection", "PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, LGT, T, "inv_projection", "INV_PROJECTION_MATRIX"),
    BuiltinPort(SPATIAL, LGT, S, "time", "TIME"),
    BuiltinPort(SPATIAL, LGT, V, "viewport_size", "vec3(VIEWPORT_SIZE,0.0)"),

    # Canvas Item, Vertex
    BuiltinPort(CANVAS, VTX, V, "vertex", "vec3(VERTEX,0.0)"),
    BuiltinPort(CANVAS, VTX, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(CANVAS, VTX, S, "alpha", "COLOR.a"),
    BuiltinPort(CANVAS, VTX, S, "point_size", "POINT_SIZE"),
    BuiltinPort(CANVAS, VTX, V, "texture_pixel_size", "vec3(TEXTURE_PIXEL_SIZE,1.0)"),
    BuiltinPort(CANVAS, VTX, T, "world", "WORLD_MATRIX"),
    BuiltinPort(CANVAS, VTX, T, "projection", "PROJECTION_MATRIX"),
    BuiltinPort(CANVAS, VTX, T, "extra", "EXTRA_MATRIX"),
    BuiltinPort(CANVAS, VTX, S, "time", "TIME"),
    BuiltinPort(CANVAS, VTX, S, "light_pass", "float(AT_LIGHT_PASS ? 1.0 : 0.0)"),

    # Canvas Item, Fragment
    BuiltinPort(CANVAS, FRG, V, "fragcoord", "FRAGCOORD.xyz"),
    BuiltinPort(CANVAS, FRG, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, FRG, V, "color", "COLOR.rgb"),
    BuiltinPort(CANVAS, FRG, S, "alpha", "COLOR.a"),
    BuiltinPort(CANVAS, FRG, V, "screen_uv", "vec3(SCREEN_UV,0.0)"),
    BuiltinPort(CANVAS, FRG, V, "texture_pixel_size", "vec3(TEXTURE_PIXEL_SIZE,1.0)"),
    BuiltinPort(CANVAS, FRG, V, "screen_pixel_size", "vec3(SCREEN_PIXEL_SIZE,1.0)"),
    BuiltinPort(CANVAS, FRG, V, "point_coord", "vec3(POINT_COORD,0.0)"),
    BuiltinPort(CANVAS, FRG, S, "time", "TIME"),
    BuiltinPort(CANVAS, FRG, S, "light_pass", "float(AT_LIGHT_PASS ? 1.0 : 0.0)"),

    # Canvas Item, Light
    BuiltinPort(CANVAS, LGT, V, "fragcoord", "FRAGCOORD.xyz"),
    BuiltinPort(CANVAS, LGT, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, LGT, V, "normal", "NORMAL"),
    BuiltinPort(CANVAS, LGT, V, "color", "COLOR.rgb"),
    BuiltinPort(CANVAS, LGT, S, "alpha", "COLOR.a"),
    BuiltinPort(CANVAS, LGT, V, "light_vec", "vec3(LIGHT_VEC,0.0)"),
    BuiltinPort(CANVAS, LGT, S, "light_height", "LIGHT_HEIGHT"),
    BuiltinPort(CANVAS, LGT, V, "light_color", "LIGHT_COLOR.rgb"),
    BuiltinPort(CANVAS, LGT, S, "light_alpha", "LIGHT_COLOR.a"),
    BuiltinPort(CANVAS, LGT, V, "light_uv", "vec3(LIGHT_UV,0.0)"),
    BuiltinPort(CANVAS, LGT, V, "shadow_color", "SHADOW_COLOR.rgb"),
    BuiltinPort(CANVAS, LGT, V, "screen_uv", "vec3(SCREEN_UV,0.0)"),
    BuiltinPort(CANVAS, LGT, V, "point_coord", "vec3(POINT_COORD,0.0)"),
    BuiltinPort(CANVAS, LGT, S, "time", "TIME"),

    # Particles, Vertex
    BuiltinPort(PARTICLES, VTX, V, "color", "COLOR.rgb"),
    BuiltinPort(PARTICLES, VTX, S, "alpha", "COLOR.a"),
    BuiltinPort(PARTICLES, VTX, V, "velocity", "VELOCITY"),
    BuiltinPort(PARTICLES, VTX, S, "restart", "float(RESTART ? 1.0 : 0.0)"),
    BuiltinPort(PARTICLES, VTX, S, "active", "float(ACTIVE ? 1.0 : 0.0)"),
    BuiltinPort(PARTICLES, VTX, V, "custom", "CUSTOM.rgb"),
    BuiltinPort(PARTICLES, VTX, S, "custom_alpha", "CUSTOM.a"),
    BuiltinPort(PARTICLES, VTX, T, "transform", "TRANSFORM"),
    BuiltinPort(PARTICLES, VTX, S, "delta", "DELTA"),
    BuiltinPort(PARTICLES, VTX, S, "lifetime", "LIFETIME"),
    BuiltinPort(PARTICLES, VTX, S, "index", "float(INDEX)"),
    BuiltinPort(PARTICLES, VTX, T, "emission_transform", "EMISSION_TRANSFORM"),
    BuiltinPort(PARTICLES, VTX, S, "time", "TIME"),
]

# Substitutions used when a node is rendered in isolation on a canvas_item
# fragment; they only need to produce something plausible to look at.
PREVIEW_PORTS: List[BuiltinPort] = [
    BuiltinPort(SPATIAL, VTX, V, "vertex", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "normal", "vec3(0.0,0.0,1.0)"),
    BuiltinPort(SPATIAL, VTX, V, "tangent", "vec3(0.0,1.0,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "binormal", "vec3(1.0,0.0,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "uv2", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, VTX, V, "color", "vec3(1.0)"),
    BuiltinPort(SPATIAL, VTX, S, "alpha", "1.0"),

    BuiltinPort(SPATIAL, FRG, V, "fragcoord", "vec3(FRAGCOORD.xy,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "vertex", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "normal", "vec3(0.0,0.0,1.0)"),
    BuiltinPort(SPATIAL, FRG, V, "tangent", "vec3(0.0,1.0,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "binormal", "vec3(1.0,0.0,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "uv2", "vec3(UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, V, "color", "vec3(1.0)"),
    BuiltinPort(SPATIAL, FRG, S, "alpha", "1.0"),
    BuiltinPort(SPATIAL, FRG, V, "screen_uv", "vec3(SCREEN_UV,0.0)"),
    BuiltinPort(SPATIAL, FRG, S, "side", "1.0"),

    BuiltinPort(SPATIAL, LGT, V, "normal", "vec3(0.0,0.0,1.0)"),

    BuiltinPort(CANVAS, VTX, V, "vertex", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, VTX, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, VTX, V, "color", "vec3(1.0)"),
    BuiltinPort(CANVAS, VTX, S, "alpha", "1.0"),

    BuiltinPort(CANVAS, FRG, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, FRG, V, "color", "vec3(1.0)"),
    BuiltinPort(CANVAS, FRG, S, "alpha", "1.0"),
    BuiltinPort(CANVAS, FRG, V, "screen_uv", "vec3(SCREEN_UV,0.0)"),

    BuiltinPort(CANVAS, LGT, V, "uv", "vec3(UV,0.0)"),
    BuiltinPort(CANVAS, LGT, V, "normal", "vec3(0.0,0.0,1.0)"),
    BuiltinPort(CANVAS, LGT, V, "color", "vec3(1.0)"),
    BuiltinPort(CANVAS, LGT, S, "alpha", "1.0"),

    BuiltinPort(PARTICLES, VTX, V, "color", "vec3(1.0)"),
    BuiltinPort(PARTICLES, VTX, S, "alpha", "1.0"),

    BuiltinPort(None, None, S, "time", "TIME"),
]

NO_INPUT = "[None]"


def _find_port(table: List[BuiltinPort], mode, stage, name) -> Optional[BuiltinPort]:
    for port in table:
        if (port.mode is None or port.mode == mode) and \
                (port.stage is None or port.stage == stage) and port.name == name:
            return port
    return None


def list_input_names(mode: ShaderMode, stage: ShaderType) -> List[str]:
    """Built-in names available to an Input node in the given mode and stage."""
    return [p.name for p in INPUT_PORTS if p.mode == mode and p.stage == stage]


class ShaderNodeInput(ShaderNode):
    """
    Exposes one built-in variable of the stage (time, normal, ...).

    The shader mode and stage are assigned by the owning graph when the
    node is added, since the output type depends on them.
    """
    kind = "input"
    caption = "Input"

    def __init__(self, input_name: str = NO_INPUT):
        super().__init__()
        self._input_name = input_name
        self.shader_mode = ShaderMode.SPATIAL
        self.shader_type = ShaderType.FRAGMENT

    @property
    def input_name(self) -> str:
        return self._input_name

    @input_name.setter
    def input_name(self, name: str):
        self._set_property('_input_name', name)

    def _port(self) -> Optional[BuiltinPort]:
        return _find_port(INPUT_PORTS, self.shader_mode, self.shader_type, self._input_name)

    def get_input_type_by_name(self, name: str) -> PortType:
        port = _find_port(INPUT_PORTS, self.shader_mode, self.shader_type, name)
        return port.type if port else PortType.SCALAR

    def get_caption(self) -> str:
        return f"Input: {self._input_name}" if self._port() else self.caption

    def get_output_port_count(self) -> int:
        return 1

    def get_output_port_type(self, port: int) -> PortType:
        return self.get_input_type_by_name(self._input_name)

    def get_output_port_name(self, port: int) -> str:
        return ""

    def get_editable_properties(self) -> List[str]:
        return ["input_name"]

    def get_warning(self, mode, stage):
        if _find_port(INPUT_PORTS, mode, stage, self._input_name) is None:
            return f"Input '{self._input_name}' is not available in {mode} {stage} shaders."
        return None

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        port = _find_port(INPUT_PORTS, mode, stage, self._input_name)
        if port is not None:
            return f"\t{output_vars[0]} = {port.string};\n"
        return f"\t{output_vars[0]} = {self.get_output_port_type(0).zero_literal()};\n"

    def generate_code_for_preview(self, stage, node_id, input_vars, output_vars):
        port = _find_port(PREVIEW_PORTS, self.shader_mode, stage, self._input_name)
        if port is not None:
            return f"\t{output_vars[0]} = {port.string};\n"
        return f"\t{output_vars[0]} = {self.get_output_port_type(0).zero_literal()};\n"
