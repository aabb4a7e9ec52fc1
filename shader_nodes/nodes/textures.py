from typing import Optional

from ..ir.types import PortType, ShaderMode, ShaderType
from ..ir.resources import DefaultTextureParam, TextureRef
from .base import ShaderNode, choose, make_unique_id

SOURCES = {
    'TEXTURE': "texture",
    'SCREEN': "screen",
}

TEXTURE_TYPES = {
    'DATA': "",
    'COLOR': " : hint_albedo",
    'NORMALMAP': " : hint_normal",
}


class ShaderNodeTexture(ShaderNode):
    """
    Samples a texture at ``uv``.

    With the TEXTURE source the node owns a private sampler uniform named
    ``tex_<stage>_<id>``; the assigned texture is reported as its default
    texture parameter. The SCREEN source reads SCREEN_TEXTURE and is only
    valid in spatial/canvas_item fragment shaders.
    """
    kind = "texture"
    caption = "Texture"
    input_ports = (("uv", PortType.VECTOR), ("lod", PortType.SCALAR))
    output_ports = (("rgb", PortType.VECTOR), ("alpha", PortType.SCALAR))

    def __init__(self, texture: Optional[TextureRef] = None, source: str = 'TEXTURE',
                 texture_type: str = 'DATA'):
        super().__init__()
        self._texture = texture
        self._source = choose(SOURCES, source, "source")
        self._texture_type = choose(TEXTURE_TYPES, texture_type, "texture type")

    @property
    def texture(self) -> Optional[TextureRef]:
        return self._texture

    @texture.setter
    def texture(self, value: Optional[TextureRef]):
        self._set_property('_texture', value)

    @property
    def source(self) -> str:
        return self._source

    @source.setter
    def source(self, value: str):
        self._set_property('_source', choose(SOURCES, value, "source"))

    @property
    def texture_type(self) -> str:
        return self._texture_type

    @texture_type.setter
    def texture_type(self, value: str):
        self._set_property('_texture_type', choose(TEXTURE_TYPES, value, "texture type"))

    def get_editable_properties(self):
        props = ["source"]
        if self._source == 'TEXTURE':
            props += ["texture", "texture_type"]
        return props

    def is_input_required(self, port: int) -> bool:
        return port == 0

    @staticmethod
    def _screen_available(mode, stage) -> bool:
        return mode in (ShaderMode.SPATIAL, ShaderMode.CANVAS_ITEM) and stage == ShaderType.FRAGMENT

    def get_warning(self, mode, stage):
        if self._source == 'SCREEN' and not self._screen_available(mode, stage):
            return "Screen source is only available in spatial and canvas_item fragment shaders."
        return None

    def get_default_texture_parameters(self, stage, node_id):
        if self._source != 'TEXTURE' or self._texture is None:
            return []
        return [DefaultTextureParam(make_unique_id(stage, node_id, "tex"), self._texture)]

    def generate_global(self, mode, stage, node_id):
        if self._source != 'TEXTURE':
            return ""
        uniform = make_unique_id(stage, node_id, "tex")
        return f"uniform sampler2D {uniform}{TEXTURE_TYPES[self._texture_type]};\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        uv, lod = input_vars[0], input_vars[1]
        if self._source == 'TEXTURE':
            sampler = make_unique_id(stage, node_id, "tex")
            code = "\t{\n"
            if not uv:
                code += "\t\tvec4 n_tex_read = vec4(0.0);\n"
            elif not lod:
                code += f"\t\tvec4 n_tex_read = texture( {sampler} , {uv}.xy );\n"
            else:
                code += f"\t\tvec4 n_tex_read = textureLod( {sampler} , {uv}.xy , {lod} );\n"
            code += f"\t\t{output_vars[0]} = n_tex_read.rgb;\n"
            code += f"\t\t{output_vars[1]} = n_tex_read.a;\n"
            code += "\t}\n"
            return code

        if self._screen_available(mode, stage):
            code = "\t{\n"
            if not uv:
                code += "\t\tvec4 n_tex_read = vec4(0.0);\n"
            elif not lod:
                code += f"\t\tvec4 n_tex_read = textureLod( SCREEN_TEXTURE , {uv}.xy , 0.0 );\n"
            else:
                code += f"\t\tvec4 n_tex_read = textureLod( SCREEN_TEXTURE , {uv}.xy , {lod} );\n"
            code += f"\t\t{output_vars[0]} = n_tex_read.rgb;\n"
            code += f"\t\t{output_vars[1]} = n_tex_read.a;\n"
            code += "\t}\n"
            return code

        # Unsupported here; get_warning reports it
        return f"\t{output_vars[0]} = vec3(0.0);\n\t{output_vars[1]} = 1.0;\n"
