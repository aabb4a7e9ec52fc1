from typing import List, Optional

from ..ir.types import PortType
from ..ir.resources import DefaultTextureParam, TextureRef
from .base import ShaderNode, choose


class ShaderNodeUniform(ShaderNode):
    """
    Base for nodes backed by an externally bound ``uniform``.

    The name is user-assigned; uniqueness against reserved words and other
    uniforms is enforced by the owning shader through its uniform-name
    validator, not here.
    """
    caption = "Uniform"

    def __init__(self, uniform_name: str = ""):
        super().__init__()
        self._uniform_name = uniform_name

    @property
    def uniform_name(self) -> str:
        return self._uniform_name

    @uniform_name.setter
    def uniform_name(self, name: str):
        self._set_property('_uniform_name', name)

    def get_editable_properties(self) -> List[str]:
        return ["uniform_name"]

    def get_warning(self, mode, stage):
        if not self._uniform_name:
            return "Uniform has no name."
        return None


class ShaderNodeScalarUniform(ShaderNodeUniform):
    kind = "scalar_uniform"
    caption = "ScalarUniform"
    output_ports = (("", PortType.SCALAR),)

    def generate_global(self, mode, stage, node_id):
        return f"uniform float {self.uniform_name};\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {self.uniform_name};\n"


class ShaderNodeVectorUniform(ShaderNodeUniform):
    kind = "vector_uniform"
    caption = "VectorUniform"
    output_ports = (("", PortType.VECTOR),)

    def generate_global(self, mode, stage, node_id):
        return f"uniform vec3 {self.uniform_name};\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {self.uniform_name};\n"


class ShaderNodeColorUniform(ShaderNodeUniform):
    kind = "color_uniform"
    caption = "ColorUniform"
    output_ports = (("color", PortType.VECTOR), ("alpha", PortType.SCALAR))

    def generate_global(self, mode, stage, node_id):
        return f"uniform vec4 {self.uniform_name} : hint_color;\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        code = f"\t{output_vars[0]} = {self.uniform_name}.rgb;\n"
        code += f"\t{output_vars[1]} = {self.uniform_name}.a;\n"
        return code


class ShaderNodeTransformUniform(ShaderNodeUniform):
    kind = "transform_uniform"
    caption = "TransformUniform"
    output_ports = (("", PortType.TRANSFORM),)

    def generate_global(self, mode, stage, node_id):
        return f"uniform mat4 {self.uniform_name};\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {self.uniform_name};\n"


TEXTURE_HINTS = {
    'DATA': "",
    'COLOR': " : hint_albedo",
    'NORMALMAP': " : hint_normal",
    'ANISO': " : hint_aniso",
}

BLACK_HINTS = {
    'DATA': " : hint_black",
    'COLOR': " : hint_black_albedo",
}


class ShaderNodeTextureUniform(ShaderNodeUniform):
    """
    Sampler uniform. If a texture is assigned it is reported as a default
    texture parameter so the material can bind it.
    """
    kind = "texture_uniform"
    caption = "TextureUniform"
    input_ports = (("uv", PortType.VECTOR), ("lod", PortType.SCALAR))
    output_ports = (("rgb", PortType.VECTOR), ("alpha", PortType.SCALAR))

    def __init__(self, uniform_name: str = "", texture: Optional[TextureRef] = None,
                 texture_type: str = 'DATA', color_default: str = 'WHITE'):
        super().__init__(uniform_name)
        self._texture = texture
        self._texture_type = choose(TEXTURE_HINTS, texture_type, "texture type")
        self._color_default = choose({'WHITE': 0, 'BLACK': 1}, color_default, "color default")

    @property
    def texture(self) -> Optional[TextureRef]:
        return self._texture

    @texture.setter
    def texture(self, value: Optional[TextureRef]):
        self._set_property('_texture', value)

    @property
    def texture_type(self) -> str:
        return self._texture_type

    @texture_type.setter
    def texture_type(self, value: str):
        self._set_property('_texture_type', choose(TEXTURE_HINTS, value, "texture type"))

    @property
    def color_default(self) -> str:
        return self._color_default

    @color_default.setter
    def color_default(self, value: str):
        self._set_property('_color_default', choose({'WHITE': 0, 'BLACK': 1}, value, "color default"))

    def get_editable_properties(self):
        return ["uniform_name", "texture", "texture_type", "color_default"]

    def is_input_required(self, port: int) -> bool:
        return port == 0

    def get_default_texture_parameters(self, stage, node_id):
        if self._texture is None or not self.uniform_name:
            return []
        return [DefaultTextureParam(self.uniform_name, self._texture)]

    def generate_global(self, mode, stage, node_id):
        hint = TEXTURE_HINTS[self._texture_type]
        if self._color_default == 'BLACK' and self._texture_type in BLACK_HINTS:
            hint = BLACK_HINTS[self._texture_type]
        return f"uniform sampler2D {self.uniform_name}{hint};\n"

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        name = self.uniform_name
        code = "\t{\n"
        if not input_vars[0]:
            code += "\t\tvec4 n_tex_read = vec4(0.0);\n"
        elif not input_vars[1]:
            code += f"\t\tvec4 n_tex_read = texture( {name} , {input_vars[0]}.xy );\n"
        else:
            code += f"\t\tvec4 n_tex_read = textureLod( {name} , {input_vars[0]}.xy , {input_vars[1]} );\n"
        code += f"\t\t{output_vars[0]} = n_tex_read.rgb;\n"
        code += f"\t\t{output_vars[1]} = n_tex_read.a;\n"
        code += "\t}\n"
        return code
