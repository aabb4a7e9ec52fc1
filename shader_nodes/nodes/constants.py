from typing import Tuple

from ..ir.types import PortType
from ..ir.values import Transform, Vector, as_value, finite_float
from ..codegen.literals import format_constant, format_float
from .base import ShaderNode


class ShaderNodeScalarConstant(ShaderNode):
    kind = "scalar_constant"
    caption = "Scalar"
    output_ports = (("", PortType.SCALAR),)

    def __init__(self, constant: float = 0.0):
        super().__init__()
        self._constant = finite_float(constant)

    @property
    def constant(self) -> float:
        return self._constant

    @constant.setter
    def constant(self, value: float):
        self._set_property('_constant', finite_float(value))

    def get_editable_properties(self):
        return ["constant"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {format_float(self._constant, 6)};\n"


class ShaderNodeVectorConstant(ShaderNode):
    kind = "vector_constant"
    caption = "Vector"
    output_ports = (("", PortType.VECTOR),)

    def __init__(self, constant=(0.0, 0.0, 0.0)):
        super().__init__()
        self._constant = Vector(*constant)

    @property
    def constant(self) -> Vector:
        return self._constant

    @constant.setter
    def constant(self, value):
        self._set_property('_constant', value if isinstance(value, Vector) else Vector(*value))

    def get_editable_properties(self):
        return ["constant"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {format_constant(self._constant, 3)};\n"


class ShaderNodeColorConstant(ShaderNode):
    """RGBA color split into an rgb vector and an alpha scalar."""
    kind = "color_constant"
    caption = "Color"
    output_ports = (("", PortType.VECTOR), ("alpha", PortType.SCALAR))

    def __init__(self, color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)):
        super().__init__()
        self._color = self._to_rgba(color)

    @staticmethod
    def _to_rgba(color):
        comps = tuple(finite_float(c) for c in color)
        if len(comps) == 3:
            comps += (1.0,)
        if len(comps) != 4:
            raise ValueError(f"Color expects 3 or 4 components, got {len(comps)}")
        return comps

    @property
    def color(self):
        return self._color

    @color.setter
    def color(self, value):
        self._set_property('_color', self._to_rgba(value))

    def get_editable_properties(self):
        return ["color"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        r, g, b, a = self._color
        code = f"\t{output_vars[0]} = vec3({format_float(r, 3)},{format_float(g, 3)},{format_float(b, 3)});\n"
        code += f"\t{output_vars[1]} = {format_float(a, 3)};\n"
        return code


class ShaderNodeTransformConstant(ShaderNode):
    kind = "transform_constant"
    caption = "Transform"
    output_ports = (("", PortType.TRANSFORM),)

    def __init__(self, transform=None):
        super().__init__()
        self._transform = Transform() if transform is None else as_value(transform)

    @property
    def transform(self) -> Transform:
        return self._transform

    @transform.setter
    def transform(self, value):
        self._set_property('_transform', as_value(value))

    def get_editable_properties(self):
        return ["transform"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {format_constant(self._transform, 3)};\n"
