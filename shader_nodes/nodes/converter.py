# Converter nodes: build/split vectors and transforms, transform products

from ..ir.types import PortType
from ..ir.values import Scalar, Transform, Vector
from .base import ShaderNode, choose

S = PortType.SCALAR
V = PortType.VECTOR
T = PortType.TRANSFORM


class ShaderNodeVectorCompose(ShaderNode):
    kind = "vector_compose"
    caption = "VectorCompose"
    input_ports = (("x", S), ("y", S), ("z", S))
    output_ports = (("vec", V),)

    def __init__(self):
        super().__init__()
        for i in range(3):
            self.set_input_port_default_value(i, Scalar(0.0))

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = vec3({input_vars[0]}, {input_vars[1]}, {input_vars[2]});\n"


class ShaderNodeVectorDecompose(ShaderNode):
    kind = "vector_decompose"
    caption = "VectorDecompose"
    input_ports = (("vec", V),)
    output_ports = (("x", S), ("y", S), ("z", S))

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Vector())

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        code = ""
        for i, c in enumerate("xyz"):
            code += f"\t{output_vars[i]} = {input_vars[0]}.{c};\n"
        return code


class ShaderNodeTransformCompose(ShaderNode):
    kind = "transform_compose"
    caption = "TransformCompose"
    input_ports = (("x", V), ("y", V), ("z", V), ("origin", V))
    output_ports = (("xform", T),)

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Vector(1.0, 0.0, 0.0))
        self.set_input_port_default_value(1, Vector(0.0, 1.0, 0.0))
        self.set_input_port_default_value(2, Vector(0.0, 0.0, 1.0))
        self.set_input_port_default_value(3, Vector(0.0, 0.0, 0.0))

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        x, y, z, origin = input_vars
        return f"\t{output_vars[0]} = mat4(vec4({x}, 0.0), vec4({y}, 0.0), vec4({z}, 0.0), vec4({origin}, 1.0));\n"


class ShaderNodeTransformDecompose(ShaderNode):
    kind = "transform_decompose"
    caption = "TransformDecompose"
    input_ports = (("xform", T),)
    output_ports = (("x", V), ("y", V), ("z", V), ("origin", V))

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Transform())

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        code = ""
        for i in range(4):
            code += f"\t{output_vars[i]} = {input_vars[0]}[{i}].xyz;\n"
        return code


TRANSFORM_MULT_OPS = {
    'AxB': "{a} * {b}",
    'BxA': "{b} * {a}",
    'AxB_COMP': "matrixCompMult({a}, {b})",
    'BxA_COMP': "matrixCompMult({b}, {a})",
}


class ShaderNodeTransformMult(ShaderNode):
    kind = "transform_mult"
    caption = "TransformMult"
    input_ports = (("a", T), ("b", T))
    output_ports = (("mult", T),)

    def __init__(self, op: str = 'AxB'):
        super().__init__()
        self._op = choose(TRANSFORM_MULT_OPS, op, "operator")
        self.set_input_port_default_value(0, Transform())
        self.set_input_port_default_value(1, Transform())

    @property
    def op(self) -> str:
        return self._op

    @op.setter
    def op(self, value: str):
        self._set_property('_op', choose(TRANSFORM_MULT_OPS, value, "operator"))

    def get_editable_properties(self):
        return ["op"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        expr = TRANSFORM_MULT_OPS[self._op].format(a=input_vars[0], b=input_vars[1])
        return f"\t{output_vars[0]} = {expr};\n"


TRANSFORM_VEC_MULT_OPS = {
    'AxB': "( {a} * vec4({b}, 1.0) ).xyz",
    'BxA': "( vec4({b}, 1.0) * {a} ).xyz",
    '3x3_AxB': "( {a} * vec4({b}, 0.0) ).xyz",
    '3x3_BxA': "( vec4({b}, 0.0) * {a} ).xyz",
}


class ShaderNodeTransformVecMult(ShaderNode):
    kind = "transform_vec_mult"
    caption = "TransformVectorMult"
    input_ports = (("a", T), ("b", V))
    output_ports = (("", V),)

    def __init__(self, op: str = 'AxB'):
        super().__init__()
        self._op = choose(TRANSFORM_VEC_MULT_OPS, op, "operator")
        self.set_input_port_default_value(0, Transform())
        self.set_input_port_default_value(1, Vector())

    @property
    def op(self) -> str:
        return self._op

    @op.setter
    def op(self, value: str):
        self._set_property('_op', choose(TRANSFORM_VEC_MULT_OPS, value, "operator"))

    def get_editable_properties(self):
        return ["op"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        expr = TRANSFORM_VEC_MULT_OPS[self._op].format(a=input_vars[0], b=input_vars[1])
        return f"\t{output_vars[0]} = {expr};\n"
