# Operator nodes: scalar/vector arithmetic, functions and interpolation

from ..ir.types import PortType
from ..ir.values import Scalar, Vector
from .base import ShaderNode, choose

S = PortType.SCALAR
V = PortType.VECTOR


# Templates take the two operands; "{a}"/"{b}" are substituted
BINARY_OPS = {
    'ADD': "{a} + {b}",
    'SUB': "{a} - {b}",
    'MUL': "{a} * {b}",
    'DIV': "{a} / {b}",
    'MOD': "mod({a}, {b})",
    'POW': "pow({a}, {b})",
    'MAX': "max({a}, {b})",
    'MIN': "min({a}, {b})",
}

SCALAR_OPS = dict(BINARY_OPS, ATAN2="atan({a}, {b})")
VECTOR_OPS = dict(BINARY_OPS, CROSS="cross({a}, {b})")


class _OpNode(ShaderNode):
    operations = {}
    default_op = 'ADD'

    def __init__(self, op: str = None):
        super().__init__()
        self._op = choose(self.operations, op or self.default_op, "operator")

    @property
    def op(self) -> str:
        return self._op

    @op.setter
    def op(self, value: str):
        self._set_property('_op', choose(self.operations, value, "operator"))

    def get_editable_properties(self):
        return ["op"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        expr = self.operations[self._op].format(a=input_vars[0], b=input_vars[1])
        return f"\t{output_vars[0]} = {expr};\n"


class ShaderNodeScalarOp(_OpNode):
    kind = "scalar_op"
    caption = "ScalarOp"
    operations = SCALAR_OPS
    input_ports = (("a", S), ("b", S))
    output_ports = (("op", S),)

    def __init__(self, op: str = None):
        super().__init__(op)
        self.set_input_port_default_value(0, Scalar(0.0))
        self.set_input_port_default_value(1, Scalar(0.0))


class ShaderNodeVectorOp(_OpNode):
    kind = "vector_op"
    caption = "VectorOp"
    operations = VECTOR_OPS
    input_ports = (("a", V), ("b", V))
    output_ports = (("op", V),)

    def __init__(self, op: str = None):
        super().__init__(op)
        self.set_input_port_default_value(0, Vector())
        self.set_input_port_default_value(1, Vector())


def _per_component(out: str, a: str, b: str, low: str, high: str) -> str:
    """Emit a branch on base < 0.5 for each of x, y, z."""
    code = ""
    for c in "xyz":
        code += "\t{\n"
        code += f"\t\tfloat base = {a}.{c};\n"
        code += f"\t\tfloat blend = {b}.{c};\n"
        code += "\t\tif (base < 0.5) {\n"
        code += f"\t\t\t{out}.{c} = {low};\n"
        code += "\t\t} else {\n"
        code += f"\t\t\t{out}.{c} = {high};\n"
        code += "\t\t}\n"
        code += "\t}\n"
    return code


class ShaderNodeColorOp(ShaderNode):
    """Photoshop-style blend modes between two rgb colors."""
    kind = "color_op"
    caption = "ColorOp"
    input_ports = (("a", V), ("b", V))
    output_ports = (("op", V),)
    operations = {
        'SCREEN': "vec3(1.0) - (vec3(1.0) - {a}) * (vec3(1.0) - {b})",
        'DIFFERENCE': "abs({a} - {b})",
        'DARKEN': "min({a}, {b})",
        'LIGHTEN': "max({a}, {b})",
        'OVERLAY': None,
        'DODGE': "({a}) / (vec3(1.0) - {b})",
        'BURN': "vec3(1.0) - (vec3(1.0) - {a}) / ({b})",
        'SOFT_LIGHT': None,
        'HARD_LIGHT': None,
    }

    def __init__(self, op: str = 'SCREEN'):
        super().__init__()
        self._op = choose(self.operations, op, "operator")
        self.set_input_port_default_value(0, Vector())
        self.set_input_port_default_value(1, Vector())

    @property
    def op(self) -> str:
        return self._op

    @op.setter
    def op(self, value: str):
        self._set_property('_op', choose(self.operations, value, "operator"))

    def get_editable_properties(self):
        return ["op"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        a, b = input_vars[0], input_vars[1]
        out = output_vars[0]
        if self._op == 'OVERLAY':
            return _per_component(out, a, b, "2.0 * base * blend",
                                  "1.0 - 2.0 * (1.0 - blend) * (1.0 - base)")
        if self._op == 'SOFT_LIGHT':
            return _per_component(out, a, b, "base * (blend + 0.5)",
                                  "1.0 - (1.0 - base) * (1.0 - (blend - 0.5))")
        if self._op == 'HARD_LIGHT':
            return _per_component(out, a, b, "base * (2.0 * blend)",
                                  "1.0 - (1.0 - base) * (1.0 - 2.0 * (blend - 0.5))")
        return f"\t{out} = {self.operations[self._op].format(a=a, b=b)};\n"


SCALAR_FUNCS = {
    'SIN': "sin({x})",
    'COS': "cos({x})",
    'TAN': "tan({x})",
    'ASIN': "asin({x})",
    'ACOS': "acos({x})",
    'ATAN': "atan({x})",
    'SINH': "sinh({x})",
    'COSH': "cosh({x})",
    'TANH': "tanh({x})",
    'LOG': "log({x})",
    'EXP': "exp({x})",
    'SQRT': "sqrt({x})",
    'ABS': "abs({x})",
    'SIGN': "sign({x})",
    'FLOOR': "floor({x})",
    'ROUND': "round({x})",
    'CEIL': "ceil({x})",
    'FRAC': "fract({x})",
    'SATURATE': "min(max({x}, 0.0), 1.0)",
    'NEGATE': "-({x})",
}


class ShaderNodeScalarFunc(ShaderNode):
    kind = "scalar_func"
    caption = "ScalarFunc"
    input_ports = (("", S),)
    output_ports = (("", S),)

    def __init__(self, function: str = 'SIGN'):
        super().__init__()
        self._function = choose(SCALAR_FUNCS, function, "function")
        self.set_input_port_default_value(0, Scalar(0.0))

    @property
    def function(self) -> str:
        return self._function

    @function.setter
    def function(self, value: str):
        self._set_property('_function', choose(SCALAR_FUNCS, value, "function"))

    def get_editable_properties(self):
        return ["function"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = {SCALAR_FUNCS[self._function].format(x=input_vars[0])};\n"


VECTOR_FUNCS = {
    'NORMALIZE': "normalize({x})",
    'SATURATE': "max(min({x}, vec3(1.0)), vec3(0.0))",
    'NEGATE': "-({x})",
    'RECIPROCAL': "1.0 / ({x})",
    'RGB2HSV': None,
    'HSV2RGB': None,
}


class ShaderNodeVectorFunc(ShaderNode):
    kind = "vector_func"
    caption = "VectorFunc"
    input_ports = (("", V),)
    output_ports = (("", V),)

    def __init__(self, function: str = 'NORMALIZE'):
        super().__init__()
        self._function = choose(VECTOR_FUNCS, function, "function")
        self.set_input_port_default_value(0, Vector())

    @property
    def function(self) -> str:
        return self._function

    @function.setter
    def function(self, value: str):
        self._set_property('_function', choose(VECTOR_FUNCS, value, "function"))

    def get_editable_properties(self):
        return ["function"]

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        x, out = input_vars[0], output_vars[0]
        if self._function == 'RGB2HSV':
            return (
                "\t{\n"
                f"\t\tvec3 c = {x};\n"
                "\t\tvec4 K = vec4(0.0, -1.0 / 3.0, 2.0 / 3.0, -1.0);\n"
                "\t\tvec4 p = mix(vec4(c.bg, K.wz), vec4(c.gb, K.xy), step(c.b, c.g));\n"
                "\t\tvec4 q = mix(vec4(p.xyw, c.r), vec4(c.r, p.yzx), step(p.x, c.r));\n"
                "\t\tfloat d = q.x - min(q.w, q.y);\n"
                "\t\tfloat e = 1.0e-10;\n"
                f"\t\t{out} = vec3(abs(q.z + (q.w - q.y) / (6.0 * d + e)), d / (q.x + e), q.x);\n"
                "\t}\n"
            )
        if self._function == 'HSV2RGB':
            return (
                "\t{\n"
                f"\t\tvec3 c = {x};\n"
                "\t\tvec4 K = vec4(1.0, 2.0 / 3.0, 1.0 / 3.0, 3.0);\n"
                "\t\tvec3 p = abs(fract(c.xxx + K.xyz) * 6.0 - K.www);\n"
                f"\t\t{out} = c.z * mix(K.xxx, clamp(p - K.xxx, 0.0, 1.0), c.y);\n"
                "\t}\n"
            )
        return f"\t{out} = {VECTOR_FUNCS[self._function].format(x=x)};\n"


class ShaderNodeDotProduct(ShaderNode):
    kind = "dot_product"
    caption = "DotProduct"
    input_ports = (("a", V), ("b", V))
    output_ports = (("dot", S),)

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Vector())
        self.set_input_port_default_value(1, Vector())

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = dot({input_vars[0]}, {input_vars[1]});\n"


class ShaderNodeVectorLen(ShaderNode):
    kind = "vector_len"
    caption = "VectorLen"
    input_ports = (("vec", V),)
    output_ports = (("len", S),)

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Vector())

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = length({input_vars[0]});\n"


class ShaderNodeScalarInterp(ShaderNode):
    kind = "scalar_interp"
    caption = "ScalarInterp"
    input_ports = (("a", S), ("b", S), ("c", S))
    output_ports = (("mix", S),)

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Scalar(0.0))
        self.set_input_port_default_value(1, Scalar(1.0))
        self.set_input_port_default_value(2, Scalar(0.5))

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = mix({input_vars[0]}, {input_vars[1]}, {input_vars[2]});\n"


class ShaderNodeVectorInterp(ShaderNode):
    kind = "vector_interp"
    caption = "VectorInterp"
    input_ports = (("a", V), ("b", V), ("c", V))
    output_ports = (("mix", V),)

    def __init__(self):
        super().__init__()
        self.set_input_port_default_value(0, Vector(0.0, 0.0, 0.0))
        self.set_input_port_default_value(1, Vector(1.0, 1.0, 1.0))
        self.set_input_port_default_value(2, Vector(0.5, 0.5, 0.5))

    def generate_code(self, mode, stage, node_id, input_vars, output_vars):
        return f"\t{output_vars[0]} = mix({input_vars[0]}, {input_vars[1]}, {input_vars[2]});\n"
