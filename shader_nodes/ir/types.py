from enum import Enum, auto
from typing import Dict, FrozenSet

# Node ids within a stage graph; the Output node always sits at 0
NODE_ID_INVALID = -1
NODE_ID_OUTPUT = 0

class PortType(Enum):
    SCALAR = auto()
    VECTOR = auto()
    TRANSFORM = auto()

    def glsl_type(self):
        """Returns the shading-language type used for variables of this port type."""
        if self == PortType.SCALAR: return "float"
        if self == PortType.VECTOR: return "vec3"
        return "mat4"

    def zero_literal(self):
        """Literal used when a value of this type is unavailable."""
        if self == PortType.SCALAR: return "0.0"
        if self == PortType.VECTOR: return "vec3(0.0)"
        return "mat4( vec4(1.0,0.0,0.0,0.0), vec4(0.0,1.0,0.0,0.0), vec4(0.0,0.0,1.0,0.0), vec4(0.0,0.0,0.0,1.0) )"

    def __str__(self):
        return self.name.lower()


class ShaderType(Enum):
    """Shader stage. Each stage owns an independent graph."""
    VERTEX = 0
    FRAGMENT = 1
    LIGHT = 2

    @property
    def func_name(self):
        """Name of the entry function generated for this stage."""
        return self.name.lower()

    @property
    def prefix(self):
        """Short tag used to build per-stage unique identifiers."""
        return {ShaderType.VERTEX: "vtx", ShaderType.FRAGMENT: "frg", ShaderType.LIGHT: "lgt"}[self]

    def __str__(self):
        return self.name.lower()


class ShaderMode(Enum):
    SPATIAL = "spatial"
    CANVAS_ITEM = "canvas_item"
    PARTICLES = "particles"

    def __str__(self):
        return self.value


# Allowed (from output type) -> (to input type) conversions.
# A narrower type may feed a wider one, never the reverse.
DEFAULT_COMPATIBILITY: Dict[PortType, FrozenSet[PortType]] = {
    PortType.SCALAR: frozenset({PortType.SCALAR, PortType.VECTOR}),
    PortType.VECTOR: frozenset({PortType.VECTOR}),
    PortType.TRANSFORM: frozenset({PortType.TRANSFORM}),
}

# Scalars and vectors convert freely in both directions, as in the
# classic editor; transforms stay isolated.
PERMISSIVE_COMPATIBILITY: Dict[PortType, FrozenSet[PortType]] = {
    PortType.SCALAR: frozenset({PortType.SCALAR, PortType.VECTOR}),
    PortType.VECTOR: frozenset({PortType.SCALAR, PortType.VECTOR}),
    PortType.TRANSFORM: frozenset({PortType.TRANSFORM}),
}


def is_port_types_compatible(from_type: PortType, to_type: PortType, table=None) -> bool:
    """Check whether an output of `from_type` may feed an input of `to_type`."""
    table = DEFAULT_COMPATIBILITY if table is None else table
    return to_type in table.get(from_type, frozenset())
