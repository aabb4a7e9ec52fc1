# Literal formatting utilities for shader code generation

from ..ir.values import Absent, Scalar, Transform, Vector


def format_float(value, precision: int = 5) -> str:
    """Format a Python number as a shading-language float literal."""
    return f"{float(value):.{precision}f}"


def format_constant(value, precision: int = 5) -> str:
    """
    Format a default value as a shading-language literal.
    
    Returns an empty string for ABSENT so the caller can tell that no
    variable should be declared.
    """
    if isinstance(value, Absent) or value is None:
        return ""
    
    if isinstance(value, Scalar):
        return format_float(value.value, precision)
    elif isinstance(value, Vector):
        comps = ",".join(format_float(v, precision) for v in value.as_tuple())
        return f"vec3({comps})"
    elif isinstance(value, Transform):
        cols = []
        for col in value.columns():
            cols.append("vec4(" + ",".join(format_float(v, precision) for v in col) + ")")
        return "mat4( " + ",".join(cols) + " )"
    raise TypeError(f"Unsupported default value {value!r}")
