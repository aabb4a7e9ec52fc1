from .types import NODE_ID_INVALID, NODE_ID_OUTPUT, PortType, ShaderType, ShaderMode, DEFAULT_COMPATIBILITY, PERMISSIVE_COMPATIBILITY, is_port_types_compatible
from .values import Value, Scalar, Vector, Transform, Absent, ABSENT, as_value, finite_float
from .resources import TextureRef, DefaultTextureParam
