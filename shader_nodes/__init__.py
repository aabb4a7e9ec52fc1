"""
Shader Nodes

Typed node graphs per shader stage, compiled to shading-language source.
"""

from .errors import (ShaderNodesError, GraphError, DuplicateNodeIdError, ProtectedNodeError,
                     NodeNotFoundError, InvalidConnectionError, ConnectionNotFoundError,
                     CompilationError, CycleDetectedError, PreviewError)
from .ir import (PortType, ShaderType, ShaderMode, DEFAULT_COMPATIBILITY, PERMISSIVE_COMPATIBILITY,
                 Scalar, Vector, Transform, ABSENT, as_value, TextureRef, DefaultTextureParam)
from .nodes import NODE_REGISTRY, create_node, register_node, get_node_class
from .codegen.options import GeneratorOptions
from .codegen.generator import ShaderCode, StageCode, ShaderGenerator
from .codegen.preview import generate_preview_shader, generate_node_preview
from .codegen.naming import validate_uniform_name
from .graph import Connection, NODE_ID_INVALID, NODE_ID_OUTPUT, VisualShader
from .logger import setup_logger, get_logger

__version__ = "0.1.0"
