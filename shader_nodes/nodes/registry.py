# Node Kind Registry
# Maps kind identifier -> node class

from typing import Dict, Optional, Type

from .base import ShaderNode
from .input import ShaderNodeInput
from .output import ShaderNodeOutput
from .uniform import (ShaderNodeScalarUniform, ShaderNodeVectorUniform, ShaderNodeColorUniform,
                      ShaderNodeTransformUniform, ShaderNodeTextureUniform)
from .constants import (ShaderNodeScalarConstant, ShaderNodeVectorConstant, ShaderNodeColorConstant,
                        ShaderNodeTransformConstant)
from .math import (ShaderNodeScalarOp, ShaderNodeVectorOp, ShaderNodeColorOp, ShaderNodeScalarFunc,
                   ShaderNodeVectorFunc, ShaderNodeDotProduct, ShaderNodeVectorLen,
                   ShaderNodeScalarInterp, ShaderNodeVectorInterp)
from .converter import (ShaderNodeVectorCompose, ShaderNodeVectorDecompose, ShaderNodeTransformCompose,
                        ShaderNodeTransformDecompose, ShaderNodeTransformMult, ShaderNodeTransformVecMult)
from .textures import ShaderNodeTexture


NODE_REGISTRY: Dict[str, Type[ShaderNode]] = {}


def register_node(cls: Type[ShaderNode]) -> Type[ShaderNode]:
    """Register a node class under its ``kind``. Usable as a decorator."""
    if not cls.kind:
        raise ValueError(f"{cls.__name__} has no kind identifier")
    existing = NODE_REGISTRY.get(cls.kind)
    if existing is not None and existing is not cls:
        raise ValueError(f"Node kind '{cls.kind}' already registered by {existing.__name__}")
    NODE_REGISTRY[cls.kind] = cls
    return cls


def get_node_class(kind: str) -> Optional[Type[ShaderNode]]:
    """Get node class for a kind identifier, or None if not found."""
    return NODE_REGISTRY.get(kind)


def create_node(kind: str, **props) -> ShaderNode:
    """
    Instantiate a registered node kind.
    
    Example:
        node = create_node("scalar_op", op="MUL")
    """
    cls = get_node_class(kind)
    if cls is None:
        raise KeyError(f"Unknown node kind: {kind}")
    return cls(**props)


for _cls in (
    # Built-ins
    ShaderNodeInput,
    ShaderNodeOutput,

    # Uniforms
    ShaderNodeScalarUniform,
    ShaderNodeVectorUniform,
    ShaderNodeColorUniform,
    ShaderNodeTransformUniform,
    ShaderNodeTextureUniform,

    # Constants
    ShaderNodeScalarConstant,
    ShaderNodeVectorConstant,
    ShaderNodeColorConstant,
    ShaderNodeTransformConstant,

    # Math
    ShaderNodeScalarOp,
    ShaderNodeVectorOp,
    ShaderNodeColorOp,
    ShaderNodeScalarFunc,
    ShaderNodeVectorFunc,
    ShaderNodeDotProduct,
    ShaderNodeVectorLen,
    ShaderNodeScalarInterp,
    ShaderNodeVectorInterp,

    # Converter
    ShaderNodeVectorCompose,
    ShaderNodeVectorDecompose,
    ShaderNodeTransformCompose,
    ShaderNodeTransformDecompose,
    ShaderNodeTransformMult,
    ShaderNodeTransformVecMult,

    # Textures
    ShaderNodeTexture,
):
    register_node(_cls)


__all__ = ['NODE_REGISTRY', 'register_node', 'get_node_class', 'create_node']
