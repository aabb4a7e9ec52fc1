from .base import ShaderNode, make_unique_id
from .input import ShaderNodeInput, list_input_names
from .output import ShaderNodeOutput
from .uniform import (ShaderNodeUniform, ShaderNodeScalarUniform, ShaderNodeVectorUniform,
                      ShaderNodeColorUniform, ShaderNodeTransformUniform, ShaderNodeTextureUniform)
from .constants import (ShaderNodeScalarConstant, ShaderNodeVectorConstant, ShaderNodeColorConstant,
                        ShaderNodeTransformConstant)
from .math import (ShaderNodeScalarOp, ShaderNodeVectorOp, ShaderNodeColorOp, ShaderNodeScalarFunc,
                   ShaderNodeVectorFunc, ShaderNodeDotProduct, ShaderNodeVectorLen,
                   ShaderNodeScalarInterp, ShaderNodeVectorInterp)
from .converter import (ShaderNodeVectorCompose, ShaderNodeVectorDecompose, ShaderNodeTransformCompose,
                        ShaderNodeTransformDecompose, ShaderNodeTransformMult, ShaderNodeTransformVecMult)
from .textures import ShaderNodeTexture
from .registry import NODE_REGISTRY, register_node, get_node_class, create_node
