"""
Single node previews.

A preview isolates one port of one node: the producers of that port are
generated with preview substitutions for built-in inputs and the port's
value is written to ``COLOR.rgb`` of a minimal canvas_item program.
"""

import logging
from typing import Optional

from ..errors import PreviewError
from ..ir.types import PortType, ShaderType
from ..nodes.output import ShaderNodeOutput
from .generator import ShaderCode, ShaderGenerator, StageCode, convert_expr, input_var, output_var
from .literals import format_constant

logger = logging.getLogger(__name__)


def _resolve_output_input(generator: ShaderGenerator, graph, stage: ShaderType, node_id: int, port: int):
    """
    The Output node has no outputs, so its input is previewed instead.
    Returns (stage_code, expression, port_type).
    """
    node = graph.node(node_id)
    if port < 0 or port >= node.get_input_port_count():
        raise PreviewError(f"Input port {port} out of range for {node.get_caption()} node {node_id}",
                           node_id=node_id, port=port)
    in_type = node.get_input_port_type(port)
    conn = graph.incoming(node_id, port)
    if conn is None:
        # Same declaration the full program makes for a disconnected input
        default = node.get_input_port_default_value(port)
        literal = format_constant(default, generator.options.float_precision)
        if not literal:
            return StageCode(stage, ""), in_type.zero_literal(), in_type
        literal = convert_expr(literal, default.port_type, in_type) or in_type.zero_literal()
        var = input_var(node_id, port)
        return StageCode(stage, f"\t{in_type.glsl_type()} {var} = {literal};\n"), var, in_type

    stage_code = generator.generate_stage(stage, conn.from_node, for_preview=True)
    out_type = graph.node(conn.from_node).get_output_port_type(conn.from_port)
    expr = convert_expr(output_var(conn.from_node, conn.from_port), out_type, in_type)
    return stage_code, expr or in_type.zero_literal(), in_type


def generate_preview_shader(shader, stage, node_id: int, port: int, options=None) -> ShaderCode:
    """
    Generate a canvas_item program showing the value of (node_id, port).

    Raises:
        PreviewError: If the node does not exist, the port is out of range
            or the port carries a transform
    """
    stage = ShaderType(stage)
    graph = shader.get_graph(stage)
    node = graph.node(node_id)
    if node is None:
        raise PreviewError(f"Cannot preview node {node_id}: not in {stage} graph", node_id=node_id, port=port)

    generator = ShaderGenerator(shader, options)

    if isinstance(node, ShaderNodeOutput):
        stage_code, expr, port_type = _resolve_output_input(generator, graph, stage, node_id, port)
    else:
        if port < 0 or port >= node.get_output_port_count():
            raise PreviewError(f"Output port {port} out of range for {node.get_caption()} node {node_id}",
                               node_id=node_id, port=port)
        port_type = node.get_output_port_type(port)
        stage_code = generator.generate_stage(stage, node_id, for_preview=True)
        expr = output_var(node_id, port)

    if port_type == PortType.TRANSFORM:
        raise PreviewError(f"Cannot preview transform port {port} of node {node_id}",
                           node_id=node_id, port=port)

    code = "shader_type canvas_item;\n"
    code += "".join(stage_code.global_code)
    code += "\nvoid fragment() {\n"
    code += stage_code.code
    code += "\n"
    if port_type == PortType.SCALAR:
        code += f"\tCOLOR.rgb = vec3( {expr} );\n"
    else:
        code += f"\tCOLOR.rgb = {expr};\n"
    code += "}\n"

    warnings = {(stage, nid): text for nid, text in stage_code.warnings.items()}
    logger.debug(f"Generated preview for {stage} node {node_id} port {port}")
    return ShaderCode(code, stage_code.texture_params, warnings)


def generate_node_preview(shader, stage, node_id: int, options=None) -> Optional[ShaderCode]:
    """Preview a node through its ``preview_output_port``, or None when unset."""
    stage = ShaderType(stage)
    node = shader.get_graph(stage).node(node_id)
    if node is None:
        raise PreviewError(f"Cannot preview node {node_id}: not in {stage} graph", node_id=node_id)
    if node.preview_output_port < 0:
        return None
    return generate_preview_shader(shader, stage, node_id, node.preview_output_port, options)
