# Connection validation rules

from typing import Optional

from ..ir.types import is_port_types_compatible
from .model import ShaderGraph


def check_connection(graph: ShaderGraph, from_node: int, from_port: int, to_node: int, to_port: int,
                     compatibility=None) -> Optional[str]:
    """
    Returns the reason a connection would be rejected, or None if valid.
    """
    if not graph.has_node(from_node):
        return f"source node {from_node} does not exist"
    if not graph.has_node(to_node):
        return f"destination node {to_node} does not exist"
    
    src = graph.node(from_node)
    dst = graph.node(to_node)
    if from_port < 0 or from_port >= src.get_output_port_count():
        return f"output port {from_port} out of range for node {from_node}"
    if to_port < 0 or to_port >= dst.get_input_port_count():
        return f"input port {to_port} out of range for node {to_node}"
    
    if from_node == to_node:
        return "a node cannot connect to itself"
    
    from_type = src.get_output_port_type(from_port)
    to_type = dst.get_input_port_type(to_port)
    if not is_port_types_compatible(from_type, to_type, compatibility):
        return f"incompatible port types ({from_type} -> {to_type})"
    
    if graph.find_connection(from_node, from_port, to_node, to_port) is not None:
        return "connection already exists"
    
    if graph.is_producer_of(to_node, from_node):
        return f"connection would create a cycle through node {to_node}"
    
    return None


def can_connect(graph: ShaderGraph, from_node: int, from_port: int, to_node: int, to_port: int,
                compatibility=None) -> bool:
    return check_connection(graph, from_node, from_port, to_node, to_port, compatibility) is None
