from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..ir.types import ShaderType
from ..nodes.base import ShaderNode
from .connection import Connection

Position = Tuple[float, float]

# (node_id, port) lookup key
PortKey = Tuple[int, int]


@dataclass
class GraphNode:
    node: ShaderNode
    position: Position = (0.0, 0.0)


class ShaderGraph:
    """
    Node/connection storage for a single stage.

    Holds no policy: validation lives in ``validator`` and the dirty
    bookkeeping in ``VisualShader``, which owns one graph per stage.
    """
    def __init__(self, stage: ShaderType):
        self.stage = stage
        self.nodes: Dict[int, GraphNode] = {}
        self.connections: List[Connection] = []

    def has_node(self, node_id: int) -> bool:
        return node_id in self.nodes

    def node(self, node_id: int) -> Optional[ShaderNode]:
        entry = self.nodes.get(node_id)
        return entry.node if entry else None

    def node_ids(self) -> List[int]:
        return sorted(self.nodes)

    def iter_nodes(self) -> Iterator[Tuple[int, ShaderNode]]:
        for node_id in self.node_ids():
            yield node_id, self.nodes[node_id].node

    def find_connection(self, from_node, from_port, to_node, to_port) -> Optional[Connection]:
        for c in self.connections:
            if c.from_node == from_node and c.from_port == from_port and \
                    c.to_node == to_node and c.to_port == to_port:
                return c
        return None

    def incoming(self, node_id: int, port: int) -> Optional[Connection]:
        """Connection feeding the given input, if any."""
        for c in self.connections:
            if c.to_node == node_id and c.to_port == port:
                return c
        return None

    def build_indices(self) -> Tuple[Dict[PortKey, Connection], Dict[PortKey, List[Connection]]]:
        """
        Returns (input_index, output_index).
        
        input_index maps an input slot to the connection feeding it;
        output_index maps an output slot to every connection it feeds.
        """
        input_index: Dict[PortKey, Connection] = {}
        output_index: Dict[PortKey, List[Connection]] = {}
        for c in self.connections:
            input_index[(c.to_node, c.to_port)] = c
            output_index.setdefault((c.from_node, c.from_port), []).append(c)
        return input_index, output_index

    def is_producer_of(self, candidate: int, node_id: int) -> bool:
        """True if `candidate` feeds `node_id` directly or transitively."""
        producers: Dict[int, List[int]] = {}
        for c in self.connections:
            producers.setdefault(c.to_node, []).append(c.from_node)
        
        visited = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            for src in producers.get(current, ()):
                if src == candidate:
                    return True
                if src not in visited:
                    visited.add(src)
                    stack.append(src)
        return False
