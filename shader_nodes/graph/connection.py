from dataclasses import dataclass

from ..ir.types import NODE_ID_INVALID, NODE_ID_OUTPUT

@dataclass(frozen=True)
class Connection:
    """Directed edge from an output port to an input port within one stage."""
    from_node: int
    from_port: int
    to_node: int
    to_port: int

    def as_tuple(self):
        return (self.from_node, self.from_port, self.to_node, self.to_port)

    def touches(self, node_id: int) -> bool:
        return self.from_node == node_id or self.to_node == node_id

    def __repr__(self):
        return f"<Connection {self.from_node}:{self.from_port} -> {self.to_node}:{self.to_port}>"
