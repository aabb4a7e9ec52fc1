import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..errors import (DuplicateNodeIdError, ProtectedNodeError, NodeNotFoundError,
                      InvalidConnectionError, ConnectionNotFoundError)
from ..ir.types import ShaderMode, ShaderType, is_port_types_compatible
from ..nodes.base import ShaderNode
from ..nodes.input import ShaderNodeInput
from ..nodes.output import ShaderNodeOutput
from ..nodes.uniform import ShaderNodeUniform
from ..codegen.generator import ShaderCode, ShaderGenerator
from ..codegen.naming import validate_uniform_name
from ..codegen.options import GeneratorOptions, DEFAULT_OPTIONS
from ..codegen import preview
from .connection import Connection, NODE_ID_INVALID, NODE_ID_OUTPUT
from .model import GraphNode, Position, ShaderGraph
from .render_modes import build_render_mode, enum_options, flag_names
from .validator import check_connection

logger = logging.getLogger(__name__)


class VisualShader:
    """
    A visual shader: one node graph per stage plus shader-wide settings.

    Every structural mutation marks the shader dirty; the generated code is
    rebuilt lazily on the next read and cached until the next mutation.

    Args:
        mode: Shader mode (spatial, canvas_item, particles)
        compatibility: Port conversion table used to validate connections
        options: Code generation options
        uniform_name_validator: Callable(shader, name, uniform) -> name
    """
    def __init__(self, mode: ShaderMode = ShaderMode.SPATIAL, compatibility=None,
                 options: GeneratorOptions = None, uniform_name_validator=validate_uniform_name):
        self._mode = ShaderMode(mode)
        self.compatibility = compatibility
        self.options = options or DEFAULT_OPTIONS
        self.uniform_name_validator = uniform_name_validator
        self.graph_offset: Position = (0.0, 0.0)

        self._graphs: Dict[ShaderType, ShaderGraph] = {}
        self._flags: Set[str] = set()
        self._mode_enums: Dict[str, str] = {}
        self._dirty = True
        self._cached: Optional[ShaderCode] = None

        for stage in ShaderType:
            graph = ShaderGraph(stage)
            output = ShaderNodeOutput(self._mode, stage)
            output.add_change_listener(self._on_node_changed)
            graph.nodes[NODE_ID_OUTPUT] = GraphNode(output, (400.0, 150.0))
            self._graphs[stage] = graph

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def get_graph(self, stage) -> ShaderGraph:
        return self._graphs[ShaderType(stage)]

    def add_node(self, stage, node: ShaderNode, position: Position = (0.0, 0.0), node_id: int = None) -> int:
        """
        Add `node` to a stage under `node_id` (next free id when omitted).

        Raises:
            DuplicateNodeIdError: If the id is taken, negative, or the node
                is an Output node
        """
        stage = ShaderType(stage)
        graph = self._graphs[stage]
        if node_id is None:
            node_id = self.get_valid_node_id(stage)

        if node_id < 0:
            raise DuplicateNodeIdError(f"Invalid node id {node_id}", stage=stage, node_id=node_id)
        if graph.has_node(node_id):
            raise DuplicateNodeIdError(f"Node id {node_id} already used in {stage} graph",
                                       stage=stage, node_id=node_id)
        if isinstance(node, ShaderNodeOutput):
            raise DuplicateNodeIdError(f"The {stage} graph already has its Output node",
                                       stage=stage, node_id=node_id)

        if isinstance(node, ShaderNodeInput):
            node.shader_mode = self._mode
            node.shader_type = stage

        graph.nodes[node_id] = GraphNode(node, tuple(position))

        if isinstance(node, ShaderNodeUniform):
            node.uniform_name = self.validate_uniform_name(node.uniform_name, node)

        node.add_change_listener(self._on_node_changed)
        logger.debug(f"Added {node.get_caption()} node {node_id} to {stage} graph")
        self.mark_dirty()
        return node_id

    def remove_node(self, stage, node_id: int):
        """
        Remove a node and every connection touching it.

        Raises:
            ProtectedNodeError: For the Output node
            NodeNotFoundError: If the id is unknown
        """
        stage = ShaderType(stage)
        graph = self._graphs[stage]
        if node_id == NODE_ID_OUTPUT:
            raise ProtectedNodeError(f"The {stage} Output node cannot be removed", stage=stage, node_id=node_id)
        if not graph.has_node(node_id):
            raise NodeNotFoundError(f"Node {node_id} not found in {stage} graph", stage=stage, node_id=node_id)

        entry = graph.nodes.pop(node_id)
        entry.node.remove_change_listener(self._on_node_changed)
        before = len(graph.connections)
        graph.connections = [c for c in graph.connections if not c.touches(node_id)]
        logger.debug(f"Removed node {node_id} from {stage} graph "
                     f"({before - len(graph.connections)} connections dropped)")
        self.mark_dirty()

    def set_node_position(self, stage, node_id: int, position: Position):
        self._entry(stage, node_id).position = tuple(position)

    def get_node_position(self, stage, node_id: int) -> Position:
        return self._entry(stage, node_id).position

    def get_node(self, stage, node_id: int) -> Optional[ShaderNode]:
        return self.get_graph(stage).node(node_id)

    def get_node_list(self, stage) -> List[int]:
        return self.get_graph(stage).node_ids()

    def get_valid_node_id(self, stage) -> int:
        return max(NODE_ID_OUTPUT + 1, max(self.get_graph(stage).nodes, default=NODE_ID_OUTPUT) + 1)

    def find_node_id(self, stage, node: ShaderNode) -> int:
        for node_id, candidate in self.get_graph(stage).iter_nodes():
            if candidate is node:
                return node_id
        return NODE_ID_INVALID

    def iter_nodes(self) -> Iterator[Tuple[ShaderType, int, ShaderNode]]:
        """Yields (stage, node_id, node) across all stages."""
        for stage in ShaderType:
            for node_id, node in self._graphs[stage].iter_nodes():
                yield stage, node_id, node

    def _entry(self, stage, node_id: int) -> GraphNode:
        stage = ShaderType(stage)
        entry = self._graphs[stage].nodes.get(node_id)
        if entry is None:
            raise NodeNotFoundError(f"Node {node_id} not found in {stage} graph", stage=stage, node_id=node_id)
        return entry

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def is_node_connection(self, stage, from_node: int, from_port: int, to_node: int, to_port: int) -> bool:
        return self.get_graph(stage).find_connection(from_node, from_port, to_node, to_port) is not None

    def can_connect_nodes(self, stage, from_node: int, from_port: int, to_node: int, to_port: int) -> bool:
        return check_connection(self.get_graph(stage), from_node, from_port, to_node, to_port,
                                self.compatibility) is None

    def connect_nodes(self, stage, from_node: int, from_port: int, to_node: int, to_port: int) -> Connection:
        """
        Connect an output to an input, replacing whatever fed that input.

        Raises:
            InvalidConnectionError: If the connection fails validation
        """
        stage = ShaderType(stage)
        graph = self._graphs[stage]
        reason = check_connection(graph, from_node, from_port, to_node, to_port, self.compatibility)
        if reason is not None:
            raise InvalidConnectionError(
                f"Cannot connect {from_node}:{from_port} -> {to_node}:{to_port} in {stage} graph: {reason}",
                stage=stage, connection=(from_node, from_port, to_node, to_port), reason=reason)

        previous = graph.incoming(to_node, to_port)
        if previous is not None:
            graph.connections.remove(previous)
            logger.debug(f"Replaced {previous} in {stage} graph")

        conn = Connection(from_node, from_port, to_node, to_port)
        graph.connections.append(conn)
        self.mark_dirty()
        return conn

    def disconnect_nodes(self, stage, from_node: int, from_port: int, to_node: int, to_port: int):
        """
        Raises:
            ConnectionNotFoundError: If no such connection exists
        """
        stage = ShaderType(stage)
        graph = self._graphs[stage]
        conn = graph.find_connection(from_node, from_port, to_node, to_port)
        if conn is None:
            raise ConnectionNotFoundError(
                f"No connection {from_node}:{from_port} -> {to_node}:{to_port} in {stage} graph",
                stage=stage, connection=(from_node, from_port, to_node, to_port))
        graph.connections.remove(conn)
        self.mark_dirty()

    def get_node_connections(self, stage) -> List[Connection]:
        return list(self.get_graph(stage).connections)

    # -------------------------------------------------------------------------
    # Mode & render modes
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> ShaderMode:
        return self._mode

    @mode.setter
    def mode(self, mode: ShaderMode):
        mode = ShaderMode(mode)
        if mode == self._mode:
            return
        self._mode = mode

        # Built-in ports differ per mode, so links to Input/Output nodes go stale
        for stage, graph in self._graphs.items():
            for _node_id, node in graph.iter_nodes():
                if isinstance(node, (ShaderNodeInput, ShaderNodeOutput)):
                    node.shader_mode = mode
            graph.connections = [c for c in graph.connections
                                 if not (self._is_builtin(graph, c.from_node) or self._is_builtin(graph, c.to_node))]

        self._flags.clear()
        self._mode_enums.clear()
        logger.debug(f"Shader mode set to {mode}")
        self.mark_dirty()

    @staticmethod
    def _is_builtin(graph: ShaderGraph, node_id: int) -> bool:
        return isinstance(graph.node(node_id), (ShaderNodeInput, ShaderNodeOutput))

    @property
    def flags(self) -> List[str]:
        return [name for name in flag_names(self._mode) if name in self._flags]

    def set_flag(self, name: str, enabled: bool = True):
        if name not in flag_names(self._mode):
            raise ValueError(f"Unknown render mode flag '{name}' for {self._mode} shaders")
        if enabled == (name in self._flags):
            return
        if enabled:
            self._flags.add(name)
        else:
            self._flags.discard(name)
        self.mark_dirty()

    def has_flag(self, name: str) -> bool:
        return name in self._flags

    def set_mode_enum(self, group: str, option: Optional[str]):
        """Select one option of an exclusive render mode group; None restores the default."""
        if option is None:
            if self._mode_enums.pop(group, None) is not None:
                self.mark_dirty()
            return
        if option not in enum_options(self._mode, group):
            raise ValueError(f"Unknown option '{option}' for render mode '{group}' in {self._mode} shaders")
        if self._mode_enums.get(group) != option:
            self._mode_enums[group] = option
            self.mark_dirty()

    def get_mode_enum(self, group: str) -> Optional[str]:
        return self._mode_enums.get(group)

    def get_render_mode_string(self) -> str:
        return build_render_mode(self._mode, self._mode_enums, self._flags)

    # -------------------------------------------------------------------------
    # Change tracking
    # -------------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self):
        self._dirty = True

    def _on_node_changed(self, node: ShaderNode):
        if isinstance(node, ShaderNodeInput):
            self._prune_input_connections(node)
        elif isinstance(node, ShaderNodeUniform):
            valid = self.validate_uniform_name(node.uniform_name, node)
            if valid != node.uniform_name:
                # Re-enters once with the adjusted name
                node.uniform_name = valid
                return
        self.mark_dirty()

    def _prune_input_connections(self, node: ShaderNodeInput):
        """Drop outgoing links a renamed Input node can no longer satisfy."""
        graph = self._graphs[node.shader_type]
        node_id = self.find_node_id(node.shader_type, node)
        if node_id == NODE_ID_INVALID:
            return
        out_type = node.get_output_port_type(0)
        kept = []
        for c in graph.connections:
            if c.from_node == node_id and not is_port_types_compatible(
                    out_type, graph.node(c.to_node).get_input_port_type(c.to_port), self.compatibility):
                logger.debug(f"Dropped {c}: input '{node.input_name}' is now {out_type}")
                continue
            kept.append(c)
        graph.connections = kept

    def validate_uniform_name(self, name: str, uniform: ShaderNodeUniform) -> str:
        return self.uniform_name_validator(self, name, uniform)

    # -------------------------------------------------------------------------
    # Code
    # -------------------------------------------------------------------------

    def get_code(self) -> ShaderCode:
        """Generated program, rebuilt only when the shader is dirty."""
        if self._dirty or self._cached is None:
            self._cached = ShaderGenerator(self, self.options).generate()
            self._dirty = False
        return self._cached

    @property
    def code(self) -> str:
        return self.get_code().code

    @property
    def default_texture_params(self):
        return self.get_code().texture_params

    def generate_preview_shader(self, stage, node_id: int, port: int) -> ShaderCode:
        return preview.generate_preview_shader(self, stage, node_id, port, self.options)

    def generate_node_preview(self, stage, node_id: int) -> Optional[ShaderCode]:
        return preview.generate_node_preview(self, stage, node_id, self.options)
