import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..ir.types import PortType, ShaderMode, ShaderType
from ..ir.values import ABSENT, Value, as_value
from ..ir.resources import DefaultTextureParam

logger = logging.getLogger(__name__)

# (name, type) pairs used by nodes with a fixed port layout
PortSpec = Tuple[str, PortType]


class ShaderNode:
    """
    Base class for all Shader Nodes.

    Subclasses with a fixed layout only declare ``input_ports`` and
    ``output_ports``; nodes whose ports depend on the shader mode or
    stage override the port accessors instead.

    The code generation contract:
        generate_global(mode, stage, node_id) -> declarations outside functions
        generate_code(mode, stage, node_id, input_vars, output_vars) -> body code

    ``input_vars[i]`` is either a variable/expression or an empty string
    when the port is disconnected and has no default. ``output_vars[i]``
    are already declared by the generator; the node only assigns them.
    """
    kind: str = ""
    caption: str = "Node"
    input_ports: Sequence[PortSpec] = ()
    output_ports: Sequence[PortSpec] = ()

    def __init__(self):
        self._default_input_values: Dict[int, Value] = {}
        self._preview_output_port = -1
        self._listeners: List[Callable[['ShaderNode'], None]] = []

    # -------------------------------------------------------------------------
    # Ports
    # -------------------------------------------------------------------------

    def get_caption(self) -> str:
        return self.caption

    def get_input_port_count(self) -> int:
        return len(self.input_ports)

    def get_input_port_type(self, port: int) -> PortType:
        return self.input_ports[port][1]

    def get_input_port_name(self, port: int) -> str:
        return self.input_ports[port][0]

    def get_output_port_count(self) -> int:
        return len(self.output_ports)

    def get_output_port_type(self, port: int) -> PortType:
        return self.output_ports[port][1]

    def get_output_port_name(self, port: int) -> str:
        return self.output_ports[port][0]

    def is_port_separator(self, index: int) -> bool:
        return False

    # -------------------------------------------------------------------------
    # Defaults & preview
    # -------------------------------------------------------------------------

    def set_input_port_default_value(self, port: int, value) -> None:
        if port < 0 or port >= self.get_input_port_count():
            raise IndexError(f"{self.get_caption()}: input port {port} out of range")
        value = as_value(value)
        # Scalars and vectors convert into each other; transforms never do
        if value is not ABSENT and \
                (value.port_type == PortType.TRANSFORM) != (self.get_input_port_type(port) == PortType.TRANSFORM):
            raise TypeError(f"{self.get_caption()}: {value.port_type} default does not fit "
                            f"{self.get_input_port_type(port)} input port {port}")
        if value is ABSENT:
            self._default_input_values.pop(port, None)
        else:
            self._default_input_values[port] = value
        self.emit_changed()

    def get_input_port_default_value(self, port: int) -> Value:
        """ABSENT means no variable is supplied when the port is disconnected."""
        return self._default_input_values.get(port, ABSENT)

    def get_default_input_values(self) -> Dict[int, Value]:
        return dict(self._default_input_values)

    @property
    def preview_output_port(self) -> int:
        return self._preview_output_port

    @preview_output_port.setter
    def preview_output_port(self, index: int):
        if index != -1 and (index < 0 or index >= self.get_output_port_count()):
            raise IndexError(f"{self.get_caption()}: output port {index} out of range")
        self._preview_output_port = index

    def is_input_required(self, port: int) -> bool:
        """Required inputs produce a warning when left empty."""
        return False

    # -------------------------------------------------------------------------
    # Editor hooks
    # -------------------------------------------------------------------------

    def get_editable_properties(self) -> List[str]:
        return []

    def get_warning(self, mode: ShaderMode, stage: ShaderType) -> Optional[str]:
        return None

    # -------------------------------------------------------------------------
    # Code generation
    # -------------------------------------------------------------------------

    def get_default_texture_parameters(self, stage: ShaderType, node_id: int) -> List[DefaultTextureParam]:
        return []

    def generate_global(self, mode: ShaderMode, stage: ShaderType, node_id: int) -> str:
        return ""

    def generate_code(self, mode: ShaderMode, stage: ShaderType, node_id: int,
                      input_vars: List[str], output_vars: List[str]) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not implement generate_code")

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def add_change_listener(self, callback: Callable[['ShaderNode'], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_change_listener(self, callback: Callable[['ShaderNode'], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def emit_changed(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def _set_property(self, attr: str, value) -> None:
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        self.emit_changed()

    def __repr__(self):
        return f"<{type(self).__name__} '{self.get_caption()}'>"


def make_unique_id(stage: ShaderType, node_id: int, name: str) -> str:
    """Build an identifier unique across stages, e.g. ``tex_frg_4``."""
    return f"{name}_{stage.prefix}_{node_id}"


def choose(options: dict, key, what: str):
    """Validate an enum-like property value against its allowed keys."""
    if key not in options:
        raise ValueError(f"Unknown {what} '{key}'. Expected one of: {', '.join(options)}")
    return key
