from .connection import Connection, NODE_ID_INVALID, NODE_ID_OUTPUT
from .model import GraphNode, ShaderGraph
from .validator import check_connection, can_connect
from .render_modes import RENDER_MODES, RENDER_MODE_ENUMS, enum_options, flag_names, build_render_mode
from .visual_shader import VisualShader
