import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..errors import CycleDetectedError
from ..ir.types import NODE_ID_OUTPUT, PortType, ShaderType
from ..ir.resources import DefaultTextureParam
from ..nodes.input import ShaderNodeInput
from .literals import format_constant
from .options import GeneratorOptions, DEFAULT_OPTIONS

logger = logging.getLogger(__name__)


def output_var(node_id: int, port: int) -> str:
    return f"n_out{node_id}p{port}"


def input_var(node_id: int, port: int) -> str:
    return f"n_in{node_id}p{port}"


def convert_expr(expr: str, from_type: PortType, to_type: PortType) -> Optional[str]:
    """
    Adapt `expr` from one port type to another.
    Returns None when no conversion exists.
    """
    if from_type == to_type:
        return expr
    if from_type == PortType.SCALAR and to_type == PortType.VECTOR:
        return f"vec3({expr})"
    if from_type == PortType.VECTOR and to_type == PortType.SCALAR:
        return f"dot({expr},vec3(0.333333,0.333333,0.333333))"
    return None


@dataclass
class ShaderCode:
    """
    Result of a generation pass.

    Attributes:
        code: Complete shading-language source
        texture_params: Default texture bindings, unique by name
        warnings: (stage, node_id) -> warning text for nodes that could not
            be generated cleanly
    """
    code: str
    texture_params: List[DefaultTextureParam] = field(default_factory=list)
    warnings: Dict[Tuple[ShaderType, int], str] = field(default_factory=dict)


@dataclass
class StageCode:
    """Function body and contributions of one stage, before assembly."""
    stage: ShaderType
    code: str
    global_code: List[str] = field(default_factory=list)
    texture_params: List[DefaultTextureParam] = field(default_factory=list)
    warnings: Dict[int, str] = field(default_factory=dict)


class _GlobalSection:
    """Insertion-ordered global declarations, deduplicated by text."""
    def __init__(self):
        self._decls: Dict[str, None] = {}

    def add(self, code: str):
        if code and code not in self._decls:
            self._decls[code] = None

    def items(self) -> List[str]:
        return list(self._decls)

    def text(self) -> str:
        return "".join(self._decls)


class _TextureParams:
    """Default texture parameters, first occurrence of a name wins."""
    def __init__(self):
        self._params: Dict[str, DefaultTextureParam] = {}

    def add(self, param: DefaultTextureParam):
        if param.name not in self._params:
            self._params[param.name] = param
        elif self._params[param.name] != param:
            logger.warning(f"Texture parameter '{param.name}' bound twice; keeping the first binding")

    def items(self) -> List[DefaultTextureParam]:
        return list(self._params.values())


class _StagePass:
    """
    One memoized walk over a stage graph.

    Producers are written before consumers and each node at most once, so
    shared producers in diamond-shaped graphs are emitted a single time.
    """
    def __init__(self, shader, stage: ShaderType, options: GeneratorOptions, for_preview: bool,
                 global_section: _GlobalSection, texture_params: _TextureParams):
        self.shader = shader
        self.stage = stage
        self.graph = shader.get_graph(stage)
        self.options = options
        self.for_preview = for_preview
        self.global_section = global_section
        self.texture_params = texture_params
        self.input_index, self.output_index = self.graph.build_indices()
        self.processed: Set[int] = set()
        self.in_progress: Set[int] = set()
        self.code: List[str] = []
        self.warnings: Dict[int, str] = {}

    def write(self, root: int):
        stack: List[Tuple[int, bool]] = [(root, False)]
        while stack:
            node_id, ready = stack.pop()
            if node_id in self.processed:
                continue
            if ready:
                self._write_node(node_id)
                self.processed.add(node_id)
                self.in_progress.discard(node_id)
                continue

            if node_id in self.in_progress:
                raise CycleDetectedError(
                    f"Cycle detected at node {node_id} while generating {self.stage} shader",
                    stage=self.stage, node_id=node_id)
            self.in_progress.add(node_id)
            stack.append((node_id, True))

            # Reverse so the producer of port 0 is written first
            node = self.graph.node(node_id)
            for port in reversed(range(node.get_input_port_count())):
                conn = self.input_index.get((node_id, port))
                if conn is not None and conn.from_node not in self.processed:
                    stack.append((conn.from_node, False))

    def resolve_input(self, node_id: int, port: int, problems: List[str]) -> str:
        """Variable or expression feeding an input; declares default literals as needed."""
        node = self.graph.node(node_id)
        in_type = node.get_input_port_type(port)
        conn = self.input_index.get((node_id, port))

        if conn is not None:
            src = self.graph.node(conn.from_node)
            out_type = src.get_output_port_type(conn.from_port)
            expr = convert_expr(output_var(conn.from_node, conn.from_port), out_type, in_type)
            if expr is None:
                problems.append(f"cannot convert {out_type} to {in_type} on input '{node.get_input_port_name(port)}'")
                return in_type.zero_literal()
            return expr

        default = node.get_input_port_default_value(port)
        literal = format_constant(default, self.options.float_precision)
        if literal:
            literal = convert_expr(literal, default.port_type, in_type) or in_type.zero_literal()
            var = input_var(node_id, port)
            self.code.append(f"\t{in_type.glsl_type()} {var} = {literal};\n")
            return var

        # Left empty; the node decides how to handle it
        if node.is_input_required(port):
            problems.append(f"input '{node.get_input_port_name(port)}' is not connected")
        return ""

    def _write_node(self, node_id: int):
        node = self.graph.node(node_id)
        mode = self.shader.mode
        problems: List[str] = []

        if self.options.node_comments:
            self.code.append(f"// {node.get_caption()}:{node_id}\n")

        inputs = [self.resolve_input(node_id, i, problems) for i in range(node.get_input_port_count())]

        outputs = []
        for i in range(node.get_output_port_count()):
            var = output_var(node_id, i)
            outputs.append(var)
            self.code.append(f"\t{node.get_output_port_type(i).glsl_type()} {var};\n")

        for param in node.get_default_texture_parameters(self.stage, node_id):
            self.texture_params.add(param)

        if self.for_preview and isinstance(node, ShaderNodeInput):
            self.code.append(node.generate_code_for_preview(self.stage, node_id, inputs, outputs))
        else:
            self.global_section.add(node.generate_global(mode, self.stage, node_id))
            self.code.append(node.generate_code(mode, self.stage, node_id, inputs, outputs))
        self.code.append("\n")

        warning = node.get_warning(mode, self.stage)
        if warning:
            problems.insert(0, warning)
        if problems:
            message = "; ".join(problems)
            self.warnings[node_id] = message
            logger.warning(f"{self.stage} node {node_id} ({node.get_caption()}): {message}")


class ShaderGenerator:
    """
    Generates shading-language source from a VisualShader.

    Each call performs a fresh pass; caching is the shader's business.
    """
    def __init__(self, shader, options: GeneratorOptions = None):
        self.shader = shader
        self.options = options or getattr(shader, 'options', None) or DEFAULT_OPTIONS

    def generate(self) -> ShaderCode:
        global_section = _GlobalSection()
        texture_params = _TextureParams()
        warnings: Dict[Tuple[ShaderType, int], str] = {}

        body = []
        for stage in ShaderType:
            stage_pass = _StagePass(self.shader, stage, self.options, False, global_section, texture_params)
            stage_pass.write(NODE_ID_OUTPUT)
            body.append(f"\nvoid {stage.func_name}() {{\n")
            body.extend(stage_pass.code)
            body.append("}\n")
            for node_id, message in stage_pass.warnings.items():
                warnings[(stage, node_id)] = message

        code = self._generate_header() + global_section.text() + "\n\n" + "".join(body)
        logger.debug(f"Generated {self.shader.mode} shader: {len(code)} chars, "
                     f"{len(texture_params.items())} texture params, {len(warnings)} warnings")
        return ShaderCode(code, texture_params.items(), warnings)

    def generate_stage(self, stage: ShaderType, root: int = NODE_ID_OUTPUT,
                       for_preview: bool = False) -> StageCode:
        """Generate the body of a single stage rooted at `root`."""
        global_section = _GlobalSection()
        texture_params = _TextureParams()
        stage_pass = _StagePass(self.shader, stage, self.options, for_preview, global_section, texture_params)
        stage_pass.write(root)
        return StageCode(stage, "".join(stage_pass.code), global_section.items(),
                         texture_params.items(), dict(stage_pass.warnings))

    def _generate_header(self) -> str:
        code = f"shader_type {self.shader.mode};\n"
        render_mode = self.shader.get_render_mode_string()
        if render_mode:
            code += f"render_mode {render_mode};\n\n"
        return code
