# Uniform name validation

import logging
import re
from typing import Iterable

from ..nodes.input import INPUT_PORTS
from ..nodes.output import OUTPUT_PORTS
from ..nodes.uniform import ShaderNodeUniform

logger = logging.getLogger(__name__)

KEYWORDS = {
    "void", "bool", "bvec2", "bvec3", "bvec4", "int", "ivec2", "ivec3", "ivec4",
    "uint", "uvec2", "uvec3", "uvec4", "float", "vec2", "vec3", "vec4",
    "mat2", "mat3", "mat4", "sampler2D", "isampler2D", "usampler2D", "samplerCube",
    "if", "else", "for", "while", "do", "switch", "case", "default", "break", "continue",
    "return", "discard", "uniform", "varying", "const", "in", "out", "inout",
    "lowp", "mediump", "highp", "flat", "smooth", "true", "false", "struct",
    "shader_type", "render_mode",
}

BUILTIN_FUNCTIONS = {
    "radians", "degrees", "sin", "cos", "tan", "asin", "acos", "atan", "sinh", "cosh", "tanh",
    "pow", "exp", "log", "exp2", "log2", "sqrt", "inversesqrt", "abs", "sign", "floor", "round",
    "ceil", "fract", "mod", "min", "max", "clamp", "mix", "step", "smoothstep", "length",
    "distance", "dot", "cross", "normalize", "reflect", "refract", "faceforward",
    "matrixCompMult", "transpose", "inverse", "texture", "textureLod", "textureSize",
}

# Identifiers the generator itself allocates
GENERATED_PATTERN = re.compile(r"^(n_out\d+p\d+|n_in\d+p\d+|tex_(vtx|frg|lgt)_\d+|n_tex_read)$")

_IDENT_CHAR = re.compile(r"[A-Za-z0-9_]")


def _builtin_identifiers() -> set:
    names = set()
    for port in list(INPUT_PORTS) + list(OUTPUT_PORTS):
        names.update(re.findall(r"\b[A-Z][A-Z0-9_]*\b", port.string))
    names.update({"SCREEN_TEXTURE", "TEXTURE"})
    return names


RESERVED_WORDS = frozenset(KEYWORDS | BUILTIN_FUNCTIONS | _builtin_identifiers())


def is_reserved(name: str) -> bool:
    return name in RESERVED_WORDS or bool(GENERATED_PATTERN.match(name))


def sanitize_name(name: str) -> str:
    """Keep identifier characters, turn spaces into underscores, drop a leading non-letter run."""
    name = name or ""
    start = 0
    while start < len(name) and not (name[start].isascii() and (name[start].isalpha() or name[start] == "_")):
        start += 1
    valid = ""
    for ch in name[start:]:
        if _IDENT_CHAR.match(ch):
            valid += ch
        elif ch == " ":
            valid += "_"
    return valid


def validate_uniform_name(shader, name: str, uniform) -> str:
    """
    Return a usable name for `uniform` within `shader`.

    The name is sanitized, falls back to the node caption when empty, and
    gets a numeric suffix while it collides with a reserved identifier or
    with another uniform in any stage.
    """
    valid = sanitize_name(name)
    if not valid:
        valid = sanitize_name(uniform.get_caption()) or "uniform"

    taken = set(_other_uniform_names(shader, uniform))

    attempt = 1
    base = None
    while is_reserved(valid) or valid in taken:
        attempt += 1
        if base is None:
            # Replace any trailing number with the attempt counter
            base = valid.rstrip("0123456789") or "uniform"
            if GENERATED_PATTERN.match(f"{base}{attempt}"):
                base = f"u_{base}"
        valid = f"{base}{attempt}"

    if valid != name:
        logger.debug(f"Uniform name '{name}' adjusted to '{valid}'")
    return valid


def _other_uniform_names(shader, uniform) -> Iterable[str]:
    for _stage, _node_id, node in shader.iter_nodes():
        if node is uniform:
            continue
        if isinstance(node, ShaderNodeUniform) and node.uniform_name:
            yield node.uniform_name
