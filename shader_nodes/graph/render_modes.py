from typing import Dict, List

from ..ir.types import ShaderMode

# Canonical render_mode identifiers per shader mode, in emission order
RENDER_MODES: Dict[ShaderMode, List[str]] = {
    ShaderMode.SPATIAL: [
        "blend_mix", "blend_add", "blend_sub", "blend_mul",
        "depth_draw_opaque", "depth_draw_always", "depth_draw_never", "depth_draw_alpha_prepass",
        "depth_test_disable",
        "cull_front", "cull_back", "cull_disabled",
        "unshaded",
        "diffuse_lambert", "diffuse_lambert_wrap", "diffuse_oren_nayar", "diffuse_burley", "diffuse_toon",
        "specular_schlick_ggx", "specular_blinn", "specular_phong", "specular_toon", "specular_disabled",
        "skip_vertex_transform", "world_vertex_coords", "ensure_correct_normals",
        "shadows_disabled", "ambient_light_disabled", "shadow_to_opacity", "vertex_lighting",
    ],
    ShaderMode.CANVAS_ITEM: [
        "skip_vertex_transform",
        "blend_mix", "blend_add", "blend_sub", "blend_mul", "blend_premul_alpha", "blend_disabled",
        "unshaded", "light_only",
    ],
    ShaderMode.PARTICLES: [
        "keep_data", "disable_force", "disable_velocity",
    ],
}

# Mutually exclusive groups; the selected option is emitted as "<group>_<option>"
RENDER_MODE_ENUMS: Dict[ShaderMode, List[str]] = {
    ShaderMode.SPATIAL: ["blend", "depth_draw", "cull", "diffuse", "specular"],
    ShaderMode.CANVAS_ITEM: ["blend"],
    ShaderMode.PARTICLES: [],
}


def enum_options(mode: ShaderMode, group: str) -> List[str]:
    """Options of an enum group, e.g. ['mix', 'add', 'sub', 'mul'] for spatial blend."""
    if group not in RENDER_MODE_ENUMS[mode]:
        return []
    prefix = group + "_"
    return [m[len(prefix):] for m in RENDER_MODES[mode] if m.startswith(prefix)]


def flag_names(mode: ShaderMode) -> List[str]:
    """Render modes that are independent on/off flags."""
    grouped = set()
    for group in RENDER_MODE_ENUMS[mode]:
        grouped.update(f"{group}_{opt}" for opt in enum_options(mode, group))
    return [m for m in RENDER_MODES[mode] if m not in grouped]


def build_render_mode(mode: ShaderMode, enums: Dict[str, str], flags) -> str:
    """Join selected enum options then flags, following the canonical order."""
    parts = []
    for group in RENDER_MODE_ENUMS[mode]:
        if group in enums:
            parts.append(f"{group}_{enums[group]}")
    for name in RENDER_MODES[mode]:
        if name in flags:
            parts.append(name)
    return ", ".join(parts)
