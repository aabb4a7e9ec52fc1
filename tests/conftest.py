"""
Pytest configuration and shared fixtures for Shader Nodes tests.

This file provides:
1. Shared fixtures for shaders and graphs
2. Helper functions for common test patterns

Usage:
    pytest tests/ -v
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def shader():
    """
    Creates an empty spatial VisualShader.

    Each stage only holds its Output node (id 0).
    """
    from shader_nodes.graph import VisualShader
    return VisualShader()


@pytest.fixture
def diamond_shader():
    """
    Creates a fragment graph where one producer feeds two consumers.

    Structure:
        Scalar(1) -> ScalarFunc SIN(2) -> ScalarOp ADD(4).a
        Scalar(1) -> ScalarFunc COS(3) -> ScalarOp ADD(4).b
        ScalarOp(4) -> Output(0).alpha
    """
    from shader_nodes.graph import VisualShader
    from shader_nodes.ir.types import ShaderType
    from shader_nodes.nodes import (ShaderNodeScalarConstant, ShaderNodeScalarFunc,
                                    ShaderNodeScalarOp)

    shader = VisualShader()
    stage = ShaderType.FRAGMENT
    shader.add_node(stage, ShaderNodeScalarConstant(0.5), (0, 0), 1)
    shader.add_node(stage, ShaderNodeScalarFunc('SIN'), (200, -100), 2)
    shader.add_node(stage, ShaderNodeScalarFunc('COS'), (200, 100), 3)
    shader.add_node(stage, ShaderNodeScalarOp('ADD'), (400, 0), 4)

    shader.connect_nodes(stage, 1, 0, 2, 0)
    shader.connect_nodes(stage, 1, 0, 3, 0)
    shader.connect_nodes(stage, 2, 0, 4, 0)
    shader.connect_nodes(stage, 3, 0, 4, 1)
    shader.connect_nodes(stage, 4, 0, 0, output_port(shader, stage, "alpha"))
    return shader


@pytest.fixture
def lenient_shader():
    """
    Creates a VisualShader whose uniform names are taken as given.

    Used to place identically named uniforms in several stages.
    """
    from shader_nodes.graph import VisualShader
    return VisualShader(uniform_name_validator=lambda shader, name, uniform: name)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def output_port(shader, stage, name):
    """Index of the named input on a stage's Output node."""
    port = shader.get_node(stage, 0).find_input_port(name)
    assert port >= 0, f"Output node has no '{name}' input in {shader.mode} {stage}"
    return port


def stage_body(code, stage):
    """Extract the body of one stage function from a full program."""
    header = f"\nvoid {stage.func_name}() {{\n"
    start = code.index(header) + len(header)
    end = code.index("\n}\n", start - 1)
    return code[start:end + 1]
