import logging
import unittest

import pytest

from shader_nodes.codegen.generator import ShaderGenerator, convert_expr
from shader_nodes.codegen.options import GeneratorOptions
from shader_nodes.errors import CycleDetectedError
from shader_nodes.graph import Connection, VisualShader
from shader_nodes.ir.resources import DefaultTextureParam, TextureRef
from shader_nodes.ir.types import NODE_ID_OUTPUT, PERMISSIVE_COMPATIBILITY, PortType, ShaderMode, ShaderType
from shader_nodes.nodes import (ShaderNodeColorUniform, ShaderNodeInput, ShaderNodeScalarConstant,
                                ShaderNodeScalarFunc, ShaderNodeScalarOp, ShaderNodeScalarUniform,
                                ShaderNodeTexture, ShaderNodeTextureUniform, ShaderNodeTransformCompose,
                                ShaderNodeVectorConstant, ShaderNodeVectorOp)

from conftest import output_port, stage_body

VERTEX = ShaderType.VERTEX
FRAGMENT = ShaderType.FRAGMENT
LIGHT = ShaderType.LIGHT


class TestProgramLayout(unittest.TestCase):
    def test_empty_shader(self):
        code = VisualShader().code
        self.assertEqual(code,
                         "shader_type spatial;\n"
                         "\n\n"
                         "\nvoid vertex() {\n// Output:0\n\n}\n"
                         "\nvoid fragment() {\n// Output:0\n\n}\n"
                         "\nvoid light() {\n// Output:0\n\n}\n")

    def test_simple_fragment(self):
        shader = VisualShader()
        shader.add_node(FRAGMENT, ShaderNodeScalarConstant(0.5), node_id=2)
        shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(shader, FRAGMENT, "alpha"))

        body = stage_body(shader.code, FRAGMENT)
        self.assertEqual(body,
                         "// Scalar:2\n"
                         "\tfloat n_out2p0;\n"
                         "\tn_out2p0 = 0.500000;\n"
                         "\n"
                         "// Output:0\n"
                         "\tALPHA = n_out2p0;\n"
                         "\n")

    def test_stage_order(self):
        code = VisualShader(ShaderMode.CANVAS_ITEM).code
        self.assertTrue(code.startswith("shader_type canvas_item;\n"))
        self.assertLess(code.index("void vertex()"), code.index("void fragment()"))
        self.assertLess(code.index("void fragment()"), code.index("void light()"))

    def test_render_mode_line(self):
        shader = VisualShader()
        shader.set_flag("unshaded")
        shader.set_mode_enum("cull", "disabled")
        self.assertTrue(shader.code.startswith(
            "shader_type spatial;\nrender_mode cull_disabled, unshaded;\n\n"))

    def test_unreachable_nodes_skipped(self):
        shader = VisualShader()
        shader.add_node(FRAGMENT, ShaderNodeScalarConstant(0.5), node_id=2)
        self.assertNotIn("n_out2p0", shader.code)

    def test_node_comments_optional(self):
        shader = VisualShader(options=GeneratorOptions(node_comments=False))
        shader.add_node(FRAGMENT, ShaderNodeScalarConstant(0.5), node_id=2)
        shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(shader, FRAGMENT, "alpha"))
        self.assertNotIn("//", shader.code)


class TestInputResolution(unittest.TestCase):
    def setUp(self):
        self.shader = VisualShader()

    def test_default_literals_declared(self):
        self.shader.add_node(FRAGMENT, ShaderNodeScalarOp('MUL'), node_id=2)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(self.shader, FRAGMENT, "alpha"))

        body = stage_body(self.shader.code, FRAGMENT)
        self.assertIn("\tfloat n_in2p0 = 0.00000;\n", body)
        self.assertIn("\tfloat n_in2p1 = 0.00000;\n", body)
        self.assertIn("\tn_out2p0 = n_in2p0 * n_in2p1;\n", body)

    def test_default_ignored_when_connected(self):
        op = ShaderNodeScalarOp('ADD')
        op.set_input_port_default_value(0, 7.0)
        self.shader.add_node(FRAGMENT, ShaderNodeScalarConstant(1.0), node_id=1)
        self.shader.add_node(FRAGMENT, op, node_id=2)
        self.shader.connect_nodes(FRAGMENT, 1, 0, 2, 0)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(self.shader, FRAGMENT, "alpha"))

        body = stage_body(self.shader.code, FRAGMENT)
        self.assertNotIn("n_in2p0", body)
        self.assertNotIn("7.00000", body)
        self.assertIn("\tn_out2p0 = n_out1p0 + n_in2p1;\n", body)

    def test_float_precision_option(self):
        shader = VisualShader(options=GeneratorOptions(float_precision=2))
        shader.add_node(FRAGMENT, ShaderNodeScalarOp(), node_id=2)
        shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(shader, FRAGMENT, "alpha"))
        self.assertIn("\tfloat n_in2p0 = 0.00;\n", shader.code)

    def test_scalar_widened_to_vector(self):
        self.shader.add_node(FRAGMENT, ShaderNodeScalarConstant(0.5), node_id=2)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(self.shader, FRAGMENT, "albedo"))
        self.assertIn("\tALBEDO = vec3(n_out2p0);\n", self.shader.code)

    def test_scalar_default_on_vector_port(self):
        op = ShaderNodeVectorOp('ADD')
        op.set_input_port_default_value(1, 2.0)
        self.shader.add_node(FRAGMENT, op, node_id=2)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(self.shader, FRAGMENT, "albedo"))
        self.assertIn("\tvec3 n_in2p1 = vec3(2.00000);\n", self.shader.code)

    def test_vector_narrowed_with_permissive_table(self):
        shader = VisualShader(compatibility=PERMISSIVE_COMPATIBILITY)
        shader.add_node(FRAGMENT, ShaderNodeVectorConstant((1, 0, 0)), node_id=2)
        shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(shader, FRAGMENT, "alpha"))
        self.assertIn("\tALPHA = dot(n_out2p0,vec3(0.333333,0.333333,0.333333));\n", shader.code)

    def test_swizzled_output(self):
        self.shader.add_node(VERTEX, ShaderNodeVectorConstant((0.5, 0.5, 0.0)), node_id=2)
        self.shader.connect_nodes(VERTEX, 2, 0, 0, output_port(self.shader, VERTEX, "uv"))
        self.assertIn("\tUV = n_out2p0.xy;\n", self.shader.code)

    def test_input_node(self):
        self.shader.add_node(FRAGMENT, ShaderNodeInput("uv"), node_id=2)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(self.shader, FRAGMENT, "albedo"))
        body = stage_body(self.shader.code, FRAGMENT)
        self.assertIn("// Input: uv:2\n\tvec3 n_out2p0;\n\tn_out2p0 = vec3(UV,0.0);\n", body)


class TestConvertExpr(unittest.TestCase):
    def test_conversions(self):
        self.assertEqual(convert_expr("x", PortType.SCALAR, PortType.SCALAR), "x")
        self.assertEqual(convert_expr("x", PortType.SCALAR, PortType.VECTOR), "vec3(x)")
        self.assertEqual(convert_expr("x", PortType.VECTOR, PortType.SCALAR),
                         "dot(x,vec3(0.333333,0.333333,0.333333))")
        self.assertIsNone(convert_expr("x", PortType.TRANSFORM, PortType.VECTOR))


class TestTraversal:
    def test_diamond_emits_producer_once(self, diamond_shader):
        body = stage_body(diamond_shader.code, FRAGMENT)
        assert body.count("// Scalar:1\n") == 1
        assert body.count("\tn_out1p0 = 0.500000;\n") == 1
        assert body.count("\tfloat n_out1p0;\n") == 1

    def test_producers_before_consumers(self, diamond_shader):
        body = stage_body(diamond_shader.code, FRAGMENT)
        order = [body.index(marker) for marker in
                 ("// Scalar:1\n", "// ScalarFunc:2\n", "// ScalarFunc:3\n", "// ScalarOp:4\n", "// Output:0\n")]
        assert order == sorted(order)
        assert "\tn_out4p0 = n_out2p0 + n_out3p0;\n" in body

    def test_deterministic(self, diamond_shader):
        first = ShaderGenerator(diamond_shader).generate()
        second = ShaderGenerator(diamond_shader).generate()
        assert first.code == second.code
        assert first.texture_params == second.texture_params
        assert first.warnings == second.warnings

    def test_generate_stage_defaults_to_output_root(self, diamond_shader):
        stage_code = ShaderGenerator(diamond_shader).generate_stage(FRAGMENT)
        assert f"// Output:{NODE_ID_OUTPUT}\n" in stage_code.code
        assert stage_code.code == stage_body(diamond_shader.code, FRAGMENT)

    def test_generate_stage_from_interior_root(self, diamond_shader):
        stage_code = ShaderGenerator(diamond_shader).generate_stage(FRAGMENT, root=2)
        assert "// ScalarFunc:2\n" in stage_code.code
        assert "// ScalarFunc:3\n" not in stage_code.code
        assert "// Output:0\n" not in stage_code.code

    def test_cycle_detected(self, shader):
        shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=2)
        shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=3)
        shader.connect_nodes(FRAGMENT, 2, 0, 3, 0)
        shader.connect_nodes(FRAGMENT, 3, 0, 0, output_port(shader, FRAGMENT, "alpha"))

        # Bypass validation to break the acyclic invariant
        shader.get_graph(FRAGMENT).connections.append(Connection(3, 0, 2, 0))
        shader.mark_dirty()

        with pytest.raises(CycleDetectedError) as exc_info:
            shader.get_code()
        assert exc_info.value.stage == FRAGMENT
        assert exc_info.value.node_id == 3

    def test_deep_chain(self, shader):
        previous = None
        for node_id in range(1, 1501):
            shader.add_node(FRAGMENT, ShaderNodeScalarFunc('ABS'), node_id=node_id)
            if previous is not None:
                shader.connect_nodes(FRAGMENT, previous, 0, node_id, 0)
            previous = node_id
        shader.connect_nodes(FRAGMENT, previous, 0, 0, output_port(shader, FRAGMENT, "alpha"))

        body = stage_body(shader.code, FRAGMENT)
        assert body.index("// ScalarFunc:1\n") < body.index("// ScalarFunc:1500\n")


class TestGlobalsAndTextures:
    def test_uniform_declared_in_globals(self, shader):
        shader.add_node(FRAGMENT, ShaderNodeColorUniform("tint"), node_id=2)
        shader.connect_nodes(FRAGMENT, 2, 0, 0, output_port(shader, FRAGMENT, "albedo"))

        code = shader.code
        assert "uniform vec4 tint : hint_color;\n" in code
        assert code.index("uniform vec4 tint") < code.index("void vertex()")
        assert "\tn_out2p0 = tint.rgb;\n" in code

    def test_globals_deduplicated_across_stages(self, lenient_shader):
        for stage in (VERTEX, FRAGMENT):
            lenient_shader.add_node(stage, ShaderNodeScalarUniform("shared"), node_id=2)
            lenient_shader.connect_nodes(stage, 2, 0, 0, output_port(lenient_shader, stage, "alpha"))

        assert lenient_shader.code.count("uniform float shared;\n") == 1

    def test_texture_params_deduplicated(self, lenient_shader):
        first = TextureRef("res://first.png")
        second = TextureRef("res://second.png")
        for stage, texture, target in ((VERTEX, first, "color"), (FRAGMENT, second, "albedo")):
            lenient_shader.add_node(stage, ShaderNodeTextureUniform("albedo_tex", texture=texture), node_id=2)
            lenient_shader.connect_nodes(stage, 2, 0, 0, output_port(lenient_shader, stage, target))

        assert lenient_shader.default_texture_params == [DefaultTextureParam("albedo_tex", first)]

    def test_texture_node_params(self, shader):
        texture = TextureRef("res://rock.png")
        shader.add_node(FRAGMENT, ShaderNodeTexture(texture), node_id=4)
        shader.add_node(FRAGMENT, ShaderNodeInput("uv"), node_id=5)
        shader.connect_nodes(FRAGMENT, 5, 0, 4, 0)
        shader.connect_nodes(FRAGMENT, 4, 0, 0, output_port(shader, FRAGMENT, "albedo"))

        result = shader.get_code()
        assert result.texture_params == [DefaultTextureParam("tex_frg_4", texture)]
        assert "uniform sampler2D tex_frg_4;\n" in result.code
        assert "\t{\n\t\tvec4 n_tex_read = texture( tex_frg_4 , n_out5p0.xy );\n" in result.code
        assert result.warnings == {}

    def test_texture_without_assignment_has_no_param(self, shader):
        shader.add_node(FRAGMENT, ShaderNodeTexture(), node_id=4)
        shader.connect_nodes(FRAGMENT, 4, 0, 0, output_port(shader, FRAGMENT, "albedo"))
        assert shader.default_texture_params == []


class TestWarnings:
    def test_required_input_warning(self, shader):
        shader.add_node(FRAGMENT, ShaderNodeTexture(), node_id=3)
        shader.connect_nodes(FRAGMENT, 3, 0, 0, output_port(shader, FRAGMENT, "albedo"))

        result = shader.get_code()
        assert "uv" in result.warnings[(FRAGMENT, 3)]
        assert "\t\tvec4 n_tex_read = vec4(0.0);\n" in result.code

    def test_screen_source_outside_fragment(self, shader):
        shader.add_node(VERTEX, ShaderNodeTexture(source='SCREEN'), node_id=2)
        shader.add_node(VERTEX, ShaderNodeInput("uv"), node_id=3)
        shader.connect_nodes(VERTEX, 3, 0, 2, 0)
        shader.connect_nodes(VERTEX, 2, 0, 0, output_port(shader, VERTEX, "color"))

        result = shader.get_code()
        assert "Screen source" in result.warnings[(VERTEX, 2)]
        assert "SCREEN_TEXTURE" not in stage_body(result.code, VERTEX)

    def test_unknown_input_name(self, shader):
        shader.add_node(LIGHT, ShaderNodeInput("bogus"), node_id=2)
        shader.connect_nodes(LIGHT, 2, 0, 0, output_port(shader, LIGHT, "diffuse"))

        result = shader.get_code()
        assert "bogus" in result.warnings[(LIGHT, 2)]
        assert "\tn_out2p0 = 0.0;\n" in result.code

    def test_warnings_logged(self, shader, caplog):
        shader.add_node(FRAGMENT, ShaderNodeTexture(), node_id=3)
        shader.connect_nodes(FRAGMENT, 3, 0, 0, output_port(shader, FRAGMENT, "albedo"))

        with caplog.at_level(logging.WARNING, logger="shader_nodes"):
            shader.get_code()
        assert any("uv" in record.getMessage() for record in caplog.records)

    def test_clean_graph_has_no_warnings(self, diamond_shader):
        assert diamond_shader.get_code().warnings == {}

    def test_transform_compose_defaults(self, shader):
        shader.add_node(VERTEX, ShaderNodeTransformCompose(), node_id=2)
        stage_code = ShaderGenerator(shader).generate_stage(VERTEX, root=2)
        assert "\tvec3 n_in2p0 = vec3(1.00000,0.00000,0.00000);\n" in stage_code.code
        assert stage_code.warnings == {}
