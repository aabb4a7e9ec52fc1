import unittest

import pytest

from shader_nodes.errors import ConnectionNotFoundError, GraphError, InvalidConnectionError
from shader_nodes.graph import Connection, VisualShader, can_connect, check_connection
from shader_nodes.ir.types import PERMISSIVE_COMPATIBILITY, PortType, ShaderType, is_port_types_compatible
from shader_nodes.nodes import (ShaderNodeScalarConstant, ShaderNodeScalarFunc, ShaderNodeScalarOp,
                                ShaderNodeTransformConstant, ShaderNodeVectorConstant, ShaderNodeVectorFunc)

from conftest import output_port

FRAGMENT = ShaderType.FRAGMENT


class TestCompatibilityTable(unittest.TestCase):
    def test_default_table(self):
        S, V, T = PortType.SCALAR, PortType.VECTOR, PortType.TRANSFORM
        self.assertTrue(is_port_types_compatible(S, S))
        self.assertTrue(is_port_types_compatible(S, V))
        self.assertFalse(is_port_types_compatible(V, S))
        self.assertTrue(is_port_types_compatible(T, T))
        self.assertFalse(is_port_types_compatible(T, V))
        self.assertFalse(is_port_types_compatible(S, T))

    def test_permissive_table(self):
        self.assertTrue(is_port_types_compatible(PortType.VECTOR, PortType.SCALAR, PERMISSIVE_COMPATIBILITY))
        self.assertFalse(is_port_types_compatible(PortType.VECTOR, PortType.TRANSFORM, PERMISSIVE_COMPATIBILITY))


class TestCanConnect(unittest.TestCase):
    def setUp(self):
        self.shader = VisualShader()
        self.shader.add_node(FRAGMENT, ShaderNodeScalarConstant(), node_id=1)
        self.shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=2)
        self.shader.add_node(FRAGMENT, ShaderNodeVectorConstant(), node_id=3)
        self.shader.add_node(FRAGMENT, ShaderNodeTransformConstant(), node_id=4)
        self.shader.add_node(FRAGMENT, ShaderNodeScalarOp(), node_id=5)

    def test_valid(self):
        self.assertTrue(self.shader.can_connect_nodes(FRAGMENT, 1, 0, 2, 0))

    def test_self_connection(self):
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 2, 0, 2, 0))

    def test_port_out_of_range(self):
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 1, 1, 2, 0))
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 1, 0, 2, 1))
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 1, -1, 2, 0))

    def test_missing_node(self):
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 9, 0, 2, 0))
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 1, 0, 9, 0))

    def test_incompatible_types(self):
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 3, 0, 2, 0))
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 4, 0, 2, 0))

    def test_existing_connection(self):
        self.shader.connect_nodes(FRAGMENT, 1, 0, 2, 0)
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 1, 0, 2, 0))

    def test_cycle(self):
        self.shader.connect_nodes(FRAGMENT, 2, 0, 5, 0)
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 5, 0, 2, 0))

    def test_other_stage_is_independent(self):
        self.assertFalse(self.shader.can_connect_nodes(ShaderType.VERTEX, 1, 0, 2, 0))

    def test_reason_strings(self):
        graph = self.shader.get_graph(FRAGMENT)
        self.assertIn("itself", check_connection(graph, 2, 0, 2, 0))
        self.assertIn("incompatible", check_connection(graph, 3, 0, 2, 0))
        self.assertIsNone(check_connection(graph, 1, 0, 2, 0))
        self.assertTrue(can_connect(graph, 1, 0, 2, 0))

    def test_permissive_shader(self):
        shader = VisualShader(compatibility=PERMISSIVE_COMPATIBILITY)
        shader.add_node(FRAGMENT, ShaderNodeVectorConstant(), node_id=1)
        shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=2)
        self.assertTrue(shader.can_connect_nodes(FRAGMENT, 1, 0, 2, 0))


class TestConnect(unittest.TestCase):
    def setUp(self):
        self.shader = VisualShader()
        for node_id in (1, 2):
            self.shader.add_node(FRAGMENT, ShaderNodeScalarConstant(node_id), node_id=node_id)
        self.shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=3)
        self.shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=4)
        self.alpha = output_port(self.shader, FRAGMENT, "alpha")

    def test_connect_records_connection(self):
        conn = self.shader.connect_nodes(FRAGMENT, 1, 0, 0, self.alpha)
        self.assertEqual(conn, Connection(1, 0, 0, self.alpha))
        self.assertTrue(self.shader.is_node_connection(FRAGMENT, 1, 0, 0, self.alpha))

    def test_connect_replaces_existing_input(self):
        self.shader.connect_nodes(FRAGMENT, 1, 0, 0, self.alpha)
        self.shader.connect_nodes(FRAGMENT, 2, 0, 0, self.alpha)

        into_alpha = [c for c in self.shader.get_node_connections(FRAGMENT)
                      if c.to_node == 0 and c.to_port == self.alpha]
        self.assertEqual(into_alpha, [Connection(2, 0, 0, self.alpha)])

    def test_output_fans_out(self):
        self.shader.connect_nodes(FRAGMENT, 1, 0, 3, 0)
        self.shader.connect_nodes(FRAGMENT, 1, 0, 4, 0)
        self.assertEqual(len(self.shader.get_node_connections(FRAGMENT)), 2)

    def test_invalid_connection_carries_reason(self):
        with self.assertRaises(InvalidConnectionError) as ctx:
            self.shader.connect_nodes(FRAGMENT, 3, 0, 3, 0)
        err = ctx.exception
        self.assertEqual(err.connection, (3, 0, 3, 0))
        self.assertEqual(err.stage, FRAGMENT)
        self.assertIn("itself", err.reason)
        self.assertIsInstance(err, GraphError)
        self.assertEqual(self.shader.get_node_connections(FRAGMENT), [])

    def test_cycle_rejected(self):
        self.shader.connect_nodes(FRAGMENT, 3, 0, 4, 0)
        with self.assertRaises(InvalidConnectionError) as ctx:
            self.shader.connect_nodes(FRAGMENT, 4, 0, 3, 0)
        self.assertIn("cycle", ctx.exception.reason)
        self.assertEqual(self.shader.get_node_connections(FRAGMENT), [Connection(3, 0, 4, 0)])

    def test_longer_cycle_rejected(self):
        self.shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=5)
        self.shader.connect_nodes(FRAGMENT, 3, 0, 4, 0)
        self.shader.connect_nodes(FRAGMENT, 4, 0, 5, 0)
        self.assertFalse(self.shader.can_connect_nodes(FRAGMENT, 5, 0, 3, 0))

    def test_rejected_connection_keeps_cache(self):
        self.shader.get_code()
        with self.assertRaises(InvalidConnectionError):
            self.shader.connect_nodes(FRAGMENT, 1, 0, 9, 0)
        self.assertFalse(self.shader.is_dirty)

    def test_disconnect(self):
        self.shader.connect_nodes(FRAGMENT, 1, 0, 3, 0)
        self.shader.disconnect_nodes(FRAGMENT, 1, 0, 3, 0)
        self.assertFalse(self.shader.is_node_connection(FRAGMENT, 1, 0, 3, 0))

    def test_disconnect_missing(self):
        with self.assertRaises(ConnectionNotFoundError) as ctx:
            self.shader.disconnect_nodes(FRAGMENT, 1, 0, 3, 0)
        self.assertEqual(ctx.exception.connection, (1, 0, 3, 0))


@pytest.mark.parametrize("from_node, from_port, to_node, to_port", [
    (2, 0, 2, 0),   # self
    (1, 3, 2, 0),   # output port out of range
    (1, 0, 2, 5),   # input port out of range
    (3, 0, 2, 0),   # vector into scalar
])
def test_can_connect_rejections(shader, from_node, from_port, to_node, to_port):
    shader.add_node(FRAGMENT, ShaderNodeScalarConstant(), node_id=1)
    shader.add_node(FRAGMENT, ShaderNodeScalarFunc(), node_id=2)
    shader.add_node(FRAGMENT, ShaderNodeVectorFunc(), node_id=3)
    assert not shader.can_connect_nodes(FRAGMENT, from_node, from_port, to_node, to_port)
