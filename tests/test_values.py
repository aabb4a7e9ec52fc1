import unittest

import numpy as np
import pytest

from shader_nodes.codegen.literals import format_constant, format_float
from shader_nodes.ir.types import PortType
from shader_nodes.ir.values import ABSENT, Absent, Scalar, Transform, Vector, as_value


class TestValues(unittest.TestCase):
    def test_absent_singleton(self):
        self.assertIs(Absent(), ABSENT)
        self.assertFalse(ABSENT)
        self.assertIsNone(ABSENT.port_type)

    def test_port_types(self):
        self.assertEqual(Scalar(1).port_type, PortType.SCALAR)
        self.assertEqual(Vector().port_type, PortType.VECTOR)
        self.assertEqual(Transform().port_type, PortType.TRANSFORM)

    def test_as_value(self):
        self.assertIs(as_value(None), ABSENT)
        self.assertEqual(as_value(2), Scalar(2.0))
        self.assertEqual(as_value(np.float32(0.5)), Scalar(0.5))
        self.assertEqual(as_value((1, 2, 3)), Vector(1.0, 2.0, 3.0))
        self.assertEqual(as_value(np.identity(4)), Transform())
        vector = Vector(1, 2, 3)
        self.assertIs(as_value(vector), vector)

    def test_as_value_rejects(self):
        with self.assertRaises(TypeError):
            as_value(True)
        with self.assertRaises(TypeError):
            as_value((1, 2))
        with self.assertRaises(TypeError):
            as_value("red")

    def test_non_finite_rejected(self):
        for bad in (float("nan"), float("inf"), -float("inf")):
            with self.assertRaises(ValueError):
                Scalar(bad)
            with self.assertRaises(ValueError):
                Vector(0.0, bad, 0.0)
            with self.assertRaises(ValueError):
                as_value(bad)
        matrix = np.identity(4)
        matrix[0, 3] = np.nan
        with self.assertRaises(ValueError):
            Transform(matrix)

    def test_transform_is_immutable(self):
        t = Transform()
        with self.assertRaises(ValueError):
            t.matrix[0, 0] = 5.0

    def test_transform_from_3x4(self):
        rows = [[1, 0, 0, 4], [0, 1, 0, 5], [0, 0, 1, 6]]
        t = Transform(rows)
        self.assertEqual(t.matrix.shape, (4, 4))
        self.assertEqual(list(t.columns())[3], (4.0, 5.0, 6.0, 1.0))

    def test_transform_bad_shape(self):
        with self.assertRaises(ValueError):
            Transform(np.zeros((2, 2)))

    def test_transform_from_basis_origin(self):
        t = Transform.from_basis_origin([[0, 1, 0], [-1, 0, 0], [0, 0, 1]], (1, 2, 3))
        columns = list(t.columns())
        self.assertEqual(columns[0], (0.0, 1.0, 0.0, 0.0))
        self.assertEqual(columns[1], (-1.0, 0.0, 0.0, 0.0))
        self.assertEqual(columns[3], (1.0, 2.0, 3.0, 1.0))

    def test_transform_equality_and_hash(self):
        a = Transform()
        b = Transform(np.identity(4))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, Transform.from_basis_origin(np.identity(3), (1, 0, 0)))


class TestLiterals:
    def test_format_float(self):
        assert format_float(1) == "1.00000"
        assert format_float(0.123456789, 3) == "0.123"

    def test_absent_is_empty(self):
        assert format_constant(ABSENT) == ""
        assert format_constant(None) == ""

    def test_scalar_and_vector(self):
        assert format_constant(Scalar(0.25)) == "0.25000"
        assert format_constant(Vector(1, 0, 0.5)) == "vec3(1.00000,0.00000,0.50000)"

    def test_transform_columns(self):
        t = Transform.from_basis_origin(np.identity(3), (1, 2, 3))
        assert format_constant(t, 1) == (
            "mat4( vec4(1.0,0.0,0.0,0.0),vec4(0.0,1.0,0.0,0.0),"
            "vec4(0.0,0.0,1.0,0.0),vec4(1.0,2.0,3.0,1.0) )")

    def test_unknown_value(self):
        with pytest.raises(TypeError):
            format_constant("vec3(0.0)")
