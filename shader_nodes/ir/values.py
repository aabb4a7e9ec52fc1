"""
Default-value literals for node input ports.

A port default is one of a closed set of variants: ``Scalar``,
``Vector``, ``Transform`` or ``Absent``. ``Absent`` means the node wants
no value when the port is disconnected, in which case the generator
hands it an empty variable name.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

import numpy as np

from .types import PortType


class Absent:
    """No default value. Use the ``ABSENT`` singleton."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def port_type(self) -> Optional[PortType]:
        return None

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"


ABSENT = Absent()


def finite_float(value) -> float:
    """Convert to float, rejecting NaN and infinities which have no shading-language literal."""
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"Port values must be finite, got {result}")
    return result


@dataclass(frozen=True)
class Scalar:
    value: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'value', finite_float(self.value))

    @property
    def port_type(self) -> PortType:
        return PortType.SCALAR


@dataclass(frozen=True)
class Vector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        for name in ('x', 'y', 'z'):
            object.__setattr__(self, name, finite_float(getattr(self, name)))

    @property
    def port_type(self) -> PortType:
        return PortType.VECTOR

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Transform:
    """
    A 4x4 affine transform stored as a row-major numpy array.
    
    Columns are the basis vectors and translation, matching how the
    shading language builds a ``mat4`` from column vectors.
    """
    __slots__ = ('_matrix',)

    def __init__(self, matrix=None):
        if matrix is None:
            m = np.identity(4, dtype=np.float64)
        else:
            m = np.array(matrix, dtype=np.float64)
            if m.shape == (3, 4):
                # basis + origin without the homogeneous row
                m = np.vstack([m, [0.0, 0.0, 0.0, 1.0]])
            if m.shape != (4, 4):
                raise ValueError(f"Transform expects a 4x4 or 3x4 matrix, got shape {m.shape}")
            if not np.isfinite(m).all():
                raise ValueError("Transform values must be finite")
        m.setflags(write=False)
        self._matrix = m

    @classmethod
    def from_basis_origin(cls, basis, origin=(0.0, 0.0, 0.0)):
        """Build from a 3x3 basis (rows are x, y, z axes) and an origin."""
        b = np.array(basis, dtype=np.float64).reshape(3, 3)
        m = np.identity(4, dtype=np.float64)
        m[:3, :3] = b.T
        m[:3, 3] = np.array(origin, dtype=np.float64)
        return cls(m)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def port_type(self) -> PortType:
        return PortType.TRANSFORM

    def columns(self):
        """Yields the four columns as tuples of floats."""
        for c in range(4):
            yield tuple(float(v) for v in self._matrix[:, c])

    def __eq__(self, other):
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self):
        return hash(self._matrix.tobytes())

    def __repr__(self):
        return f"Transform({self._matrix.tolist()})"


Value = Union[Scalar, Vector, Transform, Absent]


def as_value(value: Any) -> Value:
    """
    Coerce a plain Python value into a ``Value`` variant.
    
    None -> ABSENT, int/float -> Scalar, 3-sequence -> Vector,
    4x4 / 3x4 array-like -> Transform. Variants pass through unchanged.
    """
    if value is None:
        return ABSENT
    if isinstance(value, (Absent, Scalar, Vector, Transform)):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean defaults are not supported; use a Scalar")
    if isinstance(value, (int, float, np.floating, np.integer)):
        return Scalar(float(value))
    
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot convert {value!r} to a port value") from e
    if arr.shape == (3,):
        return Vector(*arr.tolist())
    if arr.shape in ((4, 4), (3, 4)):
        return Transform(arr)
    raise TypeError(f"Cannot convert {value!r} to a port value")
