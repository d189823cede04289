"""
Three-Component Vector for Particle Kinematics

Vectors are stored as a 4-lane single-precision NumPy array. Lanes 0-2 hold
x, y, z; lane 3 is padding that rounds the width up to a multiple of 4 and
is held at zero. The padding lane never takes part in arithmetic results,
comparisons, conversions or the string form.
"""

import numbers

import numpy as np

from .constants import REAL, EPSILON, VECTOR_LANES, PAD_LANE


class VectorLengthError(AssertionError):
    """
    A vector was requested from a sequence whose length is not 3.

    This is a broken caller contract rather than a runtime condition, hence
    an AssertionError subclass. Validate lengths before converting if you
    need to recover.
    """


class Vector3:
    """
    3D vector of single-precision reals.

    Operators build new vectors and never touch their operands, except for
    the in-place forms (``+=``, ``-=``, ``*=``) and ``invert()``.

    Equality is tolerant: two vectors compare equal when every component
    differs by strictly less than EPSILON (1e-4). This relation is NOT
    transitive near the tolerance boundary (a == b and b == c does not
    imply a == c), so tests should keep differences well away from EPSILON.
    For the same reason vectors are unhashable.

    Attributes:
        x, y, z: Components (read/write, stored as float32)
    """

    __slots__ = ("_v",)

    # Make NumPy defer to our operators instead of broadcasting over us
    __array_ufunc__ = None

    __hash__ = None

    def __init__(self, x=0.0, y=0.0, z=0.0):
        self._v = np.zeros(VECTOR_LANES, dtype=REAL)
        self._v[:3] = (x, y, z)

    @classmethod
    def _from_lanes(cls, lanes):
        """Wrap a freshly computed 4-lane array, re-zeroing the padding lane."""
        vec = cls.__new__(cls)
        lanes = np.asarray(lanes, dtype=REAL)
        lanes[PAD_LANE] = 0.0
        vec._v = lanes
        return vec

    # ==================== CONSTRUCTION ====================

    @classmethod
    def splat(cls, value):
        """Vector with all three components set to ``value``."""
        return cls(value, value, value)

    @classmethod
    def from_sequence(cls, values):
        """
        Build a vector from a length-3 sequence.

        Accepts tuples, lists and NumPy arrays of shape (3,).

        Args:
            values: Sequence of three reals

        Returns:
            vec: New Vector3

        Raises:
            VectorLengthError: If len(values) != 3
        """
        n = len(values)
        if n != 3:
            raise VectorLengthError(f"Cannot create vector from {n} length sequence")

        x, y, z = values
        return cls(x, y, z)

    def copy(self):
        """Independent copy."""
        return Vector3._from_lanes(self._v.copy())

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def to_array(self):
        """
        Components as a new float32 array of shape (3,).

        The padding lane is not included.
        """
        return self._v[:3].copy()

    # ==================== COMPONENTS ====================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @x.setter
    def x(self, value: float):
        self._v[0] = value

    @property
    def y(self) -> float:
        return float(self._v[1])

    @y.setter
    def y(self, value: float):
        self._v[1] = value

    @property
    def z(self) -> float:
        return float(self._v[2])

    @z.setter
    def z(self, value: float):
        self._v[2] = value

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __len__(self):
        return 3

    # ==================== GEOMETRY ====================

    def invert(self):
        """Negate x, y and z in place."""
        self._v[:3] = -self._v[:3]

    def square_magnitude(self) -> float:
        """
        Squared length x^2 + y^2 + z^2.

        Cheaper than magnitude() when only comparing lengths.
        """
        xyz = self._v[:3]
        return float(np.dot(xyz, xyz))

    def magnitude(self) -> float:
        """Euclidean length. Zero for the zero vector."""
        xyz = self._v[:3]
        return float(np.sqrt(np.dot(xyz, xyz)))

    def normalise(self):
        """
        Unit vector pointing the same way.

        Returns:
            unit: New Vector3 of length 1, or None if the magnitude is <= 0
                  (a null vector has no direction)
        """
        length = self.magnitude()
        if length <= 0:
            return None

        return self * (1.0 / length)

    def add_scaled(self, other, scalar):
        """
        Return self + other * scalar as a single fused step.

        Args:
            other: Vector3 to scale and add
            scalar: Scale factor

        Returns:
            result: New Vector3
        """
        return Vector3._from_lanes(self._v + other._v * REAL(scalar))

    def component_product(self, other):
        """Element-wise (Hadamard) product. Not the dot product."""
        return Vector3._from_lanes(self._v * other._v)

    def dot(self, other) -> float:
        """Scalar product."""
        return float(np.dot(self._v[:3], other._v[:3]))

    def cross(self, other):
        """
        Right-handed vector product self x other.

        (ay*bz - az*by, az*bx - ax*bz, ax*by - ay*bx)

        Anti-commutative: a.cross(b) == -(b.cross(a)).
        """
        ax, ay, az = self._v[:3]
        bx, by, bz = other._v[:3]

        return Vector3(
            ay * bz - az * by,
            az * bx - ax * bz,
            ax * by - ay * bx,
        )

    # ==================== OPERATORS ====================

    def __add__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3._from_lanes(self._v + other._v)

    def __sub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3._from_lanes(self._v - other._v)

    def __mul__(self, scalar):
        # Vector-by-scalar only; use component_product/dot/cross for vectors
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vector3._from_lanes(self._v * REAL(scalar))

    def __iadd__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        self._v += other._v
        return self

    def __isub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        self._v -= other._v
        return self

    def __imul__(self, scalar):
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        self._v *= REAL(scalar)
        self._v[PAD_LANE] = 0.0
        return self

    def __neg__(self):
        return Vector3._from_lanes(-self._v)

    # Named forms of the operators
    def plus(self, other):
        return self + other

    def minus(self, other):
        return self - other

    def scaled(self, scalar):
        return self * scalar

    # ==================== COMPARISON ====================

    def __eq__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        diff = np.abs(self._v[:3] - other._v[:3])
        return bool(np.all(diff < EPSILON))

    def __repr__(self):
        """String representation."""
        return f"Vector3({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"

