"""
Unit-quaternion algebra.

Layout: q = [x, y, z, w] where (x, y, z) is the vector part and w the scalar
part. Quaternions are alibi rotations; composition is the Hamilton product

    q1 (x) q2:  vec = w1*v2 + w2*v1 + v1 x v2,   w = w1*w2 - v1 . v2

which is linear in either factor:

    q1 (x) q2 == quat_left_matrix(q1) @ q2 == quat_right_matrix(q2) @ q1

The left/right matrices are the linearization used by filter Jacobians.

Two APIs are provided:
    - functions on (4,) arrays (quat_multiply, quat_inverse, ...)
    - the Quaternion value class wrapping such an array
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from lse_manifold.common.constants import QUAT_IDENTITY, QUAT_NORM_EPSILON
from lse_manifold.common.geometry.so3_numpy import skew, vector_norm
from lse_manifold.common.validation import as_quat

logger = logging.getLogger(__name__)


# =============================================================================
# Functional API
# =============================================================================


def quat_identity() -> np.ndarray:
    """Identity quaternion (0, 0, 0, 1)."""
    return np.array(QUAT_IDENTITY, dtype=float)


def quat_normalize(q: np.ndarray) -> np.ndarray:
    """
    Normalize to unit length.

    Total function: if ||q|| <= QUAT_NORM_EPSILON, or the norm is not finite,
    the identity is returned instead, so NaN can never leave this function.
    """
    q = as_quat(q, "q")
    norm = vector_norm(q)
    if QUAT_NORM_EPSILON < norm < math.inf:
        return q / norm
    logger.debug("Degenerate quaternion norm %.3e, falling back to identity", norm)
    return quat_identity()


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1 (x) q2 in (x, y, z, w) layout."""
    x1, y1, z1, w1 = as_quat(q1, "q1")
    x2, y2, z2, w2 = as_quat(q2, "q2")
    return np.array([
        w1*x2 - z1*y2 + y1*z2 + x1*w2,
        w1*y2 + z1*x2 - x1*z2 + y1*w2,
        w1*z2 - y1*x2 + x1*y2 + z1*w2,
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
    ], dtype=float)


def quat_inverse(q: np.ndarray) -> np.ndarray:
    """Conjugate (-x, -y, -z, w). Equals the inverse for unit quaternions."""
    q = as_quat(q, "q")
    return np.array([-q[0], -q[1], -q[2], q[3]], dtype=float)


def _mult_matrix(q: np.ndarray, sign: float) -> np.ndarray:
    M = np.eye(4, dtype=float) * q[3]
    M[:3, :3] += sign * skew(q[:3])
    M[3, :] = -q
    M[:, 3] = q
    return M


def quat_left_matrix(q: np.ndarray) -> np.ndarray:
    """
    Left-multiplication matrix L(q) with L(q) @ p == q (x) p.

        L(q) = [ w*I + [v]x   v ]
               [   -v^T       w ]
    """
    return _mult_matrix(as_quat(q, "q"), 1.0)


def quat_right_matrix(q: np.ndarray) -> np.ndarray:
    """
    Right-multiplication matrix R(q) with R(q) @ p == p (x) q.

        R(q) = [ w*I - [v]x   v ]
               [   -v^T       w ]
    """
    return _mult_matrix(as_quat(q, "q"), -1.0)


# =============================================================================
# Object API
# =============================================================================


class Quaternion:
    """
    Rotation quaternion value object, components (x, y, z, w).

    Mutable through item assignment and normalize()/set_identity(); every
    other method returns a new Quaternion. No operator overloading:
    composition is the explicit multiply().
    """

    __slots__ = ("_q",)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0):
        self._q = np.array([x, y, z, w], dtype=float)

    @classmethod
    def from_array(cls, q: Sequence[float]) -> "Quaternion":
        """Build from an array-like (x, y, z, w). Not normalized."""
        return cls(*as_quat(q, "q"))

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls()

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def __getitem__(self, i: int) -> float:
        return float(self._q[i])

    def __setitem__(self, i: int, value: float) -> None:
        self._q[i] = float(value)

    @property
    def x(self) -> float:
        return float(self._q[0])

    @property
    def y(self) -> float:
        return float(self._q[1])

    @property
    def z(self) -> float:
        return float(self._q[2])

    @property
    def w(self) -> float:
        return float(self._q[3])

    @property
    def vector(self) -> np.ndarray:
        """Copy of the vector part (x, y, z)."""
        return self._q[:3].copy()

    def as_array(self) -> np.ndarray:
        """Copy of the components as a (4,) array."""
        return self._q.copy()

    def norm(self) -> float:
        return float(np.linalg.norm(self._q))

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def normalize(self) -> "Quaternion":
        """Normalize in place (identity fallback for a ~zero norm). Returns self."""
        self._q = quat_normalize(self._q)
        return self

    def set_identity(self) -> "Quaternion":
        self._q = quat_identity()
        return self

    def multiply(self, other: "Quaternion") -> "Quaternion":
        """Composition self (x) other."""
        return Quaternion(*quat_multiply(self._q, other._q))

    def inverse(self) -> "Quaternion":
        return Quaternion(*quat_inverse(self._q))

    def left_matrix(self) -> np.ndarray:
        return quat_left_matrix(self._q)

    def right_matrix(self) -> np.ndarray:
        return quat_right_matrix(self._q)

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def copy(self) -> "Quaternion":
        return Quaternion(*self._q)

    def allclose(self, other: "Quaternion", atol: float = 1e-9) -> bool:
        """True if both describe the same rotation (q and -q are equivalent)."""
        a = self._q
        b = other._q if isinstance(other, Quaternion) else as_quat(other, "other")
        return bool(np.allclose(a, b, atol=atol, rtol=0.0) or np.allclose(a, -b, atol=atol, rtol=0.0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.array_equal(self._q, other._q))

    __hash__ = None

    def __repr__(self) -> str:
        x, y, z, w = self._q
        return f"Quaternion(x={x!r}, y={y!r}, z={z!r}, w={w!r})"
