"""
so(3) primitives: hat/vee operators and rotation-vector wrapping.

Rotation vectors are (rx, ry, rz) = angle * axis, angle in radians.
Canonical rotation vectors have norm in (-pi, pi].
"""

from __future__ import annotations

import logging
import math

import numpy as np

from lse_manifold.common.validation import as_matrix3, as_vector3

logger = logging.getLogger(__name__)


def skew(v: np.ndarray) -> np.ndarray:
    """Skew-symmetric matrix from 3-vector (hat operator): skew(v) @ x == v x x."""
    v = as_vector3(v, "v")
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ], dtype=float)


def unskew(S: np.ndarray) -> np.ndarray:
    """Extract 3-vector from skew-symmetric matrix (vee operator)."""
    S = as_matrix3(S, "S")
    return np.array([S[2, 1], S[0, 2], S[1, 0]], dtype=float)


def vector_norm(v: np.ndarray) -> float:
    """
    Euclidean norm, scaled by the largest entry so that large finite inputs
    do not overflow the intermediate sum of squares. Returns inf only when
    the norm itself exceeds the double range, and nan for nan input.
    """
    v = np.asarray(v, dtype=float)
    scale = float(np.max(np.abs(v))) if v.size else 0.0
    if scale == 0.0 or not math.isfinite(scale):
        return scale
    return scale * float(np.linalg.norm(v / scale))


def wrap_to_pi(v: np.ndarray) -> np.ndarray:
    """
    Limit the norm of a rotation vector to (-pi, pi].

    The axis is kept; the angle a = |v| is replaced by its IEEE remainder
    modulo 2*pi, which equals

        a2 = a - 2*pi*floor((a + pi) / (2*pi))

    and stays exact for any finite a. The result is (v / a) * a2. A negative
    a2 flips the sense of the axis, which describes the same rotation.
    A norm that is not finite (overflow, inf or nan entries) has no
    meaningful angle and wraps to the zero vector.
    """
    v = as_vector3(v, "v")
    a = vector_norm(v)
    if a <= math.pi:
        return v.copy()
    if not math.isfinite(a):
        logger.debug("Rotation vector norm is not finite, wrapping to zero")
        return np.zeros(3, dtype=float)
    a2 = math.remainder(a, 2.0 * math.pi)
    if a2 == -math.pi:
        a2 = math.pi
    return (v / a) * a2
