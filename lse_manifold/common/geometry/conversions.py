"""
Rotation-representation conversions.

Conventions:
    - quaternion:       alibi, (x, y, z, w)
    - rotation matrix:  alibi, R @ v_body = v_ref
    - rotation vector:  alibi, angle * axis with angle in (-pi, pi]
    - yaw-pitch-roll:   alias (passive) Euler angles
    - roll-pitch-yaw:   Euler angles of the opposite sequence; the two Euler
                        conventions are NOT interchangeable

Euler angles are singular at pitch = +/-pi/2 (gimbal lock). The asin
arguments are clamped to [-1, 1] so these configurations produce a valid
(non-unique) triple instead of NaN.

Numerical Policy:
    ROTATION_EPSILON and EULER_RATE_EPSILON (1e-10) are the only branch
    conditions. Below them the log/exp maps switch to their first-order
    form and the inverse Euler-rate matrix becomes the zero matrix.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from lse_manifold.common.constants import EULER_RATE_EPSILON, ROTATION_EPSILON
from lse_manifold.common.geometry.quaternion import quat_identity, quat_normalize
from lse_manifold.common.geometry.so3_numpy import skew, vector_norm, wrap_to_pi
from lse_manifold.common.validation import as_matrix3, as_quat, as_vector3

logger = logging.getLogger(__name__)


def _clamped_asin(value: float) -> float:
    return math.asin(min(1.0, max(-1.0, value)))


# =============================================================================
# Quaternion <-> Rotation matrix
# =============================================================================


def quat_to_rotmat(q: np.ndarray) -> np.ndarray:
    """
    Convert quaternion (x, y, z, w) to rotation matrix.

        R = (2w^2 - 1) I + 2w [v]x + 2 v v^T

    The quaternion is NOT renormalized: callers supply a unit quaternion.
    """
    q = as_quat(q, "q")
    v = q[:3]
    w = q[3]
    return (2.0 * w * w - 1.0) * np.eye(3, dtype=float) + 2.0 * w * skew(v) + 2.0 * np.outer(v, v)


def rotmat_to_quat(R: np.ndarray) -> np.ndarray:
    """
    Convert rotation matrix to quaternion (x, y, z, w).

    Uses Shepperd's method for numerical stability (the branch is picked on
    the largest diagonal term, so the divisor never approaches zero).
    """
    R = as_matrix3(R, "R")
    trace = np.trace(R)

    if trace > 0:
        s = math.sqrt(trace + 1.0) * 2  # s = 4 * qw
        w = 0.25 * s
        x = (R[2, 1] - R[1, 2]) / s
        y = (R[0, 2] - R[2, 0]) / s
        z = (R[1, 0] - R[0, 1]) / s
    elif (R[0, 0] > R[1, 1]) and (R[0, 0] > R[2, 2]):
        s = math.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2]) * 2
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = math.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2]) * 2
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = math.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1]) * 2
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s

    return quat_normalize(np.array([x, y, z, w], dtype=float))


# =============================================================================
# Quaternion <-> Rotation vector (log/exp maps of SO(3))
# =============================================================================


def quat_to_rotvec(q: np.ndarray) -> np.ndarray:
    """
    Logarithmic map: unit quaternion -> rotation vector.

    With s = |v| and angle a = 2 atan2(s, w), returns v * a / s. For
    s < ROTATION_EPSILON the first-order form 2 v is used instead of
    dividing by ~0. The result is wrapped to (-pi, pi] so that q and -q
    map to the same canonical rotation vector.
    """
    q = as_quat(q, "q")
    v = q[:3]
    s = vector_norm(v)
    if s >= ROTATION_EPSILON:
        a = 2.0 * math.atan2(s, q[3])
        return wrap_to_pi(v * (a / s))
    return v * 2.0


def rotvec_to_quat(v: np.ndarray) -> np.ndarray:
    """
    Exponential map: rotation vector -> unit quaternion.

        q = (sin(a/2) / a * v, cos(a/2)),  a = |v|

    For a < ROTATION_EPSILON the vector part is v itself (first-order
    Taylor). The result is always renormalized. A norm beyond the double
    range (or inf/nan entries) has no meaningful angle and maps to the
    identity.
    """
    v = as_vector3(v, "v")
    a = vector_norm(v)
    if not math.isfinite(a):
        logger.debug("Rotation vector norm is not finite, returning identity")
        return quat_identity()
    q = np.empty(4, dtype=float)
    q[3] = math.cos(a / 2.0)
    if a >= ROTATION_EPSILON:
        q[:3] = math.sin(a / 2.0) * (v / a)
    else:
        q[:3] = v
    return quat_normalize(q)


def rotvec_to_rotmat(v: np.ndarray) -> np.ndarray:
    """Rotation vector -> rotation matrix (through the exponential map)."""
    return quat_to_rotmat(rotvec_to_quat(v))


# =============================================================================
# Yaw-pitch-roll (alias)
# =============================================================================


def quat_to_ypr(q: np.ndarray) -> np.ndarray:
    """Quaternion -> yaw-pitch-roll (alias) Euler angles."""
    x, y, z, w = as_quat(q, "q")
    return np.array([
        math.atan2(2.0 * (-w * x + y * z), 1.0 - 2.0 * (x * x + y * y)),
        _clamped_asin(2.0 * (-w * y - x * z)),
        math.atan2(2.0 * (-w * z + x * y), 1.0 - 2.0 * (y * y + z * z)),
    ], dtype=float)


def ypr_to_quat(ypr: np.ndarray) -> np.ndarray:
    """Yaw-pitch-roll (alias) Euler angles -> quaternion."""
    ypr = as_vector3(ypr, "ypr")
    c_phi, s_phi = math.cos(ypr[0] / 2.0), math.sin(ypr[0] / 2.0)
    c_theta, s_theta = math.cos(ypr[1] / 2.0), math.sin(ypr[1] / 2.0)
    c_psi, s_psi = math.cos(ypr[2] / 2.0), math.sin(ypr[2] / 2.0)
    return np.array([
        c_phi * s_theta * s_psi - c_theta * c_psi * s_phi,
        -c_phi * s_theta * c_psi - c_theta * s_psi * s_phi,
        -c_phi * c_theta * s_psi + s_theta * c_psi * s_phi,
        c_phi * c_theta * c_psi + s_theta * s_psi * s_phi,
    ], dtype=float)


# =============================================================================
# Roll-pitch-yaw
# =============================================================================


def quat_to_rpy(q: np.ndarray) -> np.ndarray:
    """Quaternion -> roll-pitch-yaw Euler angles."""
    x, y, z, w = as_quat(q, "q")
    return np.array([
        math.atan2(2.0 * (-z * y - w * x), z * z + w * w - x * x - y * y),
        _clamped_asin(2.0 * (x * z - w * y)),
        math.atan2(-2.0 * x * y - 2.0 * w * z, x * x + w * w - z * z - y * y),
    ], dtype=float)


def rpy_to_quat(rpy: np.ndarray) -> np.ndarray:
    """Roll-pitch-yaw Euler angles -> quaternion (inverse of quat_to_rpy)."""
    rpy = as_vector3(rpy, "rpy")
    c_roll, s_roll = math.cos(rpy[0] / 2.0), math.sin(rpy[0] / 2.0)
    c_pitch, s_pitch = math.cos(rpy[1] / 2.0), math.sin(rpy[1] / 2.0)
    c_yaw, s_yaw = math.cos(rpy[2] / 2.0), math.sin(rpy[2] / 2.0)
    return np.array([
        -c_yaw * c_pitch * s_roll - s_yaw * s_pitch * c_roll,
        -c_yaw * s_pitch * c_roll + s_yaw * c_pitch * s_roll,
        -c_yaw * s_pitch * s_roll - s_yaw * c_pitch * c_roll,
        c_yaw * c_pitch * c_roll - s_yaw * s_pitch * s_roll,
    ], dtype=float)


# =============================================================================
# Euler angular rates (roll-pitch-yaw)
# =============================================================================


def rpy_to_ear(rpy: np.ndarray) -> np.ndarray:
    """
    Euler angular-rate matrix E for the roll-pitch-yaw convention.

    For q(t) = rpy_to_quat(rpy(t)) driven by a left perturbation

        q(t + dt) = rotvec_to_quat(omega * dt) (x) q(t)

    the rates satisfy

        E @ d(rpy)/dt == -omega

    The columns are the roll, pitch and yaw axes in the reference frame:
    Rz(-yaw) Ry(-pitch) e_x, Rz(-yaw) e_y and e_z. The minus sign comes from
    the negated angles in rpy_to_quat. Only pitch and yaw enter.
    """
    rpy = as_vector3(rpy, "rpy")
    cp, sp = math.cos(rpy[1]), math.sin(rpy[1])
    cy, sy = math.cos(rpy[2]), math.sin(rpy[2])
    return np.array([
        [cp * cy, sy, 0.0],
        [-cp * sy, cy, 0.0],
        [sp, 0.0, 1.0],
    ], dtype=float)


def rpy_to_ear_inv(rpy: np.ndarray) -> np.ndarray:
    """
    Inverse of rpy_to_ear: d(rpy)/dt == -rpy_to_ear_inv(rpy) @ omega for
    the left perturbation described in rpy_to_ear.

    Singular at cos(pitch) = 0. When |cos(pitch)| <= EULER_RATE_EPSILON the
    ZERO matrix is returned: there is no well-defined Euler rate there, and
    callers must treat a zero result as an unusable update, not as a
    zero-velocity reading.
    """
    rpy = as_vector3(rpy, "rpy")
    cp = math.cos(rpy[1])
    if abs(cp) <= EULER_RATE_EPSILON:
        logger.debug("Euler-rate inverse undefined at pitch=%.6f, returning zero matrix", rpy[1])
        return np.zeros((3, 3), dtype=float)
    cpi = 1.0 / cp
    tp = math.tan(rpy[1])
    cy, sy = math.cos(rpy[2]), math.sin(rpy[2])
    return np.array([
        [cpi * cy, -cpi * sy, 0.0],
        [sy, cy, 0.0],
        [-cy * tp, sy * tp, 1.0],
    ], dtype=float)
