"""
Geometry package for lse_manifold.

SO(3) primitives, unit-quaternion algebra and rotation-representation
conversions, NumPy backend.

Modules:
- so3_numpy: hat/vee operators, overflow-safe norm, rotation-vector wrapping
- quaternion: quaternion algebra (functions and the Quaternion value class)
- conversions: quaternion <-> matrix / rotation vector / Euler angles,
  Euler angular-rate matrices

Usage:
    from lse_manifold.common.geometry import (
        quat_multiply,
        quat_to_rotvec,
        rotvec_to_quat,
        rpy_to_ear_inv,
    )
"""

from __future__ import annotations

from lse_manifold.common.geometry.so3_numpy import (
    skew,
    unskew,
    vector_norm,
    wrap_to_pi,
)
from lse_manifold.common.geometry.quaternion import (
    Quaternion,
    quat_identity,
    quat_normalize,
    quat_multiply,
    quat_inverse,
    quat_left_matrix,
    quat_right_matrix,
)
from lse_manifold.common.geometry.conversions import (
    quat_to_rotmat,
    rotmat_to_quat,
    quat_to_rotvec,
    rotvec_to_quat,
    rotvec_to_rotmat,
    quat_to_ypr,
    ypr_to_quat,
    quat_to_rpy,
    rpy_to_quat,
    rpy_to_ear,
    rpy_to_ear_inv,
)

__all__ = [
    # SO(3) primitives
    "skew",
    "unskew",
    "vector_norm",
    "wrap_to_pi",
    # Quaternion algebra
    "Quaternion",
    "quat_identity",
    "quat_normalize",
    "quat_multiply",
    "quat_inverse",
    "quat_left_matrix",
    "quat_right_matrix",
    # Conversions
    "quat_to_rotmat",
    "rotmat_to_quat",
    "quat_to_rotvec",
    "rotvec_to_quat",
    "rotvec_to_rotmat",
    "quat_to_ypr",
    "ypr_to_quat",
    "quat_to_rpy",
    "rpy_to_quat",
    "rpy_to_ear",
    "rpy_to_ear_inv",
]
