"""
lse_manifold: manifold algebra for robot state estimation.

Rotation-representation conversions, unit-quaternion algebra and a
composite state (scalars, 3-vectors, quaternions) with boxplus/boxminus.
"""

from lse_manifold.common.geometry import (
    Quaternion,
    quat_identity,
    quat_inverse,
    quat_left_matrix,
    quat_multiply,
    quat_normalize,
    quat_right_matrix,
    quat_to_rotmat,
    quat_to_rotvec,
    quat_to_rpy,
    quat_to_ypr,
    rotmat_to_quat,
    rotvec_to_quat,
    rotvec_to_rotmat,
    rpy_to_ear,
    rpy_to_ear_inv,
    rpy_to_quat,
    skew,
    unskew,
    wrap_to_pi,
    ypr_to_quat,
)
from lse_manifold.common.validation import ContractViolation, LayoutMismatch
from lse_manifold.state import CompositeState, StateLayout

__version__ = "0.1.0"

__all__ = [
    "Quaternion",
    "quat_identity",
    "quat_inverse",
    "quat_left_matrix",
    "quat_multiply",
    "quat_normalize",
    "quat_right_matrix",
    "quat_to_rotmat",
    "quat_to_rotvec",
    "quat_to_rpy",
    "quat_to_ypr",
    "rotmat_to_quat",
    "rotvec_to_quat",
    "rotvec_to_rotmat",
    "rpy_to_ear",
    "rpy_to_ear_inv",
    "rpy_to_quat",
    "skew",
    "unskew",
    "wrap_to_pi",
    "ypr_to_quat",
    "ContractViolation",
    "LayoutMismatch",
    "CompositeState",
    "StateLayout",
]
