"""
Common package for lse_manifold.

Shared constants, contract validation and geometry used by the state layer.

Subpackages:
- geometry/: SO(3) and quaternion operations
"""

from lse_manifold.common import constants
from lse_manifold.common.validation import ContractViolation, LayoutMismatch

__all__ = [
    "constants",
    "ContractViolation",
    "LayoutMismatch",
]
