"""Contract validation utilities for lse_manifold.

Shape and layout checks at module boundaries. Numeric degeneracies are
never reported here: the geometry code absorbs them with documented
fallbacks. Only programming errors (wrong sizes, incompatible layouts,
non-finite configuration values) raise.
"""
import numpy as np

from lse_manifold.common.constants import QUAT_SIZE, VECTOR_SIZE


class ContractViolation(ValueError):
    """Raised when a data contract is violated."""
    pass


class LayoutMismatch(ContractViolation):
    """Raised when two composite states (or a state and a tangent vector)
    do not share the same block layout."""
    pass


def _as_flat(value, size: int, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=float).reshape(-1)
    if arr.shape != (size,):
        raise ContractViolation(f"{name}: Expected {size} elements, got {arr.size}")
    return arr


def as_vector3(v, name: str = "vector") -> np.ndarray:
    """Coerce to a float (3,) array.

    Raises:
        ContractViolation: If v does not hold exactly 3 elements
    """
    return _as_flat(v, VECTOR_SIZE, name)


def as_quat(q, name: str = "quaternion") -> np.ndarray:
    """Coerce to a float (4,) array in (x, y, z, w) order.

    Raises:
        ContractViolation: If q does not hold exactly 4 elements
    """
    return _as_flat(q, QUAT_SIZE, name)


def as_matrix3(M, name: str = "matrix") -> np.ndarray:
    """Coerce to a float (3, 3) array.

    Raises:
        ContractViolation: If M is not 3x3
    """
    M = np.asarray(M, dtype=float)
    if M.shape != (3, 3):
        raise ContractViolation(f"{name}: Expected shape (3, 3), got {M.shape}")
    return M


def as_tangent(d, dim: int, name: str = "tangent") -> np.ndarray:
    """Coerce to a float (dim,) tangent vector.

    Raises:
        LayoutMismatch: If the size does not match the state dimension
    """
    arr = np.asarray(d, dtype=float).reshape(-1)
    if arr.shape != (dim,):
        raise LayoutMismatch(f"{name}: Expected tangent of dimension {dim}, got {arr.size}")
    return arr


def validate_finite(value, name: str = "value") -> None:
    """Validate an array contains no inf/nan.

    Args:
        value: Array-like to check
        name: Name for error messages

    Raises:
        ContractViolation: If any entry is inf or nan
    """
    arr = np.asarray(value, dtype=float)
    if not np.all(np.isfinite(arr)):
        raise ContractViolation(f"{name}: Contains inf/nan: {arr}")
