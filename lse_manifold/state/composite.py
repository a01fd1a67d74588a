"""
Composite manifold state: N scalars, M Euclidean 3-vectors, L unit quaternions.

Tangent layout (size N + 3M + 3L):

    [0, N)                    scalars
    [N + 3i, N + 3i + 3)      vector block i
    [N + 3M + 3i, ... + 3)    rotation-vector block of quaternion i

Chart:
    boxminus:  (a [-] b)_q = log(q_a (x) q_b^-1)
    boxplus:   (a [+] d)_q = exp(d_q) (x) q_a       (perturbation on the left)

so that b [+] (a [-] b) == a, and (a [+] d) [-] a == d for |d_q| < pi.
Scalars and vectors use ordinary addition and subtraction.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from lse_manifold.common.constants import QUAT_IDENTITY
from lse_manifold.common.geometry.conversions import quat_to_rotvec, rotvec_to_quat
from lse_manifold.common.geometry.quaternion import (
    Quaternion,
    quat_inverse,
    quat_multiply,
    quat_normalize,
)
from lse_manifold.common.param_models import StateLayout
from lse_manifold.common.validation import LayoutMismatch, as_quat, as_tangent, as_vector3

QuaternionLike = Union[Quaternion, np.ndarray, list, tuple]


def _check_index(i: int, count: int, kind: str) -> int:
    i = int(i)
    if not 0 <= i < count:
        raise IndexError(f"{kind} index {i} out of range for {count} {kind} block(s)")
    return i


class CompositeState:
    """
    Value type on the product manifold R^N x (R^3)^M x SO(3)^L.

    Constructed at identity. Getters return copies; setters validate shapes
    and normalize quaternions. boxplus returns a new state and leaves self
    unchanged. == compares layout and block contents exactly; allclose is
    the tolerant, sign-insensitive comparison.
    """

    __slots__ = ("_layout", "_scalars", "_vectors", "_quats")

    def __init__(self, layout: StateLayout):
        self._layout = layout
        self._scalars = np.zeros(layout.n_scalars, dtype=float)
        self._vectors = np.zeros((layout.n_vectors, 3), dtype=float)
        self._quats = np.tile(np.array(QUAT_IDENTITY, dtype=float), (layout.n_quaternions, 1))

    @classmethod
    def from_counts(cls, n_scalars: int = 0, n_vectors: int = 0, n_quaternions: int = 0) -> "CompositeState":
        return cls(StateLayout(n_scalars=n_scalars, n_vectors=n_vectors, n_quaternions=n_quaternions))

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    @property
    def layout(self) -> StateLayout:
        return self._layout

    @property
    def dim(self) -> int:
        """Tangent-space dimension N + 3M + 3L."""
        return self._layout.dim

    def get_dim(self) -> int:
        return self._layout.dim

    def scalar_slice(self) -> slice:
        return slice(0, self._layout.n_scalars)

    def vector_slice(self, i: int) -> slice:
        i = _check_index(i, self._layout.n_vectors, "vector")
        start = self._layout.n_scalars + 3 * i
        return slice(start, start + 3)

    def quaternion_slice(self, i: int) -> slice:
        i = _check_index(i, self._layout.n_quaternions, "quaternion")
        start = self._layout.n_scalars + 3 * self._layout.n_vectors + 3 * i
        return slice(start, start + 3)

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Set the group identity: scalars 0, vectors 0, quaternions (0, 0, 0, 1)."""
        self._scalars[:] = 0.0
        self._vectors[:] = 0.0
        self._quats[:] = QUAT_IDENTITY

    def scalar(self, i: int) -> float:
        return float(self._scalars[_check_index(i, self._layout.n_scalars, "scalar")])

    def set_scalar(self, i: int, value: float) -> None:
        self._scalars[_check_index(i, self._layout.n_scalars, "scalar")] = float(value)

    def vector(self, i: int) -> np.ndarray:
        return self._vectors[_check_index(i, self._layout.n_vectors, "vector")].copy()

    def set_vector(self, i: int, v) -> None:
        self._vectors[_check_index(i, self._layout.n_vectors, "vector")] = as_vector3(v, f"vector[{i}]")

    def quaternion(self, i: int) -> Quaternion:
        return Quaternion.from_array(self._quats[_check_index(i, self._layout.n_quaternions, "quaternion")])

    def set_quaternion(self, i: int, q: QuaternionLike) -> None:
        """Store a quaternion (normalized; a ~zero quaternion becomes identity)."""
        i = _check_index(i, self._layout.n_quaternions, "quaternion")
        arr = q.as_array() if isinstance(q, Quaternion) else as_quat(q, f"quaternion[{i}]")
        self._quats[i] = quat_normalize(arr)

    @property
    def scalars(self) -> np.ndarray:
        return self._scalars.copy()

    @property
    def vectors(self) -> np.ndarray:
        return self._vectors.copy()

    @property
    def quaternions(self) -> np.ndarray:
        return self._quats.copy()

    # -------------------------------------------------------------------------
    # Manifold operations
    # -------------------------------------------------------------------------

    def boxminus(self, other: "CompositeState") -> np.ndarray:
        """
        Local difference self [-] other as a flat tangent vector.

        Rotation blocks are quat_to_rotvec(q_self (x) q_other^-1): the rotation
        vector of the relative rotation from other to self.

        Raises:
            LayoutMismatch: If the two states have different layouts
        """
        if not isinstance(other, CompositeState) or other._layout != self._layout:
            other_layout = getattr(other, "layout", type(other).__name__)
            raise LayoutMismatch(f"boxminus: layout {self._layout!r} vs {other_layout!r}")

        n = self._layout.n_scalars
        m = self._layout.n_vectors
        delta = np.empty(self.dim, dtype=float)
        delta[:n] = self._scalars - other._scalars
        delta[n:n + 3 * m] = (self._vectors - other._vectors).reshape(-1)
        offset = n + 3 * m
        for i in range(self._layout.n_quaternions):
            dq = quat_multiply(self._quats[i], quat_inverse(other._quats[i]))
            delta[offset + 3 * i:offset + 3 * i + 3] = quat_to_rotvec(dq)
        return delta

    def boxplus(self, delta) -> "CompositeState":
        """
        Retraction self [+] delta, returned as a new state.

        Rotation blocks become exp(delta_i) (x) q_i (left perturbation).

        Raises:
            LayoutMismatch: If delta does not have size dim
        """
        delta = as_tangent(delta, self.dim, "delta")
        n = self._layout.n_scalars
        m = self._layout.n_vectors

        result = CompositeState(self._layout)
        result._scalars = self._scalars + delta[:n]
        result._vectors = self._vectors + delta[n:n + 3 * m].reshape(m, 3)
        offset = n + 3 * m
        for i in range(self._layout.n_quaternions):
            dq = rotvec_to_quat(delta[offset + 3 * i:offset + 3 * i + 3])
            result._quats[i] = quat_normalize(quat_multiply(dq, self._quats[i]))
        return result

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def copy(self) -> "CompositeState":
        result = CompositeState(self._layout)
        result._scalars = self._scalars.copy()
        result._vectors = self._vectors.copy()
        result._quats = self._quats.copy()
        return result

    def allclose(self, other: "CompositeState", atol: float = 1e-9) -> bool:
        """Blockwise comparison; quaternions q and -q count as equal."""
        if not isinstance(other, CompositeState) or other._layout != self._layout:
            return False
        if not np.allclose(self._scalars, other._scalars, atol=atol, rtol=0.0):
            return False
        if not np.allclose(self._vectors, other._vectors, atol=atol, rtol=0.0):
            return False
        for qa, qb in zip(self._quats, other._quats):
            if not (np.allclose(qa, qb, atol=atol, rtol=0.0) or np.allclose(qa, -qb, atol=atol, rtol=0.0)):
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompositeState):
            return NotImplemented
        return (
            self._layout == other._layout
            and bool(np.array_equal(self._scalars, other._scalars))
            and bool(np.array_equal(self._vectors, other._vectors))
            and bool(np.array_equal(self._quats, other._quats))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"CompositeState(layout=({self._layout.n_scalars}, {self._layout.n_vectors}, "
            f"{self._layout.n_quaternions}), scalars={self._scalars.tolist()}, "
            f"vectors={self._vectors.tolist()}, quaternions={self._quats.tolist()})"
        )
