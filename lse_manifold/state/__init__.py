"""
State package for lse_manifold.

Composite manifold state (scalars, 3-vectors, unit quaternions) with
boxplus/boxminus.
"""

from lse_manifold.common.param_models import StateLayout
from lse_manifold.state.composite import CompositeState

__all__ = [
    "CompositeState",
    "StateLayout",
]
