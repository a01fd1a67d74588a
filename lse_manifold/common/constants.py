"""
Numerical constants for the manifold algebra.

These thresholds are the ONLY branch conditions of the numeric code.
They select a computational path (small-angle linearization, identity
fallback, zero Euler-rate matrix); they are not model parameters.
"""

# =============================================================================
# Numerical Thresholds (stability, not policy)
# =============================================================================
# Sized for IEEE 754 double precision.

# Small-angle branch of the log/exp maps (|v| of quaternion or rotation vector)
ROTATION_EPSILON: float = 1e-10

# Degenerate quaternion norm: below this, normalize() falls back to identity
QUAT_NORM_EPSILON: float = 1e-10

# |cos(pitch)| below this makes the inverse Euler-rate matrix undefined
EULER_RATE_EPSILON: float = 1e-10

# =============================================================================
# Conventions
# =============================================================================

# Quaternion layout is (x, y, z, w): vector part first, scalar part last
QUAT_IDENTITY = (0.0, 0.0, 0.0, 1.0)
QUAT_SIZE = 4
VECTOR_SIZE = 3

# Tangent-space size of one rotation block (so(3))
ROTATION_TANGENT_SIZE = 3
