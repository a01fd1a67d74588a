import numpy as np
import pytest

from lse_manifold.common.param_models import StateConfig
from lse_manifold.config import get_default_config_paths, load_state_config

# =============================================================================
# Production Config Fixtures
# =============================================================================
# These fixtures load the shipped configuration files, ensuring tests
# validate the same layouts an estimator would be started with.


@pytest.fixture
def base_config_path():
    """Path to config/lse_manifold_base.yaml."""
    base_path, _ = get_default_config_paths()
    if not base_path.exists():
        pytest.skip("lse_manifold_base.yaml not found")
    return base_path


@pytest.fixture
def base_state_config(base_config_path) -> StateConfig:
    """Validated base state configuration."""
    return load_state_config(base_config_path)


# =============================================================================
# Test Utility Fixtures
# =============================================================================


@pytest.fixture
def rng():
    """Seeded generator for reproducible tests."""
    return np.random.default_rng(42)


def random_unit_quat(rng) -> np.ndarray:
    q = rng.normal(size=4)
    return q / np.linalg.norm(q)


def random_rotvec(rng, max_angle: float = np.pi - 0.1, min_angle: float = 1e-3) -> np.ndarray:
    axis = rng.normal(size=3)
    axis /= np.linalg.norm(axis)
    return axis * rng.uniform(min_angle, max_angle)


@pytest.fixture
def random_quats(rng):
    """A batch of random unit quaternions (x, y, z, w)."""
    return [random_unit_quat(rng) for _ in range(20)]


@pytest.fixture
def random_rotvecs(rng):
    """A batch of random rotation vectors with angle in (0, pi)."""
    return [random_rotvec(rng) for _ in range(20)]
