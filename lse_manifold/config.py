"""
State-layout configuration hooks.

Provides utilities for loading, validating, and building composite states
from YAML files.

This module bridges the gap between:
1. YAML configuration files (config/lse_manifold_base.yaml, config/presets/)
2. Pydantic validation models (common/param_models.py)
3. CompositeState instances used by the estimator

Usage:
    from lse_manifold.config import load_state_config, build_state

    # Load from YAML
    config = load_state_config("/path/to/config.yaml")

    # Initialized state
    state = build_state(config)
"""

from __future__ import annotations

import copy
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from lse_manifold.common.param_models import StateConfig
from lse_manifold.state.composite import CompositeState

logger = logging.getLogger(__name__)

# Top-level YAML section holding the state configuration
STATE_SECTION = "state"


def load_yaml_config(config_path: str | Path) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge multiple configuration dictionaries (later configs override earlier).

    Args:
        configs: Variable number of config dicts to merge

    Returns:
        Merged configuration dictionary
    """
    result: Dict[str, Any] = {}
    for config in configs:
        if config:
            _deep_merge(result, config)
    return result


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override dict into base dict (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)


def load_state_config(
    base_path: Optional[str | Path] = None,
    preset_path: Optional[str | Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> StateConfig:
    """
    Load and validate state configuration from YAML files.

    Args:
        base_path: Path to base configuration YAML (lse_manifold_base.yaml)
        preset_path: Optional path to preset override YAML (e.g., presets/quadruped.yaml)
        overrides: Optional dictionary of overrides for the state section

    Returns:
        Validated StateConfig model

    Raises:
        ValidationError: If configuration is invalid
    """
    base_config: Dict[str, Any] = {}
    if base_path:
        base_config = load_yaml_config(base_path).get(STATE_SECTION, {})

    preset_config: Dict[str, Any] = {}
    if preset_path:
        preset_config = load_yaml_config(preset_path).get(STATE_SECTION, {})

    # Merge configs: base <- preset <- overrides
    merged = merge_configs(base_config, preset_config, overrides or {})

    config = StateConfig(**merged)
    layout = config.layout
    logger.info(
        "Loaded state layout: %d scalar(s), %d vector(s), %d quaternion(s), dim=%d",
        layout.n_scalars,
        layout.n_vectors,
        layout.n_quaternions,
        layout.dim,
    )
    return config


def build_state(config: StateConfig) -> CompositeState:
    """
    Create a CompositeState from a validated config.

    Blocks without initial values stay at identity; quaternions are normalized.
    """
    state = CompositeState(config.layout)
    for i, value in enumerate(config.scalars or []):
        state.set_scalar(i, value)
    for i, vector in enumerate(config.vectors or []):
        state.set_vector(i, vector)
    for i, quat in enumerate(config.quaternions or []):
        state.set_quaternion(i, quat)
    return state


def get_default_config_paths() -> tuple[Path, Path]:
    """
    Get default paths to configuration files.

    Looks next to the source tree first, then in the share directory that
    setup.py installs the YAML files into.

    Returns:
        Tuple of (base_config_path, presets_dir_path)
    """
    # Source checkout: config/ sits next to the package directory
    config_dir = Path(__file__).parent.parent / "config"

    # Fallback: installed data_files location (see setup.py)
    if not (config_dir / "lse_manifold_base.yaml").exists():
        config_dir = Path(sys.prefix) / "share" / "lse_manifold" / "config"

    return config_dir / "lse_manifold_base.yaml", config_dir / "presets"


def get_preset_path(preset_name: str) -> Optional[Path]:
    """
    Get path to a preset configuration file.

    Args:
        preset_name: Name of preset (e.g., "quadruped")

    Returns:
        Path to preset file, or None if not found
    """
    _, presets_dir = get_default_config_paths()
    preset_path = presets_dir / f"{preset_name}.yaml"
    return preset_path if preset_path.exists() else None
