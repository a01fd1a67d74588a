"""
Pydantic models for composite-state configuration.

StateLayout is the runtime block-count descriptor (N scalars, M 3-vectors,
L unit quaternions) of a CompositeState. StateConfig adds optional initial
values and is what the YAML loader in lse_manifold.config validates.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lse_manifold.common.constants import QUAT_SIZE, ROTATION_TANGENT_SIZE, VECTOR_SIZE
from lse_manifold.common.validation import ContractViolation, validate_finite


class StateLayout(BaseModel):
    """Block counts of a composite state. Tangent dim is N + 3M + 3L."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    n_scalars: int = Field(default=0, ge=0)
    n_vectors: int = Field(default=0, ge=0)
    n_quaternions: int = Field(default=0, ge=0)

    @property
    def dim(self) -> int:
        return self.n_scalars + VECTOR_SIZE * self.n_vectors + ROTATION_TANGENT_SIZE * self.n_quaternions


class StateConfig(BaseModel):
    """
    Layout plus optional initial values.

    Omitted blocks start at identity (0 for scalars and vectors, (0, 0, 0, 1)
    for quaternions). Quaternions are normalized when the state is built.
    """

    model_config = ConfigDict(extra="forbid")

    layout: StateLayout = Field(default_factory=StateLayout)
    scalars: Optional[List[float]] = None
    vectors: Optional[List[List[float]]] = None
    quaternions: Optional[List[List[float]]] = None

    @model_validator(mode="after")
    def _check_initial_values(self) -> "StateConfig":
        layout = self.layout
        if self.scalars is not None:
            _check_block("scalars", self.scalars, layout.n_scalars, None)
        if self.vectors is not None:
            _check_block("vectors", self.vectors, layout.n_vectors, VECTOR_SIZE)
        if self.quaternions is not None:
            _check_block("quaternions", self.quaternions, layout.n_quaternions, QUAT_SIZE)
        return self


def _check_block(name: str, values: list, count: int, width: Optional[int]) -> None:
    if len(values) != count:
        raise ContractViolation(f"{name}: Expected {count} entries for layout, got {len(values)}")
    if width is not None:
        for i, entry in enumerate(values):
            if len(entry) != width:
                raise ContractViolation(f"{name}[{i}]: Expected {width} components, got {len(entry)}")
    validate_finite(values, name)
