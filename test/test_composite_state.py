"""Tests for CompositeState: layout, element access and the boxplus/boxminus chart."""

import math

import numpy as np
import pytest

from lse_manifold.common.geometry import Quaternion, quat_multiply, rotvec_to_quat
from lse_manifold.common.validation import LayoutMismatch
from lse_manifold.state import CompositeState, StateLayout


def _random_state(rng, n_scalars=2, n_vectors=3, n_quaternions=2) -> CompositeState:
    state = CompositeState.from_counts(n_scalars, n_vectors, n_quaternions)
    for i in range(n_scalars):
        state.set_scalar(i, rng.normal())
    for i in range(n_vectors):
        state.set_vector(i, rng.normal(size=3))
    for i in range(n_quaternions):
        state.set_quaternion(i, rng.normal(size=4))
    return state


def _random_delta(rng, state: CompositeState, max_angle=math.pi - 0.1) -> np.ndarray:
    delta = rng.normal(size=state.dim)
    for i in range(state.layout.n_quaternions):
        axis = rng.normal(size=3)
        axis /= np.linalg.norm(axis)
        delta[state.quaternion_slice(i)] = axis * rng.uniform(1e-3, max_angle)
    return delta


class TestLayout:
    @pytest.mark.parametrize(
        "counts, dim",
        [((1, 1, 1), 7), ((2, 3, 4), 23), ((0, 0, 0), 0), ((5, 0, 0), 5), ((0, 0, 2), 6)],
    )
    def test_dim(self, counts, dim):
        state = CompositeState.from_counts(*counts)
        assert state.dim == dim
        assert state.get_dim() == dim
        assert state.layout.dim == dim

    def test_slices(self):
        state = CompositeState.from_counts(2, 3, 1)
        assert state.scalar_slice() == slice(0, 2)
        assert state.vector_slice(0) == slice(2, 5)
        assert state.vector_slice(1) == slice(5, 8)
        assert state.quaternion_slice(0) == slice(11, 14)

    def test_layout_equality(self):
        assert StateLayout(n_scalars=1, n_vectors=2) == StateLayout(n_scalars=1, n_vectors=2, n_quaternions=0)
        assert StateLayout(n_scalars=1) != StateLayout(n_vectors=1)


class TestResetAndAccess:
    def test_constructed_at_identity(self):
        state = CompositeState.from_counts(2, 2, 2)
        assert np.array_equal(state.scalars, np.zeros(2))
        assert np.array_equal(state.vectors, np.zeros((2, 3)))
        assert np.array_equal(state.quaternions, [[0.0, 0.0, 0.0, 1.0]] * 2)

    def test_reset(self, rng):
        state = _random_state(rng)
        state.reset()
        assert state.allclose(CompositeState.from_counts(2, 3, 2), atol=0.0)

    def test_getters_return_copies(self, rng):
        state = _random_state(rng)
        before = state.copy()
        state.vector(0)[:] = 100.0
        state.vectors[:] = 100.0
        state.scalars[:] = 100.0
        state.quaternions[:] = 100.0
        q = state.quaternion(0)
        q[3] = 100.0
        assert state.allclose(before, atol=0.0)

    def test_set_quaternion_normalizes(self):
        state = CompositeState.from_counts(0, 0, 1)
        state.set_quaternion(0, [0.0, 0.0, 3.0, 4.0])
        assert np.allclose(state.quaternion(0).as_array(), [0.0, 0.0, 0.6, 0.8])

    def test_set_quaternion_accepts_quaternion(self):
        state = CompositeState.from_counts(0, 0, 1)
        state.set_quaternion(0, Quaternion(0.0, 2.0, 0.0, 0.0))
        assert state.quaternion(0) == Quaternion(0.0, 1.0, 0.0, 0.0)

    def test_set_zero_quaternion_gives_identity(self):
        state = CompositeState.from_counts(0, 0, 1)
        state.set_quaternion(0, np.zeros(4))
        assert state.quaternion(0) == Quaternion.identity()

    def test_scalar_and_vector_round_trip(self):
        state = CompositeState.from_counts(1, 1, 0)
        state.set_scalar(0, 2.5)
        state.set_vector(0, [1.0, 2.0, 3.0])
        assert state.scalar(0) == 2.5
        assert np.array_equal(state.vector(0), [1.0, 2.0, 3.0])

    @pytest.mark.parametrize("index", [-1, 2])
    def test_index_out_of_range(self, index):
        state = CompositeState.from_counts(2, 2, 2)
        with pytest.raises(IndexError):
            state.scalar(index)
        with pytest.raises(IndexError):
            state.vector(index)
        with pytest.raises(IndexError):
            state.quaternion(index)
        with pytest.raises(IndexError):
            state.set_quaternion(index, [0.0, 0.0, 0.0, 1.0])

    def test_bad_vector_size(self):
        state = CompositeState.from_counts(0, 1, 0)
        with pytest.raises(ValueError):
            state.set_vector(0, [1.0, 2.0])

    def test_copy_is_independent(self, rng):
        state = _random_state(rng)
        clone = state.copy()
        clone.set_scalar(0, 42.0)
        clone.set_quaternion(1, [1.0, 0.0, 0.0, 0.0])
        assert state.scalar(0) != 42.0
        assert not state.allclose(clone)

    def test_equality_is_by_content(self, rng):
        state = _random_state(rng)
        assert state == state.copy()
        assert CompositeState.from_counts(1, 1, 1) == CompositeState.from_counts(1, 1, 1)

        changed = state.copy()
        changed.set_vector(2, [9.0, 9.0, 9.0])
        assert state != changed
        # Same dimension, different blocks
        assert CompositeState.from_counts(3, 0, 0) != CompositeState.from_counts(0, 1, 0)
        assert state != "state"

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(CompositeState.from_counts(1, 1, 1))


class TestBoxplus:
    def test_example_from_identity(self):
        state = CompositeState.from_counts(1, 1, 1)
        result = state.boxplus([2.0, 1.0, 0.0, 0.0, 0.0, 0.0, math.pi / 2])
        assert result.scalar(0) == pytest.approx(2.0)
        assert np.allclose(result.vector(0), [1.0, 0.0, 0.0])
        s = math.sqrt(0.5)
        assert result.quaternion(0).allclose(Quaternion(0.0, 0.0, s, s), atol=1e-12)

    def test_does_not_mutate(self, rng):
        state = _random_state(rng)
        before = state.copy()
        state.boxplus(_random_delta(rng, state))
        assert state.allclose(before, atol=0.0)

    def test_zero_delta(self, rng):
        state = _random_state(rng)
        assert state.boxplus(np.zeros(state.dim)).allclose(state, atol=1e-12)

    def test_left_perturbation(self):
        state = CompositeState.from_counts(0, 0, 1)
        state.set_quaternion(0, rotvec_to_quat([0.3, 0.0, 0.0]))
        result = state.boxplus([0.0, 0.0, 0.5])
        # exp(d) (x) q, not q (x) exp(d)
        expected = quat_multiply(rotvec_to_quat([0.0, 0.0, 0.5]), rotvec_to_quat([0.3, 0.0, 0.0]))
        assert result.quaternion(0).allclose(Quaternion.from_array(expected), atol=1e-12)

    def test_quaternions_stay_unit(self, rng):
        state = _random_state(rng)
        for _ in range(50):
            state = state.boxplus(_random_delta(rng, state))
        assert np.allclose(np.linalg.norm(state.quaternions, axis=1), 1.0)

    def test_wrong_delta_size(self):
        state = CompositeState.from_counts(1, 1, 1)
        with pytest.raises(LayoutMismatch):
            state.boxplus(np.zeros(6))


class TestBoxminus:
    def test_self_difference_is_zero(self, rng):
        state = _random_state(rng)
        assert np.allclose(state.boxminus(state), 0.0, atol=1e-12)

    def test_scalar_and_vector_blocks_subtract(self, rng):
        a = _random_state(rng)
        b = _random_state(rng)
        d = a.boxminus(b)
        assert np.allclose(d[a.scalar_slice()], a.scalars - b.scalars)
        for i in range(a.layout.n_vectors):
            assert np.allclose(d[a.vector_slice(i)], a.vector(i) - b.vector(i))

    def test_rotation_blocks_bounded(self, rng):
        for _ in range(10):
            a = _random_state(rng)
            b = _random_state(rng)
            d = a.boxminus(b)
            for i in range(a.layout.n_quaternions):
                assert np.linalg.norm(d[a.quaternion_slice(i)]) <= math.pi + 1e-12

    def test_other_boxplus_difference_recovers(self, rng):
        for _ in range(10):
            a = _random_state(rng)
            other = _random_state(rng)
            assert other.boxplus(a.boxminus(other)).allclose(a, atol=1e-9)

    def test_difference_of_retraction(self, rng):
        for _ in range(10):
            state = _random_state(rng)
            delta = _random_delta(rng, state)
            assert np.allclose(state.boxplus(delta).boxminus(state), delta, atol=1e-9)
            assert np.allclose(state.boxminus(state.boxplus(delta)), -delta, atol=1e-9)

    def test_layout_mismatch(self):
        a = CompositeState.from_counts(1, 1, 1)
        with pytest.raises(LayoutMismatch):
            a.boxminus(CompositeState.from_counts(1, 2, 1))
        with pytest.raises(LayoutMismatch):
            a.boxminus(CompositeState.from_counts(7, 0, 0))
        with pytest.raises(LayoutMismatch):
            a.boxminus(np.zeros(7))

    def test_layout_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            CompositeState.from_counts(1).boxminus(CompositeState.from_counts(2))


class TestEmptyLayout:
    def test_operations(self):
        a = CompositeState.from_counts()
        assert a.dim == 0
        assert a.boxminus(a.copy()).shape == (0,)
        assert a.boxplus([]).allclose(a)
        a.reset()
        assert "CompositeState" in repr(a)
