"""
test_utils.py
-------------

Tests for PRNG helpers and per-draw linear algebra.
"""

import jax.numpy as jnp
import jax.random as jr

from pibble.utils import (
    backsolve,
    fresh_key,
    is_positive_definite,
    map_iterations,
    resolve_key,
    seed,
    split,
    symmetrize,
    upper_cholesky,
)


class TestRng:
    def test_seed_is_deterministic(self):
        assert jnp.array_equal(seed(3), seed(3))

    def test_split_count(self):
        assert split(seed(0), num=4).shape[0] == 4

    def test_resolve_key(self):
        key = seed(1)
        assert resolve_key(key) is key
        assert resolve_key(None).shape == fresh_key().shape


class TestMath:
    def test_upper_cholesky_and_backsolve(self):
        A = jnp.array([[4.0, 2.0], [2.0, 3.0]])
        U = upper_cholesky(A)
        assert jnp.allclose(U, jnp.triu(U))
        assert jnp.allclose(U.T @ U, A)
        B = jnp.array([[1.0], [2.0]])
        assert jnp.allclose(U @ backsolve(U, B), B)

    def test_map_iterations_last_axis(self):
        A = jr.normal(jr.PRNGKey(0), (3, 4, 6))
        out = map_iterations(lambda a: a.T @ a, A)
        assert out.shape == (4, 4, 6)
        assert jnp.allclose(out[..., 2], A[..., 2].T @ A[..., 2])

    def test_map_iterations_shared_argument(self):
        A = jnp.ones((2, 3, 5))
        x = jnp.arange(3.0)
        out = map_iterations(lambda a, v: a @ v, A, x, in_axes=(-1, None))
        assert out.shape == (2, 5)
        assert jnp.allclose(out, 3.0)

    def test_positive_definite(self):
        assert is_positive_definite(jnp.eye(3))
        assert not is_positive_definite(jnp.diag(jnp.array([1.0, -1.0])))
        assert jnp.allclose(symmetrize(jnp.array([[1.0, 2.0], [0.0, 1.0]])), jnp.array([[1.0, 1.0], [1.0, 1.0]]))
