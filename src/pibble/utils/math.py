"""
math.py
-------

Linear-algebra utilities shared by the sampling and prediction engines.

Includes:
- upper_cholesky : upper-triangular factor U with A = U^T U.
- backsolve : solve U x = B for upper-triangular U.
- map_iterations : vectorize a per-draw function over the iteration axis.
- symmetrize : remove floating-point asymmetry from covariance matrices.

All functions use JAX (jax.numpy). Posterior arrays keep the iteration
index on the LAST axis, so map_iterations vmaps with in_axes=-1 and
out_axes=-1: each draw is computed independently and written to its own
output slice.

Examples
--------
>>> import jax.numpy as jnp
>>> from pibble.utils.math import upper_cholesky, backsolve
>>> A = jnp.array([[4.0, 2.0], [2.0, 3.0]])
>>> U = upper_cholesky(A)
>>> jnp.allclose(U.T @ U, A)
Array(True, dtype=bool)
"""

from __future__ import annotations

from typing import Callable

import jax
import jax.numpy as jnp
from jax.scipy.linalg import solve_triangular


def upper_cholesky(A: jnp.ndarray) -> jnp.ndarray:
    """
    Upper-triangular Cholesky factor.

    Parameters
    ----------
    A : jnp.ndarray, shape (k, k)
        Symmetric positive-definite matrix.

    Returns
    -------
    jnp.ndarray, shape (k, k)
        U such that A = U^T U.
    """
    return jnp.linalg.cholesky(A).T


def backsolve(U: jnp.ndarray, B: jnp.ndarray) -> jnp.ndarray:
    """Solve ``U @ X = B`` for upper-triangular ``U``."""
    return solve_triangular(U, B, lower=False)


def symmetrize(A: jnp.ndarray) -> jnp.ndarray:
    """Return (A + A^T) / 2 over the first two axes."""
    return 0.5 * (A + jnp.swapaxes(A, 0, 1))


def map_iterations(fn: Callable, *arrays, in_axes=-1, out_axes=-1):
    """
    Apply ``fn`` independently to every posterior draw.

    Parameters
    ----------
    fn : callable
        Function of per-draw slices.
    *arrays : jnp.ndarray
        Arrays stacked along the iteration axis.
    in_axes, out_axes : int or tuple, default=-1
        Passed to jax.vmap. Use ``None`` entries in a tuple for arguments
        shared across draws (e.g. the design matrix).

    Returns
    -------
    jnp.ndarray or tuple
        Outputs stacked along ``out_axes``.
    """
    return jax.vmap(fn, in_axes=in_axes, out_axes=out_axes)(*arrays)


def is_positive_definite(A: jnp.ndarray) -> bool:
    """True when every eigenvalue of the symmetric matrix A is positive."""
    eigvals = jnp.linalg.eigvalsh(symmetrize(A))
    return bool(jnp.all(eigvals > 0))
