"""
distributions.py
----------------

Matrix-variate random draws used by the prior sampler.

- rwishart : Wishart draws via the Bartlett decomposition.
- rinvwishart_chol : upper Cholesky factors U of Sigma^{-1} for
  Sigma ~ InvWishart(df, Xi), i.e. Sigma^{-1} = U^T U.
- rmatrixnormal : matrix-normal draws M + U^{-1} Z V given the upper
  Cholesky factor U of the row precision and V of the column covariance.

Every function returns draws stacked on the LAST axis, matching the layout
of posterior arrays on a PibbleFit. Draws are independent: one PRNG key per
draw, mapped with jax.vmap.

Mathematical Background
-----------------------
Bartlett: if L = chol(S) and A is lower-triangular with
    A_ii = sqrt(chi2(df - i)),  A_ij ~ N(0, 1) for i > j,
then (L A)(L A)^T ~ Wishart(df, S).
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import jax.random as jr

from pibble.errors import InvalidArgumentError
from pibble.utils.math import backsolve, map_iterations, upper_cholesky


def _bartlett_factor(key: jax.Array, df: float, k: int) -> jnp.ndarray:
    key_chi, key_norm = jr.split(key)
    dfs = df - jnp.arange(k)
    chi = jnp.sqrt(2.0 * jr.gamma(key_chi, dfs / 2.0))
    Z = jr.normal(key_norm, (k, k))
    return jnp.tril(Z, -1) + jnp.diag(chi)


def rwishart(key: jax.Array, df: float, scale: jnp.ndarray, n: int) -> jnp.ndarray:
    """
    Draw from a Wishart distribution.

    Parameters
    ----------
    key : jax.Array
        PRNG key.
    df : float
        Degrees of freedom; must exceed k - 1.
    scale : jnp.ndarray, shape (k, k)
        Scale matrix (symmetric positive-definite).
    n : int
        Number of draws.

    Returns
    -------
    jnp.ndarray, shape (k, k, n)
    """
    scale = jnp.asarray(scale)
    k = scale.shape[0]
    if df <= k - 1:
        raise InvalidArgumentError(
            f"Wishart degrees of freedom must exceed {k - 1}, got {df}"
        )
    L = jnp.linalg.cholesky(scale)

    def one(key_i):
        LA = L @ _bartlett_factor(key_i, df, k)
        return LA @ LA.T

    return jax.vmap(one, out_axes=-1)(jr.split(key, n))


def rinvwishart_chol(key: jax.Array, df: float, Xi: jnp.ndarray, n: int) -> jnp.ndarray:
    """
    Upper Cholesky factors of inverse-Wishart precisions.

    Draws W ~ Wishart(df, Xi^{-1}) and factors W = U^T U, so that
    Sigma = W^{-1} ~ InvWishart(df, Xi).

    Returns
    -------
    jnp.ndarray, shape (k, k, n)
        Upper-triangular U per draw.
    """
    W = rwishart(key, df, jnp.linalg.inv(jnp.asarray(Xi)), n)
    return map_iterations(upper_cholesky, W)


def rmatrixnormal(
    key: jax.Array,
    M: jnp.ndarray,
    U_row: jnp.ndarray,
    U_col: jnp.ndarray,
) -> jnp.ndarray:
    """
    Matrix-normal draws with per-draw row covariance.

    Parameters
    ----------
    key : jax.Array
        PRNG key.
    M : jnp.ndarray, shape (k, m) or (k, m, n)
        Mean; a 3-D mean supplies one mean per draw.
    U_row : jnp.ndarray, shape (k, k, n)
        Upper Cholesky factor of the row PRECISION per draw (Sigma^{-1} = U^T U).
    U_col : jnp.ndarray, shape (m, m)
        Upper Cholesky factor of the column covariance (shared).

    Returns
    -------
    jnp.ndarray, shape (k, m, n)
        M + solve(U, Z) @ U_col with Z iid standard normal.
    """
    k, n = U_row.shape[0], U_row.shape[-1]
    m = U_col.shape[0]
    Z = jr.normal(key, (k, m, n))
    if M.ndim == 2:
        return map_iterations(
            lambda U, z: M + backsolve(U, z) @ U_col, U_row, Z
        )
    return map_iterations(lambda Mi, U, z: Mi + backsolve(U, z) @ U_col, M, U_row, Z)


def covariance_from_precision_chol(U: jnp.ndarray) -> jnp.ndarray:
    """
    Sigma = L L^T with L = U^{-1}, for a stack of upper factors U.

    Parameters
    ----------
    U : jnp.ndarray, shape (k, k, n)

    Returns
    -------
    jnp.ndarray, shape (k, k, n)
    """
    k = U.shape[0]

    def one(Ui):
        Linv = backsolve(Ui, jnp.eye(k))
        return Linv @ Linv.T

    return map_iterations(one, U)
