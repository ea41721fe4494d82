"""
arrays.py
---------

Log-ratio transforms of compositional arrays.

Each function acts along one axis (the category axis, default 0) and is
applied uniformly to every other index, so a (D, N, iter) stack of draws is
transformed in one call.

Includes:
- closure : rescale to sum to one.
- alr_array / alr_inv_array : additive log-ratio against a reference.
- clr_array / clr_inv_array : centered log-ratio.
- ilr_array / ilr_inv_array : isometric log-ratio with an orthonormal basis.
- default_ilr_basis : sequential-binary-partition (Helmert) basis.
- contrast_matrix / embedding_matrix : linear maps between log-ratio systems.

Mathematical Background
-----------------------
All log-ratio systems are linear images of log-proportions:
    y = G @ log(x)           G: (k, D), rows sum to zero
and map back to CLR coordinates through an embedding
    clr(x) = E @ y           E: (D, k)
so converting from system 1 to system 2 is the (k2, k1) matrix G2 @ E1.

Examples
--------
>>> import jax.numpy as jnp
>>> x = jnp.array([[0.2], [0.3], [0.5]])
>>> y = alr_array(x)                       # reference = last category
>>> jnp.allclose(alr_inv_array(y), x)
Array(True, dtype=bool)
"""

from __future__ import annotations

import jax.numpy as jnp
from jax.nn import softmax

from pibble.fit.coords import Alr, Clr, CoordSystem, Default, Ilr
from pibble.errors import UnsupportedTransformError


def _resolve_base(base: int | None, D: int) -> int:
    return D - 1 if base is None else int(base) % D


def closure(x: jnp.ndarray, axis: int = 0) -> jnp.ndarray:
    """Rescale ``x`` so it sums to one along ``axis``."""
    x = jnp.asarray(x)
    return x / jnp.sum(x, axis=axis, keepdims=True)


def alr_array(x: jnp.ndarray, base: int | None = None, axis: int = 0) -> jnp.ndarray:
    """
    Additive log-ratio transform.

    Parameters
    ----------
    x : jnp.ndarray
        Proportions (or positive parts), size D along ``axis``.
    base : int, optional
        0-based reference category. Defaults to the last category.
    axis : int, default=0
        Category axis.

    Returns
    -------
    jnp.ndarray
        Log-ratios, size D-1 along ``axis``.
    """
    x = jnp.moveaxis(jnp.asarray(x), axis, 0)
    D = x.shape[0]
    b = _resolve_base(base, D)
    logx = jnp.log(x)
    y = jnp.delete(logx, b, axis=0) - logx[b][None]
    return jnp.moveaxis(y, 0, axis)


def alr_inv_array(y: jnp.ndarray, base: int | None = None, axis: int = 0) -> jnp.ndarray:
    """
    Inverse additive log-ratio transform.

    The reference coordinate (log-ratio of the reference against itself, 0)
    is inserted at ``base`` before a softmax, so the output sums to one
    along ``axis`` for every other index.

    Parameters
    ----------
    y : jnp.ndarray
        ALR coordinates, size D-1 along ``axis``.
    base : int, optional
        0-based reference category in the D-part output. Defaults to the
        last category.
    axis : int, default=0
        Category axis.

    Returns
    -------
    jnp.ndarray
        Proportions, size D along ``axis``.
    """
    y = jnp.moveaxis(jnp.asarray(y), axis, 0)
    D = y.shape[0] + 1
    b = _resolve_base(base, D)
    z = jnp.insert(y, b, 0.0, axis=0)
    return jnp.moveaxis(softmax(z, axis=0), 0, axis)


def clr_array(x: jnp.ndarray, axis: int = 0) -> jnp.ndarray:
    """Centered log-ratio: log(x) minus its mean along ``axis``."""
    logx = jnp.log(jnp.asarray(x))
    return logx - jnp.mean(logx, axis=axis, keepdims=True)


def clr_inv_array(y: jnp.ndarray, axis: int = 0) -> jnp.ndarray:
    """Inverse centered log-ratio (softmax along ``axis``)."""
    return softmax(jnp.asarray(y), axis=axis)


def default_ilr_basis(D: int) -> jnp.ndarray:
    """
    Default ILR basis: sequential binary partition of parts 0..j against j+1.

    Parameters
    ----------
    D : int
        Number of categories (>= 2).

    Returns
    -------
    jnp.ndarray, shape (D, D-1)
        Orthonormal columns, each summing to zero.
    """
    V = jnp.zeros((D, D - 1))
    for j in range(D - 1):
        scale = 1.0 / jnp.sqrt((j + 1.0) * (j + 2.0))
        V = V.at[: j + 1, j].set(scale)
        V = V.at[j + 1, j].set(-(j + 1.0) * scale)
    return V


def _basis(basis: jnp.ndarray | None, D: int) -> jnp.ndarray:
    return default_ilr_basis(D) if basis is None else jnp.asarray(basis)


def ilr_array(x: jnp.ndarray, basis: jnp.ndarray | None = None, axis: int = 0) -> jnp.ndarray:
    """Isometric log-ratio: V^T log(x) along ``axis``."""
    x = jnp.moveaxis(jnp.asarray(x), axis, 0)
    V = _basis(basis, x.shape[0])
    y = jnp.tensordot(V.T, jnp.log(x), axes=1)
    return jnp.moveaxis(y, 0, axis)


def ilr_inv_array(y: jnp.ndarray, basis: jnp.ndarray | None = None, axis: int = 0) -> jnp.ndarray:
    """Inverse isometric log-ratio: softmax(V y) along ``axis``."""
    y = jnp.moveaxis(jnp.asarray(y), axis, 0)
    V = _basis(basis, y.shape[0] + 1)
    z = jnp.tensordot(V, y, axes=1)
    return jnp.moveaxis(softmax(z, axis=0), 0, axis)


def contrast_matrix(coord: CoordSystem, D: int) -> jnp.ndarray:
    """
    Matrix G (k x D) mapping log-proportions to ``coord`` coordinates.

    Raises
    ------
    UnsupportedTransformError
        For the Default system, which is not a log-ratio system.
    """
    if isinstance(coord, Clr):
        return jnp.eye(D) - jnp.full((D, D), 1.0 / D)
    if isinstance(coord, Alr):
        G = jnp.delete(jnp.eye(D), coord.base, axis=0)
        return G.at[:, coord.base].set(-1.0)
    if isinstance(coord, Ilr):
        return _basis(coord.basis, D).T
    raise UnsupportedTransformError(
        f"{coord.describe()} is not a log-ratio coordinate system"
    )


def embedding_matrix(coord: CoordSystem, D: int) -> jnp.ndarray:
    """
    Matrix E (D x k) mapping ``coord`` coordinates to CLR coordinates.

    Raises
    ------
    UnsupportedTransformError
        For the Default system, which is not a log-ratio system.
    """
    H = jnp.eye(D) - jnp.full((D, D), 1.0 / D)
    if isinstance(coord, Clr):
        return H
    if isinstance(coord, Alr):
        # insert a zero row at the reference, then center
        P = jnp.delete(jnp.eye(D), coord.base, axis=1)
        return H @ P
    if isinstance(coord, Ilr):
        return _basis(coord.basis, D)
    raise UnsupportedTransformError(
        f"{coord.describe()} is not a log-ratio coordinate system"
    )


def transition_matrix(source: CoordSystem, target: CoordSystem, D: int) -> jnp.ndarray:
    """Matrix T (k_target x k_source) with y_target = T @ y_source."""
    return contrast_matrix(target, D) @ embedding_matrix(source, D)


def to_log_ratio(x: jnp.ndarray, coord: CoordSystem, axis: int = 0) -> jnp.ndarray:
    """Map proportions into the log-ratio system ``coord``."""
    if isinstance(coord, Alr):
        return alr_array(x, coord.base, axis)
    if isinstance(coord, Clr):
        return clr_array(x, axis)
    if isinstance(coord, Ilr):
        return ilr_array(x, coord.basis, axis)
    if isinstance(coord, Default):
        return jnp.asarray(x)
    raise UnsupportedTransformError(f"unknown coordinate system {coord!r}")


def from_log_ratio(y: jnp.ndarray, coord: CoordSystem, axis: int = 0) -> jnp.ndarray:
    """Map ``coord`` coordinates back to proportions."""
    if isinstance(coord, Alr):
        return alr_inv_array(y, coord.base, axis)
    if isinstance(coord, Clr):
        return clr_inv_array(y, axis)
    if isinstance(coord, Ilr):
        return ilr_inv_array(y, coord.basis, axis)
    if isinstance(coord, Default):
        return jnp.asarray(y)
    raise UnsupportedTransformError(f"unknown coordinate system {coord!r}")
