"""
predictive.py
-------------

Posterior (or prior) predictive simulation for pibble fit objects.

Given draws of Lambda (and Sigma) for a design matrix ``newdata`` (Q x nnew),
predict produces per-draw

    LambdaX_i = Lambda_i @ newdata                       (k, nnew)
    Eta_i     = LambdaX_i + chol(Sigma_i) Z_i             (k, nnew)
    Y_i[:, j] ~ Multinomial(size[j, i], Pi_i[:, j])      (D, nnew)

with Pi_i the proportions of Eta_i. Draws are independent: the iteration
axis is mapped with jax.vmap and every draw has its own normal or
multinomial variates.

Coordinate handling
-------------------
Computation runs in ALR or ILR. Fits stored in proportions or CLR are first
converted to ALR (reference = last category); LambdaX and Eta are then mapped
back to proportions, and on to CLR when that was the stored system. ALR and
ILR fits are returned in their own coordinates.
"""

from __future__ import annotations

import warnings
from typing import Callable, Sequence

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np
import pandas as pd
from loguru import logger

from pibble.config import RESPONSES, SummaryConfig
from pibble.errors import (
    InvalidArgumentError,
    MissingComponentError,
    MissingDataError,
    MissingSizeError,
)
from pibble.fit.coords import Alr, Clr, CoordSystem, Default, Ilr, store_coord
from pibble.fit.names import coord_labels, name_array
from pibble.fit.pibblefit import PibbleFit
from pibble.summary.posterior import summarise_posterior
from pibble.summary.tidy import gather_array, name_tidy
from pibble.transforms.arrays import alr_inv_array, clr_array
from pibble.transforms.fit import to_alr, to_proportions
from pibble.utils.math import map_iterations
from pibble.utils.rng import resolve_key


# ----------------------------------------------------------------------
# Argument resolution
# ----------------------------------------------------------------------
def _resolve_iter(fit: PibbleFit, iter: int | None) -> int:
    if iter is None:
        return fit.iter
    iter = int(iter)
    if not 1 <= iter <= fit.iter:
        raise InvalidArgumentError(
            f"iter must lie in 1..{fit.iter} (draws stored on the fit), got {iter}"
        )
    return iter


def _resolve_newdata(fit: PibbleFit, newdata, newdata_names):
    if newdata is None:
        if fit.X is None:
            raise MissingDataError(
                "prediction requires newdata or a design matrix X on the fit"
            )
        names = fit.names_samples if newdata_names is None else newdata_names
        return fit.X, names
    if isinstance(newdata, pd.DataFrame) and newdata_names is None:
        newdata_names = [str(c) for c in newdata.columns]
    newdata = jnp.asarray(np.asarray(newdata, dtype=float))
    if newdata.ndim != 2 or newdata.shape[0] != fit.Q:
        raise InvalidArgumentError(
            f"newdata must have shape (Q={fit.Q}, nnew), got {tuple(newdata.shape)}"
        )
    return newdata, newdata_names


def _resolve_size(fit: PibbleFit, size, newdata_given: bool, nnew: int, iter: int) -> jnp.ndarray:
    """Total counts per (sample, draw), shape (nnew, iter)."""
    if size is None:
        if fit.Y is None:
            raise MissingSizeError("Either Y or size must be specified to predict counts")
        colsums = jnp.sum(fit.Y, axis=0)
        if newdata_given:
            size = jnp.median(colsums)
            logger.debug("predicting counts with median observed total {}", float(size))
        else:
            size = colsums
            logger.debug("predicting counts with observed column totals")

    size = jnp.asarray(size, dtype=float)
    if size.ndim == 0:
        return jnp.full((nnew, iter), size)
    if size.ndim == 1:
        if size.shape[0] != nnew:
            raise InvalidArgumentError(
                f"size vector has length {size.shape[0]}, expected nnew={nnew}"
            )
        return jnp.broadcast_to(size[:, None], (nnew, iter))
    if size.shape != (nnew, iter):
        raise InvalidArgumentError(
            f"size matrix has shape {tuple(size.shape)}, expected ({nnew}, {iter})"
        )
    return size


# ----------------------------------------------------------------------
# Draws
# ----------------------------------------------------------------------
def _draw_lambda_x(Lambda: jnp.ndarray, newdata: jnp.ndarray) -> jnp.ndarray:
    return map_iterations(lambda L: L @ newdata, Lambda)


def _draw_eta(key: jax.Array, LambdaX: jnp.ndarray, Sigma: jnp.ndarray) -> jnp.ndarray:
    Z = jr.normal(key, LambdaX.shape)
    return map_iterations(
        lambda LX, S, z: LX + jnp.linalg.cholesky(S) @ z, LambdaX, Sigma, Z
    )


def _draw_counts(key: jax.Array, Pi: jnp.ndarray, size: jnp.ndarray) -> jnp.ndarray:
    """Multinomial counts (D, nnew, iter) from proportions and totals."""
    p = jnp.moveaxis(Pi, 0, -1)  # (nnew, iter, D)
    counts = jr.multinomial(key, jnp.round(size), p)
    return jnp.moveaxis(counts, -1, 0).astype(int)


def _back_map(values: jnp.ndarray, saved: CoordSystem, transformed: bool) -> jnp.ndarray:
    if not transformed:
        return values
    values = alr_inv_array(values, axis=0)
    if isinstance(saved, Clr):
        values = clr_array(values, axis=0)
    return values


def predict(
    fit: PibbleFit,
    newdata=None,
    response: str = "LambdaX",
    size=None,
    use_names: bool = True,
    summary: bool = False,
    iter: int | None = None,
    *,
    key: jax.Array | None = None,
    newdata_names: Sequence[str] | None = None,
    config: SummaryConfig | None = None,
    **extra_stats: Callable[[pd.Series], float],
):
    """
    Predictive draws of LambdaX, Eta or counts.

    Parameters
    ----------
    fit : PibbleFit
        Posterior (or prior) draws; needs Lambda, and Sigma for Eta or Y.
    newdata : array-like, shape (Q, nnew), optional
        Design matrix to predict for; defaults to the fit's X. A DataFrame's
        column labels are used as sample names.
    response : {"LambdaX", "Eta", "Y"}, default="LambdaX"
        Quantity to predict.
    size : scalar, (nnew,) or (nnew, iter) array-like, optional
        Total counts when ``response="Y"``. Defaults to the column totals of
        Y (newdata omitted) or their median (newdata given).
    use_names : bool, default=True
        Return an ``xarray.DataArray`` with dims ("coord", "sample", "iter")
        labelled by coordinate (or category) names and sample names.
    summary : bool, default=False
        Return a posterior summary table (see summarise_posterior) grouped by
        coord and sample instead of the draws.
    iter : int, optional
        Use only the first ``iter`` draws. Defaults to all.
    key : jax.Array, optional
        PRNG key for Eta and Y. A clock-seeded key is used when omitted.
    newdata_names : sequence of str, optional
        Sample labels for ``newdata``.
    config : SummaryConfig, optional
        Interval widths when ``summary=True``.
    **extra_stats : callable
        Extra statistics when ``summary=True``.

    Returns
    -------
    jnp.ndarray, xr.DataArray or pd.DataFrame
        LambdaX/Eta: (k, nnew, iter) in the fit's coordinates, or (D, nnew,
        iter) proportions/CLR values for fits stored that way. Y: integer
        counts (D, nnew, iter), each column summing to its size.

    Raises
    ------
    InvalidArgumentError
        Unknown response, iter out of range, bad newdata or size shapes.
    MissingDataError
        Neither newdata nor X.
    MissingSizeError
        Counts requested with neither size nor Y.
    MissingComponentError
        Lambda (or Sigma, for Eta and Y) not stored.

    Examples
    --------
    >>> Ypred = predict(fit, response="Y", key=jr.PRNGKey(1))
    >>> Ypred.sizes
    Frozen({'coord': 3, 'sample': 5, 'iter': 100})
    """
    if response not in RESPONSES:
        raise InvalidArgumentError(
            f"response must be one of {list(RESPONSES)}, got {response!r}"
        )
    iter = _resolve_iter(fit, iter)
    newdata_given = newdata is not None
    newdata, sample_names = _resolve_newdata(fit, newdata, newdata_names)
    nnew = newdata.shape[1]

    if fit.Lambda is None:
        raise MissingComponentError("Lambda", f"predict {response}")
    if response in ("Eta", "Y") and fit.Sigma is None:
        raise MissingComponentError("Sigma", f"predict {response}")
    if response == "Y":
        size = _resolve_size(fit, size, newdata_given, nnew, iter)
    if sample_names is not None and len(sample_names) != nnew:
        raise InvalidArgumentError(
            f"{len(sample_names)} sample names given for {nnew} columns of newdata"
        )

    saved = store_coord(fit)
    transformed = not isinstance(saved, (Alr, Ilr))
    m = to_alr(fit, fit.D - 1) if transformed else fit
    logger.debug(
        "predicting {} for {} samples over {} draws ({})", response, nnew, iter, saved.describe()
    )

    key = resolve_key(key)
    key_eta, key_y = jr.split(key)

    LambdaX = _draw_lambda_x(m.Lambda[..., :iter], newdata)
    if response == "LambdaX":
        out, out_coord = _back_map(LambdaX, saved, transformed), saved
    else:
        Eta = _draw_eta(key_eta, LambdaX, m.Sigma[..., :iter])
        if response == "Eta":
            out, out_coord = _back_map(Eta, saved, transformed), saved
        else:
            # proportions from the predicted Eta; Lambda and Sigma are not needed
            new = m.replace(
                N=nnew,
                iter=iter,
                Eta=Eta,
                Lambda=None,
                Sigma=None,
                X=newdata,
                Y=None,
                names_samples=None,
                summary=None,
            )
            Pi = to_proportions(new).Eta
            out, out_coord = _draw_counts(key_y, Pi, size), Default()

    coord_names = coord_labels(out_coord, fit.names_categories)

    if summary:
        if iter == 1:
            warnings.warn(
                "summarizing a single predictive draw; intervals are degenerate",
                UserWarning,
                stacklevel=2,
            )
        table = summarise_posterior(
            gather_array(out, "val", ("coord", "sample", "iter")),
            "val",
            ("coord", "sample"),
            config,
            **extra_stats,
        )
        if use_names:
            table = name_tidy(table, {"coord": coord_names, "sample": sample_names})
        return table

    if use_names:
        return name_array(out, ("coord", "sample", "iter"), (coord_names, sample_names, None))
    return out
