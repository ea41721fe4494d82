"""
prior.py
--------

Sample from the prior hierarchy of a pibble model.

    Sigma   ~ InvWishart(upsilon, Xi)
    Lambda  ~ MN(Theta, Sigma, Gamma)
    Eta     ~ MN(Lambda X, Sigma, I_N)

Draws are generated in ALR coordinates (reference = last category)
whatever system the fit is stored in, and the resulting object is converted
back to the original system before it is returned.

Connections
-----------
- The returned PibbleFit can be passed to predict() to obtain prior
  predictive draws of LambdaX, Eta or counts.
- Existing posterior draws on the input are ignored.
"""

from __future__ import annotations

from typing import Iterable

import jax
import jax.numpy as jnp
import jax.random as jr
from loguru import logger

from pibble.config import HYPERPARAMETERS, PARAMETERS, check_pars
from pibble.errors import InvalidArgumentError, MissingDataError, MissingHyperparameterError
from pibble.fit.coords import Alr, reapply_coord, store_coord
from pibble.fit.pibblefit import PibbleFit
from pibble.sampling.distributions import (
    covariance_from_precision_chol,
    rinvwishart_chol,
    rmatrixnormal,
)
from pibble.transforms.fit import to_alr
from pibble.utils.math import map_iterations, upper_cholesky
from pibble.utils.rng import resolve_key


def sample_prior(
    fit: PibbleFit,
    n_samples: int = 2000,
    pars: Iterable[str] | str = PARAMETERS,
    use_names: bool = True,
    *,
    key: jax.Array | None = None,
) -> PibbleFit:
    """
    Draw independent samples from the prior of ``fit``.

    Parameters
    ----------
    fit : PibbleFit
        Object carrying the hyperparameters upsilon, Theta, Gamma, Xi (and X
        when Eta is requested).
    n_samples : int, default=2000
        Number of prior draws.
    pars : iterable of {"Eta", "Lambda", "Sigma"}
        Parameters to keep on the returned object.
    use_names : bool, default=True
        Carry the name vectors of ``fit`` over to the result.
    key : jax.Array, optional
        PRNG key. A clock-seeded key is used when omitted.

    Returns
    -------
    PibbleFit
        Prior-only object (Y absent) with ``iter == n_samples``, in the same
        coordinate system as ``fit``.

    Raises
    ------
    MissingHyperparameterError
        When upsilon, Theta, Gamma or Xi is missing.
    MissingDataError
        When Eta is requested and X is missing.
    InvalidArgumentError
        For unknown names in ``pars`` or a non-positive ``n_samples``.

    Examples
    --------
    >>> prior = sample_prior(fit, n_samples=50, pars=["Sigma"], key=jr.PRNGKey(0))
    >>> prior.Sigma.shape
    (2, 2, 50)
    """
    pars = check_pars(pars)
    n_samples = int(n_samples)
    if n_samples < 1:
        raise InvalidArgumentError(f"n_samples must be positive, got {n_samples}")
    missing = [h for h in HYPERPARAMETERS if getattr(fit, h) is None]
    if missing:
        raise MissingHyperparameterError(missing)
    if "Eta" in pars and fit.X is None:
        raise MissingDataError("sampling Eta from the prior requires the design matrix X")

    key = resolve_key(key)
    key_sigma, key_lambda, key_eta = jr.split(key, 3)

    # Convert to ALR for computation (posterior draws are not needed)
    saved = store_coord(fit)
    m = to_alr(fit.replace(Eta=None, Lambda=None, Sigma=None, summary=None), fit.D - 1)
    k = m.D - 1
    logger.debug("sampling {} prior draws of {} (k={})", n_samples, list(pars), k)

    # Sigma: upper factors of the precision, Sigma^{-1} = U^T U
    U = rinvwishart_chol(key_sigma, m.upsilon, m.Xi, n_samples)

    Lambda = None
    if "Lambda" in pars or "Eta" in pars:
        Lambda = rmatrixnormal(key_lambda, m.Theta, U, upper_cholesky(m.Gamma))

    Eta = None
    if "Eta" in pars:
        LambdaX = map_iterations(lambda L: L @ m.X, Lambda)
        Eta = rmatrixnormal(key_eta, LambdaX, U, jnp.eye(m.N))

    Sigma = covariance_from_precision_chol(U) if "Sigma" in pars else None

    out = PibbleFit(
        D=m.D,
        N=m.N,
        Q=m.Q,
        iter=n_samples,
        coord_system=Alr(m.D - 1),
        Eta=Eta,
        Lambda=Lambda if "Lambda" in pars else None,
        Sigma=Sigma,
        upsilon=m.upsilon,
        Theta=m.Theta,
        Gamma=m.Gamma,
        Xi=m.Xi,
        X=m.X,
        names_categories=m.names_categories if use_names else None,
        names_covariates=m.names_covariates if use_names else None,
        names_samples=m.names_samples if use_names else None,
    )

    # Convert back to the original system
    return reapply_coord(out, saved)
