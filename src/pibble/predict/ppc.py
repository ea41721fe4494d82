"""
ppc.py
------

Posterior predictive check on the training counts.
"""

from __future__ import annotations

import warnings

import jax
import numpy as np
from loguru import logger

from pibble.errors import MissingDataError
from pibble.fit.pibblefit import PibbleFit
from pibble.predict.predictive import predict


def ppc_summary(fit: PibbleFit, *, key: jax.Array | None = None) -> float:
    """
    Fraction of observed counts inside the 95% posterior predictive interval.

    Counts are predicted for the training design with the observed column
    totals; an observation is inside when it lies between the 2.5% and 97.5%
    quantiles (inclusive) of its predictive draws.

    Parameters
    ----------
    fit : PibbleFit
        Posterior draws with Y, X, Lambda and Sigma.
    key : jax.Array, optional
        PRNG key for the predictive draws.

    Returns
    -------
    float
        Fraction in [0, 1]; also printed.

    Raises
    ------
    MissingDataError
        When the fit holds no observed counts Y.
    """
    if fit.Y is None:
        raise MissingDataError(
            "ppc_summary is only for posterior samples, the fit has no observed counts Y"
        )
    if fit.iter == 1:
        warnings.warn(
            "ppc_summary is intended to be used with more than 1 draw, "
            "results will be misleading",
            UserWarning,
            stacklevel=2,
        )

    draws = np.asarray(predict(fit, response="Y", use_names=False, key=key))
    lower, upper = np.quantile(draws, [0.025, 0.975], axis=-1)
    observed = np.asarray(fit.Y)
    inside = float(np.mean((lower <= observed) & (observed <= upper)))

    logger.info("{:.3f} of observations inside the 95% predictive interval", inside)
    print(f"Proportions of Observations within 95% Credible Interval: {inside}")
    return inside
