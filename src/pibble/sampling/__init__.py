"""
sampling
========

Prior/Posterior Sampling Engine.

  from pibble.sampling import sample_prior
  from pibble.sampling import rwishart, rinvwishart_chol, rmatrixnormal
"""

from .distributions import (
    covariance_from_precision_chol,
    rinvwishart_chol,
    rmatrixnormal,
    rwishart,
)
from .prior import sample_prior

__all__ = [
    "sample_prior",
    "rwishart",
    "rinvwishart_chol",
    "rmatrixnormal",
    "covariance_from_precision_chol",
]
