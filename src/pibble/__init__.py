"""
pibble
======

Post-processing and prediction for Multinomial Logistic-Normal linear
regression ("pibble") models.

A pibble model relates a count table Y (D categories x N samples) to a
design matrix X (Q covariates x N samples):

    Y_j     ~ Multinomial(size_j, Pi_j)
    Pi_j    = inverse-log-ratio(Eta_j)
    Eta     ~ MN(Lambda X, Sigma, I_N)
    Lambda  ~ MN(Theta, Sigma, Gamma)
    Sigma   ~ InvWishart(upsilon, Xi)

This package does not fit the model. It takes posterior draws (or draws
sampled from the prior) and provides coordinate transforms, prior
sampling, predictive simulation and tidy summaries.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. PibbleFit (fit/pibblefit.py):
   - Immutable container of draws, data, hyperparameters and names.
   - Draws keep the iteration on the LAST axis: Eta (k, N, iter),
     Lambda (k, Q, iter), Sigma (k, k, iter).

2. Coordinate systems (fit/coords.py, transforms/):
   - Default (proportions), Clr, Alr(base), Ilr(basis).
   - Conversions between any two systems through one table of
     defined (source, target) pairs.

3. Sampling (sampling/):
   - sample_prior draws Sigma, Lambda and Eta from the prior in ALR and
     maps the result back to the stored coordinate system.

4. Prediction (predict/):
   - predict draws LambdaX, Eta or counts Y for new covariates.
   - ppc_summary checks observed counts against predictive intervals.

5. Summaries (summary/):
   - tidy_samples flattens draws into a long pandas DataFrame.
   - summarize reduces draws to means, medians and credible intervals.

Unified import style
--------------------
Top-level:
  from pibble import PibbleFit, sample_prior, predict, summarize
  from pibble import Alr, Clr, Ilr, Default, to_alr, to_clr, to_ilr, to_proportions

Subpackages:
  from pibble.fit import coef, names_coords, set_names_categories, print_fit
  from pibble.transforms import alr_array, alr_inv_array, clr_array, ilr_array
  from pibble.sampling import rwishart, rinvwishart_chol, rmatrixnormal
  from pibble.summary import gather_array, tidy_samples, summarise_posterior, mean_qi
  from pibble.utils import seed, split

Numerics and logging
--------------------
- 64-bit floats are enabled on import so coordinate round trips are exact
  to ~1e-8.
- Log messages go through loguru and are disabled by default; call
  ``logger.enable("pibble")`` to see them.

----------------------------------------------------------------------
"""

import jax

jax.config.update("jax_enable_x64", True)

from loguru import logger  # noqa: E402

logger.disable("pibble")

# Re-export subpackages for unified import style (e.g., pibble.fit, pibble.summary)
from . import fit as fit  # noqa: E402
from . import sampling as sampling  # noqa: E402
from . import summary as summary  # noqa: E402
from . import transforms as transforms  # noqa: E402
from . import utils as utils  # noqa: E402
from .config import SummaryConfig  # noqa: E402
from .errors import (  # noqa: E402
    InvalidArgumentError,
    MissingComponentError,
    MissingDataError,
    MissingHyperparameterError,
    MissingSizeError,
    PibbleError,
    UnsupportedTransformError,
)

# Fit object
from .fit import (  # noqa: E402
    Alr,
    Clr,
    Default,
    Ilr,
    PibbleFit,
    coef,
    names_coords,
    print_fit,
    reapply_coord,
    store_coord,
)

# Prediction
from .predict import ppc_summary, predict  # noqa: E402

# Sampling
from .sampling import sample_prior  # noqa: E402

# Summaries
from .summary import precompute_summary, summarize, tidy_samples  # noqa: E402

# Transforms
from .transforms import to_alr, to_clr, to_ilr, to_proportions  # noqa: E402

__all__ = [
    # Fit object
    "PibbleFit",
    "coef",
    "names_coords",
    "print_fit",
    # Coordinates
    "Default",
    "Clr",
    "Alr",
    "Ilr",
    "to_alr",
    "to_clr",
    "to_ilr",
    "to_proportions",
    "store_coord",
    "reapply_coord",
    # Sampling and prediction
    "sample_prior",
    "predict",
    "ppc_summary",
    # Summaries
    "tidy_samples",
    "summarize",
    "precompute_summary",
    "SummaryConfig",
    # Errors
    "PibbleError",
    "MissingComponentError",
    "MissingHyperparameterError",
    "MissingDataError",
    "MissingSizeError",
    "UnsupportedTransformError",
    "InvalidArgumentError",
    # Subpackages
    "fit",
    "transforms",
    "sampling",
    "summary",
    "utils",
]
