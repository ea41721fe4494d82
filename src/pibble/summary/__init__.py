"""
summary
=======

Tidy/Summary Pipeline.

  from pibble.summary import tidy_samples, summarize, precompute_summary
  from pibble.summary import gather_array, summarise_posterior, mean_qi
"""

from .posterior import (
    mean_qi,
    precompute_summary,
    quantile_label,
    summarise_posterior,
    summarize,
)
from .tidy import gather_array, name_tidy, tidy_samples

__all__ = [
    # tables
    "gather_array",
    "name_tidy",
    "tidy_samples",
    # reducers
    "summarise_posterior",
    "mean_qi",
    "quantile_label",
    # fit objects
    "summarize",
    "precompute_summary",
]
