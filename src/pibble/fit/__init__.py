"""
fit
===

The fit object and its coordinate metadata.

  from pibble.fit import PibbleFit, Alr, Clr, Ilr, Default
  from pibble.fit import coef, names_coords, store_coord, reapply_coord
"""

from .coords import (
    Alr,
    Clr,
    CoordSystem,
    Default,
    Ilr,
    coord_from_name,
    reapply_coord,
    store_coord,
)
from .names import coord_labels, name_array, names_coords
from .pibblefit import (
    PibbleFit,
    category_count,
    coef,
    covariate_count,
    format_fit,
    iteration_count,
    ncategories,
    ncovariates,
    niter,
    nsamples,
    print_fit,
    sample_count,
    set_names_categories,
    set_names_covariates,
    set_names_samples,
    with_summary,
)

__all__ = [
    "PibbleFit",
    # coordinates
    "CoordSystem",
    "Default",
    "Clr",
    "Alr",
    "Ilr",
    "coord_from_name",
    "store_coord",
    "reapply_coord",
    # names
    "names_coords",
    "coord_labels",
    "name_array",
    "set_names_categories",
    "set_names_covariates",
    "set_names_samples",
    # accessors
    "category_count",
    "sample_count",
    "covariate_count",
    "iteration_count",
    "ncategories",
    "nsamples",
    "ncovariates",
    "niter",
    "coef",
    "with_summary",
    # display
    "format_fit",
    "print_fit",
]
