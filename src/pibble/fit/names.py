"""
names.py
--------

Dimension labels for fit objects and their arrays.

Arrays stored on a PibbleFit are plain JAX arrays. When a caller asks for
names, they are wrapped in an ``xarray.DataArray`` whose dims are taken from
the axis roles below and whose coordinate labels come from the fit's name
vectors. Axes without a name vector keep positional (0-based) indices.

Axis roles
----------
- "coord"     : category axis, labelled by names_coords(fit)
- "coord2"    : second category axis of Sigma
- "sample"    : observation / column of the design matrix
- "covariate" : row of the design matrix
- "iter"      : posterior draw
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np
import xarray as xr

from pibble.errors import InvalidArgumentError
from pibble.fit.coords import Alr, Clr, CoordSystem, Default, Ilr

if TYPE_CHECKING:
    from pibble.fit.pibblefit import PibbleFit

# dims of each stored parameter
PARAMETER_DIMS: dict[str, tuple[str, str, str]] = {
    "Eta": ("coord", "sample", "iter"),
    "Lambda": ("coord", "covariate", "iter"),
    "Sigma": ("coord", "coord2", "iter"),
}


def coord_labels(coord: CoordSystem, categories: Sequence[str] | None) -> tuple[str, ...] | None:
    """
    Labels of the category axis in coordinate system ``coord``.

    Returns None when ``categories`` is None.

    Examples
    --------
    With categories ("a", "b", "c"):
    - proportions  -> ("a", "b", "c")
    - clr          -> ("clr_a", "clr_b", "clr_c")
    - alr, base 2  -> ("log(a/c)", "log(b/c)")
    - ilr          -> ("ilr_1", "ilr_2")
    """
    if categories is None:
        return None
    cats = tuple(categories)
    if isinstance(coord, Default):
        return cats
    if isinstance(coord, Clr):
        return tuple(f"clr_{c}" for c in cats)
    if isinstance(coord, Alr):
        ref = cats[coord.base]
        return tuple(f"log({c}/{ref})" for i, c in enumerate(cats) if i != coord.base)
    if isinstance(coord, Ilr):
        return tuple(f"ilr_{i + 1}" for i in range(len(cats) - 1))
    return None


def names_coords(fit: PibbleFit) -> tuple[str, ...] | None:
    """Labels of the category axis in the fit's current coordinate system."""
    return coord_labels(fit.coord_system, fit.names_categories)


def axis_labels(fit: PibbleFit, dim: str) -> tuple[str, ...] | None:
    """Name vector for one axis role (None when unset)."""
    if dim in ("coord", "coord2"):
        return names_coords(fit)
    if dim == "sample":
        return fit.names_samples
    if dim == "covariate":
        return fit.names_covariates
    if dim == "category":
        return fit.names_categories
    return None


def name_array(
    array,
    dims: Sequence[str],
    labels: Sequence[Sequence[str] | None],
) -> xr.DataArray:
    """
    Wrap a 3-D draw array in a labelled DataArray.

    Parameters
    ----------
    array : array-like
        Values; one axis per entry in ``dims``.
    dims : sequence of str
        Dimension names.
    labels : sequence of (sequence of str | None)
        Coordinate labels per dim; None leaves the axis unlabelled.

    Returns
    -------
    xr.DataArray
    """
    values = np.asarray(array)
    coords = {}
    for axis, (dim, lab) in enumerate(zip(dims, labels)):
        if lab is None:
            continue
        if len(lab) != values.shape[axis]:
            raise InvalidArgumentError(
                f"{len(lab)} labels given for dim {dim!r} of length {values.shape[axis]}"
            )
        coords[dim] = list(lab)
    return xr.DataArray(values, dims=tuple(dims), coords=coords)


def name_parameter(fit: PibbleFit, parameter: str) -> xr.DataArray:
    """Return a stored parameter array with the fit's names applied."""
    dims = PARAMETER_DIMS[parameter]
    labels = [axis_labels(fit, d) for d in dims]
    return name_array(getattr(fit, parameter), dims, labels)
