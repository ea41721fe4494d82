"""
transforms
==========

Coordinate Transform Engine.

Array level (any axis):
  from pibble.transforms import alr_array, alr_inv_array, clr_array, ilr_array

Fit level (table of defined conversions):
  from pibble.transforms import to_alr, to_clr, to_ilr, to_proportions, convert
"""

from .arrays import (
    alr_array,
    alr_inv_array,
    closure,
    clr_array,
    clr_inv_array,
    contrast_matrix,
    default_ilr_basis,
    embedding_matrix,
    ilr_array,
    ilr_inv_array,
    transition_matrix,
)
from .fit import convert, to_alr, to_clr, to_ilr, to_proportions

__all__ = [
    # arrays
    "alr_array",
    "alr_inv_array",
    "clr_array",
    "clr_inv_array",
    "ilr_array",
    "ilr_inv_array",
    "closure",
    "default_ilr_basis",
    "contrast_matrix",
    "embedding_matrix",
    "transition_matrix",
    # fit objects
    "convert",
    "to_alr",
    "to_clr",
    "to_ilr",
    "to_proportions",
]
