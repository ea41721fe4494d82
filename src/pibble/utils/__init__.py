"""
utils
=====

Shared helpers: PRNG keys and per-draw linear algebra.
"""

from .math import backsolve, is_positive_definite, map_iterations, symmetrize, upper_cholesky
from .rng import fresh_key, resolve_key, seed, split

__all__ = [
    # rng
    "seed",
    "split",
    "fresh_key",
    "resolve_key",
    # math
    "upper_cholesky",
    "backsolve",
    "symmetrize",
    "map_iterations",
    "is_positive_definite",
]
