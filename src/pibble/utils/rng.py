"""
rng.py
------

Random number utilities for pibble.

Every stochastic operation (sample_prior, predict, ppc_summary) takes an
explicit JAX PRNG key. These helpers standardize how keys are created and
split, and provide a clock-seeded key for callers that do not pass one.

Examples
--------
>>> from pibble.utils.rng import seed, split
>>> key = seed(0)
>>> k1, k2 = split(key)
"""

from __future__ import annotations

import time

import jax
import jax.random as jr
from loguru import logger


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    jax.Array
        Stacked independent PRNG keys, shape (num, 2).
    """
    return jr.split(key, num=num)


def fresh_key() -> jax.Array:
    """Return a key seeded from the clock (non-reproducible)."""
    value = time.time_ns() % 2**32
    logger.debug("no PRNG key supplied, seeding from clock ({})", value)
    return jr.PRNGKey(value)


def resolve_key(key: jax.Array | None) -> jax.Array:
    """Return ``key`` unchanged, or a fresh clock-seeded key when None."""
    return fresh_key() if key is None else key
