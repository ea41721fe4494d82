"""
fit.py
------

Coordinate transforms of whole fit objects.

convert(fit, target) looks the (source, target) pair up in an explicit
table; every defined pair is listed in _TRANSFORMS and anything else raises
UnsupportedTransformError.

Defined pairs
-------------
- log-ratio -> log-ratio (clr, alr, ilr in any combination):
      linear map T = G_target @ E_source
      Eta, Lambda, Theta  ->  T @ A
      Sigma, Xi           ->  T @ S @ T^T
- log-ratio -> proportions:
      Eta mapped through the inverse transform; Lambda, Sigma, Theta and Xi
      are dropped because proportions cannot express them.
- proportions -> log-ratio:
      Eta mapped through the forward transform (only Eta can be stored in
      proportions, so nothing else needs converting).
- proportions -> proportions: identity.

Every conversion returns a new PibbleFit and clears the summary cache,
whose tables refer to the old coordinates.
"""

from __future__ import annotations

from typing import Callable

import jax.numpy as jnp
from loguru import logger

from pibble.errors import InvalidArgumentError, UnsupportedTransformError
from pibble.fit.coords import Alr, Clr, CoordSystem, Default, Ilr
from pibble.fit.pibblefit import PibbleFit
from pibble.transforms.arrays import from_log_ratio, to_log_ratio, transition_matrix


def _identity(fit: PibbleFit, target: CoordSystem) -> PibbleFit:
    return fit


def _linear(fit: PibbleFit, target: CoordSystem) -> PibbleFit:
    """Log-ratio to log-ratio conversion."""
    if fit.coord_system == target:
        return fit
    T = transition_matrix(fit.coord_system, target, fit.D)
    changes: dict = {"coord_system": target, "summary": None}
    for name in ("Eta", "Lambda"):
        A = getattr(fit, name)
        if A is not None:
            changes[name] = jnp.einsum("ij,jnk->ink", T, A)
    if fit.Sigma is not None:
        changes["Sigma"] = jnp.einsum("ij,jlk,ml->imk", T, fit.Sigma, T)
    if fit.Theta is not None:
        changes["Theta"] = T @ fit.Theta
    if fit.Xi is not None:
        changes["Xi"] = T @ fit.Xi @ T.T
    return fit.replace(**changes)


def _to_default(fit: PibbleFit, target: CoordSystem) -> PibbleFit:
    """Log-ratio to proportions conversion."""
    Eta = None if fit.Eta is None else from_log_ratio(fit.Eta, fit.coord_system, axis=0)
    return fit.replace(
        coord_system=target,
        Eta=Eta,
        Lambda=None,
        Sigma=None,
        Theta=None,
        Xi=None,
        summary=None,
    )


def _from_default(fit: PibbleFit, target: CoordSystem) -> PibbleFit:
    """Proportions to log-ratio conversion."""
    if fit.Lambda is not None or fit.Sigma is not None:
        raise UnsupportedTransformError(
            "cannot map Lambda/Sigma out of proportions"
        )
    Eta = None if fit.Eta is None else to_log_ratio(fit.Eta, target, axis=0)
    return fit.replace(coord_system=target, Eta=Eta, summary=None)


_LOG_RATIO: tuple[type, ...] = (Clr, Alr, Ilr)

_TRANSFORMS: dict[tuple[type, type], Callable[[PibbleFit, CoordSystem], PibbleFit]] = {
    (Default, Default): _identity,
    **{(Default, t): _from_default for t in _LOG_RATIO},
    **{(s, Default): _to_default for s in _LOG_RATIO},
    **{(s, t): _linear for s in _LOG_RATIO for t in _LOG_RATIO},
}


def convert(fit: PibbleFit, target: CoordSystem) -> PibbleFit:
    """
    Convert ``fit`` into coordinate system ``target``.

    Parameters
    ----------
    fit : PibbleFit
    target : CoordSystem

    Returns
    -------
    PibbleFit
        New object tagged with ``target`` (``fit`` itself for identities).

    Raises
    ------
    UnsupportedTransformError
        When the pair is not in the transform table.
    InvalidArgumentError
        When ``target`` is invalid for ``fit.D`` (reference index, basis).
    """
    if not isinstance(target, CoordSystem):
        raise InvalidArgumentError(f"target must be a CoordSystem, got {target!r}")
    target.validate(fit.D)
    fn = _TRANSFORMS.get((type(fit.coord_system), type(target)))
    if fn is None:
        raise UnsupportedTransformError(
            f"no transform from {fit.coord_system.describe()} to {target.describe()}"
        )
    logger.debug(
        "converting fit from {} to {}", fit.coord_system.describe(), target.describe()
    )
    return fn(fit, target)


def to_alr(fit: PibbleFit, base: int) -> PibbleFit:
    """Convert to ALR coordinates with 0-based reference ``base``."""
    return convert(fit, Alr(int(base)))


def to_clr(fit: PibbleFit) -> PibbleFit:
    """Convert to CLR coordinates."""
    return convert(fit, Clr())


def to_ilr(fit: PibbleFit, basis: jnp.ndarray | None = None) -> PibbleFit:
    """Convert to ILR coordinates (default basis when ``basis`` is None)."""
    return convert(fit, Ilr(None if basis is None else jnp.asarray(basis)))


def to_proportions(fit: PibbleFit) -> PibbleFit:
    """Apply the inverse of the current system, returning proportions."""
    return convert(fit, Default())
