"""
coords.py
---------

Coordinate systems for compositional parameter arrays.

A fit object stores Eta, Lambda and Sigma in exactly one coordinate system.
The system is a closed variant:

- Default()        : proportions on the simplex (category axis size D)
- Clr()            : centered log-ratio (category axis size D)
- Alr(base)        : additive log-ratio against category ``base`` (size D-1)
- Ilr(basis)       : isometric log-ratio with a D x (D-1) contrast basis
                     (size D-1); ``basis=None`` means the default basis

Indices are 0-based: ``Alr(base=D - 1)`` uses the last category as the
reference.

store_coord / reapply_coord let a caller detour through ALR for a
computation and hand back a result tagged with the original system.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import jax.numpy as jnp

from pibble.errors import InvalidArgumentError

if TYPE_CHECKING:
    from pibble.fit.pibblefit import PibbleFit


class CoordSystem:
    """Base class of the coordinate-system variant."""

    name: ClassVar[str] = ""
    # category-axis size is D - reduced
    reduced: ClassVar[int] = 0

    def size(self, D: int) -> int:
        """Category-axis size of arrays stored in this system."""
        return D - self.reduced

    @property
    def is_log_ratio(self) -> bool:
        return not isinstance(self, Default)

    def validate(self, D: int) -> None:
        """Check system parameters against the number of categories."""

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class Default(CoordSystem):
    """Proportions (the simplex)."""

    name: ClassVar[str] = "proportions"


@dataclass(frozen=True)
class Clr(CoordSystem):
    """Centered log-ratio coordinates."""

    name: ClassVar[str] = "clr"


@dataclass(frozen=True)
class Alr(CoordSystem):
    """
    Additive log-ratio coordinates.

    Parameters
    ----------
    base : int
        0-based index of the reference category.
    """

    base: int
    name: ClassVar[str] = "alr"
    reduced: ClassVar[int] = 1

    def validate(self, D: int) -> None:
        if not 0 <= int(self.base) < D:
            raise InvalidArgumentError(
                f"alr reference index must be in [0, {D - 1}], got {self.base}"
            )

    def describe(self) -> str:
        return f"alr, reference category: {self.base}"


@dataclass(frozen=True, eq=False)
class Ilr(CoordSystem):
    """
    Isometric log-ratio coordinates.

    Parameters
    ----------
    basis : jnp.ndarray | None, shape (D, D-1)
        Orthonormal contrast matrix (columns sum to zero). None selects the
        default sequential-binary-partition basis.
    """

    basis: jnp.ndarray | None = None
    name: ClassVar[str] = "ilr"
    reduced: ClassVar[int] = 1

    def validate(self, D: int) -> None:
        if self.basis is None:
            return
        shape = jnp.shape(self.basis)
        if shape != (D, D - 1):
            raise InvalidArgumentError(
                f"ilr basis must have shape ({D}, {D - 1}), got {shape}"
            )

    def __eq__(self, other):
        if not isinstance(other, Ilr):
            return NotImplemented
        if self.basis is None or other.basis is None:
            return self.basis is None and other.basis is None
        return jnp.shape(self.basis) == jnp.shape(other.basis) and bool(
            jnp.allclose(self.basis, other.basis)
        )

    __hash__ = object.__hash__


def coord_from_name(
    name: str,
    D: int,
    alr_base: int | None = None,
    ilr_basis: jnp.ndarray | None = None,
) -> CoordSystem:
    """
    Build a coordinate system from its string name.

    Parameters
    ----------
    name : {"proportions", "default", "clr", "alr", "ilr"}
    D : int
        Number of categories (used for the default ALR reference).
    alr_base : int, optional
        0-based ALR reference; defaults to the last category.
    ilr_basis : jnp.ndarray, optional
        ILR contrast basis.
    """
    key = name.lower()
    if key in ("proportions", "default"):
        coord: CoordSystem = Default()
    elif key == "clr":
        coord = Clr()
    elif key == "alr":
        coord = Alr(D - 1 if alr_base is None else int(alr_base))
    elif key == "ilr":
        coord = Ilr(None if ilr_basis is None else jnp.asarray(ilr_basis))
    else:
        raise InvalidArgumentError(f"unknown coordinate system: {name!r}")
    coord.validate(D)
    return coord


def store_coord(fit: PibbleFit) -> CoordSystem:
    """Capture the coordinate metadata of ``fit`` (system plus reference)."""
    return fit.coord_system


def reapply_coord(fit: PibbleFit, saved: CoordSystem) -> PibbleFit:
    """
    Convert ``fit`` back into a previously stored coordinate system.

    Parameters
    ----------
    fit : PibbleFit
        Object produced by a scratch computation (typically in ALR).
    saved : CoordSystem
        Value returned by store_coord before the detour.

    Returns
    -------
    PibbleFit
        New object in ``saved``; ``fit`` itself when already there.
    """
    from pibble.transforms.fit import convert

    return convert(fit, saved)
