"""
pibblefit.py
------------

The fit object: posterior (or prior) draws of a Multinomial Logistic-Normal
linear regression together with its data, hyperparameters and coordinate
metadata.

Model
-----
    Y_j     ~ Multinomial(size_j, Pi_j)
    Pi_j    = inverse-log-ratio(Eta_j)
    Eta     ~ MN(Lambda X, Sigma, I_N)
    Lambda  ~ MN(Theta, Sigma, Gamma)
    Sigma   ~ InvWishart(upsilon, Xi)

Arrays keep the posterior draw on the LAST axis:
    Eta    : (k, N, iter)
    Lambda : (k, Q, iter)
    Sigma  : (k, k, iter)
with k = D - 1 in ALR/ILR and k = D in CLR/proportions.

Design
------
PibbleFit is a frozen dataclass. Every "update" (names, coordinate
transforms, summary cache) returns a new instance through
dataclasses.replace, which re-runs validation. Optional fields are None
when a quantity was not retained; accessors raise the errors in
pibble.errors when a required field is missing.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import jax.numpy as jnp

from pibble.config import PARAMETERS
from pibble.errors import InvalidArgumentError, MissingComponentError
from pibble.fit.coords import Alr, CoordSystem, Default
from pibble.fit.names import name_parameter

if TYPE_CHECKING:
    import pandas as pd
    import xarray as xr

# array-valued fields converted to jnp arrays on construction
ARRAY_FIELDS: tuple[str, ...] = ("Eta", "Lambda", "Sigma", "Theta", "Gamma", "Xi", "X", "Y")
NAME_FIELDS: dict[str, str] = {
    "names_categories": "D",
    "names_covariates": "Q",
    "names_samples": "N",
}


@dataclass(frozen=True, eq=False)
class PibbleFit:
    """
    Posterior or prior draws of a pibble model.

    Parameters
    ----------
    D, N, Q : int
        Number of categories, samples (observations) and covariates.
    iter : int
        Number of draws stored on the iteration axis.
    coord_system : CoordSystem, optional
        Coordinate system of Eta/Lambda/Sigma/Theta/Xi. Defaults to
        ``Alr(D - 1)``.
    Eta, Lambda, Sigma : jnp.ndarray, optional
        Draws of the latent linear predictor, coefficients and covariance.
    upsilon, Theta, Gamma, Xi : optional
        Prior hyperparameters (needed only by sample_prior).
    X, Y : jnp.ndarray, optional
        Design matrix (Q, N) and observed counts (D, N).
    names_categories, names_covariates, names_samples : sequence of str, optional
        Dimension labels, length-checked against D, Q and N.
    log_marginal_likelihood : float, optional
        Reported by the display routine when present.
    summary : mapping of str to DataFrame, optional
        Cached posterior summaries keyed by parameter name. Treated as
        authoritative once set; see pibble.summary.summarize.

    Raises
    ------
    InvalidArgumentError
        When a stored array or name vector disagrees with the dimensions.
    """

    D: int
    N: int
    Q: int
    iter: int
    coord_system: CoordSystem | None = None
    Eta: jnp.ndarray | None = None
    Lambda: jnp.ndarray | None = None
    Sigma: jnp.ndarray | None = None
    upsilon: float | None = None
    Theta: jnp.ndarray | None = None
    Gamma: jnp.ndarray | None = None
    Xi: jnp.ndarray | None = None
    X: jnp.ndarray | None = None
    Y: jnp.ndarray | None = None
    names_categories: tuple[str, ...] | None = None
    names_covariates: tuple[str, ...] | None = None
    names_samples: tuple[str, ...] | None = None
    log_marginal_likelihood: float | None = None
    summary: Mapping[str, pd.DataFrame] | None = field(default=None, repr=False)

    def __post_init__(self):
        """Normalize field types and validate dimensions."""
        for dim in ("D", "N", "Q", "iter"):
            value = int(getattr(self, dim))
            if value < 1:
                raise InvalidArgumentError(f"{dim} must be positive, got {value}")
            object.__setattr__(self, dim, value)
        if self.D < 2:
            raise InvalidArgumentError(f"D must be at least 2, got {self.D}")

        if self.coord_system is None:
            object.__setattr__(self, "coord_system", Alr(self.D - 1))
        if not isinstance(self.coord_system, CoordSystem):
            raise InvalidArgumentError(
                f"coord_system must be a CoordSystem, got {type(self.coord_system).__name__}"
            )
        self.coord_system.validate(self.D)

        for name in ARRAY_FIELDS:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, jnp.asarray(value))
        if self.upsilon is not None:
            object.__setattr__(self, "upsilon", float(self.upsilon))

        for name, dim in NAME_FIELDS.items():
            value = getattr(self, name)
            if value is not None:
                value = tuple(str(v) for v in value)
                if len(value) != getattr(self, dim):
                    raise InvalidArgumentError(
                        f"{name} has length {len(value)}, expected {dim}={getattr(self, dim)}"
                    )
                object.__setattr__(self, name, value)

        if self.summary is not None:
            object.__setattr__(self, "summary", dict(self.summary))

        self._check_shapes()

    def _check_shapes(self) -> None:
        k = self.k
        expected = {
            "Eta": (k, self.N, self.iter),
            "Lambda": (k, self.Q, self.iter),
            "Sigma": (k, k, self.iter),
            "Theta": (k, self.Q),
            "Gamma": (self.Q, self.Q),
            "Xi": (k, k),
            "X": (self.Q, self.N),
            "Y": (self.D, self.N),
        }
        for name, shape in expected.items():
            value = getattr(self, name)
            if value is not None and tuple(value.shape) != shape:
                raise InvalidArgumentError(
                    f"{name} has shape {tuple(value.shape)}, expected {shape} "
                    f"({self.coord_system.describe()})"
                )

        if isinstance(self.coord_system, Default):
            present = [n for n in ("Lambda", "Sigma", "Theta", "Xi") if getattr(self, n) is not None]
            if present:
                raise InvalidArgumentError(
                    "proportions cannot represent " + ", ".join(present)
                    + "; store them in a log-ratio coordinate system"
                )

    # ------------------------------------------------------------------
    # ACCESSORS
    # ------------------------------------------------------------------
    @property
    def k(self) -> int:
        """Category-axis size in the current coordinate system."""
        return self.coord_system.size(self.D)

    @property
    def present_parameters(self) -> tuple[str, ...]:
        """Names of the parameter arrays stored on this object."""
        return tuple(p for p in PARAMETERS if getattr(self, p) is not None)

    def replace(self, **changes) -> PibbleFit:
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of every field (arrays are not copied)."""
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}

    def __str__(self) -> str:
        return format_fit(self)

    def __repr__(self) -> str:
        return (
            f"PibbleFit(D={self.D}, N={self.N}, Q={self.Q}, iter={self.iter}, "
            f"coord_system={self.coord_system!r}, parameters={list(self.present_parameters)})"
        )

    # ------------------------------------------------------------------
    # CONVENIENCE: delegate to the engines
    # ------------------------------------------------------------------
    def coef(self, use_names: bool = True):
        """Regression coefficients; see :func:`coef`."""
        return coef(self, use_names=use_names)

    def to_alr(self, base: int | None = None) -> PibbleFit:
        from pibble.transforms.fit import to_alr

        return to_alr(self, self.D - 1 if base is None else base)

    def to_clr(self) -> PibbleFit:
        from pibble.transforms.fit import to_clr

        return to_clr(self)

    def to_ilr(self, basis=None) -> PibbleFit:
        from pibble.transforms.fit import to_ilr

        return to_ilr(self, basis)

    def to_proportions(self) -> PibbleFit:
        from pibble.transforms.fit import to_proportions

        return to_proportions(self)

    def predict(self, *args, **kwargs):
        """Posterior predictive draws; see :func:`pibble.predict.predict`."""
        from pibble.predict.predictive import predict

        return predict(self, *args, **kwargs)

    def sample_prior(self, *args, **kwargs) -> PibbleFit:
        """Prior draws; see :func:`pibble.sampling.sample_prior`."""
        from pibble.sampling.prior import sample_prior

        return sample_prior(self, *args, **kwargs)

    def tidy_samples(self, use_names: bool = False, as_factor: bool = False) -> pd.DataFrame:
        from pibble.summary.tidy import tidy_samples

        return tidy_samples(self, use_names=use_names, as_factor=as_factor)

    def summarize(self, *args, **kwargs) -> dict[str, pd.DataFrame]:
        """Posterior summaries; see :func:`pibble.summary.summarize`."""
        from pibble.summary.posterior import summarize

        return summarize(self, *args, **kwargs)


# ----------------------------------------------------------------------
# Dimension accessors
# ----------------------------------------------------------------------
def category_count(fit: PibbleFit) -> int:
    """Number of categories D."""
    return fit.D


def sample_count(fit: PibbleFit) -> int:
    """Number of samples N."""
    return fit.N


def covariate_count(fit: PibbleFit) -> int:
    """Number of covariates Q."""
    return fit.Q


def iteration_count(fit: PibbleFit) -> int:
    """Number of stored draws."""
    return fit.iter


ncategories = category_count
nsamples = sample_count
ncovariates = covariate_count
niter = iteration_count


# ----------------------------------------------------------------------
# Name setters (return new objects)
# ----------------------------------------------------------------------
def set_names_categories(fit: PibbleFit, value: Sequence[str] | None) -> PibbleFit:
    """Return a copy of ``fit`` with category names ``value`` (None clears)."""
    return fit.replace(names_categories=value)


def set_names_covariates(fit: PibbleFit, value: Sequence[str] | None) -> PibbleFit:
    """Return a copy of ``fit`` with covariate names ``value`` (None clears)."""
    return fit.replace(names_covariates=value)


def set_names_samples(fit: PibbleFit, value: Sequence[str] | None) -> PibbleFit:
    """Return a copy of ``fit`` with sample names ``value`` (None clears)."""
    return fit.replace(names_samples=value)


def with_summary(fit: PibbleFit, summary: Mapping[str, pd.DataFrame] | None) -> PibbleFit:
    """Return a copy of ``fit`` whose summary cache is ``summary``."""
    return fit.replace(summary=summary)


def coef(fit: PibbleFit, use_names: bool = True) -> jnp.ndarray | xr.DataArray:
    """
    Return the regression coefficients Lambda.

    Parameters
    ----------
    fit : PibbleFit
    use_names : bool, default=True
        Return a DataArray with dims ("coord", "covariate", "iter") labelled
        by the fit's names.

    Returns
    -------
    jnp.ndarray or xr.DataArray
        Shape (k, Q, iter).

    Raises
    ------
    MissingComponentError
        When Lambda is not stored.
    """
    if fit.Lambda is None:
        raise MissingComponentError("Lambda")
    if use_names:
        return name_parameter(fit, "Lambda")
    return fit.Lambda


# ----------------------------------------------------------------------
# Display
# ----------------------------------------------------------------------
def format_fit(fit: PibbleFit) -> str:
    """Plain-text report of dimensions, parameters and coordinate system."""
    if fit.Y is None:
        lines = [" PibbleFit Object (Priors Only): "]
    else:
        lines = ["PibbleFit Object: "]
    lines.append(f"  Number of Samples:\t\t {fit.N}")
    lines.append(f"  Number of Categories:\t\t {fit.D}")
    lines.append(f"  Number of Covariates:\t\t {fit.Q}")
    lines.append(f"  Number of Posterior Samples:\t {fit.iter}")
    lines.append("  Contains Samples of Parameters:" + "  ".join(fit.present_parameters))

    cs = fit.coord_system.describe()
    if isinstance(fit.coord_system, Alr) and fit.names_categories is not None:
        cs = f"{cs} [{fit.names_categories[fit.coord_system.base]}]"
    lines.append(f"  Coordinate System:\t\t {cs}")
    if fit.log_marginal_likelihood is not None:
        lines.append(
            f"  Log Marginal Likelihood:\t {round(fit.log_marginal_likelihood, 3)}"
        )
    return "\n".join(lines)


def print_fit(fit: PibbleFit, summary: bool = False, **kwargs) -> None:
    """
    Print the report of :func:`format_fit`.

    Parameters
    ----------
    summary : bool, default=False
        Also compute and print posterior summaries (kwargs are passed to
        summarize).
    """
    print(format_fit(fit))
    if summary:
        from pibble.summary.posterior import summarize

        print("\n\n Summary: ")
        for parameter, table in summarize(fit, **kwargs).items():
            print(f"\n{parameter}:")
            print(table)
