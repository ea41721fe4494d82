"""
config.py
---------

Package-wide constants and configuration dataclasses.

SummaryConfig controls the credible-interval widths used by the summary
pipeline (summarize, summarise_posterior, mean_qi) and by predictive
summaries.

Examples
--------
>>> from pibble.config import SummaryConfig
>>> SummaryConfig().widths
(0.5, 0.8, 0.95, 0.99)
>>> SummaryConfig(widths=(0.9,)).quantile_levels()
(0.05, 0.95)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from pibble.errors import InvalidArgumentError

PARAMETERS: tuple[str, ...] = ("Eta", "Lambda", "Sigma")
RESPONSES: tuple[str, ...] = ("LambdaX", "Eta", "Y")
DEFAULT_WIDTHS: tuple[float, ...] = (0.5, 0.8, 0.95, 0.99)

# Hyperparameters required by sample_prior
HYPERPARAMETERS: tuple[str, ...] = ("upsilon", "Theta", "Gamma", "Xi")


def check_pars(pars: Iterable[str] | str) -> tuple[str, ...]:
    """Normalize a parameter selection and reject unknown names."""
    if isinstance(pars, str):
        pars = (pars,)
    pars = tuple(pars)
    unknown = [p for p in pars if p not in PARAMETERS]
    if unknown:
        raise InvalidArgumentError(
            f"unknown parameters {unknown}; expected a subset of {list(PARAMETERS)}"
        )
    return pars


@dataclass(frozen=True)
class SummaryConfig:
    """
    Configuration for posterior summaries.

    Attributes
    ----------
    widths : tuple of float
        Nested credible-interval widths. Each must lie strictly in (0, 1).
        Stored sorted ascending.
    point : {"mean", "median"}
        Point estimate reported by ``mean_qi`` in long format.
    """

    widths: tuple[float, ...] = DEFAULT_WIDTHS
    point: Literal["mean", "median"] = "mean"

    def __post_init__(self):
        """Validate configuration."""
        widths = tuple(float(w) for w in self.widths)
        if len(widths) == 0:
            raise InvalidArgumentError("widths must contain at least one value")
        for w in widths:
            if not 0.0 < w < 1.0:
                raise InvalidArgumentError(
                    f"interval widths must lie in (0, 1), got {w}"
                )
        object.__setattr__(self, "widths", tuple(sorted(set(widths))))

        if self.point not in ("mean", "median"):
            raise InvalidArgumentError(
                f"point must be 'mean' or 'median', got {self.point!r}"
            )

    def quantile_levels(self) -> tuple[float, ...]:
        """Lower and upper quantile levels of every width, ascending."""
        lower = [round((1.0 - w) / 2.0, 10) for w in self.widths]
        upper = [round(1.0 - q, 10) for q in lower]
        return tuple(sorted(lower + upper))
