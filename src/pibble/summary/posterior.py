"""
posterior.py
------------

Posterior summaries of fit objects and of long-format draw tables.

- summarise_posterior : wide reducer (mean, median, nested quantile bounds
  and any extra statistics) per group.
- mean_qi : long reducer, one row per (group, interval width).
- summarize : per-parameter summaries of a PibbleFit, served from the
  object's cache when every requested parameter is cached.
- precompute_summary : fill that cache.

Quantile columns are named after their level in percent: the default widths
(0.5, 0.8, 0.95, 0.99) give p0.5, p2.5, p10, p25, p75, p90, p97.5, p99.5.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Sequence

import pandas as pd
from loguru import logger

from pibble.config import DEFAULT_WIDTHS, SummaryConfig, check_pars
from pibble.errors import InvalidArgumentError, MissingComponentError
from pibble.fit.names import PARAMETER_DIMS
from pibble.fit.pibblefit import with_summary
from pibble.summary.tidy import tidy_samples

if TYPE_CHECKING:
    from pibble.fit.pibblefit import PibbleFit


def quantile_label(q: float) -> str:
    """Column name of a quantile level, e.g. 0.025 -> "p2.5"."""
    return f"p{round(q * 100, 8):g}"


def _grouped(df: pd.DataFrame, value: str, by: Sequence[str]):
    by = list(by)
    missing = [c for c in by + [value] if c not in df.columns]
    if missing:
        raise InvalidArgumentError(f"columns {missing} not found in table")
    # sort=False keeps groups in order of first appearance (axis order)
    return df.groupby(by, sort=False, observed=True)[value]


def summarise_posterior(
    df: pd.DataFrame,
    value: str = "val",
    by: Sequence[str] = ("Parameter", "coord", "coord2", "sample", "covariate"),
    config: SummaryConfig | None = None,
    **extra_stats: Callable[[pd.Series], float],
) -> pd.DataFrame:
    """
    Reduce draws to one row of statistics per group.

    Parameters
    ----------
    df : pd.DataFrame
        Long table of draws.
    value : str, default="val"
        Column holding the draws.
    by : sequence of str
        Grouping columns.
    config : SummaryConfig, optional
        Interval widths; defaults to ``SummaryConfig()``.
    **extra_stats : callable
        Additional statistics, ``name=fn`` where ``fn`` maps the draws of a
        group (a Series) to a scalar.

    Returns
    -------
    pd.DataFrame
        Columns ``*by, mean, median, p..., *extra_stats``.

    Examples
    --------
    >>> summarise_posterior(df, by=["coord"], sd=lambda v: v.std())
    """
    config = config or SummaryConfig()
    grouped = _grouped(df, value, by)

    stats = {"mean": grouped.mean(), "median": grouped.median()}
    for q in config.quantile_levels():
        stats[quantile_label(q)] = grouped.quantile(q)
    for name, fn in extra_stats.items():
        if not callable(fn):
            raise InvalidArgumentError(f"extra statistic {name!r} is not callable")
        stats[name] = grouped.agg(fn)
    return pd.DataFrame(stats).reset_index()


def mean_qi(
    df: pd.DataFrame,
    value: str = "val",
    by: Sequence[str] = ("Parameter", "coord", "coord2", "sample", "covariate"),
    widths: Iterable[float] = DEFAULT_WIDTHS,
    point: str = "mean",
) -> pd.DataFrame:
    """
    Point estimate and quantile intervals in long format.

    Parameters
    ----------
    df : pd.DataFrame
        Long table of draws.
    value : str, default="val"
        Column holding the draws; also the name of the point-estimate column.
    by : sequence of str
        Grouping columns.
    widths : iterable of float
        Interval widths, each in (0, 1).
    point : {"mean", "median"}
        Point estimate.

    Returns
    -------
    pd.DataFrame
        Columns ``*by, val, lower, upper, width, point, interval``; one row
        per group and width, widths ascending within a group.
    """
    config = SummaryConfig(widths=tuple(widths), point=point)
    grouped = _grouped(df, value, by)
    estimate = grouped.mean() if config.point == "mean" else grouped.median()

    frames = []
    for w in config.widths:
        lo = round((1.0 - w) / 2.0, 10)
        frame = pd.DataFrame(
            {
                value: estimate,
                "lower": grouped.quantile(lo),
                "upper": grouped.quantile(1.0 - lo),
            }
        )
        frame["width"] = w
        frames.append(frame.reset_index())

    out = pd.concat(frames, ignore_index=True)
    out["point"] = config.point
    out["interval"] = "qi"
    # interleave widths within each group
    order = out.groupby(list(by), sort=False, observed=True).ngroup()
    out = out.assign(_group=order).sort_values(["_group", "width"], kind="stable")
    return out.drop(columns="_group").reset_index(drop=True)


def summarize(
    fit: PibbleFit,
    pars: Iterable[str] | str | None = None,
    use_names: bool = True,
    as_factor: bool = False,
    gather_prob: bool = False,
    *,
    config: SummaryConfig | None = None,
    **extra_stats: Callable[[pd.Series], float],
) -> dict[str, pd.DataFrame]:
    """
    Summarize the posterior draws of a fit, one table per parameter.

    Parameters
    ----------
    fit : PibbleFit
    pars : iterable of {"Eta", "Lambda", "Sigma"}, optional
        Parameters to summarize; all present parameters when None.
    use_names : bool, default=True
        Label index columns with the fit's names.
    as_factor : bool, default=False
        Labels as ordered categoricals (implies ``use_names``).
    gather_prob : bool, default=False
        Return long-format intervals (:func:`mean_qi`) instead of the wide
        table of :func:`summarise_posterior`.
    config : SummaryConfig, optional
        Interval widths.
    **extra_stats : callable
        Passed to :func:`summarise_posterior`.

    Returns
    -------
    dict of str -> pd.DataFrame
        Keyed by parameter name. Index columns a parameter does not have are
        dropped.

    Raises
    ------
    InvalidArgumentError
        For unknown parameter names.
    MissingComponentError
        When a requested parameter has no draws and is not cached.

    Notes
    -----
    When ``fit.summary`` already holds every requested parameter, the cached
    tables are returned as is and the other arguments are ignored.
    """
    pars = fit.present_parameters if pars is None else check_pars(pars)

    if fit.summary is not None and pars and all(p in fit.summary for p in pars):
        logger.debug("returning cached summaries of {}", list(pars))
        return {p: fit.summary[p] for p in pars}

    for p in pars:
        if getattr(fit, p) is None:
            raise MissingComponentError(p, "summarize it")

    config = config or SummaryConfig()
    tidy = tidy_samples(fit, use_names=use_names or as_factor, as_factor=as_factor)

    out = {}
    for p in pars:
        draws = tidy.loc[tidy["Parameter"] == p]
        by = ["Parameter"] + [d for d in PARAMETER_DIMS[p] if d != "iter"]
        if gather_prob:
            table = mean_qi(draws, "val", by, widths=config.widths, point=config.point)
        else:
            table = summarise_posterior(draws, "val", by, config, **extra_stats)
        out[p] = table.dropna(axis=1, how="all")
    return out


def precompute_summary(fit: PibbleFit, **kwargs) -> PibbleFit:
    """
    Return a copy of ``fit`` with its summary cache filled.

    Keyword arguments are passed to :func:`summarize`. Later calls to
    summarize that request a subset of the cached parameters return the
    cached tables.
    """
    return with_summary(fit, summarize(fit, **kwargs))
