"""
tidy.py
-------

Flatten 3-D draw arrays into long-format ("tidy") tables.

One row per (index..., iteration) entry of an array, with 0-based integer
index columns and a value column. tidy_samples stacks Eta, Lambda and Sigma
into one table tagged by a ``Parameter`` column:

    Parameter  coord  coord2  sample  covariate  iter  val
    Eta        0      <NA>    3       <NA>       17    0.41
    Lambda     1      <NA>    <NA>    0          17   -1.20
    Sigma      0      1       <NA>    <NA>       17    0.08

Index columns use the nullable Int64 dtype so axes a parameter does not
have stay missing (<NA>) rather than turning the column into floats.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np
import pandas as pd

from pibble.fit.names import PARAMETER_DIMS, axis_labels

if TYPE_CHECKING:
    from pibble.fit.pibblefit import PibbleFit

INDEX_COLUMNS: tuple[str, ...] = ("coord", "coord2", "sample", "covariate")
TIDY_COLUMNS: tuple[str, ...] = ("Parameter",) + INDEX_COLUMNS + ("iter", "val")


def gather_array(
    array,
    value_name: str = "val",
    dim_names: Sequence[str] = ("dim_1", "dim_2", "dim_3"),
) -> pd.DataFrame:
    """
    Convert an array into a long DataFrame.

    Parameters
    ----------
    array : array-like
        Values, one axis per entry of ``dim_names``.
    value_name : str, default="val"
        Name of the value column.
    dim_names : sequence of str
        Names of the index columns.

    Returns
    -------
    pd.DataFrame
        Columns ``*dim_names, value_name``; one row per array entry.

    Examples
    --------
    >>> gather_array(jnp.zeros((2, 3, 4)), "val", ("coord", "sample", "iter")).shape
    (24, 4)
    """
    values = np.asarray(array)
    if values.ndim != len(dim_names):
        raise ValueError(
            f"array has {values.ndim} axes but {len(dim_names)} dim names were given"
        )
    idx = np.indices(values.shape).reshape(values.ndim, -1)
    data = {name: idx[i] for i, name in enumerate(dim_names)}
    data[value_name] = values.reshape(-1)
    return pd.DataFrame(data)


def name_tidy(
    df: pd.DataFrame,
    mapping: Mapping[str, Sequence[str] | None],
    as_factor: bool = False,
) -> pd.DataFrame:
    """
    Replace integer index columns by labels.

    Parameters
    ----------
    df : pd.DataFrame
        Long table with 0-based index columns.
    mapping : mapping of column -> labels
        Labels per column; None (or a column absent from ``df``) leaves the
        bare index in place.
    as_factor : bool, default=False
        Return ordered categoricals whose category order follows the axis
        order instead of free-form labels.

    Returns
    -------
    pd.DataFrame
        Copy of ``df`` with labelled columns.
    """
    df = df.copy()
    for column, labels in mapping.items():
        if labels is None or column not in df.columns:
            continue
        labels = list(labels)
        named = df[column].map(dict(enumerate(labels)))
        if as_factor:
            named = pd.Categorical(named, categories=list(dict.fromkeys(labels)), ordered=True)
        df[column] = named
    return df


def tidy_samples(
    fit: PibbleFit,
    use_names: bool = False,
    as_factor: bool = False,
) -> pd.DataFrame:
    """
    Stack the draws of every present parameter into one long table.

    Parameters
    ----------
    fit : PibbleFit
    use_names : bool, default=False
        Replace indices with the fit's labels (coordinate names for
        coord/coord2, sample names, covariate names). Axes without a name
        vector keep their 0-based index.
    as_factor : bool, default=False
        With ``use_names``, return labels as ordered categoricals.

    Returns
    -------
    pd.DataFrame
        Columns ``Parameter, coord, coord2, sample, covariate, iter, val``.
    """
    frames = []
    for parameter in fit.present_parameters:
        df = gather_array(getattr(fit, parameter), "val", PARAMETER_DIMS[parameter])
        df.insert(0, "Parameter", parameter)
        frames.append(df)

    if not frames:
        return pd.DataFrame({c: pd.Series(dtype="object") for c in TIDY_COLUMNS})

    tidy = pd.concat(frames, ignore_index=True)
    for column in INDEX_COLUMNS + ("iter",):
        if column not in tidy.columns:
            tidy[column] = pd.NA
        tidy[column] = tidy[column].astype("Int64")
    tidy = tidy.loc[:, list(TIDY_COLUMNS)]

    if not use_names:
        return tidy
    mapping = {column: axis_labels(fit, column) for column in INDEX_COLUMNS}
    return name_tidy(tidy, mapping, as_factor)
