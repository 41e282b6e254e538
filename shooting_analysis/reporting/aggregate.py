"""
Group-by counts over the featured incident table, for charts and reports.

count_by(df, "boro")        -> {"BRONX": 120, "BROOKLYN": 340, ...}   first-seen order
count_by(df, "year")        -> {2006: 2055, 2007: 1887, ...}          ascending
count_by(df, "month")       -> {1: 101, 2: 87, ...}                   calendar order
count_by(df, "time_bucket") -> {1: 410, 2: 95, ...}                   bucket order

Only values that actually occur are reported, and null values are not
counted, so sum(count_by(df, d).values()) == df[d].notna().sum().
"""

from __future__ import annotations

import pandas as pd

ORDERED_DIMENSIONS = ("year", "month", "time_bucket")
DIMENSIONS = ("boro", *ORDERED_DIMENSIONS)


def count_by(df: pd.DataFrame, dimension: str) -> dict:
    """
    Count rows per distinct value of one reporting dimension.

    Raises:
        ValueError: If `dimension` is not one of DIMENSIONS.
    """
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown dimension {dimension!r}; expected one of {DIMENSIONS}")

    values = df[dimension].dropna()
    if isinstance(values.dtype, pd.CategoricalDtype):
        values = values.astype(values.cat.categories.dtype)

    counts = values.value_counts(sort=False)
    if dimension in ORDERED_DIMENSIONS:
        keys = sorted(counts.index)
    else:
        keys = pd.unique(values)
    return {_plain(k): int(counts[k]) for k in keys}


def summarise(df: pd.DataFrame, dimensions: tuple[str, ...] = DIMENSIONS) -> dict[str, dict]:
    return {dim: count_by(df, dim) for dim in dimensions}


def counts_frame(counts: dict, dimension: str) -> pd.DataFrame:
    """Two-column (dimension, count) table, the shape the chart layer reads."""
    return pd.DataFrame({dimension: list(counts), "count": list(counts.values())})


def _plain(value):
    # numpy scalars -> Python scalars so results compare and serialise cleanly
    return value.item() if hasattr(value, "item") else value
