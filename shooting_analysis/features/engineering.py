"""
Temporal feature derivation for the shooting incident table.

All functions here are pure (no file I/O, deterministic output for a given
input), which keeps them easy to unit-test.

derive_features(clean_df) adds:

    year         (int)          calendar year of occur_date
    month        (categorical)  1..12, ordered, all twelve months declared
    day          (int)          day of month
    time_bucket  (categorical)  1..6, ordered, see assign_time_bucket()

Time buckets are defined on the HHMM scale, i.e. occur_time_numeric * 100:

    bucket 1: [   0,  400]
    bucket 2: ( 400,  800]
    bucket 3: ( 800, 1200]
    bucket 4: (1200, 1600]
    bucket 5: (1600, 2000]
    bucket 6: (2000, 2400]

Because occur_time_numeric is "HH.MM" rather than fractional hours, the
buckets are four clock hours wide only at their edges; 3:59 is 359 and
4:00 is 400, both in bucket 1.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd

from shooting_analysis.errors import BucketAssignmentError, RowErrorTally

logger = logging.getLogger(__name__)

BUCKET_EDGES = (0, 400, 800, 1200, 1600, 2000, 2400)
TIME_BUCKETS = tuple(range(1, len(BUCKET_EDGES)))
MONTHS = tuple(range(1, 13))

MONTH_DTYPE = pd.CategoricalDtype(categories=list(MONTHS), ordered=True)
TIME_BUCKET_DTYPE = pd.CategoricalDtype(categories=list(TIME_BUCKETS), ordered=True)

FEATURE_COLUMNS = ["year", "month", "day", "time_bucket"]


def to_hhmm(occur_time_numeric: float) -> float:
    """Scale a numeric time back to HHMM, rounding away float noise (23.59 -> 2359)."""
    return round(occur_time_numeric * 100, 6)


def assign_time_bucket(hhmm: float) -> int:
    """
    Return the 1-based time bucket for a time on the HHMM scale.

    Raises:
        BucketAssignmentError: If the value is NaN or outside [0, 2400].
    """
    if hhmm is None or (isinstance(hhmm, float) and math.isnan(hhmm)):
        raise BucketAssignmentError("occur_time_numeric", hhmm, "missing time value")
    if hhmm < BUCKET_EDGES[0] or hhmm > BUCKET_EDGES[-1]:
        raise BucketAssignmentError(
            "occur_time_numeric",
            hhmm,
            f"outside [{BUCKET_EDGES[0]}, {BUCKET_EDGES[-1]}]",
        )
    for bucket, upper in zip(TIME_BUCKETS, BUCKET_EDGES[1:-1]):
        if hhmm <= upper:
            return bucket
    return TIME_BUCKETS[-1]


def derive_features(
    df: pd.DataFrame,
    tally: RowErrorTally | None = None,
) -> pd.DataFrame:
    """
    Add calendar and time-of-day features to the clean table.

    Rows whose occur_time_numeric cannot be bucketed are dropped and
    recorded in `tally` as BucketAssignmentError; they take no part in
    aggregation or modelling.

    Args:
        df: Output of normalize_schema (needs occur_date, occur_time_numeric).
        tally: Receives one BucketAssignmentError per dropped row.

    Returns:
        A new DataFrame with the input columns plus FEATURE_COLUMNS and a
        fresh RangeIndex.
    """
    tally = tally if tally is not None else RowErrorTally()

    buckets: list[float] = []
    for idx, value in df["occur_time_numeric"].items():
        try:
            buckets.append(assign_time_bucket(to_hhmm(value)))
        except BucketAssignmentError as exc:
            tally.record(exc)
            logger.debug("Row %s dropped: %s", idx, exc)
            buckets.append(np.nan)

    out = df.copy()
    bucket_series = pd.Series(buckets, index=df.index, dtype=float)
    dropped = int(bucket_series.isna().sum())
    if dropped:
        logger.warning("Dropped %d rows with a time outside the bucket range", dropped)

    out = out.loc[bucket_series.notna()].copy()
    dates = out["occur_date"].dt
    out["year"] = dates.year.astype(int)
    out["month"] = pd.Categorical(dates.month, dtype=MONTH_DTYPE)
    out["day"] = dates.day.astype(int)
    out["time_bucket"] = pd.Categorical(
        bucket_series.loc[out.index].astype(int), dtype=TIME_BUCKET_DTYPE
    )

    logger.info("Features derived: %d rows", len(out))
    return out.reset_index(drop=True)
