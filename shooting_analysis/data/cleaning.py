"""
Completeness filter and schema normalizer for the raw incident export.

Stage order matters and is fixed:

  1. filter_complete(raw_df)
     Drops rows with an empty BORO or OCCUR_DATE. Nothing else is looked at.
     About a third of the export has empty perpetrator fields, so requiring
     anything beyond these two columns would throw most of the data away.

  2. normalize_schema(filtered_df)
     Parses OCCUR_DATE, converts OCCUR_TIME to its numeric form, turns the
     descriptive columns into categoricals and projects to CLEAN_COLUMNS.
     Rows whose date cannot be parsed are dropped and counted.

Usage:

    from shooting_analysis.data.cleaning import filter_complete, normalize_schema
    from shooting_analysis.errors import RowErrorTally

    tally = RowErrorTally()
    clean_df = normalize_schema(filter_complete(raw_df), tally=tally)
"""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np
import pandas as pd

from shooting_analysis.data.categories import CategoryCodes
from shooting_analysis.errors import ParseError, RowErrorTally

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("BORO", "OCCUR_DATE")
DATE_FORMAT = "%m/%d/%Y"

# raw column -> clean column, for every column kept as a categorical
CATEGORICAL_COLUMNS = {
    "BORO": "boro",
    "JURISDICTION_CODE": "jurisdiction_code",
    "STATISTICAL_MURDER_FLAG": "murder_flag",
    "LOCATION_DESC": "location_desc",
    "VIC_AGE_GROUP": "victim_age_group",
    "VIC_SEX": "victim_sex",
    "VIC_RACE": "victim_race",
    "PERP_AGE_GROUP": "perp_age_group",
    "PERP_SEX": "perp_sex",
    "PERP_RACE": "perp_race",
}

CLEAN_COLUMNS = [
    "occur_date",
    "occur_time_raw",
    "occur_time_numeric",
    "precinct",
    *CATEGORICAL_COLUMNS.values(),
]


def _is_blank(values: pd.Series) -> pd.Series:
    return values.isna() | (values.astype(str).str.strip() == "")


def filter_complete(
    df: pd.DataFrame,
    required: tuple[str, ...] = REQUIRED_FIELDS,
) -> pd.DataFrame:
    """
    Keep only rows whose required fields are non-empty.

    Emptiness is the only test: a malformed but non-empty OCCUR_DATE passes
    here and is dealt with by normalize_schema.

    Args:
        df: Raw string-typed DataFrame from the row source.
        required: Raw column names that must be non-empty.

    Returns:
        The surviving rows in their original order, with a fresh RangeIndex.

    Raises:
        KeyError: If a required column is absent from the frame.
    """
    absent = [c for c in required if c not in df.columns]
    if absent:
        raise KeyError(f"Required columns not present in raw data: {absent}")

    blank = pd.Series(False, index=df.index)
    for col in required:
        blank |= _is_blank(df[col])

    kept = df.loc[~blank].reset_index(drop=True)
    logger.info(
        "Completeness filter: kept %d of %d rows (dropped %d missing %s)",
        len(kept),
        len(df),
        int(blank.sum()),
        "/".join(required),
    )
    return kept


def parse_occur_date(value: object, fmt: str = DATE_FORMAT) -> datetime:
    """
    Parse one OCCUR_DATE string such as "07/04/2021" (month/day/year).

    Raises:
        ParseError: If the value does not match `fmt`, or names a date outside
            the datetime64[ns] range (1677-09-21 .. 2262-04-11).
    """
    text = "" if value is None else str(value).strip()
    try:
        parsed = datetime.strptime(text, fmt)
    except ValueError as e:
        raise ParseError("OCCUR_DATE", value, f"does not match {fmt}") from e
    if not pd.Timestamp.min <= parsed <= pd.Timestamp.max:
        raise ParseError("OCCUR_DATE", value, "outside the representable date range")
    return parsed


def parse_occur_time(value: object) -> float:
    """
    Numeric form of a clock time: hour and minute digits joined, divided by 100.

    "16:30" -> 16.3, "4:30" and "04:30" -> 4.3, "19:39:00" -> 19.39 (seconds
    are ignored). This is not fractional hours: "00:30" gives 0.30, not 0.5.
    Returns NaN for anything that is not digits separated by colons.
    """
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return np.nan
    parts = str(value).strip().split(":")
    if len(parts) == 1:
        digits = parts[0]
    else:
        hour, minute = parts[0], parts[1]
        if not minute.isdigit():
            return np.nan
        digits = hour + minute.zfill(2)
    if not digits.isdigit():
        return np.nan
    return int(digits) / 100


def _column_or_blank(df: pd.DataFrame, col: str) -> pd.Series:
    if col in df.columns:
        return df[col]
    logger.warning("Column %s not present in raw data; treating it as empty", col)
    return pd.Series("", index=df.index, name=col)


def _parse_dates(
    values: pd.Series,
    fmt: str,
    tally: RowErrorTally,
) -> tuple[list[datetime], list]:
    parsed: list[datetime] = []
    kept_index: list = []
    for idx, value in values.items():
        try:
            parsed.append(parse_occur_date(value, fmt))
        except ParseError as exc:
            tally.record(exc)
            logger.debug("Row %s dropped: %s", idx, exc)
            continue
        kept_index.append(idx)
    return parsed, kept_index


def normalize_schema(
    df: pd.DataFrame,
    tally: RowErrorTally | None = None,
    codebook: dict[str, CategoryCodes] | None = None,
    date_format: str = DATE_FORMAT,
) -> pd.DataFrame:
    """
    Convert filtered raw rows into typed, projected clean rows.

    Args:
        df: Output of filter_complete.
        tally: Receives one ParseError per dropped row. A private tally is
               used when omitted, so the drop count is still logged.
        codebook: Clean column name -> CategoryCodes. Pass the same dict
                  across calls to keep integer codes stable between batches.
                  Missing entries are created.
        date_format: strptime format for OCCUR_DATE.

    Returns:
        DataFrame with exactly CLEAN_COLUMNS:
            occur_date (datetime64), occur_time_raw (str),
            occur_time_numeric (float, NaN if unreadable), precinct (Int64),
            and one pandas categorical per CATEGORICAL_COLUMNS entry
            (empty input -> "MISSING").
    """
    tally = tally if tally is not None else RowErrorTally()
    codebook = codebook if codebook is not None else {}
    before = tally.parse_errors

    dates, kept_index = _parse_dates(df["OCCUR_DATE"], date_format, tally)
    dropped = tally.parse_errors - before
    if dropped:
        logger.warning("Dropped %d rows with an unparseable OCCUR_DATE (expected %s)", dropped, date_format)

    rows = df.loc[kept_index].reset_index(drop=True)
    out = pd.DataFrame(index=rows.index)

    out["occur_date"] = pd.Series(pd.to_datetime(dates), index=rows.index, dtype="datetime64[ns]")
    time_raw = _column_or_blank(rows, "OCCUR_TIME").fillna("").astype(str).str.strip()
    out["occur_time_raw"] = time_raw
    out["occur_time_numeric"] = time_raw.map(parse_occur_time).astype(float)

    precinct = pd.to_numeric(_column_or_blank(rows, "PRECINCT"), errors="coerce").astype(float)
    out["precinct"] = precinct.where(precinct == precinct.round()).astype("Int64")

    for raw_col, clean_col in CATEGORICAL_COLUMNS.items():
        codes = codebook.setdefault(clean_col, CategoryCodes())
        out[clean_col] = codes.categorize(_column_or_blank(rows, raw_col))

    unreadable_times = int(out["occur_time_numeric"].isna().sum())
    if unreadable_times:
        logger.info("%d rows have an unreadable OCCUR_TIME", unreadable_times)

    logger.info("Schema normalized: %d rows, %d columns", len(out), len(out.columns))
    return out[CLEAN_COLUMNS]
