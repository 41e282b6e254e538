"""
Row source for the NYPD Shooting Incident (Historic) export.

The dataset is published as a single CSV on NYC Open Data. Rows come back
as plain strings. No dtype inference or NA conversion is done here, so an
empty cell stays "" and every later stage sees exactly what the file held.

Usage:

    from shooting_analysis.data.source import load_rows

    raw_df = load_rows("https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv", timeout=60)
    raw_df = load_rows("data/raw/NYPD_Shooting_Incident_Data__Historic_.csv")

Any transport or decoding problem on the remote path is raised as a
FetchError. There is no retry and no partial-data fallback.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pandas as pd
import requests

from shooting_analysis.errors import FetchError

logger = logging.getLogger(__name__)

RAW_COLUMNS = [
    "INCIDENT_KEY",
    "OCCUR_DATE",
    "OCCUR_TIME",
    "BORO",
    "PRECINCT",
    "JURISDICTION_CODE",
    "LOCATION_DESC",
    "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP",
    "PERP_SEX",
    "PERP_RACE",
    "VIC_AGE_GROUP",
    "VIC_SEX",
    "VIC_RACE",
]

_READ_OPTS = {"dtype": str, "keep_default_na": False}


def _frame_from_text(text: str, origin: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(io.StringIO(text), **_READ_OPTS)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FetchError(f"{origin}: response is not a readable CSV ({e})") from e

    missing = [c for c in ("BORO", "OCCUR_DATE") if c not in df.columns]
    if missing:
        raise FetchError(f"{origin}: response is missing required columns {missing}")
    return df


def fetch_rows(url: str, timeout: float = 60.0) -> pd.DataFrame:
    """
    Download the CSV export and return it as a string-typed DataFrame.

    Args:
        url: HTTP(S) URL of the CSV export.
        timeout: Seconds to wait for the server before giving up.

    Returns:
        DataFrame with one column per CSV header, every value a str.

    Raises:
        FetchError: On timeout, connection failure, a non-2xx status, or a
            body that cannot be read as a CSV with the expected columns.
    """
    logger.info("Fetching %s (timeout=%ss)", url, timeout)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise FetchError(f"timed out after {timeout}s fetching {url}") from e
    except requests.RequestException as e:
        raise FetchError(f"request to {url} failed: {e}") from e

    df = _frame_from_text(response.text, url)
    logger.info("Fetched %d rows, %d columns", len(df), len(df.columns))
    return df


def read_rows(path: Path | str) -> pd.DataFrame:
    """
    Read a local copy of the CSV export.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Incident CSV not found: {path}")

    df = pd.read_csv(path, **_READ_OPTS)
    logger.info("%s: read %d rows", path.name, len(df))
    return df


def load_rows(location: Path | str, timeout: float = 60.0) -> pd.DataFrame:
    """Fetch from a URL or read from disk, depending on what `location` looks like."""
    if str(location).startswith(("http://", "https://")):
        return fetch_rows(str(location), timeout=timeout)
    return read_rows(location)
