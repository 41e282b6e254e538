"""
Shared pytest fixtures for the shooting analysis test suite.

All fixtures are synthetic — no download and no real dataset file required.
Raw rows mirror the NYPD export: every value is a string, empty cells are "".
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from shooting_analysis.data.source import RAW_COLUMNS


def make_raw_row(**overrides: str) -> dict[str, str]:
    """One raw export row with plausible defaults; keyword args replace columns."""
    row = {col: "" for col in RAW_COLUMNS}
    row.update({
        "INCIDENT_KEY": "100000001",
        "OCCUR_DATE": "07/04/2021",
        "OCCUR_TIME": "21:15:00",
        "BORO": "BROOKLYN",
        "PRECINCT": "75",
        "JURISDICTION_CODE": "0",
        "STATISTICAL_MURDER_FLAG": "false",
        "VIC_AGE_GROUP": "25-44",
        "VIC_SEX": "M",
        "VIC_RACE": "BLACK",
    })
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# The ten-row end-to-end scenario
# ---------------------------------------------------------------------------

@pytest.fixture()
def scenario_raw_df() -> pd.DataFrame:
    """
    Ten raw rows:
      - rows 2 and 6 have an empty BORO       → dropped by the completeness filter
      - row 8 has a non-date OCCUR_DATE       → dropped by the normalizer (1 ParseError)
    Expected: 10 → 8 → 7 featured rows.
    """
    rows = [
        make_raw_row(INCIDENT_KEY="1", BORO="BRONX", OCCUR_DATE="01/15/2019", OCCUR_TIME="00:00:00",
                     STATISTICAL_MURDER_FLAG="true"),
        make_raw_row(INCIDENT_KEY="2", BORO="BROOKLYN", OCCUR_DATE="02/03/2019", OCCUR_TIME="11:59:00"),
        make_raw_row(INCIDENT_KEY="3", BORO="", OCCUR_DATE="03/22/2019", OCCUR_TIME="13:05:00"),
        make_raw_row(INCIDENT_KEY="4", BORO="QUEENS", OCCUR_DATE="04/30/2020", OCCUR_TIME="23:59:00",
                     STATISTICAL_MURDER_FLAG="true"),
        make_raw_row(INCIDENT_KEY="5", BORO="BROOKLYN", OCCUR_DATE="05/01/2020", OCCUR_TIME="4:00:00"),
        make_raw_row(INCIDENT_KEY="6", BORO="MANHATTAN", OCCUR_DATE="06/18/2020", OCCUR_TIME="17:45:00",
                     VIC_SEX="F"),
        make_raw_row(INCIDENT_KEY="7", BORO=" ", OCCUR_DATE="07/07/2021", OCCUR_TIME="02:10:00"),
        make_raw_row(INCIDENT_KEY="8", BORO="BRONX", OCCUR_DATE="08/09/2021", OCCUR_TIME="19:20:00",
                     STATISTICAL_MURDER_FLAG="true"),
        make_raw_row(INCIDENT_KEY="9", BORO="QUEENS", OCCUR_DATE="not a date", OCCUR_TIME="08:00:00"),
        make_raw_row(INCIDENT_KEY="10", BORO="BROOKLYN", OCCUR_DATE="12/31/2021", OCCUR_TIME="22:30:00"),
    ]
    return pd.DataFrame(rows, columns=RAW_COLUMNS)


@pytest.fixture()
def scenario_csv_file(tmp_path: Path, scenario_raw_df: pd.DataFrame) -> Path:
    """The scenario rows written as an export-shaped CSV."""
    p = tmp_path / "NYPD_Shooting_Incident_Data__Historic_.csv"
    scenario_raw_df.to_csv(p, index=False)
    return p


# ---------------------------------------------------------------------------
# A featured table large enough to fit a model on
# ---------------------------------------------------------------------------

@pytest.fixture()
def model_df() -> pd.DataFrame:
    """
    60 featured-shaped rows with both murder_flag classes present in every
    borough, so any 70% subset has target variance. Values cycle
    deterministically, no randomness.
    """
    boros = ["BRONX", "BROOKLYN", "QUEENS"]
    records = []
    for i in range(60):
        records.append({
            "boro": boros[i % 3],
            "victim_sex": "M" if i % 4 else "F",
            "year": 2010 + (i % 10),
            "occur_time_numeric": round((i * 37) % 2400 / 100, 2),
            "murder_flag": "true" if i % 5 in (0, 3) else "false",
        })
    df = pd.DataFrame(records)
    for col in ("boro", "victim_sex", "murder_flag"):
        df[col] = df[col].astype("category")
    return df
