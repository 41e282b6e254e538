"""
Tests for shooting_analysis.reporting.aggregate — group-by counts.
"""

from __future__ import annotations

import pandas as pd
import pytest

from shooting_analysis.data.cleaning import filter_complete, normalize_schema
from shooting_analysis.features.engineering import derive_features
from shooting_analysis.reporting.aggregate import DIMENSIONS, count_by, counts_frame, summarise


@pytest.fixture()
def featured_df(scenario_raw_df: pd.DataFrame) -> pd.DataFrame:
    return derive_features(normalize_schema(filter_complete(scenario_raw_df)))


class TestCountBy:
    def test_boro_counts(self, featured_df: pd.DataFrame) -> None:
        assert count_by(featured_df, "boro") == {
            "BRONX": 2,
            "BROOKLYN": 3,
            "QUEENS": 1,
            "MANHATTAN": 1,
        }

    def test_boro_in_first_seen_order(self, featured_df: pd.DataFrame) -> None:
        assert list(count_by(featured_df, "boro")) == ["BRONX", "BROOKLYN", "QUEENS", "MANHATTAN"]

    def test_year_in_ascending_order(self, featured_df: pd.DataFrame) -> None:
        assert count_by(featured_df, "year") == {2019: 2, 2020: 3, 2021: 2}
        assert list(count_by(featured_df, "year")) == [2019, 2020, 2021]

    def test_month_in_calendar_order_without_empty_months(self, featured_df: pd.DataFrame) -> None:
        counts = count_by(featured_df, "month")
        assert list(counts) == sorted(counts)
        assert 3 not in counts  # the March row was dropped for a missing borough

    def test_time_bucket_counts(self, featured_df: pd.DataFrame) -> None:
        assert count_by(featured_df, "time_bucket") == {1: 2, 3: 1, 5: 2, 6: 2}

    @pytest.mark.parametrize("dimension", DIMENSIONS)
    def test_counts_sum_to_non_null_rows(self, featured_df: pd.DataFrame, dimension: str) -> None:
        counts = count_by(featured_df, dimension)
        assert sum(counts.values()) == featured_df[dimension].notna().sum() == 7

    def test_nulls_not_counted(self) -> None:
        df = pd.DataFrame({"year": [2020, None, 2020, 2021]})
        assert count_by(df, "year") == {2020: 2, 2021: 1}

    def test_plain_python_keys(self, featured_df: pd.DataFrame) -> None:
        assert all(type(k) is int for k in count_by(featured_df, "year"))

    def test_unknown_dimension_raises(self, featured_df: pd.DataFrame) -> None:
        with pytest.raises(ValueError):
            count_by(featured_df, "precinct")

    def test_empty_table(self, featured_df: pd.DataFrame) -> None:
        assert count_by(featured_df.iloc[0:0], "boro") == {}


class TestSummarise:
    def test_one_mapping_per_dimension(self, featured_df: pd.DataFrame) -> None:
        summary = summarise(featured_df)
        assert set(summary) == set(DIMENSIONS)

    def test_counts_frame_shape(self) -> None:
        frame = counts_frame({"BRONX": 2, "QUEENS": 1}, "boro")
        assert list(frame.columns) == ["boro", "count"]
        assert frame["count"].tolist() == [2, 1]
