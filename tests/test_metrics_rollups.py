"""Tests for category rollups and geography totals."""

import math

import pandas as pd
import pytest

from excess_deaths.config import Config
from excess_deaths.metrics.rollups import (
    ROLLUP_COLUMNS,
    TOTALS_COLUMNS,
    aggregate_categories,
    aggregate_totals,
    excess_rate,
)
from excess_deaths.normalize.mortality import normalize_mortality


@pytest.fixture
def canonical(raw_row, config: Config) -> pd.DataFrame:
    """Canonical records for NY and TX with a missing-difference week."""
    raw = pd.DataFrame(
        [
            raw_row(date="04/04/2020", observed="1,100", difference="100"),
            raw_row(date="04/11/2020", observed="1,050", difference="50"),
            raw_row(date="04/18/2020", observed="1,000", difference=None),
            raw_row(date="04/04/2020", outcome="COVID-19", observed="30", difference="30"),
            raw_row(date="04/04/2020", race="Hispanic", observed="300", difference="100"),
            raw_row(date="04/04/2020", race="Non-Hispanic Asian", observed="50", difference="-10"),
            raw_row(date="04/04/2020", race="Other", observed="0", difference="0"),
            raw_row(code="TX", name="Texas", date="04/04/2020", observed="500", difference="20"),
        ]
    )
    return normalize_mortality(raw, config)


class TestExcessRate:
    """Tests for excess_rate function."""

    def test_rate_uses_implied_baseline(self) -> None:
        """Test that the denominator is observed minus excess."""
        rate = excess_rate(pd.Series([150.0]), pd.Series([2150.0]))
        assert rate.iloc[0] == pytest.approx(0.075)

    def test_zero_denominator_undefined(self) -> None:
        """Test that observed equal to difference is undefined, not infinite."""
        rate = excess_rate(pd.Series([0.0, 25.0]), pd.Series([0.0, 25.0]))
        assert rate.isna().all()


class TestAggregateCategories:
    """Tests for aggregate_categories function."""

    def test_schema(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test rollup columns."""
        result = aggregate_categories(canonical, config)
        assert list(result.columns) == ROLLUP_COLUMNS

    def test_sums_all_cause_only(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test that COVID-19 rows are excluded and null differences count as zero."""
        result = aggregate_categories(canonical, config)

        white = result[(result["geography_code"] == "NY") & (result["category"] == "White")]
        assert white["difference"].iloc[0] == 150.0
        assert white["observed"].iloc[0] == 3150.0
        assert white["rate"].iloc[0] == pytest.approx(150.0 / 3000.0)

    def test_zero_observed_and_difference_is_undefined(
        self, canonical: pd.DataFrame, config: Config
    ) -> None:
        """Test that a 0/0 rollup has an undefined rate and no rank."""
        result = aggregate_categories(canonical, config)

        other = result[(result["geography_code"] == "NY") & (result["category"] == "Other")]
        assert other["difference"].iloc[0] == 0.0
        assert math.isnan(other["rate"].iloc[0])
        assert math.isnan(other["rank"].iloc[0])

    def test_rank_within_geography(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test that categories are ranked by rate, highest first."""
        result = aggregate_categories(canonical, config)

        ny = result[result["geography_code"] == "NY"].set_index("category")
        # Hispanic 100/200, White 150/3000, Asian -10/60
        assert ny.loc["Hispanic", "rank"] == 1
        assert ny.loc["White", "rank"] == 2
        assert ny.loc["Asian", "rank"] == 3

        tx = result[result["geography_code"] == "TX"]
        assert tx["rank"].tolist() == [1]

    def test_sorted_by_geography(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test deterministic ordering by geography code then category."""
        result = aggregate_categories(canonical, config)

        assert result["geography_code"].tolist() == ["NY", "NY", "NY", "NY", "TX"]
        assert result["category"].tolist()[:4] == ["Asian", "Hispanic", "Other", "White"]

    def test_alias_aggregates_jointly(self, raw_row, config: Config) -> None:
        """Test that aliased and canonical labels roll up together."""
        raw = pd.DataFrame(
            [
                raw_row(race="Non-Hispanic American Indian or Alaska Native", difference="5"),
                raw_row(race="Native American", date="04/11/2020", difference="7"),
            ]
        )

        result = aggregate_categories(normalize_mortality(raw, config), config)

        assert result["category"].tolist() == ["Native American"]
        assert result["difference"].tolist() == [12.0]

    def test_no_all_cause_records(self, raw_row, config: Config) -> None:
        """Test empty rollups when only COVID-19 rows exist."""
        canonical = normalize_mortality(pd.DataFrame([raw_row(outcome="COVID-19")]), config)

        result = aggregate_categories(canonical, config)

        assert result.empty
        assert list(result.columns) == ROLLUP_COLUMNS


class TestAggregateTotals:
    """Tests for aggregate_totals function."""

    def test_totals_per_outcome(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test all-cause and COVID-19 totals per geography."""
        result = aggregate_totals(canonical, config)

        assert list(result.columns) == TOTALS_COLUMNS
        ny = result[result["geography_code"] == "NY"].iloc[0]
        assert ny["all_cause_difference"] == 240.0
        assert ny["covid_difference"] == 30.0

    def test_missing_outcome_is_zero(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test that a geography without COVID-19 rows totals zero for it."""
        result = aggregate_totals(canonical, config)

        tx = result[result["geography_code"] == "TX"].iloc[0]
        assert tx["all_cause_difference"] == 20.0
        assert tx["covid_difference"] == 0.0

    def test_matches_category_rollups(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test that category differences add up to the all-cause total."""
        rollups = aggregate_categories(canonical, config)
        totals = aggregate_totals(canonical, config)

        category_sums = rollups.groupby("geography_code")["difference"].sum()
        for row in totals.itertuples():
            assert category_sums[row.geography_code] == pytest.approx(row.all_cause_difference)

    def test_sorted_by_geography(self, canonical: pd.DataFrame, config: Config) -> None:
        """Test deterministic ordering by geography code."""
        result = aggregate_totals(canonical, config)
        assert result["geography_code"].tolist() == ["NY", "TX"]

    def test_empty(self, raw_row, config: Config) -> None:
        """Test empty totals when no relevant outcomes exist."""
        canonical = normalize_mortality(
            pd.DataFrame([raw_row(outcome="Natural Causes")]), config
        )

        result = aggregate_totals(canonical, config)

        assert result.empty
        assert list(result.columns) == TOTALS_COLUMNS
