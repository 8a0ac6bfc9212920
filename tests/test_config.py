"""Tests for configuration loading and validation."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from excess_deaths.config import Config, load_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigLoading:
    """Tests for config loading."""

    def test_load_valid_config(self) -> None:
        """Test loading a valid configuration file."""
        config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert config.filters.estimate_type == "Unweighted"
        assert config.filters.cutoff == date(2020, 10, 1)
        assert config.categories.aliases["Native Hawaiian or Other Pacific Islander"] == "Asian"
        assert config.demographics.geography_column == "NAME"
        # Untouched sections keep their defaults
        assert config.columns.geography_code == "State Abbreviation"

    def test_load_missing_file(self) -> None:
        """Test that loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/config.yaml"))

    def test_load_invalid_alias(self) -> None:
        """Test that an alias to an unknown category raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_alias_config.yaml")

        assert "Aliases target unknown categories: Indigenous" in str(exc_info.value)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty YAML file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == Config()


class TestConfigValidation:
    """Tests for config validation rules."""

    def test_default_values(self) -> None:
        """Test that default values are applied correctly."""
        config = Config()

        assert config.filters.time_period == "2020"
        assert config.filters.estimate_type == "Predicted (weighted)"
        assert config.filters.outcomes.all_cause == "All Cause"
        assert config.filters.outcomes.covid == "COVID-19"
        assert config.categories.names == [
            "White",
            "Black",
            "Hispanic",
            "Asian",
            "Native American",
            "Other",
        ]
        assert config.categories.strip_prefix == "Non-Hispanic "
        assert config.categories.aliases == {
            "American Indian or Alaska Native": "Native American"
        }
        assert config.demographics.whole_population_name == "United States"

    def test_override_cutoff(self) -> None:
        """Test that the analysis window cutoff can be overridden."""
        config = Config.model_validate({"filters": {"cutoff": "2020-12-31"}})
        assert config.filters.cutoff == date(2020, 12, 31)

    def test_duplicate_category_names(self) -> None:
        """Test that duplicate category names are rejected."""
        with pytest.raises(ValidationError, match="Duplicate category names: White"):
            Config.model_validate({"categories": {"names": ["White", "White", "Other"]}})

    def test_empty_category_names(self) -> None:
        """Test that an empty category set is rejected."""
        with pytest.raises(ValidationError):
            Config.model_validate({"categories": {"names": [], "aliases": {}}})

    def test_identical_outcomes(self) -> None:
        """Test that all-cause and COVID-19 outcome labels must differ."""
        with pytest.raises(ValidationError, match="must differ"):
            Config.model_validate(
                {"filters": {"outcomes": {"all_cause": "Deaths", "covid": "Deaths"}}}
            )

    def test_identifier_to_unknown_category(self) -> None:
        """Test that demographic identifiers must map to known categories."""
        with pytest.raises(ValidationError, match="unknown categories: Pacific Islander"):
            Config.model_validate(
                {"demographics": {"identifiers": {"NHNA": "Pacific Islander"}}}
            )

    def test_custom_categories_with_identifiers(self) -> None:
        """Test that identifiers are checked against custom category names."""
        config = Config.model_validate(
            {
                "categories": {"names": ["White", "Other"], "aliases": {}},
                "demographics": {"identifiers": {"WA": "White", "OT": "Other", "XX": "Other"}},
            }
        )
        assert config.demographics.identifiers["XX"] == "Other"

    def test_source_columns_mapping(self) -> None:
        """Test that source_columns maps canonical to source column names."""
        columns = Config().columns.source_columns()

        assert columns["date"] == "Week Ending Date"
        assert columns["category"] == "Race/Ethnicity"
        assert len(columns) == 10
