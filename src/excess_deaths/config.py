"""Configuration loading and validation."""

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class ColumnsConfig(BaseModel):
    """Source column names of the mortality dataset."""

    geography_code: str = "State Abbreviation"
    geography_name: str = "Jurisdiction"
    date: str = "Week Ending Date"
    category: str = "Race/Ethnicity"
    outcome: str = "Outcome"
    time_period: str = "Time Period"
    estimate_type: str = "Type"
    observed: str = "Number of Deaths"
    difference: str = "Difference from 2015-2019 to 2020"
    percent_difference: str = "Percent Difference from 2015-2019 to 2020"

    def source_columns(self) -> dict[str, str]:
        """Map canonical column names to source column names."""
        return self.model_dump()


class OutcomesConfig(BaseModel):
    """Outcome labels as they appear in the source."""

    all_cause: str = "All Cause"
    covid: str = "COVID-19"

    @model_validator(mode="after")
    def validate_distinct(self) -> "OutcomesConfig":
        """Validate that the two outcome labels differ."""
        if self.all_cause == self.covid:
            msg = f"all_cause and covid outcomes must differ (both '{self.all_cause}')"
            raise ValueError(msg)
        return self


class FiltersConfig(BaseModel):
    """Record filters applied during normalization."""

    time_period: str = "2020"
    estimate_type: str = "Predicted (weighted)"
    cutoff: date = Field(
        default=date(2020, 9, 20),
        description="Exclusive upper bound of the analysis window",
    )
    outcomes: OutcomesConfig = Field(default_factory=OutcomesConfig)


class CategoriesConfig(BaseModel):
    """Race/ethnicity categories and their source aliases."""

    names: list[str] = Field(
        default_factory=lambda: [
            "White",
            "Black",
            "Hispanic",
            "Asian",
            "Native American",
            "Other",
        ]
    )
    strip_prefix: str = "Non-Hispanic "
    aliases: dict[str, str] = Field(
        default_factory=lambda: {"American Indian or Alaska Native": "Native American"}
    )

    @field_validator("names")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        """Validate that category names are non-empty and unique."""
        if not v:
            msg = "At least one category is required"
            raise ValueError(msg)
        duplicates = sorted({name for name in v if v.count(name) > 1})
        if duplicates:
            msg = f"Duplicate category names: {', '.join(duplicates)}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_aliases(self) -> "CategoriesConfig":
        """Validate that every alias targets a known category."""
        unknown = sorted(set(self.aliases.values()) - set(self.names))
        if unknown:
            msg = f"Aliases target unknown categories: {', '.join(unknown)}"
            raise ValueError(msg)
        return self


class DemographicsConfig(BaseModel):
    """Demographic baseline layout."""

    geography_column: str = "STNAME"
    identifiers: dict[str, str] = Field(
        default_factory=lambda: {
            "NHWA": "White",
            "NHBA": "Black",
            "H": "Hispanic",
            "NHAA": "Asian",
            "NHNA": "Asian",
            "NHIA": "Native American",
            "NHTOM": "Other",
        },
        description="Identifier column -> category; several identifiers may share a category",
    )
    whole_population_name: str = "United States"

    @field_validator("identifiers")
    @classmethod
    def validate_identifiers(cls, v: dict[str, str]) -> dict[str, str]:
        """Validate that at least one identifier column is mapped."""
        if not v:
            msg = "At least one demographic identifier column is required"
            raise ValueError(msg)
        return v


class Config(BaseModel):
    """Root configuration model."""

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    categories: CategoriesConfig = Field(default_factory=CategoriesConfig)
    demographics: DemographicsConfig = Field(default_factory=DemographicsConfig)

    @model_validator(mode="after")
    def validate_identifier_categories(self) -> "Config":
        """Validate that demographic identifiers map onto known categories."""
        unknown = sorted(set(self.demographics.identifiers.values()) - set(self.categories.names))
        if unknown:
            msg = f"Demographic identifiers map to unknown categories: {', '.join(unknown)}"
            raise ValueError(msg)
        return self


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    return Config.model_validate(raw_config)
