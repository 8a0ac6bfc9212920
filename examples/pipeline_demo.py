#!/usr/bin/env python3
"""Demonstration of run_pipeline usage.

This script builds a tiny mortality table and demographic baseline in memory,
runs the full pipeline, and prints the labels the renderer would display.
"""

import pandas as pd

from excess_deaths.logging import setup_logging
from excess_deaths.metrics import run_pipeline
from excess_deaths.report.transformers import transform_map_data


def _row(date, race, outcome, observed, difference, percent):
    return {
        "State Abbreviation": "NY",
        "Jurisdiction": "New York",
        "Week Ending Date": date,
        "Race/Ethnicity": race,
        "Outcome": outcome,
        "Time Period": "2020",
        "Type": "Predicted (weighted)",
        "Number of Deaths": observed,
        "Difference from 2015-2019 to 2020": difference,
        "Percent Difference from 2015-2019 to 2020": percent,
    }


def main():
    """Demonstrate pipeline usage."""
    setup_logging(verbose=False)

    mortality = pd.DataFrame(
        [
            _row("04/04/2020", "Non-Hispanic White", "All Cause", "1,100", "100", "10"),
            _row("04/11/2020", "Non-Hispanic White", "All Cause", "1,050", "50", "5"),
            _row("04/04/2020", "Non-Hispanic White", "COVID-19", "30", "30", None),
            _row("04/04/2020", "Hispanic", "All Cause", "400", "200", "100"),
            _row(
                "04/04/2020",
                "Non-Hispanic American Indian or Alaska Native",
                "All Cause",
                "12",
                "2",
                "20",
            ),
            # Dropped: after the analysis window cutoff
            _row("12/26/2020", "Hispanic", "All Cause", "300", "20", "7"),
        ]
    )

    demographics = pd.DataFrame(
        {
            "STNAME": ["New York"],
            "NHWA": [11_000_000],
            "NHBA": [2_800_000],
            "H": [3_700_000],
            "NHAA": [1_700_000],
            "NHNA": [10_000],
            "NHIA": [80_000],
            "NHTOM": [400_000],
        }
    )

    result = run_pipeline(mortality, demographics)

    print("Summary labels:")
    for code, label in result.summary_labels().items():
        print(f"  {code}: {label}")
    print()

    print("Category labels (NY):")
    for category, label in result.category_labels("NY").items():
        print(f"  {category}: {label}")
    print()

    print("Disparities (NY):")
    for share in result.summary("NY").categories.values():
        print(f"  {share.category}: {share.disparity_label}")
    print()

    print("Map records:")
    for record in transform_map_data(result.summaries):
        print(f"  {record['geography_code']}: covid_share={record['covid_share']}")


if __name__ == "__main__":
    main()
