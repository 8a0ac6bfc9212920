"""Label templates for map and chart annotations.

The wording of these templates is part of the rendered output, so the
formatting here is fixed: counts are rounded to whole deaths with thousands
separators and percentages have no decimal places. Every function takes the
values it formats as arguments.
"""

from excess_deaths.errors import is_undefined

__all__ = [
    "CATEGORY_TEMPLATE",
    "DISPARITY_TEMPLATE",
    "GEOGRAPHY_TEMPLATE",
    "UNAVAILABLE",
    "category_label",
    "disparity_label",
    "format_count",
    "format_percent",
    "geography_label",
]

UNAVAILABLE = "Data Unavailable"

GEOGRAPHY_TEMPLATE = (
    "{excess} more people have died in 2020 relative to previous years. "
    "{covid} (or {share}) of these deaths were directly attributed to COVID-19."
)
CATEGORY_TEMPLATE = "{excess} deaths ({percent} relative to previous years)"
DISPARITY_TEMPLATE = "{death_share} of excess deaths vs. {population_share} of the population"


def format_count(value: float, signed: bool = False) -> str:
    """Format a death count, e.g. 1234.4 -> "1,234" or "+1,234"."""
    count = int(round(float(value)))
    return f"{count:+,}" if signed else f"{count:,}"


def format_percent(value: float, signed: bool = False) -> str:
    """Format a ratio as a whole percentage, e.g. 0.2 -> "20%" or "+20%".

    Values that round to zero print without a minus sign.
    """
    return f"{float(value):+z.0%}" if signed else f"{float(value):z.0%}"


def geography_label(
    all_cause_difference: float,
    covid_difference: float,
    covid_share: float,
) -> str:
    """Summary sentence for one geography.

    Args:
        all_cause_difference: Total all-cause excess deaths.
        covid_difference: Total excess deaths attributed to COVID-19.
        covid_share: covid_difference / all_cause_difference.

    Returns:
        Filled geography template, or UNAVAILABLE if the share is undefined.
    """
    if is_undefined(covid_share):
        return UNAVAILABLE

    return GEOGRAPHY_TEMPLATE.format(
        excess=format_count(all_cause_difference),
        covid=format_count(covid_difference),
        share=format_percent(covid_share),
    )


def category_label(difference: float, rate: float) -> str:
    """Signed excess label for one category, e.g. "+150 deaths (+25% ...)"."""
    if is_undefined(rate):
        return UNAVAILABLE

    return CATEGORY_TEMPLATE.format(
        excess=format_count(difference, signed=True),
        percent=format_percent(rate, signed=True),
    )


def disparity_label(death_share: float, population_share: float) -> str:
    """Compare a category's share of excess deaths with its population share."""
    if is_undefined(death_share) or is_undefined(population_share):
        return UNAVAILABLE

    return DISPARITY_TEMPLATE.format(
        death_share=format_percent(death_share),
        population_share=format_percent(population_share),
    )
