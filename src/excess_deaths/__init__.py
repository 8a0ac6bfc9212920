"""Excess deaths by race and ethnicity.

Turns a weekly, jurisdiction-and-race-stratified mortality dataset into a
normalized weekly table and annotated per-geography summaries for rendering.
"""

__version__ = "0.1.0"
