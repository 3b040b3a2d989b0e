"""Enumeration types used throughout the receipt points API.

Enumerations make it easier to constrain the values passed between the
engine and its callers. ``PointsRule`` names every scoring rule so that
individual rule outcomes can be reported and tested by name.
"""

from enum import Enum


class PointsRule(str, Enum):
    """Scoring rules applied by the points engine."""

    RETAILER_NAME = "retailer_name"
    ROUND_TOTAL = "round_total"
    QUARTER_MULTIPLE = "quarter_multiple"
    ITEM_PAIRS = "item_pairs"
    ITEM_DESCRIPTION = "item_description"
    ODD_DAY = "odd_day"
    AFTERNOON_WINDOW = "afternoon_window"
