"""Points engine for stored receipts.

The engine applies a fixed set of independent rules to a
:class:`~app.models.schemas.Receipt` and sums their contributions:

* ``retailer_name`` – one point per letter or digit in the retailer name.
* ``round_total`` – 50 points if the total is a whole dollar amount.
* ``quarter_multiple`` – 25 points if the total is a multiple of 0.25.
* ``item_pairs`` – 5 points for every two items.
* ``item_description`` – for each item whose trimmed description length (in UTF-8 bytes)
  is a non-zero multiple of 3, ``ceil(price * 0.2)`` points.
* ``odd_day`` – 6 points if the day of the purchase date is odd.
* ``afternoon_window`` – 10 points if the purchase time is after 14:00
  and before 16:00.

Every rule returns a :class:`RuleOutcome`. A rule that cannot parse the
field it depends on returns a failed outcome instead of raising, and
:func:`calculate_points` counts failed outcomes as zero. Receipts that
slipped past validation with a malformed date, time or amount therefore
score lower without any visible error.

All functions are pure: they never mutate the receipt, keep no state and
perform no I/O, so they are safe to call from any number of threads.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal, localcontext
from typing import List, Optional, Sequence

from app.models.enums import PointsRule
from app.models.schemas import Item, Receipt
from app.utils.helpers import (
    is_monetary_token,
    parse_amount,
    parse_purchase_date,
    parse_purchase_time,
)

ROUND_TOTAL_POINTS = 50
QUARTER_MULTIPLE_POINTS = 25
ITEM_PAIR_POINTS = 5
DESCRIPTION_PRICE_MULTIPLIER = Decimal("0.2")
ODD_DAY_POINTS = 6
AFTERNOON_POINTS = 10
AFTERNOON_START = dt.time(14, 0)
AFTERNOON_END = dt.time(16, 0)


@dataclass(frozen=True)
class RuleOutcome:
    """Result of one rule: points earned, or the reason it could not be scored."""

    rule: PointsRule
    points: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, rule: PointsRule, error: str) -> "RuleOutcome":
        return cls(rule=rule, points=0, error=error)


def _total_cents(total: str) -> Optional[int]:
    if not is_monetary_token(total):
        return None
    # exactly two decimals, so the digits are the cents
    return int(total.replace(".", ""))


def points_for_retailer_name(retailer: str) -> RuleOutcome:
    """One point per Unicode letter or decimal digit; everything else scores 0."""
    points = sum(1 for ch in retailer or "" if ch.isalpha() or ch.isdecimal())
    return RuleOutcome(PointsRule.RETAILER_NAME, points)


def points_for_round_total(total: str) -> RuleOutcome:
    cents = _total_cents(total)
    if cents is None:
        return RuleOutcome.failure(PointsRule.ROUND_TOTAL, f"invalid total {total!r}")
    return RuleOutcome(PointsRule.ROUND_TOTAL, ROUND_TOTAL_POINTS if cents % 100 == 0 else 0)


def points_for_quarter_multiple(total: str) -> RuleOutcome:
    cents = _total_cents(total)
    if cents is None:
        return RuleOutcome.failure(PointsRule.QUARTER_MULTIPLE, f"invalid total {total!r}")
    return RuleOutcome(PointsRule.QUARTER_MULTIPLE, QUARTER_MULTIPLE_POINTS if cents % 25 == 0 else 0)


def points_for_item_pairs(items: Sequence[Item]) -> RuleOutcome:
    return RuleOutcome(PointsRule.ITEM_PAIRS, len(items) // 2 * ITEM_PAIR_POINTS)


def points_for_item_description(item: Item) -> RuleOutcome:
    """Score one item by its trimmed description length in UTF-8 bytes.

    Only items whose description length is a non-zero multiple of 3 parse
    their price; the product ``price * 0.2`` is rounded up, and an
    integral product is kept as is.
    """
    length = len((item.short_description or "").strip().encode("utf-8"))
    if length == 0 or length % 3 != 0:
        return RuleOutcome(PointsRule.ITEM_DESCRIPTION, 0)
    price = parse_amount(item.price)
    if price is None:
        return RuleOutcome.failure(PointsRule.ITEM_DESCRIPTION, f"invalid price {item.price!r}")
    with localcontext() as ctx:
        # wide enough that the product is never rounded
        ctx.prec = len(price.as_tuple().digits) + 2
        points = (price * DESCRIPTION_PRICE_MULTIPLIER).to_integral_value(rounding=ROUND_CEILING)
    return RuleOutcome(PointsRule.ITEM_DESCRIPTION, int(points))


def points_for_odd_day(purchase_date: str) -> RuleOutcome:
    date = parse_purchase_date(purchase_date)
    if date is None:
        return RuleOutcome.failure(PointsRule.ODD_DAY, f"invalid purchase date {purchase_date!r}")
    return RuleOutcome(PointsRule.ODD_DAY, ODD_DAY_POINTS if date.day % 2 == 1 else 0)


def points_for_afternoon_window(purchase_time: str) -> RuleOutcome:
    """10 points strictly between 14:00 and 16:00; both endpoints score 0."""
    time = parse_purchase_time(purchase_time)
    if time is None:
        return RuleOutcome.failure(PointsRule.AFTERNOON_WINDOW, f"invalid purchase time {purchase_time!r}")
    in_window = AFTERNOON_START < time < AFTERNOON_END
    return RuleOutcome(PointsRule.AFTERNOON_WINDOW, AFTERNOON_POINTS if in_window else 0)


def evaluate_rules(receipt: Receipt) -> List[RuleOutcome]:
    """Apply every rule to ``receipt``.

    The description rule contributes one outcome per item so that a bad
    price only affects its own item.
    """
    outcomes = [
        points_for_retailer_name(receipt.retailer),
        points_for_round_total(receipt.total),
        points_for_quarter_multiple(receipt.total),
        points_for_item_pairs(receipt.items),
    ]
    outcomes.extend(points_for_item_description(item) for item in receipt.items)
    outcomes.append(points_for_odd_day(receipt.purchase_date))
    outcomes.append(points_for_afternoon_window(receipt.purchase_time))
    return outcomes


def calculate_points(receipt: Receipt) -> int:
    """Return the total points for ``receipt``. Never raises for a receipt value."""
    points = 0
    for outcome in evaluate_rules(receipt):
        if outcome.failed:
            # unparseable field: the rule contributes nothing
            continue
        points += outcome.points
    return points
