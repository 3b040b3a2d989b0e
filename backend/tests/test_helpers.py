import datetime as dt
from decimal import Decimal

import pytest

from app.utils.helpers import is_monetary_token, parse_amount, parse_purchase_date, parse_purchase_time


@pytest.mark.parametrize("value", ["0.00", "6.49", "35.35", "1000000.00"])
def test_is_monetary_token_accepts_two_decimal_amounts(value):
    assert is_monetary_token(value)


@pytest.mark.parametrize("value", ["", None, "6.4", "6.499", "-6.49", "6", "1,000.00", " 6.49", "6.49\n", "٦.٤٩"])
def test_is_monetary_token_rejects_other_shapes(value):
    assert not is_monetary_token(value)


def test_parse_amount_accepts_plain_decimals():
    assert parse_amount("12.25") == Decimal("12.25")
    assert parse_amount("3") == Decimal("3")


@pytest.mark.parametrize("value", ["", None, "abc", "-1.00", "NaN", "Infinity", "1e3", " 1.00", "1.00 "])
def test_parse_amount_invalid_returns_none(value):
    assert parse_amount(value) is None


def test_parse_purchase_date():
    assert parse_purchase_date("2022-01-01") == dt.date(2022, 1, 1)
    assert parse_purchase_date("2022-02-30") is None
    assert parse_purchase_date("2022-1-1") is None
    assert parse_purchase_date("01/01/2022") is None


def test_parse_purchase_time():
    assert parse_purchase_time("13:01") == dt.time(13, 1)
    assert parse_purchase_time("00:00") == dt.time(0, 0)
    assert parse_purchase_time("24:00") is None
    assert parse_purchase_time("1:05") is None
    assert parse_purchase_time("13:01:00") is None
