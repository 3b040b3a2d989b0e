"""Pydantic schemas for the receipt domain and the API boundary.

Two families of models live here:

* ``Receipt`` and ``Item`` are the immutable domain values held by the
  receipt store and scored by the points engine. They accept any string
  so the engine can be exercised with unvalidated data.
* ``ReceiptCreate`` and ``ItemCreate`` validate inbound JSON before a
  receipt is created. Only a receipt that passes these checks is given an
  identifier and stored.

Field names are snake_case in Python and camelCase on the wire
(``purchaseDate``, ``shortDescription``); both spellings are accepted
when constructing a model.
"""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.helpers import is_monetary_token, parse_purchase_date, parse_purchase_time


# ---------------------------------------------------------------------------
# Domain schemas


class Item(BaseModel):
    """One purchased line on a receipt."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    short_description: str = Field(alias="shortDescription")
    price: str


class Receipt(BaseModel):
    """A stored purchase record. Frozen: no field can change after creation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    retailer: str
    purchase_date: str = Field(alias="purchaseDate")
    purchase_time: str = Field(alias="purchaseTime")
    total: str
    items: Tuple[Item, ...]


# ---------------------------------------------------------------------------
# API request/response schemas


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be empty")
    return value


def _require_money(value: str) -> str:
    if not is_monetary_token(value):
        raise ValueError("must be a non-negative amount with two decimals, e.g. 6.49")
    return value


class ItemCreate(BaseModel):
    short_description: str = Field(alias="shortDescription", examples=["Mountain Dew 12PK"])
    price: str = Field(examples=["6.49"])

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("short_description")
    @classmethod
    def check_description(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v: str) -> str:
        return _require_money(_require_text(v))


class ReceiptCreate(BaseModel):
    """Receipt JSON accepted by ``POST /receipts/process``."""

    retailer: str = Field(examples=["M&M Corner Market"])
    purchase_date: str = Field(alias="purchaseDate", examples=["2022-01-01"])
    purchase_time: str = Field(alias="purchaseTime", examples=["13:01"])
    items: List[ItemCreate] = Field(min_length=1)
    total: str = Field(examples=["6.49"])

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("retailer")
    @classmethod
    def check_retailer(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("purchase_date")
    @classmethod
    def check_purchase_date(cls, v: str) -> str:
        _require_text(v)
        if parse_purchase_date(v) is None:
            raise ValueError("must be a calendar date formatted YYYY-MM-DD")
        return v

    @field_validator("purchase_time")
    @classmethod
    def check_purchase_time(cls, v: str) -> str:
        _require_text(v)
        if parse_purchase_time(v) is None:
            raise ValueError("must be a 24-hour time formatted HH:MM")
        return v

    @field_validator("total")
    @classmethod
    def check_total(cls, v: str) -> str:
        return _require_money(_require_text(v))

    def to_receipt(self, receipt_id: str) -> Receipt:
        """Build the immutable domain receipt under ``receipt_id``."""
        return Receipt(
            id=receipt_id,
            retailer=self.retailer,
            purchase_date=self.purchase_date,
            purchase_time=self.purchase_time,
            total=self.total,
            items=tuple(
                Item(short_description=item.short_description, price=item.price)
                for item in self.items
            ),
        )


class ReceiptCreated(BaseModel):
    id: str


class PointsRead(BaseModel):
    points: int


class ErrorResponse(BaseModel):
    error: str
