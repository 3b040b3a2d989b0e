from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add backend folder to sys.path so `import app...` works in tests when running from backend root
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.models.schemas import Item, Receipt  # noqa: E402
from app.services.receipt_store import ReceiptStore  # noqa: E402


@pytest.fixture
def target_receipt() -> Receipt:
    return Receipt(
        id="3f1b2c4d-0000-4000-8000-000000000001",
        retailer="Target",
        purchaseDate="2022-01-01",
        purchaseTime="13:01",
        total="35.35",
        items=(
            Item(shortDescription="Mountain Dew 12PK", price="6.49"),
            Item(shortDescription="Emils Cheese Pizza", price="12.25"),
            Item(shortDescription="Knorr Creamy Chicken", price="1.26"),
            Item(shortDescription="Doritos Nacho Cheese", price="3.35"),
            Item(shortDescription="   Klarbrunn 12-PK 12 FL OZ  ", price="12.00"),
        ),
    )


@pytest.fixture
def corner_market_receipt() -> Receipt:
    return Receipt(
        id="3f1b2c4d-0000-4000-8000-000000000002",
        retailer="M&M Corner Market",
        purchaseDate="2022-03-20",
        purchaseTime="14:33",
        total="9.00",
        items=tuple(Item(shortDescription="Gatorade", price="2.25") for _ in range(4)),
    )


@pytest.fixture
def receipt_store() -> ReceiptStore:
    store = ReceiptStore()
    yield store
    store.close()
