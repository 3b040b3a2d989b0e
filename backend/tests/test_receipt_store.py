from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from app.models.schemas import Item, Receipt
from app.services.receipt_store import (
    DuplicateIdentifierError,
    ReceiptNotFoundError,
    ReceiptStore,
    ReceiptStoreError,
)


def _walgreens(receipt_id: str) -> Receipt:
    return Receipt(
        id=receipt_id,
        retailer="Walgreens",
        purchaseDate="2022-01-02",
        purchaseTime="08:13",
        total="2.65",
        items=(
            Item(shortDescription="Pepsi - 12-oz", price="1.25"),
            Item(shortDescription="Dasani", price="1.40"),
        ),
    )


def test_create_then_get_round_trips(receipt_store, target_receipt):
    assert receipt_store.create(target_receipt) is None
    assert receipt_store.get(target_receipt.id) == target_receipt
    assert len(receipt_store) == 1
    assert target_receipt.id in receipt_store


def test_duplicate_create_leaves_store_unchanged(receipt_store, target_receipt, corner_market_receipt):
    receipt_store.create(target_receipt)
    receipt_store.create(corner_market_receipt)
    before = receipt_store.snapshot()

    impostor = corner_market_receipt.model_copy(update={"id": target_receipt.id})
    with pytest.raises(DuplicateIdentifierError) as excinfo:
        receipt_store.create(impostor)

    assert excinfo.value.receipt_id == target_receipt.id
    assert receipt_store.snapshot() == before
    assert receipt_store.get(target_receipt.id) == target_receipt


def test_get_unknown_id_raises_not_found(receipt_store):
    with pytest.raises(ReceiptNotFoundError):
        receipt_store.get("missing")


def test_store_errors_share_a_base_class():
    assert issubclass(DuplicateIdentifierError, ReceiptStoreError)
    assert issubclass(ReceiptNotFoundError, ReceiptStoreError)


def test_identical_content_under_different_ids_is_allowed(receipt_store):
    receipt_store.create(_walgreens("a"))
    receipt_store.create(_walgreens("b"))
    assert len(receipt_store) == 2


def test_returned_receipt_cannot_be_mutated(receipt_store, target_receipt):
    receipt_store.create(target_receipt)
    stored = receipt_store.get(target_receipt.id)
    with pytest.raises(ValidationError):
        stored.retailer = "Walmart"
    with pytest.raises(ValidationError):
        stored.items[0].price = "0.00"
    with pytest.raises(TypeError):
        stored.items[0] = Item(shortDescription="x", price="0.00")  # type: ignore[index]
    assert receipt_store.get(target_receipt.id).retailer == "Target"


def test_snapshot_is_a_copy(receipt_store, target_receipt):
    receipt_store.create(target_receipt)
    snap = receipt_store.snapshot()
    snap.clear()
    assert len(receipt_store) == 1


def test_close_drops_everything(target_receipt):
    store = ReceiptStore()
    store.create(target_receipt)
    store.close()
    assert len(store) == 0
    with pytest.raises(ReceiptNotFoundError):
        store.get(target_receipt.id)


def test_concurrent_creates_and_reads(receipt_store):
    receipt_store.create(_walgreens("seed"))
    ids = [f"r-{i}" for i in range(200)]

    def create(receipt_id):
        receipt_store.create(_walgreens(receipt_id))
        return receipt_id

    def read(_):
        receipt = receipt_store.get("seed")
        # a fully constructed receipt every time
        assert receipt.retailer == "Walgreens" and len(receipt.items) == 2
        return receipt

    with ThreadPoolExecutor(max_workers=16) as pool:
        created = pool.map(create, ids)
        reads = pool.map(read, range(200))
        assert sorted(created) == sorted(ids)
        assert all(r.id == "seed" for r in reads)

    assert len(receipt_store) == len(ids) + 1


def test_concurrent_creates_with_same_id_admit_exactly_one(receipt_store):
    barrier = threading.Barrier(8)
    outcomes = []
    lock = threading.Lock()

    def create(n):
        barrier.wait()
        try:
            receipt_store.create(_walgreens("contested").model_copy(update={"retailer": f"Store {n}"}))
            result = "ok"
        except DuplicateIdentifierError:
            result = "duplicate"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=create, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("duplicate") == 7
    assert len(receipt_store) == 1


def test_reads_of_missing_ids_under_concurrency(receipt_store):
    receipt_store.create(_walgreens("present"))

    def read(receipt_id):
        try:
            return receipt_store.get(receipt_id).id
        except ReceiptNotFoundError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(read, ["present", "absent"] * 50))

    assert results.count("present") == 50
    assert results.count(None) == 50
