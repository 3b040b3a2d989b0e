"""In-memory receipt store.

Holds the authoritative mapping from receipt identifier to
:class:`~app.models.schemas.Receipt` for the lifetime of the process.
One store is created by the application factory and handed to routes
through a dependency; nothing here is module-global.

Reads run in parallel with each other. ``create`` takes the write side
of a reader-writer lock so that checking for an existing identifier and
inserting the receipt happen as one step. Receipts are frozen models, so
``get`` can hand out the stored instance without exposing it to
mutation.

There is intentionally no update or delete.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from app.models.schemas import Receipt


class ReceiptStoreError(Exception):
    """Base class for receipt store failures."""


class DuplicateIdentifierError(ReceiptStoreError):
    def __init__(self, receipt_id: str):
        super().__init__(f"receipt {receipt_id!r} already exists")
        self.receipt_id = receipt_id


class ReceiptNotFoundError(ReceiptStoreError):
    def __init__(self, receipt_id: str):
        super().__init__(f"no receipt with id {receipt_id!r}")
        self.receipt_id = receipt_id


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve ``create``.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ReceiptStore:
    """Thread-safe identifier → receipt mapping with create/read semantics."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._receipts: Dict[str, Receipt] = {}

    def create(self, receipt: Receipt) -> None:
        """Insert ``receipt`` under its own ``id``.

        :raises DuplicateIdentifierError: if the id is already stored; the
            store is left unchanged.
        """
        with self._lock.write_locked():
            if receipt.id in self._receipts:
                raise DuplicateIdentifierError(receipt.id)
            self._receipts[receipt.id] = receipt

    def get(self, receipt_id: str) -> Receipt:
        """Return the stored receipt.

        :raises ReceiptNotFoundError: if no receipt has that id.
        """
        with self._lock.read_locked():
            receipt = self._receipts.get(receipt_id)
        if receipt is None:
            raise ReceiptNotFoundError(receipt_id)
        return receipt

    def snapshot(self) -> Dict[str, Receipt]:
        """Return a point-in-time copy of the whole mapping."""
        with self._lock.read_locked():
            return dict(self._receipts)

    def close(self) -> None:
        """Drop every stored receipt. Called once at application shutdown."""
        with self._lock.write_locked():
            self._receipts.clear()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._receipts)

    def __contains__(self, receipt_id: object) -> bool:
        with self._lock.read_locked():
            return receipt_id in self._receipts
