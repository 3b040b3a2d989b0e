"""Common dependencies for FastAPI routes.

The receipt store is owned by the application (``app.state``) and
resolved per request, so tests can build an app around their own store.
"""

from __future__ import annotations

from fastapi import Request

from app.services.receipt_store import ReceiptStore


def get_receipt_store(request: Request) -> ReceiptStore:
    """Return the store created by :func:`app.api.main.create_app`."""
    return request.app.state.receipt_store
