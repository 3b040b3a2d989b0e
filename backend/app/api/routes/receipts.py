"""API routes for receipt processing and points lookup."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_receipt_store
from app.core.observability import sentry_breadcrumb
from app.models.schemas import ErrorResponse, PointsRead, ReceiptCreate, ReceiptCreated
from app.services.points_engine import calculate_points
from app.services.receipt_store import DuplicateIdentifierError, ReceiptNotFoundError, ReceiptStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


def new_receipt_id() -> str:
    return str(uuid.uuid4())


# Handlers are plain functions: FastAPI runs them on its thread pool and
# the store does its own locking.
@router.post(
    "/process",
    response_model=ReceiptCreated,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def process_receipt(payload: ReceiptCreate, store: ReceiptStore = Depends(get_receipt_store)):
    """Validate and store a receipt, returning its new identifier."""
    receipt = payload.to_receipt(new_receipt_id())
    try:
        store.create(receipt)
    except DuplicateIdentifierError:
        logger.error("Generated receipt id collided with an existing receipt: %s", receipt.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create receipt")
    logger.info("Stored receipt id=%s retailer=%r items=%d", receipt.id, receipt.retailer, len(receipt.items))
    sentry_breadcrumb("receipts", "receipt stored", data={"receipt_id": receipt.id})
    return ReceiptCreated(id=receipt.id)


@router.get(
    "/{receipt_id}/points",
    response_model=PointsRead,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_receipt_points(receipt_id: str, store: ReceiptStore = Depends(get_receipt_store)):
    """Return the points awarded to a stored receipt."""
    try:
        uuid.UUID(receipt_id)
    except ValueError:
        logger.info("Rejected malformed receipt id %r", receipt_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID format")
    try:
        receipt = store.get(receipt_id)
    except ReceiptNotFoundError:
        logger.info("No receipt found for id=%s", receipt_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No receipt found for that ID")
    return PointsRead(points=calculate_points(receipt))
