"""Health check endpoints for monitoring."""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.dependencies import get_receipt_store
from app.core.config import settings
from app.services.receipt_store import ReceiptStore

router = APIRouter(tags=["health"])


@router.api_route("/health", methods=["GET", "HEAD"])
def health_check(store: ReceiptStore = Depends(get_receipt_store)) -> Dict[str, Any]:
    """Health check endpoint (supports GET & HEAD)."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": settings.VERSION,
        "receipts": len(store),
    }
