"""
Health check endpoint for the user service
"""
from fastapi import APIRouter, status
from typing import Dict, Any

from ..models import utcnow

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat()
    }
