"""Health check endpoint."""

from datetime import datetime, timezone
from fastapi import APIRouter

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Liveness probe. Does not touch MongoDB."""
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
