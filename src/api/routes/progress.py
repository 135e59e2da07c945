"""Progress endpoint."""

from fastapi import APIRouter, Depends

from api.security import get_current_claims
from domain.model.session import TokenClaims
from services.progress_service import get_progress

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("")
async def progress(claims: TokenClaims = Depends(get_current_claims)):
    """Progress summary for the authenticated user (fixed figures for now)."""
    return get_progress()
