"""User profile routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_repo
from api.models import CurrentUserResponse, UpdateUserRequest, UpdateUserResponse, UserResponse
from api.routes.auth import current_user_response
from api.security import get_current_claims
from domain.model.errors import DuplicateError, NotFoundError, ValidationError
from domain.model.session import TokenClaims
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

USER_ENDPOINTS = {
    "register": "POST /api/auth/register",
    "login": "POST /api/auth/login",
    "getProfile": "GET /api/users/profile",
    "getMe": "GET /api/auth/me",
    "updateProfile": "PUT /api/users/update",
}


@router.get("/")
@router.get("", include_in_schema=False)
async def list_user_routes():
    """Static index of the account endpoints."""
    return {
        "message": "User routes working",
        "endpoints": USER_ENDPOINTS,
    }


@router.get("/profile", response_model=CurrentUserResponse)
def get_profile(
    claims: TokenClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """Same payload as GET /api/auth/me."""
    return current_user_response(claims, repo)


@router.put("/update", response_model=UpdateUserResponse)
def update_user(
    request: UpdateUserRequest,
    claims: TokenClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """Partially update the current user's profile and optionally their password.

    Raises:
        HTTPException: 400 wrong current password or email taken, 404 user gone
    """
    update = request.to_domain()
    try:
        user = user_service.update_profile(repo, claims.user_id, update)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (ValidationError, DuplicateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("User updated", extra={
        "userId": user.id,
        "passwordChanged": update.changes_password,
    })

    return UpdateUserResponse(
        message="User updated successfully",
        user=UserResponse.from_domain(user),
    )
