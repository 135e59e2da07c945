"""Authentication routes (register, login, current user).

Handlers that touch bcrypt or pymongo are sync so FastAPI runs them in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_repo
from api.models import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from api.security import create_access_token, get_current_claims
from domain.model.errors import DuplicateError, NotFoundError, ValidationError
from domain.model.session import TokenClaims
from port.user_repository import UserRepository
from services import auth_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user and return a token.

    Raises:
        HTTPException: 400 if the email is already registered
    """
    try:
        user = auth_service.register(
            repo,
            name=request.name,
            email=request.email,
            password=request.password,
        )
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    token = create_access_token(user.id, user.email)

    logger.info("User registered", extra={"userId": user.id})

    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserResponse.from_domain(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Login user and return JWT token.

    Raises:
        HTTPException: 400 "Invalid credentials" for an unknown email or a wrong password
    """
    try:
        user = auth_service.authenticate(repo, email=request.email, password=request.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    token = create_access_token(user.id, user.email)

    logger.info("User logged in", extra={"userId": user.id})

    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.from_domain(user),
    )


def current_user_response(claims: TokenClaims, repo: UserRepository) -> CurrentUserResponse:
    """Shared by /auth/me and /users/profile."""
    try:
        user = user_service.get_profile(repo, claims.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CurrentUserResponse(user=UserResponse.from_domain(user))


@router.get("/me", response_model=CurrentUserResponse)
def get_me(
    claims: TokenClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """Get current authenticated user info."""
    return current_user_response(claims, repo)
