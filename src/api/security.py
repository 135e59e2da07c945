"""JWT issuance/verification and the bearer-token dependency."""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from domain.model.session import TokenClaims, TokenFailure, TokenResult

logger = logging.getLogger(__name__)

# JWT Configuration
# Falls back to a well-known key when JWT_SECRET is unset; startup logs a warning.
DEFAULT_JWT_SECRET = "your-secret-key"
JWT_SECRET = os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET
USING_DEFAULT_SECRET = JWT_SECRET == DEFAULT_JWT_SECRET
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 7

# Raw header so any scheme word is accepted; the token is the second space-separated part
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token carrying userId and email.

    Args:
        user_id: User ID to encode in token
        email: User email at issuance time
        expires_delta: Lifetime override; defaults to JWT_EXPIRATION_DAYS

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(days=JWT_EXPIRATION_DAYS))
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> TokenResult:
    """Verify a token and extract its claims.

    Never raises: bad signatures, garbage input, expired tokens and
    non-numeric time claims all come back as a failed TokenResult.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        return TokenResult.fail(TokenFailure.EXPIRED)
    except JWTClaimsError as e:
        logger.debug(f"JWT claims rejected: {e}")
        return TokenResult.fail(TokenFailure.MALFORMED)
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return TokenResult.fail(TokenFailure.INVALID)
    except (TypeError, ValueError) as e:
        # jose's exp/iat/nbf checks call int() on the claim and only wrap ValueError
        logger.debug(f"JWT claims unreadable: {e}")
        return TokenResult.fail(TokenFailure.MALFORMED)

    user_id = payload.get("userId")
    email = payload.get("email")
    if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
        return TokenResult.fail(TokenFailure.MALFORMED)

    exp = payload.get("exp")
    try:
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if isinstance(exp, (int, float)) else None
    except (OverflowError, OSError, ValueError):
        return TokenResult.fail(TokenFailure.MALFORMED)
    return TokenResult.ok(TokenClaims(user_id=user_id, email=email, expires_at=expires_at))


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Second space-separated segment of the Authorization header, if any."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    return parts[1] if len(parts) > 1 and parts[1] else None


def get_current_claims(
    authorization: Optional[str] = Depends(authorization_header),
) -> TokenClaims:
    """Authenticate the request from its Authorization header.

    Raises:
        HTTPException: 401 when no token is present or the token does not verify
    """
    token = extract_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = verify_token(token)
    if not result.is_valid:
        logger.debug("Rejected bearer token", extra={"reason": result.failure.value})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return result.claims
