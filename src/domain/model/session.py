"""Session token claims and verification outcome."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenFailure(str, Enum):
    EXPIRED = "expired"
    INVALID = "invalid"      # bad signature or not a JWT at all
    MALFORMED = "malformed"  # signature fine, claims missing or wrong type


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    expires_at: datetime | None = None


@dataclass(frozen=True)
class TokenResult:
    """Either claims or a failure kind, never both."""
    claims: TokenClaims | None = None
    failure: TokenFailure | None = None

    @property
    def is_valid(self) -> bool:
        return self.claims is not None

    @classmethod
    def ok(cls, claims: TokenClaims) -> "TokenResult":
        return cls(claims=claims)

    @classmethod
    def fail(cls, failure: TokenFailure) -> "TokenResult":
        return cls(failure=failure)
