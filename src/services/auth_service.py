"""Auth service: password hashing, registration and authentication.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import DuplicateError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72

INVALID_CREDENTIALS = "Invalid credentials"


def _password_bytes(password: str) -> bytes:
    # Lone surrogates from JSON \ud800 escapes are kept as their raw code units
    return password.encode("utf-8", errors="surrogatepass")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash password with a fresh salt. Two calls on the same input give different digests."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Check a password against a stored digest.

    Returns False rather than raising when the digest is missing or not a bcrypt hash.
    """
    if not plain or not hashed:
        return False
    password = _password_bytes(plain)
    try:
        return bcrypt.checkpw(password, hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password digest is not a valid bcrypt hash")
        return False


def register(repo: UserRepository, name: str, email: str, password: str) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        DuplicateError: email already registered (pre-check or unique index)
    """
    if repo.get_by_email(email):
        raise DuplicateError("User already exists")

    password_hash = hash_password(password)
    return repo.create(name=name, email=email, password_hash=password_hash)


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Returns the authenticated User domain object.
    Doesn't reveal whether the email exists.

    Raises:
        ValidationError: invalid credentials (same message for both cases)
    """
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise ValidationError(INVALID_CREDENTIALS)
    return user
