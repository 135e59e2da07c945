from typing import Any, Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, name: str, email: str, password_hash: str) -> User:
        """Create a new user.

        Raises DuplicateError when the email is already taken.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Set the given fields on a user. Return the updated User or None if not found.

        Raises DuplicateError when the new email belongs to another user.
        """
        ...
