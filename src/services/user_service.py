"""Profile retrieval and update for the authenticated user."""

from typing import Any

from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import ProfileUpdate, User
from port.user_repository import UserRepository
from services.auth_service import hash_password, verify_password


def get_profile(repo: UserRepository, user_id: str) -> User:
    """Raises NotFoundError when the token outlived its user."""
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_profile(repo: UserRepository, user_id: str, update: ProfileUpdate) -> User:
    """Apply a partial profile update.

    name, email and birthdate change only when given a non-empty value; phone
    changes whenever it is present, so an empty string clears it. The password
    changes only when both the current and the new one are supplied and the
    current one matches; otherwise nothing at all is written.

    Raises:
        NotFoundError: no user with this id
        ValidationError: current password does not match
        DuplicateError: new email belongs to another account
    """
    user = get_profile(repo, user_id)

    fields: dict[str, Any] = {}
    if update.name:
        fields['name'] = update.name
    if update.email:
        fields['email'] = update.email
    if update.phone is not None:
        fields['phone'] = update.phone
    if update.birthdate:
        fields['birthdate'] = update.birthdate

    if update.changes_password:
        if not verify_password(update.current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        fields['password_hash'] = hash_password(update.new_password)

    if not fields:
        return user

    updated = repo.update(user_id, fields)
    if not updated:
        raise NotFoundError("User not found")
    return updated
