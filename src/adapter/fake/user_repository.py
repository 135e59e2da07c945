"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, name: str, email: str, password_hash: str) -> User:
        if self.get_by_email(email):
            raise DuplicateError("User already exists")

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.store[user_id] = user
        return replace(user)

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        new_email = fields.get('email')
        if new_email and any(u.email == new_email and u.id != user_id for u in self.store.values()):
            raise DuplicateError("Email already in use")

        updated = replace(user, **fields, updated_at=datetime.now(timezone.utc))
        self.store[user_id] = updated
        return replace(updated)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None
