from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    phone: str = ''
    birthdate: date | None = None


@dataclass
class ProfileUpdate:
    """Fields a user may change on their own profile. None means 'leave as is'."""
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    birthdate: date | None = None
    current_password: str | None = None
    new_password: str | None = None

    @property
    def changes_password(self) -> bool:
        return bool(self.current_password and self.new_password)
