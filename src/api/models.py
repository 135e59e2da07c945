"""Pydantic models for API request/response."""

from datetime import date
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from domain.model.user import ProfileUpdate, User

AVATAR_URL_TEMPLATE = "https://ui-avatars.com/api/?name={name}&background=random"


def avatar_url(name: str) -> str:
    """Generated avatar for a display name; never stored."""
    # Same escaping as JavaScript's encodeURIComponent
    return AVATAR_URL_TEMPLATE.format(name=quote(name, safe="!~*'()"))


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str


class UpdateUserRequest(BaseModel):
    """Partial profile update. Omitted fields keep their stored values."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birthdate: Optional[date] = None
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

    @field_validator('email', 'birthdate', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Profile forms send "" for untouched fields."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('birthdate', mode='before')
    @classmethod
    def strip_time(cls, v):
        """Accept full ISO timestamps ("2000-05-01T00:00:00.000Z") as well as dates."""
        if isinstance(v, str) and 'T' in v:
            return v.split('T', 1)[0]
        return v

    def to_domain(self) -> ProfileUpdate:
        return ProfileUpdate(
            name=self.name,
            email=self.email,
            phone=self.phone,
            birthdate=self.birthdate,
            current_password=self.current_password,
            new_password=self.new_password,
        )


class UserResponse(BaseModel):
    """Public profile. Has no password field by construction."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    phone: str = ""
    birthdate: str = Field("", description="ISO date, or empty when unknown")
    profile_image: str = Field(..., alias="profileImage")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone or "",
            birthdate=user.birthdate.isoformat() if user.birthdate else "",
            profile_image=avatar_url(user.name),
        )


class AuthResponse(BaseModel):
    """Response model for register and login."""
    message: str
    token: str
    user: UserResponse


class CurrentUserResponse(BaseModel):
    user: UserResponse


class UpdateUserResponse(BaseModel):
    message: str
    user: UserResponse
