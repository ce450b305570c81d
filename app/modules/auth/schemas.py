from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, field_validator

T = TypeVar("T")


def _blank_to_none(value):
    # emails are otherwise kept as typed: no case folding, no format check
    if isinstance(value, str):
        return value.strip() or None
    return value


class SignupRequest(BaseModel):
    # Required fields are checked by AuthService so a missing one gets the
    # same 400 shape as any other validation failure.
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        return _blank_to_none(value)


class SigninRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        return _blank_to_none(value)


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class CurrentUser(BaseModel):
    """Identity resolved by the authorization gate."""
    id: str
    email: str
    name: Optional[str] = None


class UserSummary(BaseModel):
    id: str
    email: str
    name: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    user: UserSummary
    token: str


class ProfileUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    avatar: Optional[str] = None


class ProfileResponse(BaseModel):
    user: ProfileUser


class MessageResponse(BaseModel):
    message: str


@dataclass
class Outcome(Generic[T]):
    """Result of an operation whose primary write succeeded.

    `warning` is set when a best-effort secondary write failed.
    """
    value: T
    warning: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.warning is not None
