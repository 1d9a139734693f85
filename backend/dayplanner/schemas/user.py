"""Pydantic schemas for Users and authentication."""
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator

# bcrypt only reads the first 72 bytes of a secret.
PASSWORD_MAX_BYTES = 72


class Credentials(BaseModel):
    """Registration input; enforces the email shape and password policy."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("must be an email address")
        return value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
        return value


class LoginCredentials(BaseModel):
    """Login input; no policy checks, so every failure is InvalidCredentials."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserOut(BaseModel):
    id: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserOut
