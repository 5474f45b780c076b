"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class RegisterUserDTO(BaseModel):
    """Self-service registration payload.

    Registration always yields a customer; admins and couriers are
    provisioned by an administrator.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""

    @field_validator("username")
    @classmethod
    def username_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Username must not be empty.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must have at least 8 characters.")
        return v
