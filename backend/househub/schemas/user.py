"""User Schemas — create/update requests and the public user representation.

Invariants:
    - first_name: 1-100 chars, stripped (required on create)
    - email: valid address <= 255 chars; blank strings become None
    - UserUpdate fields are all optional; None means "leave unchanged"
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError,
    field_validator,
)

_EMAIL_MAX_LENGTH = 255
_email_adapter = TypeAdapter(EmailStr)


def _normalize_email(v):
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
        if len(v) > _EMAIL_MAX_LENGTH:
            raise ValueError(f"email must be at most {_EMAIL_MAX_LENGTH} characters")
    return v


def canonical_email(value: str) -> str:
    """Stored form of an email address, for lookups by raw user input.

    Valid addresses come back exactly as EmailStr stores them (domain
    lower-cased); anything else is only stripped.
    """
    value = value.strip()
    try:
        return _email_adapter.validate_python(value)
    except ValidationError:
        return value


class UserCreate(BaseModel):
    """User creation — only first_name is required."""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(None, max_length=10)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)

    @field_validator("first_name")
    @classmethod
    def strip_first_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("first_name cannot be empty or whitespace")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class UserUpdate(BaseModel):
    """Partial user update — every field optional."""
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(None, max_length=10)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    is_active: bool | None = None

    @field_validator("first_name")
    @classmethod
    def strip_first_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("first_name cannot be empty or whitespace")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class UserResponse(BaseModel):
    """User response — public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    phone_number: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
