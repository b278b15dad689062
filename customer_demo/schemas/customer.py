from pydantic import BaseModel, field_validator, field_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from customer_demo.utils.helpers import (
    is_blank,
    is_valid_email,
    is_valid_phone_number,
    is_valid_post_code,
)

ID_MAX_LENGTH = 10
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 50


def _require(value: str, max_length: int = None) -> str:
    if is_blank(value):
        raise ValueError("is required")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"must be at most {max_length} characters")
    return value


class CustomerUpdate(BaseModel):
    """Mutable customer fields. Any `id` in the body is ignored."""

    username: str
    email: str
    phone_number: str
    post_code: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _require(value, USERNAME_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        _require(value, EMAIL_MAX_LENGTH)
        if not is_valid_email(value):
            raise ValueError("must be a valid email address")
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        _require(value)
        if not is_valid_phone_number(value):
            raise ValueError("must be 10 or 11 digits")
        return value

    @field_validator("post_code")
    @classmethod
    def validate_post_code(cls, value: str) -> str:
        _require(value)
        if not is_valid_post_code(value):
            raise ValueError("must be exactly 7 digits")
        return value


class CustomerCreate(CustomerUpdate):
    id: str

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        # The id is a single path segment in /api/customers/{id}
        _require(value, ID_MAX_LENGTH)
        if "/" in value:
            raise ValueError("must not contain '/'")
        if value in (".", ".."):
            raise ValueError("must not be '.' or '..'")
        return value


class CustomerResponse(BaseModel):
    id: str
    username: str
    email: str
    phone_number: str
    post_code: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        # SQLite hands back naive datetimes; everything is stored as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    detail: str
    errors: list[FieldError] = []
    type: str = "error"
    status: str = "error"
