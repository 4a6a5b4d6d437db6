"""Signup, login and profile form schemas."""

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

PHONE_PATTERN = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s./0-9]*$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

NAME_MIN = 2
NAME_MAX = 100
PASSWORD_MIN = 8


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address."""
    return value.strip().lower()


def _check_email(value: str) -> str:
    value = normalize_email(value)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("email", "Please enter a valid email address.") from None
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if len(value) < NAME_MIN:
        raise PydanticCustomError("name_short", "Name must be at least 2 characters long.")
    if len(value) > NAME_MAX:
        raise PydanticCustomError("name_long", "Name must be less than 100 characters.")
    return value


def _check_phone(value: str | None) -> str | None:
    if not value:
        return None
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise PydanticCustomError("phone", "Please enter a valid phone number.")
    return value


class SignupForm(BaseModel):
    """Signup form."""

    name: str
    email: str
    password: str
    phone: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN:
            raise PydanticCustomError(
                "password_short", "Password must be at least 8 characters long."
            )
        if not re.search(r"[a-zA-Z]", v):
            raise PydanticCustomError(
                "password_letter", "Password must contain at least one letter."
            )
        if not re.search(r"[0-9]", v):
            raise PydanticCustomError(
                "password_digit", "Password must contain at least one number."
            )
        if not re.search(r"[^a-zA-Z0-9]", v):
            raise PydanticCustomError(
                "password_special", "Password must contain at least one special character."
            )
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str | None) -> str | None:
        return _check_phone(v)


class LoginForm(BaseModel):
    """Login form."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("password_required", "Password is required.")
        return v


class UpdateProfileForm(BaseModel):
    """Profile update form. Omitted fields are left unchanged."""

    name: str | None = None
    phone: str | None = None
    avatar: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else _check_name(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str | None) -> str | None:
        return _check_phone(v)

    @field_validator("avatar")
    @classmethod
    def _avatar(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not URL_PATTERN.match(v):
            raise PydanticCustomError("avatar", "Please enter a valid URL.")
        return v
