"""Typed inputs for registration and login."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

DEFAULT_MIN_PASSWORD_LENGTH = 6

# Dialling code -> number of national digits accepted
COUNTRY_CODE_DIGITS: dict[str, int] = {
    "+92": 10,
    "+91": 10,
    "+1": 10,
    "+44": 10,
    "+971": 9,
}

CountryCode = Literal["+92", "+91", "+1", "+44", "+971"]
Gender = Literal["male", "female", "other", "prefer-not-to-say"]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RegistrationInput(BaseModel):
    """Registration form payload."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    name: str = ""
    email: str = Field(..., min_length=3, max_length=100)
    country_code: CountryCode = "+92"
    phone: str = ""
    age: int = Field(..., ge=0, le=120)
    gender: Gender = "male"
    password: str
    confirm_password: str

    @field_validator("name", mode="after")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("name_required", "Full name is required")
        return value.strip()

    @field_validator("email", mode="after")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if "@" not in value:
            raise PydanticCustomError("email", "Please enter a valid email address")
        return normalize_email(value)

    @field_validator("phone", mode="before")
    @classmethod
    def keep_digits(cls, value: object) -> str:
        return "".join(ch for ch in str(value or "") if ch.isdigit())

    @field_validator("phone", mode="after")
    @classmethod
    def trim_phone_to_country(cls, value: str, info: ValidationInfo) -> str:
        country_code = info.data.get("country_code", "+92")
        return value[: COUNTRY_CODE_DIGITS[country_code]]

    @field_validator("password", mode="after")
    @classmethod
    def validate_password_length(cls, value: str, info: ValidationInfo) -> str:
        context = info.context or {}
        min_length = context.get("min_password_length", DEFAULT_MIN_PASSWORD_LENGTH)
        if len(value) < min_length:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": min_length},
            )
        return value

    @field_validator("confirm_password", mode="after")
    @classmethod
    def validate_passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise PydanticCustomError("password_mismatch", "Passwords do not match")
        return value

    @property
    def full_phone(self) -> str:
        """Phone number stored with its dialling code."""
        return f"{self.country_code}{self.phone}"


class LoginInput(BaseModel):
    """Login form payload."""

    model_config = ConfigDict(frozen=True)

    email: str
    password: str

    @field_validator("email", mode="after")
    @classmethod
    def normalize(cls, value: str) -> str:
        return normalize_email(value)
