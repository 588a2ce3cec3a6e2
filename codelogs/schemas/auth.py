"""Authentication and account schemas."""

import re
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from codelogs.schemas.common import Envelope

MIN_AGE_YEARS = 10
MIN_PASSWORD_LENGTH = 6
# Country code of 1-4 digits followed by exactly 8 digits, e.g. +97112345678
PHONE_PATTERN = re.compile(r"^\+[0-9]{1,4}[0-9]{8}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")


def calculate_age(dob: date, today: date | None = None) -> int:
    """Return completed years between dob and today."""
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def check_password(value: str) -> str:
    """Enforce the password length rule."""
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    return value


class UserRegister(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr = Field(..., max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    dob: date
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("username")
    @classmethod
    def username_has_no_whitespace(cls, value: str) -> str:
        if re.search(r"\s", value):
            raise ValueError("Username cannot contain spaces.")
        return value

    @field_validator("phone")
    @classmethod
    def phone_has_country_code(cls, value: str) -> str:
        if not PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", value)):
            raise ValueError(
                "Invalid phone number format. Required format: country code + 8 digits "
                "(e.g., +97112345678)."
            )
        return value

    @field_validator("dob")
    @classmethod
    def old_enough(cls, value: date) -> date:
        if calculate_age(value) < MIN_AGE_YEARS:
            raise ValueError(f"You must be at least {MIN_AGE_YEARS} years old to register.")
        return value

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, value: str) -> str:
        return check_password(value)


class RegisterResponse(Envelope):
    """Registration result."""

    user_id: int
    username: str


class UserLogin(BaseModel):
    """User login request."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(Envelope):
    """Successful login."""

    username: str
    user_id: int


class LoginStatus(Envelope):
    """Whether the caller holds a live session."""

    logged_in: bool
    username: str | None = None
    user_id: int | None = None


class RecoverRequest(BaseModel):
    """Account recovery request."""

    email: str = Field(..., min_length=1, max_length=255)
    username: str | None = Field(None, max_length=50)


class RecoverResponse(Envelope):
    """Recovery acknowledgement. The token is only echoed outside production."""

    reset_token: str | None = None


class PasswordReset(BaseModel):
    """Redeem a reset token for a new password."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, value: str) -> str:
        return check_password(value)


class UserSearchResult(BaseModel):
    """A user search hit; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class UserSummary(UserSearchResult):
    """Public user fields shown in follower lists."""

    profile_picture: str | None = None


class UserSearchResponse(Envelope):
    """User search results."""

    search_query: str
    count: int
    users: list[UserSearchResult]


class ProfilePictureResponse(Envelope):
    """Avatar upload result."""

    profile_picture_url: str
    updated_at: datetime
