"""
kassa/schemas/user.py

Pydantic models for authentication, account settings and user management.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from kassa.utils import constants
from kassa.utils.validation_utils import normalize_email


Role = Literal["user", "superadmin"]


class RegisterRequest(BaseModel):
    """Request schema for creating an account."""

    email: str = Field(..., description="Login e-mail")
    password: str = Field(..., description="Password, at least 6 characters")
    username: Optional[str] = Field(default=None, description="Display name, defaults to the e-mail local part")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError(constants.MSG_PASSWORD_TOO_SHORT_REGISTER)
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 2:
            raise ValueError(constants.MSG_USERNAME_TOO_SHORT)
        return v


class LoginRequest(BaseModel):
    """Request schema for logging in."""

    email: str = Field(..., description="Login e-mail")
    password: str = Field(..., min_length=1, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class UserProfile(BaseModel):
    """Public view of a user document."""

    id: str
    email: str
    username: str
    role: Role = "user"
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Response schema for a successful login."""

    access_token: str
    token_type: str = "bearer"
    message: str = constants.MSG_LOGIN_SUCCESS
    user: UserProfile


class UpdateUsernameRequest(BaseModel):
    username: str = Field(..., description="New display name")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError(constants.MSG_USERNAME_TOO_SHORT)
        return v


class ChangePasswordRequest(BaseModel):
    """
    Password change form.
    The new password must be typed twice and be at least 6 characters.
    """

    current_password: str = Field(..., description="Password in use now")
    new_password: str = Field(..., description="Replacement password")
    confirm_password: str = Field(..., description="Replacement password, again")

    @model_validator(mode="after")
    def check_new_password(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError(constants.MSG_PASSWORD_MISMATCH)
        if len(self.new_password) < 6:
            raise ValueError(constants.MSG_PASSWORD_TOO_SHORT)
        return self


class RoleUpdateRequest(BaseModel):
    role: Role = Field(..., description="Role to assign")
