"""
Pydantic schemas for authentication endpoints.
Defines request models for registration, login and password management.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

__all__ = [
    "RegisterIn",
    "LoginIn",
    "UpdateDetailsIn",
    "UpdatePasswordIn",
    "ForgotPasswordIn",
    "ResetPasswordIn",
]


class RegisterIn(BaseModel):
    """
    Request model for the register endpoint.
    Admins cannot be self-registered; see core.bootstrap and the users API.
    """
    name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["user", "publisher"] = "user"


class LoginIn(BaseModel):
    """
    Request model for login. Fields are optional so that a missing value
    produces the API's own 400 message instead of a schema error.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateDetailsIn(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class UpdatePasswordIn(BaseModel):
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = Field(default=None, min_length=6)


class ForgotPasswordIn(BaseModel):
    email: str


class ResetPasswordIn(BaseModel):
    password: str = Field(min_length=6)
