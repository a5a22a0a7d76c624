"""
Pydantic schemas for the admin users endpoints.
Defines request models for user CRUD operations.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

__all__ = ["UserCreateIn", "UserUpdateIn"]


class UserCreateIn(BaseModel):
    """
    Request model for creating a user (admin only).
    Unlike public registration, any role can be assigned here.
    """
    name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["user", "publisher", "admin"] = "user"


class UserUpdateIn(BaseModel):
    """
    Request model for updating user information (admin only).
    All fields are optional - only provided fields will be updated.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    email: Optional[EmailStr] = None
    role: Optional[Literal["user", "publisher", "admin"]] = None  # cannot demote yourself
    password: Optional[str] = Field(default=None, min_length=6)
