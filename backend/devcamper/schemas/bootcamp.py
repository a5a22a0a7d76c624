"""
Pydantic schemas for bootcamp endpoints.
Field aliases follow the public camelCase API; attributes are snake_case so
that validated payloads map straight onto the Bootcamp model.
"""
from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from devcamper.models.bootcamp import CAREERS

__all__ = ["BootcampCreateIn", "BootcampUpdateIn"]

Career = Literal[CAREERS]


def _check_website(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or "." not in parsed.netloc:
        raise ValueError("Please provide a valid URL with HTTP or HTTPS")
    return value


class BootcampCreateIn(BaseModel):
    """Request model for creating a bootcamp (owner is taken from the token)."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: str = Field(min_length=1)
    careers: List[Career] = Field(min_length=1)
    housing: bool = False
    job_assistance: bool = Field(default=False, alias="jobAssistance")
    job_guarantee: bool = Field(default=False, alias="jobGuarantee")
    accept_gi: bool = Field(default=False, alias="acceptGi")

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)


class BootcampUpdateIn(BaseModel):
    """
    Request model for updating a bootcamp.
    All fields are optional; owner and derived fields cannot be set.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, min_length=1)
    careers: Optional[List[Career]] = Field(default=None, min_length=1)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = Field(default=None, alias="jobAssistance")
    job_guarantee: Optional[bool] = Field(default=None, alias="jobGuarantee")
    accept_gi: Optional[bool] = Field(default=None, alias="acceptGi")

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)
