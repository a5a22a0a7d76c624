"""
Pydantic schemas for review endpoints.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ReviewCreateIn", "ReviewUpdateIn"]


class ReviewCreateIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=10)  # Please add a rating between 1 and 10


class ReviewUpdateIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    text: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=10)
