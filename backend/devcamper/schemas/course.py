"""
Pydantic schemas for course endpoints.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devcamper.models.course import SKILL_LEVELS

__all__ = ["CourseCreateIn", "CourseUpdateIn"]

SkillLevel = Literal[SKILL_LEVELS]


class CourseCreateIn(BaseModel):
    """Request model for adding a course to a bootcamp (bootcamp and owner come from the route/token)."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=128)
    description: str = Field(min_length=1)
    weeks: str = Field(min_length=1, max_length=16)
    tuition: int = Field(ge=0)
    minimum_skill: SkillLevel = Field(alias="minimumSkill")
    scholarship_available: bool = Field(default=False, alias="scholarshipAvailable")

    @field_validator("weeks", mode="before")
    @classmethod
    def weeks_as_text(cls, value):
        # "8" and 8 are both accepted
        return str(value) if isinstance(value, int) else value


class CourseUpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = Field(default=None, min_length=1)
    weeks: Optional[str] = Field(default=None, min_length=1, max_length=16)
    tuition: Optional[int] = Field(default=None, ge=0)
    minimum_skill: Optional[SkillLevel] = Field(default=None, alias="minimumSkill")
    scholarship_available: Optional[bool] = Field(default=None, alias="scholarshipAvailable")

    @field_validator("weeks", mode="before")
    @classmethod
    def weeks_as_text(cls, value):
        return str(value) if isinstance(value, int) else value
