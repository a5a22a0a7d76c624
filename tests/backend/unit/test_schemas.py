"""
Unit tests for the request schemas.
Career and skill level choices come from the model constants.
"""
import pytest
from pydantic import ValidationError

from devcamper.models.bootcamp import CAREERS
from devcamper.models.course import SKILL_LEVELS
from devcamper.schemas.bootcamp import BootcampCreateIn, BootcampUpdateIn
from devcamper.schemas.course import CourseCreateIn, CourseUpdateIn


def _bootcamp(**overrides) -> dict:
    data = {
        "name": "Devworks Bootcamp",
        "description": "Full stack JavaScript bootcamp",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development"],
    }
    data.update(overrides)
    return data


def _course(**overrides) -> dict:
    data = {"title": "Front End", "description": "HTML and CSS", "weeks": 8, "tuition": 8000, "minimumSkill": "beginner"}
    data.update(overrides)
    return data


def test_every_career_is_accepted():
    body = BootcampCreateIn.model_validate(_bootcamp(careers=list(CAREERS)))
    assert tuple(body.careers) == CAREERS


def test_unknown_career_is_rejected():
    with pytest.raises(ValidationError):
        BootcampCreateIn.model_validate(_bootcamp(careers=["Astrology"]))
    with pytest.raises(ValidationError):
        BootcampUpdateIn.model_validate({"careers": ["Business", "Astrology"]})


@pytest.mark.parametrize("level", SKILL_LEVELS)
def test_every_skill_level_is_accepted(level):
    assert CourseCreateIn.model_validate(_course(minimumSkill=level)).minimum_skill == level


def test_unknown_skill_level_is_rejected():
    with pytest.raises(ValidationError):
        CourseCreateIn.model_validate(_course(minimumSkill="guru"))
    with pytest.raises(ValidationError):
        CourseUpdateIn.model_validate({"minimumSkill": "guru"})


def test_weeks_accepts_numbers():
    assert CourseCreateIn.model_validate(_course(weeks=12)).weeks == "12"
