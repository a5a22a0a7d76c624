"""
Derived bootcamp aggregates.

averageCost   = mean course tuition, rounded up to the next multiple of 10
averageRating = mean review rating

Routers call recompute_* right after a course/review is created, updated or
deleted. A failed recomputation is logged and never fails the request.
When a bootcamp has no courses (reviews) left the aggregate is stored as null.
"""
import logging
import math
from typing import Iterable, Optional

from ..models.bootcamp import Bootcamp
from ..models.course import Course
from ..models.review import Review

logger = logging.getLogger("uvicorn.error")


def average_cost(tuitions: Iterable[float]) -> Optional[int]:
    values = list(tuitions)
    if not values:
        return None
    mean = sum(values) / len(values)
    return int(math.ceil(mean / 10) * 10)


def average_rating(ratings: Iterable[float]) -> Optional[float]:
    values = list(ratings)
    if not values:
        return None
    return sum(values) / len(values)


async def recompute_average_cost(bootcamp_id) -> Optional[int]:
    try:
        tuitions = await Course.filter(bootcamp_id=bootcamp_id).values_list("tuition", flat=True)
        value = average_cost(tuitions)
        await Bootcamp.filter(id=bootcamp_id).update(average_cost=value)
        return value
    except Exception:
        logger.exception("[aggregates] averageCost recomputation failed for bootcamp %s", bootcamp_id)
        return None


async def recompute_average_rating(bootcamp_id) -> Optional[float]:
    try:
        ratings = await Review.filter(bootcamp_id=bootcamp_id).values_list("rating", flat=True)
        value = average_rating(ratings)
        await Bootcamp.filter(id=bootcamp_id).update(average_rating=value)
        return value
    except Exception:
        logger.exception("[aggregates] averageRating recomputation failed for bootcamp %s", bootcamp_id)
        return None
