# devcamper/api/v1/routers/courses.py
import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Request, status

from devcamper.api.v1.deps import fetch_or_404, require_roles
from devcamper.api.v1.serializers import course_to_dict
from devcamper.core.errors import Forbidden
from devcamper.core.policy import COURSE_EDITORS, Principal, can_mutate
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.schemas.course import CourseCreateIn, CourseUpdateIn
from devcamper.services.aggregates import recompute_average_cost
from devcamper.services.query import FieldSpec, advanced_results, as_bool

router = APIRouter(prefix="/courses", tags=["courses"])
# Nested under a bootcamp: /bootcamps/{bootcamp_id}/courses
bootcamp_router = APIRouter(prefix="/bootcamps/{bootcamp_id}/courses", tags=["courses"])

editor = require_roles(*COURSE_EDITORS)

COURSE_FIELDS = {
    "title": FieldSpec("title"),
    "weeks": FieldSpec("weeks"),
    "tuition": FieldSpec("tuition", int),
    "minimumSkill": FieldSpec("minimum_skill"),
    "scholarshipAvailable": FieldSpec("scholarship_available", as_bool),
    "bootcamp": FieldSpec("bootcamp_id", uuid.UUID, sortable=False),
    "user": FieldSpec("user_id", uuid.UUID, sortable=False),
    "createdAt": FieldSpec("created_at", dt.datetime.fromisoformat),
}


@router.get("")
async def list_courses(request: Request):
    """List courses (advanced results), each with its bootcamp's name and description."""
    return await advanced_results(
        Course.all(),
        request.query_params.multi_items(),
        COURSE_FIELDS,
        lambda c: course_to_dict(c, with_bootcamp=True),
        prefetch=("bootcamp",),
    )


@router.get("/{course_id}")
async def get_course(course_id: str):
    course = await fetch_or_404(Course, course_id, "Course")
    await course.fetch_related("bootcamp")
    return {"success": True, "data": course_to_dict(course, with_bootcamp=True)}


@router.put("/{course_id}")
async def update_course(course_id: str, body: CourseUpdateIn, principal: Principal = Depends(editor)):
    """
    Update a course. Only its owner or an admin may do so; the parent
    bootcamp and owner cannot be changed.
    """
    course = await fetch_or_404(Course, course_id, "Course")
    if not can_mutate(principal, course.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to update course {course.id}")

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        course.update_from_dict(changes)
        await course.save()
    if "tuition" in changes:
        await recompute_average_cost(course.bootcamp_id)
    return {"success": True, "data": course_to_dict(course)}


@router.delete("/{course_id}")
async def delete_course(course_id: str, principal: Principal = Depends(editor)):
    course = await fetch_or_404(Course, course_id, "Course")
    if not can_mutate(principal, course.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to delete course {course.id}")

    bootcamp_id = course.bootcamp_id
    await course.delete()
    await recompute_average_cost(bootcamp_id)
    return {"success": True, "data": {}}


@bootcamp_router.get("")
async def list_bootcamp_courses(bootcamp_id: str):
    """All courses of one bootcamp."""
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    courses = await Course.filter(bootcamp_id=bootcamp.id).order_by("created_at", "id")
    return {"success": True, "count": len(courses), "data": [course_to_dict(c) for c in courses]}


@bootcamp_router.post("", status_code=status.HTTP_201_CREATED)
async def add_course(bootcamp_id: str, body: CourseCreateIn, principal: Principal = Depends(editor)):
    """
    Add a course to a bootcamp. Only the bootcamp's owner or an admin may add
    courses; the course is owned by the caller.
    """
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    if not can_mutate(principal, bootcamp.user_id):
        raise Forbidden(
            f"User with the ID {principal.id} is not authorized to add a course to bootcamp {bootcamp.id}"
        )

    course = await Course.create(**body.model_dump(), bootcamp_id=bootcamp.id, user_id=principal.id)
    await recompute_average_cost(bootcamp.id)
    return {"success": True, "data": course_to_dict(course)}
