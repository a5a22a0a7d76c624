"""
Model → response dict conversion.
Public field names are camelCase; ids are strings.
"""
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.models.review import Review
from devcamper.models.user import User


def _iso(value):
    return value.isoformat() if value else None


def user_to_dict(u: User) -> dict:
    return {
        "id": str(u.id),
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "createdAt": _iso(u.created_at),
    }


def bootcamp_summary(b: Bootcamp) -> dict:
    """The short form embedded in course/review responses."""
    return {"id": str(b.id), "name": b.name, "description": b.description}


def location_to_dict(b: Bootcamp) -> dict | None:
    if not b.has_location:
        return None
    return {
        "type": "Point",
        "coordinates": [b.location_lng, b.location_lat],  # GeoJSON: longitude first
        "formattedAddress": b.formatted_address,
        "street": b.street,
        "city": b.city,
        "state": b.state,
        "zipcode": b.zipcode,
        "country": b.country,
    }


def course_to_dict(c: Course, with_bootcamp: bool = False) -> dict:
    data = {
        "id": str(c.id),
        "title": c.title,
        "description": c.description,
        "weeks": c.weeks,
        "tuition": c.tuition,
        "minimumSkill": c.minimum_skill,
        "scholarshipAvailable": c.scholarship_available,
        "createdAt": _iso(c.created_at),
        "bootcamp": str(c.bootcamp_id),
        "user": str(c.user_id),
    }
    if with_bootcamp:
        data["bootcamp"] = bootcamp_summary(c.bootcamp)
    return data


def review_to_dict(r: Review, with_bootcamp: bool = False) -> dict:
    data = {
        "id": str(r.id),
        "title": r.title,
        "text": r.text,
        "rating": r.rating,
        "createdAt": _iso(r.created_at),
        "bootcamp": str(r.bootcamp_id),
        "user": str(r.user_id),
    }
    if with_bootcamp:
        data["bootcamp"] = bootcamp_summary(r.bootcamp)
    return data


def bootcamp_to_dict(b: Bootcamp, with_courses: bool = False) -> dict:
    data = {
        "id": str(b.id),
        "name": b.name,
        "slug": b.slug,
        "description": b.description,
        "website": b.website,
        "phone": b.phone,
        "email": b.email,
        "address": b.address,
        "location": location_to_dict(b),
        "careers": b.careers,
        "averageRating": b.average_rating,
        "averageCost": b.average_cost,
        "photo": b.photo,
        "housing": b.housing,
        "jobAssistance": b.job_assistance,
        "jobGuarantee": b.job_guarantee,
        "acceptGi": b.accept_gi,
        "createdAt": _iso(b.created_at),
        "user": str(b.user_id),
    }
    if with_courses:
        data["courses"] = [course_to_dict(c) for c in b.courses]
    return data
