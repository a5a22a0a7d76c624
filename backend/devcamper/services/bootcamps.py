"""
Bootcamp lifecycle service.

Side effects that would otherwise hide in ORM save/remove hooks are explicit
functions here, called by the bootcamps router:

- create_bootcamp: one-bootcamp-per-publisher check, slug, geocoding
- update_bootcamp: re-slug on rename, re-geocode on address change
- delete_bootcamp: cascade delete of courses and reviews
- bootcamps_in_radius: distance search around a geocoded zipcode
"""
import logging
import math
import re
from typing import List, Optional

from tortoise.transactions import in_transaction

from ..core.context import AppContext
from ..core.errors import BadRequest
from ..core.policy import Principal, can_create_bootcamp
from ..models.bootcamp import Bootcamp
from ..models.course import Course
from ..models.review import Review
from ..schemas.bootcamp import BootcampCreateIn, BootcampUpdateIn
from .geocoder import GeoResult

logger = logging.getLogger("uvicorn.error")

EARTH_RADIUS_MILES = 3963.2

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """'Devworks Bootcamp!' -> 'devworks-bootcamp'"""
    return _NON_SLUG.sub("-", name.lower()).strip("-")


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance between two points, in miles."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))


def _location_fields(result: Optional[GeoResult]) -> dict:
    if result is None:
        return {
            "location_lng": None,
            "location_lat": None,
            "formatted_address": None,
            "street": None,
            "city": None,
            "state": None,
            "zipcode": None,
            "country": None,
        }
    return {
        "location_lng": result.longitude,
        "location_lat": result.latitude,
        "formatted_address": result.formatted_address,
        "street": result.street,
        "city": result.city,
        "state": result.state_code,
        "zipcode": result.zipcode,
        "country": result.country_code,
    }


async def _geocode_first(ctx: AppContext, address: str) -> Optional[GeoResult]:
    """Best geocoding match, or None when the lookup fails or finds nothing."""
    if not ctx.geocoder.is_available():
        logger.warning("[bootcamps] geocoder not configured, location left empty for %r", address)
        return None
    try:
        results = await ctx.geocoder.geocode(address)
    except Exception:
        logger.exception("[bootcamps] geocoding failed for %r", address)
        return None
    return results[0] if results else None


async def create_bootcamp(ctx: AppContext, principal: Principal, body: BootcampCreateIn) -> Bootcamp:
    location = _location_fields(await _geocode_first(ctx, body.address))

    async with in_transaction():
        owned = await Bootcamp.filter(user_id=principal.id).count()
        if not can_create_bootcamp(principal, owned):
            raise BadRequest(
                f"The user with the role | {principal.role.value} | with ID {principal.id} "
                "has already published a bootcamp"
            )
        bootcamp = await Bootcamp.create(
            **body.model_dump(),
            **location,
            slug=slugify(body.name),
            user_id=principal.id,
        )

    logger.info("[bootcamps] created %s (%s) owner=%s", bootcamp.id, bootcamp.slug, principal.id)
    return bootcamp


async def update_bootcamp(ctx: AppContext, bootcamp: Bootcamp, body: BootcampUpdateIn) -> Bootcamp:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes and changes["name"] != bootcamp.name:
        changes["slug"] = slugify(changes["name"])
    if "address" in changes and changes["address"] != bootcamp.address:
        changes.update(_location_fields(await _geocode_first(ctx, changes["address"])))

    if changes:
        bootcamp.update_from_dict(changes)
        await bootcamp.save()
    return bootcamp


async def delete_bootcamp(bootcamp: Bootcamp) -> None:
    async with in_transaction():
        courses = await Course.filter(bootcamp_id=bootcamp.id).delete()
        reviews = await Review.filter(bootcamp_id=bootcamp.id).delete()
        await bootcamp.delete()
    logger.info(
        "[bootcamps] deleted %s with %s course(s) and %s review(s)",
        bootcamp.id, courses, reviews,
    )


async def bootcamps_in_radius(ctx: AppContext, zipcode: str, distance: float) -> List[Bootcamp]:
    """
    Bootcamps within `distance` miles of the zipcode's location.

    Raises:
        BadRequest: when the zipcode cannot be geocoded
    """
    origin = await _geocode_first(ctx, zipcode)
    if origin is None:
        raise BadRequest(f"Could not geocode zipcode {zipcode}")

    candidates = await Bootcamp.filter(location_lat__isnull=False, location_lng__isnull=False)
    return [
        b for b in candidates
        if distance_miles(origin.latitude, origin.longitude, b.location_lat, b.location_lng) <= distance
    ]
