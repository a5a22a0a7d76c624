# devcamper/api/v1/routers/bootcamps.py
import datetime as dt

from fastapi import APIRouter, Depends, Request, status

from devcamper.api.v1.deps import fetch_or_404, get_context, require_roles
from devcamper.api.v1.serializers import bootcamp_to_dict
from devcamper.core.context import AppContext
from devcamper.core.errors import BadRequest, Forbidden
from devcamper.core.policy import BOOTCAMP_EDITORS, Principal, can_mutate
from devcamper.models.bootcamp import Bootcamp
from devcamper.schemas.bootcamp import BootcampCreateIn, BootcampUpdateIn
from devcamper.services import bootcamps as bootcamp_service
from devcamper.services.query import FieldSpec, advanced_results, as_bool

router = APIRouter(prefix="/bootcamps", tags=["bootcamps"])

editor = require_roles(*BOOTCAMP_EDITORS)

# Filterable / sortable fields of GET /bootcamps
BOOTCAMP_FIELDS = {
    "name": FieldSpec("name"),
    "slug": FieldSpec("slug"),
    "averageCost": FieldSpec("average_cost", int),
    "averageRating": FieldSpec("average_rating", float),
    "housing": FieldSpec("housing", as_bool),
    "jobAssistance": FieldSpec("job_assistance", as_bool),
    "jobGuarantee": FieldSpec("job_guarantee", as_bool),
    "acceptGi": FieldSpec("accept_gi", as_bool),
    "careers": FieldSpec("careers", sortable=False, json_list=True),
    "location.city": FieldSpec("city"),
    "location.state": FieldSpec("state"),
    "location.zipcode": FieldSpec("zipcode"),
    "createdAt": FieldSpec("created_at", dt.datetime.fromisoformat),
}


@router.get("")
async def list_bootcamps(request: Request):
    """
    List bootcamps with filtering, select, sort and pagination.
    Each bootcamp embeds its courses.
    """
    return await advanced_results(
        Bootcamp.all(),
        request.query_params.multi_items(),
        BOOTCAMP_FIELDS,
        lambda b: bootcamp_to_dict(b, with_courses=True),
        prefetch=("courses",),
    )


@router.get("/radius/{zipcode}/{distance}")
async def bootcamps_in_radius(zipcode: str, distance: float, ctx: AppContext = Depends(get_context)):
    """Bootcamps within `distance` miles of a zipcode."""
    if distance < 0:
        raise BadRequest("Distance must not be negative")
    rows = await bootcamp_service.bootcamps_in_radius(ctx, zipcode, distance)
    return {"success": True, "count": len(rows), "data": [bootcamp_to_dict(b) for b in rows]}


@router.get("/{bootcamp_id}")
async def get_bootcamp(bootcamp_id: str):
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    return {"success": True, "data": bootcamp_to_dict(bootcamp)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_bootcamp(
    body: BootcampCreateIn,
    principal: Principal = Depends(editor),
    ctx: AppContext = Depends(get_context),
):
    """
    Create a bootcamp owned by the caller.
    Publishers may own one bootcamp; admins any number.
    """
    bootcamp = await bootcamp_service.create_bootcamp(ctx, principal, body)
    return {"success": True, "data": bootcamp_to_dict(bootcamp)}


@router.put("/{bootcamp_id}")
async def update_bootcamp(
    bootcamp_id: str,
    body: BootcampUpdateIn,
    principal: Principal = Depends(editor),
    ctx: AppContext = Depends(get_context),
):
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    if not can_mutate(principal, bootcamp.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to update this bootcamp")
    bootcamp = await bootcamp_service.update_bootcamp(ctx, bootcamp, body)
    return {"success": True, "data": bootcamp_to_dict(bootcamp)}


@router.delete("/{bootcamp_id}")
async def delete_bootcamp(bootcamp_id: str, principal: Principal = Depends(editor)):
    """Delete a bootcamp together with its courses and reviews."""
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    if not can_mutate(principal, bootcamp.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to delete this bootcamp")
    await bootcamp_service.delete_bootcamp(bootcamp)
    return {"success": True, "data": {}}
