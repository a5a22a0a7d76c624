# devcamper/api/v1/routers/reviews.py
import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Request, status

from devcamper.api.v1.deps import fetch_or_404, require_roles
from devcamper.api.v1.serializers import review_to_dict
from devcamper.core.errors import Forbidden
from devcamper.core.policy import REVIEW_AUTHORS, Principal, can_mutate
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.review import Review
from devcamper.schemas.review import ReviewCreateIn, ReviewUpdateIn
from devcamper.services.aggregates import recompute_average_rating
from devcamper.services.query import FieldSpec, advanced_results

router = APIRouter(prefix="/reviews", tags=["reviews"])
bootcamp_router = APIRouter(prefix="/bootcamps/{bootcamp_id}/reviews", tags=["reviews"])

author = require_roles(*REVIEW_AUTHORS)

REVIEW_FIELDS = {
    "title": FieldSpec("title"),
    "rating": FieldSpec("rating", int),
    "bootcamp": FieldSpec("bootcamp_id", uuid.UUID, sortable=False),
    "user": FieldSpec("user_id", uuid.UUID, sortable=False),
    "createdAt": FieldSpec("created_at", dt.datetime.fromisoformat),
}


@router.get("")
async def list_reviews(request: Request):
    return await advanced_results(
        Review.all(),
        request.query_params.multi_items(),
        REVIEW_FIELDS,
        lambda r: review_to_dict(r, with_bootcamp=True),
        prefetch=("bootcamp",),
    )


@router.get("/{review_id}")
async def get_review(review_id: str):
    review = await fetch_or_404(Review, review_id, "Review")
    await review.fetch_related("bootcamp")
    return {"success": True, "data": review_to_dict(review, with_bootcamp=True)}


@router.put("/{review_id}")
async def update_review(review_id: str, body: ReviewUpdateIn, principal: Principal = Depends(author)):
    """Update a review. Only its author or an admin may do so."""
    review = await fetch_or_404(Review, review_id, "Review")
    if not can_mutate(principal, review.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to update review {review.id}")

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        review.update_from_dict(changes)
        await review.save()
    if "rating" in changes:
        await recompute_average_rating(review.bootcamp_id)
    return {"success": True, "data": review_to_dict(review)}


@router.delete("/{review_id}")
async def delete_review(review_id: str, principal: Principal = Depends(author)):
    review = await fetch_or_404(Review, review_id, "Review")
    if not can_mutate(principal, review.user_id):
        raise Forbidden(f"User with the ID {principal.id} is not authorized to delete review {review.id}")

    bootcamp_id = review.bootcamp_id
    await review.delete()
    await recompute_average_rating(bootcamp_id)
    return {"success": True, "data": {}}


@bootcamp_router.get("")
async def list_bootcamp_reviews(bootcamp_id: str):
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    reviews = await Review.filter(bootcamp_id=bootcamp.id).order_by("created_at", "id")
    return {"success": True, "count": len(reviews), "data": [review_to_dict(r) for r in reviews]}


@bootcamp_router.post("", status_code=status.HTTP_201_CREATED)
async def add_review(bootcamp_id: str, body: ReviewCreateIn, principal: Principal = Depends(author)):
    """
    Review a bootcamp as the caller.

    A second review of the same bootcamp by the same user violates the
    (bootcamp, user) unique constraint and is reported as 400.
    """
    bootcamp = await fetch_or_404(Bootcamp, bootcamp_id, "Bootcamp")
    review = await Review.create(**body.model_dump(), bootcamp_id=bootcamp.id, user_id=principal.id)
    await recompute_average_rating(bootcamp.id)
    return {"success": True, "data": review_to_dict(review)}
