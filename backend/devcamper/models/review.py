"""
Database model for reviews.
A user may review a given bootcamp at most once (unique bootcamp/user pair).
"""
import uuid
from tortoise import fields, models


class Review(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    title = fields.CharField(max_length=100)
    text = fields.TextField()
    rating = fields.IntField()  # 1..10
    created_at = fields.DatetimeField(auto_now_add=True)

    bootcamp = fields.ForeignKeyField(
        "models.Bootcamp",
        related_name="reviews",
        on_delete=fields.CASCADE,
    )
    user = fields.ForeignKeyField(
        "models.User",
        related_name="reviews",
        on_delete=fields.CASCADE,
    )

    class Meta:
        table = "reviews"
        unique_together = (("bootcamp", "user"),)
