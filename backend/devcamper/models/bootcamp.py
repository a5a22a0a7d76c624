"""
Database model for bootcamps.
A bootcamp is owned by the publisher (or admin) who created it and is the
parent of Course and Review records.
"""
import uuid
from tortoise import fields, models

CAREERS = (
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
)


class Bootcamp(models.Model):
    """
    Bootcamp database model.

    Relationships:
    - Belongs to a User (owner, many-to-one)
    - Has many Courses and Reviews (via related_name in those models)

    Derived fields (written by services, never by clients):
    - slug: from name
    - location_*: from the geocoded address
    - average_cost / average_rating: recomputed after course/review writes
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=50, unique=True)
    slug = fields.CharField(max_length=64, null=True)
    description = fields.CharField(max_length=500)
    website = fields.CharField(max_length=256, null=True)
    phone = fields.CharField(max_length=20, null=True)
    email = fields.CharField(max_length=256, null=True)
    address = fields.CharField(max_length=256)

    # GeoJSON point, longitude first
    location_lng = fields.FloatField(null=True)
    location_lat = fields.FloatField(null=True)
    formatted_address = fields.CharField(max_length=256, null=True)
    street = fields.CharField(max_length=128, null=True)
    city = fields.CharField(max_length=128, null=True)
    state = fields.CharField(max_length=64, null=True)
    zipcode = fields.CharField(max_length=16, null=True)
    country = fields.CharField(max_length=64, null=True)

    careers = fields.JSONField(default=list)
    average_rating = fields.FloatField(null=True)
    average_cost = fields.IntField(null=True)
    photo = fields.CharField(max_length=256, default="no-photo.jpg")
    housing = fields.BooleanField(default=False)
    job_assistance = fields.BooleanField(default=False)
    job_guarantee = fields.BooleanField(default=False)
    accept_gi = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    user = fields.ForeignKeyField(
        "models.User",
        related_name="bootcamps",
        on_delete=fields.CASCADE,
    )

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "bootcamps"

    @property
    def has_location(self) -> bool:
        return self.location_lng is not None and self.location_lat is not None
