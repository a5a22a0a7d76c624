import uuid
from tortoise import fields, models

SKILL_LEVELS = ("beginner", "intermediate", "advanced")


class Course(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    title = fields.CharField(max_length=128)
    description = fields.TextField()
    weeks = fields.CharField(max_length=16)
    tuition = fields.IntField()
    minimum_skill = fields.CharField(max_length=16)  # one of SKILL_LEVELS
    scholarship_available = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    bootcamp = fields.ForeignKeyField(
        "models.Bootcamp",
        related_name="courses",
        on_delete=fields.CASCADE,
    )
    user = fields.ForeignKeyField(
        "models.User",
        related_name="courses",
        on_delete=fields.CASCADE,
    )

    class Meta:
        table = "courses"
