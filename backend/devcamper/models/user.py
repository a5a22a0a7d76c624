"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
profile information, and role-based access control.
"""
import uuid
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Bootcamps, Courses and Reviews (one-to-many, as owner)

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email must be unique across all users
    - Role determines access level (user, publisher or admin)
    - Only the sha256 digest of a password reset token is stored
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)
    role = fields.CharField(max_length=16, default="user")  # "user", "publisher" or "admin"
    reset_password_token = fields.CharField(max_length=64, null=True)
    reset_password_expire = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
