# devcamper/api/v1/routers/users.py
import datetime as dt

from fastapi import APIRouter, Depends, Request, status

from devcamper.api.v1.deps import fetch_or_404, require_roles
from devcamper.api.v1.serializers import user_to_dict
from devcamper.core.errors import BadRequest
from devcamper.core.policy import USER_MANAGERS, Principal
from devcamper.core.security import hash_password
from devcamper.models.user import User
from devcamper.schemas.user import UserCreateIn, UserUpdateIn
from devcamper.services.query import FieldSpec, advanced_results

router = APIRouter(prefix="/users", tags=["users"])

admin_only = require_roles(*USER_MANAGERS)

USER_FIELDS = {
    "name": FieldSpec("name"),
    "email": FieldSpec("email"),
    "role": FieldSpec("role"),
    "createdAt": FieldSpec("created_at", dt.datetime.fromisoformat),
}


async def _count_admins() -> int:
    """Used to prevent demoting or deleting the last admin."""
    return await User.filter(role="admin").count()


@router.get("", dependencies=[Depends(admin_only)])
async def list_users(request: Request):
    """
    Get the list of all users (admin only).
    Supports the same select/sort/page/limit/filter params as the other lists.
    """
    return await advanced_results(User.all(), request.query_params.multi_items(), USER_FIELDS, user_to_dict)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(admin_only)])
async def create_user(body: UserCreateIn):
    """
    Create a user with any role (admin only).

    Raises:
        BadRequest (400): if the email is already registered
    """
    u = await User.create(
        name=body.name.strip(),
        email=str(body.email).lower(),
        password_hash=hash_password(body.password),
        role=body.role,
    )
    return {"success": True, "data": user_to_dict(u)}


@router.get("/{user_id}", dependencies=[Depends(admin_only)])
async def get_user(user_id: str):
    u = await fetch_or_404(User, user_id, "User")
    return {"success": True, "data": user_to_dict(u)}


@router.put("/{user_id}")
async def update_user(user_id: str, body: UserUpdateIn, admin: Principal = Depends(admin_only)):
    """
    Update a user's name, email, role or password (admin only).

    Only provided fields are changed. A new password is hashed before storage.

    Raises:
        NotFound (404): if the user does not exist
        BadRequest (400): if the email is taken, or an admin tries to demote
            themselves or the last admin
    """
    u = await fetch_or_404(User, user_id, "User")

    if body.name is not None:
        u.name = body.name.strip()

    if body.email is not None:
        email = str(body.email).lower()
        if email != u.email:
            taken = await User.filter(email=email).exclude(id=u.id).exists()
            if taken:
                raise BadRequest("Duplicate value entered for email field, please choose another value")
            u.email = email

    if body.role is not None and body.role != u.role:
        if admin.id == str(u.id):
            raise BadRequest("Cannot demote yourself")
        if u.role == "admin" and await _count_admins() <= 1:
            raise BadRequest("Cannot demote the last admin")
        u.role = body.role

    if body.password is not None:
        u.password_hash = hash_password(body.password)

    await u.save()
    return {"success": True, "data": user_to_dict(u)}


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: Principal = Depends(admin_only)):
    """
    Delete a user account (admin only).

    The user's bootcamps, courses and reviews are removed with it by the
    cascading foreign keys.

    Raises:
        NotFound (404): if the user does not exist
        BadRequest (400): if an admin tries to delete themselves or the last admin
    """
    u = await fetch_or_404(User, user_id, "User")

    if admin.id == str(u.id):
        raise BadRequest("Cannot delete yourself")
    if u.role == "admin" and await _count_admins() <= 1:
        raise BadRequest("Cannot delete the last admin")

    await u.delete()
    return {"success": True, "data": {}}
