import uuid
from typing import Type, TypeVar

from fastapi import Depends, Header, Request
from tortoise import models

from devcamper.core.context import AppContext
from devcamper.core.errors import Forbidden, NotFound, Unauthorized
from devcamper.core.policy import Principal, Role, role_allowed
from devcamper.core.security import decode_access_token
from devcamper.models.user import User

ModelT = TypeVar("ModelT", bound=models.Model)


def get_context(request: Request) -> AppContext:
    """The AppContext built by create_app() for this application."""
    return request.app.state.ctx


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    ctx: AppContext = Depends(get_context),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    The JWT is taken from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (token) - fallback method

    Raises:
        Unauthorized (401): no token, invalid/expired token, or unknown user
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: token
    if not token:
        token = request.cookies.get("token")

    if not token:
        raise Unauthorized("Not authorized to access this route")

    try:
        payload = decode_access_token(token, ctx.settings.jwt_secret)
        user_id = uuid.UUID(str(payload.get("sub")))
    except Exception:
        raise Unauthorized("Not authorized to access this route")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise Unauthorized("Not authorized to access this route")
    return user


async def get_principal(user: User = Depends(get_current_user)) -> Principal:
    """The authenticated caller, with the role as stored now (not as issued in the token)."""
    return Principal(id=str(user.id), role=Role(user.role))


def require_roles(*roles: Role):
    """
    Build a dependency that lets a request through only for the given roles.

    Usage:
        @router.post("", dependencies=...)
        async def create(principal: Principal = Depends(require_roles(Role.ADMIN, Role.PUBLISHER))):
            ...

    Raises:
        Unauthorized (401): if the caller is not authenticated
        Forbidden (403): if the caller's role is not in the allow-list
    """
    allowed = frozenset(roles)

    async def _guard(principal: Principal = Depends(get_principal)) -> Principal:
        if not role_allowed(principal, allowed):
            raise Forbidden(
                f"ACCESS DENIED: User role | {principal.role.value} | is unauthorized to perform this action"
            )
        return principal

    return _guard


async def fetch_or_404(model: Type[ModelT], raw_id: str, label: str) -> ModelT:
    """
    Load a record by id or raise NotFound naming the id.
    Ids that are not valid UUIDs can never exist; they get the generic 404.
    """
    try:
        pk = uuid.UUID(raw_id)
    except (TypeError, ValueError):
        raise NotFound()
    obj = await model.get_or_none(id=pk)
    if obj is None:
        raise NotFound(f"{label} not found with the ID of {raw_id}")
    return obj
