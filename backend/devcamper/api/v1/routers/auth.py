# devcamper/api/v1/routers/auth.py
import datetime as dt
import logging

from fastapi import APIRouter, Depends, Request, Response

from devcamper.api.v1.deps import get_context, get_current_user
from devcamper.api.v1.serializers import user_to_dict
from devcamper.config import Settings
from devcamper.core.context import AppContext
from devcamper.core.errors import BadRequest, NotFound, ServerError, Unauthorized
from devcamper.core.security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from devcamper.models.user import User
from devcamper.schemas.auth import (
    ForgotPasswordIn,
    LoginIn,
    RegisterIn,
    ResetPasswordIn,
    UpdateDetailsIn,
    UpdatePasswordIn,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def send_token_response(user: User, response: Response, settings: Settings) -> dict:
    """
    Issue a JWT for the user, attach it as an HttpOnly cookie and return the
    token response body.

    The cookie is only marked secure in production so that it can still be
    used over plain http during development.
    """
    token = create_access_token(str(user.id), user.role, settings.jwt_secret, settings.jwt_expire_minutes)
    response.set_cookie(
        "token",
        token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_cookie_days * 24 * 60 * 60,
    )
    return {"success": True, "token": token}


@router.post("/register")
async def register(body: RegisterIn, response: Response, ctx: AppContext = Depends(get_context)):
    """
    Register a new user account.

    The role may be "user" (default) or "publisher". The email must be unique;
    a duplicate is reported as 400 by the duplicate-key handler.

    Returns:
        dict: {success, token}; the token is also set as the "token" cookie
    """
    u = await User.create(
        name=body.name.strip(),
        email=str(body.email).lower(),
        password_hash=hash_password(body.password),
        role=body.role,
    )
    logger.info("[auth] registered user id=%s role=%s", u.id, u.role)
    return send_token_response(u, response, ctx.settings)


@router.post("/login")
async def login(body: LoginIn, response: Response, ctx: AppContext = Depends(get_context)):
    """
    Authenticate user and create access token.

    Raises:
        BadRequest (400): If email or password is missing
        Unauthorized (401): If credentials are invalid
    """
    if not body.email or not body.password:
        raise BadRequest("Please provide an email and password")

    user = await User.get_or_none(email=body.email.lower())
    if not user or not verify_password(body.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return send_token_response(user, response, ctx.settings)


@router.get("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    """
    Log out the current user by clearing the token cookie.

    Note:
        This endpoint only clears the cookie. The JWT itself remains
        valid until it expires.
    """
    response.delete_cookie("token")
    return {"success": True, "data": {}}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return {"success": True, "data": user_to_dict(user)}


@router.put("/updateDetails")
async def update_details(body: UpdateDetailsIn, user: User = Depends(get_current_user)):
    """
    Update name and email of the current user. Both are required.
    """
    if not body.name or not body.email:
        raise BadRequest("Please provide name and email")

    user.name = body.name.strip()
    user.email = str(body.email).lower()
    await user.save()
    return {"success": True, "data": user_to_dict(user)}


@router.put("/updatePassword")
async def update_password(
    body: UpdatePasswordIn,
    response: Response,
    user: User = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    """
    Change the current user's password. The old password must be supplied.

    Raises:
        BadRequest (400): If either password is missing
        Unauthorized (401): If the old password is wrong
    """
    if not body.oldPassword or not body.newPassword:
        raise BadRequest("Please provide the old password and a new password")
    if not verify_password(body.oldPassword, user.password_hash):
        raise Unauthorized("Invalid Credentials")

    user.password_hash = hash_password(body.newPassword)
    await user.save()
    return send_token_response(user, response, ctx.settings)


@router.post("/forgotPassword")
async def forgot_password(body: ForgotPasswordIn, request: Request, ctx: AppContext = Depends(get_context)):
    """
    Email a password reset link to the user.

    The plain token only travels in the email; the database keeps its sha256
    digest and an expiry (RESET_TOKEN_EXPIRE_MINUTES, 10 by default).

    Raises:
        NotFound (404): If no user has that email
        ServerError (500): If the email could not be sent (the token is cleared)
    """
    user = await User.get_or_none(email=body.email.lower())
    if not user:
        raise NotFound("There is no user with that email")

    raw_token, digest = generate_reset_token()
    user.reset_password_token = digest
    user.reset_password_expire = _utc_now() + dt.timedelta(minutes=ctx.settings.reset_token_expire_minutes)
    await user.save()

    reset_url = f"{request.base_url}api/v1/auth/resetPassword/{raw_token}"
    message = (
        f"Forgot your password? Submit a PUT request with your new password to: {reset_url}\n"
        "If you didn't forget your password, please ignore this email!"
    )
    try:
        await ctx.mailer.send(
            user.email,
            f"Your password reset token (valid for {ctx.settings.reset_token_expire_minutes} mins)",
            message,
        )
    except Exception:
        logger.exception("[auth] reset email to %s failed", user.email)
        user.reset_password_token = None
        user.reset_password_expire = None
        await user.save()
        raise ServerError("Oops! There was an error sending the email. Please try again later.")

    return {"success": True, "data": "Token sent to email"}


@router.put("/resetPassword/{token}")
async def reset_password(
    token: str,
    body: ResetPasswordIn,
    response: Response,
    ctx: AppContext = Depends(get_context),
):
    """
    Set a new password using the token from the reset email.

    Raises:
        BadRequest (400): If the token is unknown or expired
    """
    user = await User.get_or_none(
        reset_password_token=hash_reset_token(token),
        reset_password_expire__gt=_utc_now(),
    )
    if not user:
        raise BadRequest("Token is invalid or has expired")

    user.password_hash = hash_password(body.password)
    user.reset_password_token = None
    user.reset_password_expire = None
    await user.save()
    return send_token_response(user, response, ctx.settings)
