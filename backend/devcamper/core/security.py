# devcamper/core/security.py
"""
Security module for authentication.
Handles password hashing, JWT token creation/validation and password reset tokens.
"""
import datetime as dt
import hashlib
import secrets
import jwt  # PyJWT
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, role: str, secret: str, expire_minutes: int) -> str:
    """
    Create a JWT access token for user authentication.

    Args:
        user_id: Unique user identifier (UUID string)
        role: User role ("user", "publisher" or "admin")
        secret: Signing secret (from settings)
        expire_minutes: Token lifetime in minutes

    Returns:
        Encoded JWT token string

    Token payload includes:
        - sub: Subject (user ID)
        - role: User role at issue time (informational, the role is re-read from the DB per request)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def decode_access_token(token: str, secret: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALG])


def hash_reset_token(raw: str) -> str:
    """sha256 hex digest of a plain reset token (only the digest is stored)."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str]:
    """
    Generate a password reset token.

    Returns:
        (plain token for the email link, sha256 digest for the database)
    """
    raw = secrets.token_hex(20)
    return raw, hash_reset_token(raw)
