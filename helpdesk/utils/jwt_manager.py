"""Utility for issuing and validating bearer tokens."""

from datetime import datetime, timedelta, timezone

import jwt

from helpdesk.models.user import Role, User
from helpdesk.schemas.auth import Identity
from helpdesk.settings import settings
from helpdesk.utils.exceptions import InvalidCredentialsError


def create_access_token(user: User) -> str:
    """
    Creates a signed JWT carrying the user's identity and role.

    Args:
        user (User): The user the token is issued for.

    Returns:
        str: The encoded JWT token.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    """
    Validates a bearer token and returns the identity it carries.

    Raises:
        InvalidCredentialsError: If the token is expired, tampered with or
            carries claims that do not describe a known role.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidCredentialsError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise InvalidCredentialsError() from e

    try:
        return Identity(
            user_id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=Role(payload["role"]),
        )
    except (KeyError, ValueError) as e:
        raise InvalidCredentialsError() from e
