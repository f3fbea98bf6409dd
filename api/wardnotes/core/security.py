"""
Bearer token issuing and verification.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlmodel import Session

from wardnotes.core.config import settings
from wardnotes.core.database import get_session
from wardnotes.core.exceptions import AuthenticationError
from wardnotes.models.user import User

logger = logging.getLogger(__name__)

_TOKEN_SALT = "wardnotes.auth"


def _build_serializer() -> URLSafeTimedSerializer:
    """Construct a serializer for signing and verifying bearer tokens."""
    secret = settings.auth_secret_key.strip()
    if not secret:
        raise RuntimeError("AUTH_SECRET_KEY is not configured")
    return URLSafeTimedSerializer(secret, salt=_TOKEN_SALT)


def issue_access_token(user_id: int) -> str:
    """Generate a signed bearer token for a user."""
    return _build_serializer().dumps({"sub": user_id})


def verify_access_token(token: str) -> int:
    """
    Verify a bearer token and return the user ID it was issued for.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    serializer = _build_serializer()
    try:
        payload = serializer.loads(token, max_age=settings.auth_token_max_age_seconds)
    except SignatureExpired as e:
        raise AuthenticationError("Token has expired") from e
    except BadSignature as e:
        raise AuthenticationError("Invalid token") from e

    user_id = payload.get("sub") if isinstance(payload, dict) else None
    if not isinstance(user_id, int):
        raise AuthenticationError("Invalid token")
    return user_id


def read_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request,
    session: Session = Depends(get_session)
) -> User:
    """Resolve the authenticated user from the bearer token."""
    token = read_bearer_token(request)
    if not token:
        logger.warning(f"Missing bearer token on {request.method} {request.url.path}")
        raise AuthenticationError("Unauthorized")

    user_id = verify_access_token(token)
    user = session.get(User, user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id} on {request.method} {request.url.path}")
        raise AuthenticationError("Unauthorized")
    return user
