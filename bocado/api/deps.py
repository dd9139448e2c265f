"""FastAPI dependency providers shared by the endpoint modules."""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from bocado.core.exceptions import Unauthorized
from bocado.db.session import get_db
from bocado.models.user import User
from bocado.services.auth import ensure_user, verify_token


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Caller's user row, or None for anonymous requests."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    identity = verify_token(token)
    if identity is None:
        return None
    return ensure_user(db, identity)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthorized("Authentication required")
    return user
