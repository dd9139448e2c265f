"""Identity verification against Supabase and the local user mirror."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from supabase import Client, create_client

from bocado.core.config import settings
from bocado.models.user import User

logger = structlog.get_logger(__name__)

_supabase_client: Optional[Client] = None


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


def get_supabase() -> Client:
    """Singleton Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        if not settings.supabase_url or not settings.supabase_key:
            raise RuntimeError("SUPABASE_URL / SUPABASE_KEY are not configured.")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase_client


def verify_token(token: str) -> AuthenticatedUser | None:
    """Resolve an access token to the identity it belongs to, or None."""
    try:
        response = get_supabase().auth.get_user(token)
    except Exception as exc:  # supabase raises several unrelated error types
        logger.info("auth_token_rejected", error=str(exc))
        return None
    user = getattr(response, "user", None)
    if user is None:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthenticatedUser(
        id=user.id,
        email=getattr(user, "email", None),
        full_name=metadata.get("full_name") or metadata.get("name"),
        avatar_url=metadata.get("avatar_url"),
    )


def ensure_user(db: Session, identity: AuthenticatedUser) -> User:
    """Return the local user row for an identity, creating it on first sight."""
    user = db.get(User, identity.id)
    if user is not None:
        return user
    try:
        with db.begin_nested():
            user = User(
                id=identity.id,
                email=identity.email,
                full_name=identity.full_name,
                avatar_url=identity.avatar_url,
                points=0,
            )
            db.add(user)
        db.commit()
        logger.info("user_created", user_id=identity.id)
    except IntegrityError:
        # created concurrently by another request
        user = db.get(User, identity.id)
    return user
