"""Shared endpoint dependencies."""

import hmac

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import AuthError
from app.db.session import get_db
from app.services.review_store import ReviewStore


def get_review_store(db: Session = Depends(get_db)) -> ReviewStore:
    """Review store bound to the request session."""
    return ReviewStore(db)


def verify_webhook_secret(settings: Settings, provided: str | None) -> None:
    """Raise AuthError unless the secret matches; no-op when none is configured."""
    expected = settings.webhook_secret
    if not expected:
        return
    if provided is None or not hmac.compare_digest(provided.encode(), expected.encode()):
        raise AuthError()
