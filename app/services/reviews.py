"""Create-review pipeline and the ranked read path."""

from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from app.core.config import Settings
from app.models.review import Review
from app.schemas.review import ClassificationOutcome, ReviewCreate
from app.services.llm import LLMService
from app.services.moderation import decide_status
from app.services.review_store import ReviewStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def submit_review(
    store: ReviewStore,
    llm: LLMService,
    payload: ReviewCreate,
    settings: Settings,
) -> tuple[Review, ClassificationOutcome]:
    """Classify, decide a status and persist a new review.

    Nothing is stored when the classifier call fails.
    """
    outcome = llm.classify_review(payload.content)
    status = decide_status(
        outcome.result,
        require_positive_sentiment=settings.moderation_require_positive_sentiment,
    )
    review = store.create(payload, status=status, sentiment_score=outcome.result.sentiment_score)
    logger.info(
        "Stored review id=%s business_id=%s status=%s fallback=%s",
        review.id,
        review.business_id,
        status.value,
        outcome.fallback,
    )
    return review, outcome


def parse_anchor_id(raw: str | None) -> int | None:
    """Interpret the ``newReviewId`` query value; junk means no anchor."""
    if raw is None:
        return None
    raw = raw.strip()
    if not raw.lstrip("-").isdigit():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def float_anchor(reviews: Sequence[T], anchor_id: int | None, key=lambda item: item.id) -> list[T]:
    """Move the item whose id is ``anchor_id`` to the front, keeping the rest in order."""
    ordered = list(reviews)
    if anchor_id is None:
        return ordered
    for index, item in enumerate(ordered):
        if key(item) == anchor_id:
            return [item, *ordered[:index], *ordered[index + 1 :]]
    return ordered


def list_reviews(store: ReviewStore, business_id: str, anchor_id: int | None = None) -> list[Review]:
    """Approved reviews for display, with the session's own review floated first."""
    return float_anchor(store.list_approved(business_id), anchor_id)
