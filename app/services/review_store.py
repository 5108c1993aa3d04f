"""Review persistence on top of a SQLAlchemy session."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StoreError
from app.models.review import Review, ReviewStatus
from app.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewStore:
    """Insert, query and pin reviews.

    Every write commits immediately. Any database failure is rolled back and
    re-raised as :class:`StoreError`.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Review store %s failed: %s", operation, exc)
            raise StoreError(f"Review store {operation} failed: {exc}") from exc

    def create(self, payload: ReviewCreate, status: ReviewStatus, sentiment_score: float) -> Review:
        """Insert a review and return it with its store-assigned id."""
        review = Review(
            business_id=payload.business_id,
            reviewer_name=payload.reviewer_name,
            phone=payload.phone,
            email=payload.email,
            content=payload.content,
            status=status.value,
            sentiment_score=sentiment_score,
            is_positive=sentiment_score > 0,
            pinned=False,
        )
        with self._guard("insert"):
            self._db.add(review)
            self._db.commit()
            self._db.refresh(review)
        return review

    def list_approved(self, business_id: str) -> list[Review]:
        """Approved reviews of a business, pinned first, newest first."""
        stmt = (
            select(Review)
            .where(
                Review.business_id == business_id,
                Review.status == ReviewStatus.APPROVED.value,
            )
            .order_by(Review.pinned.desc(), Review.created_at.desc(), Review.id.desc())
        )
        with self._guard("query"):
            return list(self._db.execute(stmt).scalars().all())

    def approved_business_ids(self) -> list[str]:
        """Distinct business ids that have at least one approved review."""
        stmt = (
            select(Review.business_id)
            .where(Review.status == ReviewStatus.APPROVED.value)
            .distinct()
            .order_by(Review.business_id)
        )
        with self._guard("query"):
            return list(self._db.execute(stmt).scalars().all())

    def unpin_all(self, business_id: str) -> int:
        """Clear ``pinned`` on every review of the business."""
        with self._guard("unpin"):
            updated = (
                self._db.query(Review)
                .filter(Review.business_id == business_id)
                .update({Review.pinned: False}, synchronize_session=False)
            )
            self._db.commit()
        return updated

    def pin(self, business_id: str, review_ids: Sequence[int]) -> int:
        """Set ``pinned`` on the given ids, restricted to the business."""
        if not review_ids:
            return 0
        with self._guard("pin"):
            updated = (
                self._db.query(Review)
                .filter(Review.business_id == business_id, Review.id.in_(list(review_ids)))
                .update({Review.pinned: True}, synchronize_session=False)
            )
            self._db.commit()
        return updated
