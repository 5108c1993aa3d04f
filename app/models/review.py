"""Review model."""

from datetime import datetime, timezone
import enum

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text

from app.db.base import Base


class ReviewStatus(str, enum.Enum):
    """Moderation outcome, fixed when the review is created."""

    PENDING = "pending"
    APPROVED = "approved"
    FLAGGED = "flagged"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    """Customer review submitted for a business."""

    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_business_status", "business_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(String(100), nullable=False, index=True)
    reviewer_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255))
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ReviewStatus.PENDING.value)
    sentiment_score = Column(Float, nullable=False, default=0.0)
    is_positive = Column(Boolean, nullable=False, default=False)  # sentiment_score > 0 (작성 시점에 고정)
    pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
