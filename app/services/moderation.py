"""Moderation policy: classifier verdict -> review status."""

from app.models.review import ReviewStatus
from app.schemas.review import ClassificationResult

APPROVE_MAX_SAFETY = 0.3  # exclusive
FLAG_MIN_SAFETY = 0.7  # inclusive
APPROVE_MIN_SENTIMENT = 0.3  # exclusive, strict policy only


def decide_status(
    result: ClassificationResult,
    require_positive_sentiment: bool = False,
) -> ReviewStatus:
    """Map a classification to a status; first matching rule wins.

    1. ``allow`` with safety below 0.3 is approved. With
       ``require_positive_sentiment`` the sentiment must also exceed 0.3.
    2. ``block``, or safety of 0.7 and above, is flagged.
    3. Anything else waits for manual review.
    """
    if result.action == "allow" and result.safety_score < APPROVE_MAX_SAFETY:
        if not require_positive_sentiment or result.sentiment_score > APPROVE_MIN_SENTIMENT:
            return ReviewStatus.APPROVED
    if result.action == "block" or result.safety_score >= FLAG_MIN_SAFETY:
        return ReviewStatus.FLAGGED
    return ReviewStatus.PENDING
