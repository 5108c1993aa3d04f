"""Select and pin the top reviews of a business."""

from __future__ import annotations

import logging

from app.schemas.ranking import RerankResult, ReviewCandidate
from app.services.llm import DEFAULT_TOP_K, LLMService
from app.services.review_store import ReviewStore

logger = logging.getLogger(__name__)

MAX_PINNED = 3


def rerank_business(
    store: ReviewStore,
    llm: LLMService,
    business_id: str,
    top_k: int = DEFAULT_TOP_K,
) -> RerankResult:
    """Replace the pinned set of ``business_id`` with the classifier's picks.

    Only approved reviews are eligible. Ids returned by the classifier that are
    not in the eligible set are dropped. At most ``top_k`` are applied, and
    never more than ``MAX_PINNED``.

    The update runs in two committed steps, unpin everything then pin the
    selection. If pinning fails the business is left with no pins; the unpin
    is not reverted.
    """
    top_k = max(0, min(top_k, MAX_PINNED))
    reviews = store.list_approved(business_id)
    if not reviews:
        logger.info("business_id=%s: no approved reviews, nothing to pin", business_id)
        return RerankResult(business_id=business_id, message="No reviews to analyze")

    candidates = [
        ReviewCandidate(
            id=review.id,
            content=review.content,
            reviewer_name=review.reviewer_name,
            sentiment_score=review.sentiment_score,
        )
        for review in reviews
    ]
    selection = llm.select_top_reviews(candidates, top_k=top_k)

    eligible_ids = {candidate.id for candidate in candidates}
    pinned_ids = [review_id for review_id in selection.top_review_ids if review_id in eligible_ids]
    rejected = [review_id for review_id in selection.top_review_ids if review_id not in eligible_ids]
    if rejected:
        logger.warning("business_id=%s: ignoring ids outside the eligible set: %s", business_id, rejected)
    pinned_ids = pinned_ids[:top_k]

    store.unpin_all(business_id)
    store.pin(business_id, pinned_ids)

    logger.info("business_id=%s: pinned %d reviews %s", business_id, len(pinned_ids), pinned_ids)
    return RerankResult(
        business_id=business_id,
        message="Top reviews pinned successfully",
        pinned_count=len(pinned_ids),
        pinned_review_ids=pinned_ids,
        reasoning=selection.reasoning,
    )
