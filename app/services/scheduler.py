"""Daily pinning job across all businesses."""

from __future__ import annotations

import logging

from app.core.errors import ReviewServiceError
from app.schemas.ranking import BusinessPinResult
from app.services.llm import DEFAULT_TOP_K, LLMService
from app.services.ranking import rerank_business
from app.services.review_store import ReviewStore

logger = logging.getLogger(__name__)


def run_daily(
    store: ReviewStore,
    llm: LLMService,
    top_k: int = DEFAULT_TOP_K,
) -> list[BusinessPinResult]:
    """Rerank every business with approved reviews, one at a time.

    A failure for one business is recorded in its result and does not stop
    the run. Failing to list the businesses raises ``StoreError``.
    """
    business_ids = store.approved_business_ids()
    logger.info("Found %d businesses to process", len(business_ids))

    results: list[BusinessPinResult] = []
    for business_id in business_ids:
        try:
            outcome = rerank_business(store, llm, business_id, top_k=top_k)
        except ReviewServiceError as exc:
            logger.error("business_id=%s: pinning failed: %s", business_id, exc.message)
            results.append(
                BusinessPinResult(business_id=business_id, success=False, error=exc.message)
            )
            continue
        results.append(
            BusinessPinResult(
                business_id=business_id,
                success=True,
                pinned_count=outcome.pinned_count,
                reasoning=outcome.reasoning or "N/A",
            )
        )

    failed = sum(1 for result in results if not result.success)
    logger.info("Scheduled pinning finished: %d ok, %d failed", len(results) - failed, failed)
    return results
