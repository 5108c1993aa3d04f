"""Review submission and listing endpoints."""

from fastapi import APIRouter, Depends, Header, Query

from app.api.deps import get_review_store, verify_webhook_secret
from app.core.config import Settings, get_settings
from app.schemas.review import (
    AnalysisOut,
    ReviewCreate,
    ReviewCreateResponse,
    ReviewListResponse,
    ReviewOut,
)
from app.services.llm import LLMService, get_llm_service
from app.services.review_store import ReviewStore
from app.services.reviews import list_reviews, parse_anchor_id, submit_review

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewCreateResponse)
def create_review(
    payload: ReviewCreate,
    x_webhook_secret: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    store: ReviewStore = Depends(get_review_store),
    llm: LLMService = Depends(get_llm_service),
) -> ReviewCreateResponse:
    """Moderate and store a submitted review."""
    # 필수 필드 검사(400)가 secret 검사(401)보다 먼저
    verify_webhook_secret(settings, x_webhook_secret)
    review, outcome = submit_review(store, llm, payload, settings)
    return ReviewCreateResponse(
        status=review.status,
        analysis=AnalysisOut(
            safety_score=outcome.result.safety_score,
            sentiment_score=outcome.result.sentiment_score,
            recommended_action=outcome.result.action,
            fallback=outcome.fallback,
        ),
        review=ReviewOut.model_validate(review),
    )


@router.get("", response_model=ReviewListResponse)
def get_reviews(
    business_id: str = Query(..., min_length=1),
    new_review_id: str | None = Query(None, alias="newReviewId"),
    store: ReviewStore = Depends(get_review_store),
) -> ReviewListResponse:
    """Approved reviews, pinned first; ``newReviewId`` is floated to the top."""
    reviews = list_reviews(store, business_id, parse_anchor_id(new_review_id))
    return ReviewListResponse(
        reviews=[ReviewOut.model_validate(r) for r in reviews],
        count=len(reviews),
    )
