"""Endpoints that (re)pin the top reviews."""

from fastapi import APIRouter, Depends

from app.api.deps import get_review_store
from app.core.config import Settings, get_settings
from app.schemas.ranking import RerankRequest, RerankResponse, ScheduledRunResponse
from app.services.llm import LLMService, get_llm_service
from app.services.ranking import rerank_business
from app.services.review_store import ReviewStore
from app.services.scheduler import run_daily

router = APIRouter(prefix="/reviews/pin-top", tags=["pinning"])


@router.post("", response_model=RerankResponse)
def pin_top_reviews(
    payload: RerankRequest,
    settings: Settings = Depends(get_settings),
    store: ReviewStore = Depends(get_review_store),
    llm: LLMService = Depends(get_llm_service),
) -> RerankResponse:
    """Let the classifier choose the top reviews of one business and pin them."""
    result = rerank_business(store, llm, payload.business_id, top_k=settings.pin_top_k)
    return RerankResponse(
        message=result.message,
        pinned_count=result.pinned_count,
        pinned_review_ids=result.pinned_review_ids,
        reasoning=result.reasoning,
    )


@router.post("/scheduled", response_model=ScheduledRunResponse)
def run_scheduled_pinning(
    settings: Settings = Depends(get_settings),
    store: ReviewStore = Depends(get_review_store),
    llm: LLMService = Depends(get_llm_service),
) -> ScheduledRunResponse:
    """Daily trigger: rerank every business that has approved reviews."""
    results = run_daily(store, llm, top_k=settings.pin_top_k)
    return ScheduledRunResponse(
        message="Top reviews pinned successfully for all businesses",
        results=results,
    )
