"""Schemas for the pin-top-reviews flow."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ReviewCandidate(BaseModel):
    """Projection of an approved review sent to the classifier for ranking."""

    id: int
    content: str
    reviewer_name: str
    sentiment_score: float


class TopSelection(BaseModel):
    top_review_ids: list[int] = Field(default_factory=list)
    reasoning: str = ""


class RerankRequest(BaseModel):
    business_id: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}

    @field_validator("business_id", mode="before")
    @classmethod
    def _coerce_business_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RerankResult(BaseModel):
    """Outcome of one ranking pass for a business."""

    business_id: str
    message: str
    pinned_count: int = Field(0, alias="pinnedCount")
    pinned_review_ids: list[int] = Field(default_factory=list, alias="pinnedReviewIds")
    reasoning: str = ""

    model_config = {"populate_by_name": True}


class RerankResponse(BaseModel):
    ok: bool = True
    message: str
    pinned_count: int = Field(0, alias="pinnedCount")
    pinned_review_ids: list[int] = Field(default_factory=list, alias="pinnedReviewIds")
    reasoning: str = ""

    model_config = {"populate_by_name": True}


class BusinessPinResult(BaseModel):
    """Per-business line of the scheduled pinning run."""

    business_id: str
    success: bool
    pinned_count: int = Field(0, alias="pinnedCount")
    reasoning: str = "N/A"
    error: Optional[str] = None

    model_config = {"populate_by_name": True}


class ScheduledRunResponse(BaseModel):
    ok: bool = True
    message: str
    results: list[BusinessPinResult]
