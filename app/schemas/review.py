"""Schemas shared across review processing."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ModerationAction = Literal["allow", "flag", "block"]


class ClassificationResult(BaseModel):
    """Normalized classifier verdict for a single review."""

    safety_score: float = Field(..., ge=0.0, le=1.0)
    sentiment_score: float = Field(..., ge=-1.0, le=1.0)
    action: ModerationAction


class ClassificationOutcome(BaseModel):
    """Classifier verdict plus whether it is the conservative fallback."""

    result: ClassificationResult
    fallback: bool = False


class ReviewCreate(BaseModel):
    business_id: str = Field(..., min_length=1)
    reviewer_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    content: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}

    @field_validator("business_id", "phone", mode="before")
    @classmethod
    def _coerce_numeric_text(cls, value: Any) -> Any:
        # 숫자로 들어온 business_id, phone 도 문자열로 저장
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReviewOut(BaseModel):
    id: int
    business_id: str
    reviewer_name: str
    phone: str
    email: Optional[str] = None
    content: str
    status: str
    sentiment_score: float
    is_positive: bool
    pinned: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AnalysisOut(BaseModel):
    safety_score: float
    sentiment_score: float
    recommended_action: ModerationAction
    fallback: bool = False


class ReviewCreateResponse(BaseModel):
    ok: bool = True
    message: str = "Review received successfully."
    status: str
    analysis: AnalysisOut
    review: ReviewOut


class ReviewListResponse(BaseModel):
    ok: bool = True
    reviews: list[ReviewOut]
    count: int
