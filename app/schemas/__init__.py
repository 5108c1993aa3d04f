"""Expose schemas for easier import."""

from app.schemas.review import (  # noqa: F401
    AnalysisOut,
    ClassificationOutcome,
    ClassificationResult,
    ReviewCreate,
    ReviewCreateResponse,
    ReviewListResponse,
    ReviewOut,
)
from app.schemas.ranking import (  # noqa: F401
    BusinessPinResult,
    RerankRequest,
    RerankResponse,
    RerankResult,
    ReviewCandidate,
    ScheduledRunResponse,
    TopSelection,
)
