"""FastAPI application entry point."""

import logging

from dotenv import load_dotenv

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables from .env file
load_dotenv()

from app import models  # noqa: F401,E402
from app.api.routes import router  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.errors import MethodError, ReviewServiceError, ValidationError  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.db.init_db import init_db  # noqa: E402

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.project_name)
app.include_router(router, prefix=settings.api_v1_prefix)


def _error_response(exc: ReviewServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(ReviewServiceError)
async def review_service_error_handler(request: Request, exc: ReviewServiceError) -> JSONResponse:
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return _error_response(ValidationError("Invalid JSON body"))
    fields = sorted({str(err["loc"][-1]) for err in errors if err.get("loc")})
    message = f"Missing required fields: {', '.join(fields)}" if fields else None
    return _error_response(ValidationError(message))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        return _error_response(MethodError())
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error")
    return _error_response(ReviewServiceError())


@app.on_event("startup")
def on_startup() -> None:
    """Initialize database artifacts."""
    init_db()


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Basic sanity endpoint."""
    return {"message": "Review Moderation API is running"}


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Health check endpoint for Docker."""
    return {"status": "healthy"}
