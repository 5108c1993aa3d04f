"""Error taxonomy shared by services and endpoints."""


class ReviewServiceError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ReviewServiceError):
    status_code = 400
    default_message = "Missing required fields"


class AuthError(ReviewServiceError):
    status_code = 401
    default_message = "Invalid webhook secret"


class MethodError(ReviewServiceError):
    status_code = 405
    default_message = "Method not allowed"


class ClassifierError(ReviewServiceError):
    """The classifier provider failed (error status, timeout, empty reply).

    Parse problems in a successful reply are not errors; they resolve to the
    conservative fallback inside the gateway.
    """

    default_message = "Classifier request failed"


class StoreError(ReviewServiceError):
    default_message = "Review store operation failed"
