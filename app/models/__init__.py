"""ORM models; importing this module registers every table on ``Base``."""

from app.models.review import Review, ReviewStatus  # noqa: F401
