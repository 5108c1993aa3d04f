"""Expose API endpoint routers."""

from app.api.endpoints import pinning, reviews

__all__ = ["pinning", "reviews"]
