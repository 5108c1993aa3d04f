"""Logging setup shared by the API process and scripts."""

import logging

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger once per process."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # httpx logs every request line at INFO through the OpenAI client
    logging.getLogger("httpx").setLevel(logging.WARNING)
