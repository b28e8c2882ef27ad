"""Process-wide logging setup."""

import logging

from auth_service.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None):
    """Configure the root logger once at startup."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    # uvicorn's access log duplicates what the reverse proxy already records
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
