"""Logging setup applied at application startup."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """
    Install a root handler with a timestamped format.

    Uvicorn's own logging config can still override this; it only provides
    sane defaults when running the app directly.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
