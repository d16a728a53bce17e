"""Logging configuration for the API process."""

import logging


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging for the server process.

    Args:
        level: Logging level name or number (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("tasktracker").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
