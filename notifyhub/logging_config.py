"""Process-wide logging setup shared by the API and the maintenance scripts."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Install the root logging configuration for the process."""

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


__all__ = ["LOG_FORMAT", "configure_logging"]
