"""Logging infrastructure for the Scribe MI client.

Example:
    >>> from scribe_mi.logging import get_client_logger
    >>> logger = get_client_logger(__name__)
    >>> logger.info("Fetching tasks")
"""

from .logging_config import LoggingConfig, get_client_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_client_logger",
]
