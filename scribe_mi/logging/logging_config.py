"""Logging configuration for the Scribe MI client.

Loggers come from Prefect's logger factory, which parents every logger under
``prefect``, so ``scribe_mi.dispatcher`` is registered as
``prefect.scribe_mi.dispatcher``. Configuration written against the short
package names (the built-in default or a YAML file) is rewritten to the
registered names before it is applied.

Usage:
    >>> from scribe_mi.logging import get_client_logger
    >>> logger = get_client_logger(__name__)
    >>> logger.info("Session established")

Environment variables:
    SCRIBE_MI_LOGGING_CONFIG: Path to a YAML dictConfig file
    SCRIBE_MI_LOG_LEVEL: Level for the client loggers (default INFO)
    PREFECT_LOGGING_SETTINGS_PATH: Fallback config path
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from prefect.logging import get_logger

PACKAGE_LOGGER = "scribe_mi"


def registered_name(name: str = PACKAGE_LOGGER) -> str:
    """Name Prefect registers the logger for ``name`` under."""
    return get_logger(name).name


def _is_package_logger(name: str) -> bool:
    return name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")


class LoggingConfig:
    """Logging configuration for the client loggers.

    The file is taken from, in order: ``config_path``,
    ``SCRIBE_MI_LOGGING_CONFIG``, ``PREFECT_LOGGING_SETTINGS_PATH``. Without a
    readable file the client loggers get a console handler of their own at
    ``level`` (or ``SCRIBE_MI_LOG_LEVEL``) and stop propagating, leaving the
    host application's loggers untouched.
    """

    def __init__(self, config_path: Optional[Path] = None, level: Optional[str] = None):
        self.config_path = config_path or self._path_from_env()
        self.level = (level or os.environ.get("SCRIBE_MI_LOG_LEVEL") or "INFO").upper()

    @staticmethod
    def _path_from_env() -> Optional[Path]:
        for variable in ("SCRIBE_MI_LOGGING_CONFIG", "PREFECT_LOGGING_SETTINGS_PATH"):
            if value := os.environ.get(variable):
                return Path(value)
        return None

    def load_config(self) -> dict[str, Any]:
        """Return the dictConfig mapping with package loggers under their registered names."""
        if self.config_path is not None and self.config_path.exists():
            config = yaml.safe_load(self.config_path.read_text()) or {}
        else:
            config = self._default_config()

        loggers = config.get("loggers") or {}
        config["loggers"] = {
            (registered_name(name) if _is_package_logger(name) else name): options
            for name, options in loggers.items()
        }
        return config

    def _default_config(self) -> dict[str, Any]:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "level": self.level,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }

    def apply(self):
        logging.config.dictConfig(self.load_config())


_configured = False


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Configure the client loggers.

    Args:
        config_path: Optional path to a YAML logging configuration file.
        level: Level for the package logger. Overrides the file and
            SCRIBE_MI_LOG_LEVEL; child loggers inherit it.

    Example:
        >>> setup_logging(level="DEBUG")
    """
    global _configured

    LoggingConfig(config_path, level).apply()
    if level:
        logging.getLogger(registered_name()).setLevel(level.upper())
    _configured = True


def get_client_logger(name: str) -> logging.Logger:
    """Get a logger for a client component, configuring logging on first use."""
    if not _configured:
        setup_logging()
    return get_logger(name)
