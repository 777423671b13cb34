"""Root logging for the reportdesk CLI.

The root logger takes level and format from LoggingConfig. Loggers under
reportdesk.services.store get their own threshold (logging.storage_level,
WARNING by default): corrupt stored data and failed writes still show up
when the CLI itself runs quietly at ERROR. A more verbose root level also
applies to storage.

Configure via config.yaml (logging.level, logging.storage_level,
logging.format) or env (LOGGING_LEVEL, LOGGING_STORAGE_LEVEL, LOGGING_FORMAT).
"""

import logging

from reportdesk.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
STORAGE_LOGGER = "reportdesk.services.store"


def _resolve_level(level: str, default: int = logging.INFO) -> int:
    """Map level name to logging constant; unknown names give default."""
    return LEVELS.get(level.upper().strip(), default)


class ReportDeskLogging:
    """Applies LoggingConfig to the root logger and the storage loggers."""

    def __init__(self, config: LoggingConfig) -> None:
        self.level = _resolve_level(config.level)
        storage_level = _resolve_level(config.storage_level, logging.WARNING)
        self.storage_level = min(self.level, storage_level)
        self.format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        logging.basicConfig(level=self.level, format=self.format, force=True)
        logging.getLogger(STORAGE_LOGGER).setLevel(self.storage_level)
