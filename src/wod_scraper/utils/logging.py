"""
Logging for the WOD scraper.

Every module logs through a child of the `wod_scraper` logger, so one
call to `setup_logging` decides where scrape, extraction and storage
messages go. Console output goes to stderr; an optional rotating file
receives the same records.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any, MutableMapping

if TYPE_CHECKING:
    from wod_scraper.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "wod_scraper"

_logging_configured = False


def setup_logging(
    settings: "LoggingSettings | None" = None,
    level: str | None = None,
) -> logging.Logger:
    """
    Attach handlers to the application logger.

    Only the first call has an effect until `reset_logging` is called,
    so the CLI and tests can both call it safely.

    Args:
        settings: Logging section of the configuration; defaults if None
        level: Level name overriding `settings.level`, e.g. "DEBUG"

    Returns:
        The `wod_scraper` logger
    """
    global _logging_configured

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return app_logger

    if settings is None:
        from wod_scraper.config.settings import LoggingSettings
        settings = LoggingSettings()

    log_level = getattr(logging, (level or settings.level).upper(), logging.INFO)
    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)

    app_logger.handlers.clear()
    app_logger.setLevel(log_level)

    handlers: list[logging.Handler] = []
    if settings.log_to_console:
        # stdout is reserved for --json output
        handlers.append(logging.StreamHandler(sys.stderr))

    if settings.file_path is not None:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=str(settings.file_path),
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    app_logger.propagate = False
    _logging_configured = True

    app_logger.debug(
        f"Logging configured at {logging.getLevelName(log_level)} "
        f"with {len(handlers)} handler(s)"
    )
    return app_logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Logger for a module, nested under `wod_scraper`.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Fetched WOD page")
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Remove all handlers so `setup_logging` can run again."""
    global _logging_configured

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.propagate = True
    _logging_configured = False


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Prefixes every message with fixed context.

    Example:
        >>> logger = get_logger_with_context(__name__, date="2025-01-06")
        >>> logger.info("Fetching page")  # "[date=2025-01-06] Fetching page"
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        prefix = " ".join(f"[{key}={value}]" for key, value in self.extra.items())
        return f"{prefix} {msg}", kwargs


def get_logger_with_context(name: str | None = None, **context: Any) -> ContextLoggerAdapter:
    """Module logger whose messages carry `context`, e.g. the scrape date."""
    return ContextLoggerAdapter(get_logger(name), context)
