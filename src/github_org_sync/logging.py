"""Logging setup using loguru.

Every module logs through ``get_logger(__name__)``. During a resync,
``bind_repo``/``bind_issue`` attach the repository (and issue) being
fetched, and the console shows that context next to the logger name:

    12:00:01 | WARNING  | sync [acme/site #7] - Failed to fetch timeline ...

Standard library loggers (SQLAlchemy, httpx under githubkit) are routed
into loguru so there is a single output stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

    from github_org_sync.config import LoggingConfig

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[name]}:{function}:{line} | {extra} | {message}"
)


def _context(record: Record) -> str:
    """Render the resync context bound to a record, e.g. "acme/site #7"."""
    extra = record["extra"]
    if "repo" not in extra:
        return ""
    if "issue" in extra:
        return f"{extra['repo']} #{extra['issue']}"
    return str(extra["repo"])


def _console_format(record: Record) -> str:
    source = "{extra[name]}" if "name" in record["extra"] else "{name}"
    context = " [{extra[_context]}]" if record["extra"].get("_context") else ""
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        f"<cyan>{source}</cyan>{context} - <level>{{message}}</level>\n{{exception}}"
    )


def _patch_context(record: Record) -> None:
    record["extra"]["_context"] = _context(record)


class InterceptHandler(logging.Handler):
    """Route standard library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller, not the logging module
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    config: LoggingConfig | None = None,
) -> None:
    """Configure console (and optional file) logging.

    Args:
        level: Base level from Settings.log_level
        verbose: Use DEBUG (wins over quiet)
        quiet: Use WARNING
        config: File output settings; no file is written without log_file
    """
    effective: LogLevel = "DEBUG" if verbose else "WARNING" if quiet else level

    logger.remove()
    logger.configure(patcher=_patch_context)
    logger.add(sys.stderr, level=effective, format=_console_format, colorize=True)

    if config is not None and config.log_file:
        logger.add(
            config.log_file,
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
            serialize=config.serialize,
            filter=lambda record: "name" in record["extra"],
        )

    _intercept_stdlib_logging(effective)


def _intercept_stdlib_logging(level: LogLevel) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    debugging = level in ("TRACE", "DEBUG")
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debugging else logging.WARNING)
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.DEBUG if debugging else logging.WARNING)


def get_logger(name: str) -> Logger:
    """Get a logger with the module name bound."""
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    """Logger for one repository's detail fetches."""
    return logger.bind(name="sync", repo=f"{owner}/{repo}")


def bind_issue(owner: str, repo: str, number: int) -> Logger:
    """Logger for one issue's timeline fetch."""
    return logger.bind(name="sync", repo=f"{owner}/{repo}", issue=number)


class LogContext:
    """Attach context to every record logged inside the block.

    Usage:
        with LogContext(run="resync"):
            await orchestrator.resync()
    """

    def __init__(self, **context: Any) -> None:
        self._context = context
        self._manager: Any = None

    def __enter__(self) -> Logger:
        self._manager = logger.contextualize(**self._context)
        self._manager.__enter__()
        return logger

    def __exit__(self, *exc_info: Any) -> None:
        if self._manager is not None:
            self._manager.__exit__(*exc_info)
