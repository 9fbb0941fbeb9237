"""
Logging configuration for debt-tracker.

Log output goes to stderr through rich so that ``--json`` output on stdout
stays parseable. HTTP client loggers are held at WARNING, and credentials
(GitHub tokens, bearer keys for the AI gateway) are masked before any
handler sees a record.
"""

import logging
import re
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "debt_tracker"

# Held at WARNING or above whatever the CLI verbosity.
HTTP_LOGGERS = ("httpx", "httpcore")

_SECRET_RE = re.compile(
    r"(gh[pousr]_[A-Za-z0-9]{8,}|github_pat_\w{8,}|(?<=Bearer )[\w.\-]{8,})"
)
REDACTED = "***"


class SecretRedactingFilter(logging.Filter):
    """Masks access tokens in the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _SECRET_RE.sub(REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: DEBUG for debt_tracker loggers (HTTP clients stay at WARNING)
        quiet: Only ERROR and above
        log_file: Optional file that receives the same records, unstyled

    Returns:
        The debt_tracker root logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    redact = SecretRedactingFilter()
    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    rich_handler.addFilter(redact)
    handlers: list[logging.Handler] = [rich_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        file_handler.addFilter(redact)
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the debt_tracker namespace (``graph.builder`` -> ``debt_tracker.graph.builder``)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
