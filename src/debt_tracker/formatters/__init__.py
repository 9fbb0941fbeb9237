"""Output formatters for debt-tracker."""

from .base import BaseFormatter
from .json_formatter import (
    JsonFormatter,
    history_to_dict,
    rollup_to_dict,
    snapshot_to_dict,
    verdict_to_dict,
)
from .rich_formatter import RichFormatter, sparkline


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "rich": RichFormatter,
        "json": JsonFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "RichFormatter",
    "JsonFormatter",
    "get_formatter",
    "snapshot_to_dict",
    "history_to_dict",
    "rollup_to_dict",
    "verdict_to_dict",
    "sparkline",
]
