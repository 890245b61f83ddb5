"""Centralized logging setup shared by the launcher and the CLI."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "nodeclerk-stderr"


def _resolve_level(level: Optional[str] = None) -> int:
    """Pick the effective level: explicit > env var > config file > default."""
    name = (
        level
        or os.environ.get(Constants.ENV_LOG_LEVEL)
        or Constants.CONFIG_LOG_LEVEL
        or Constants.DEFAULT_LOG_LEVEL
    )
    value = getattr(logging, str(name).upper(), None)
    if not isinstance(value, int):
        return getattr(logging, Constants.DEFAULT_LOG_LEVEL)
    return value


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stderr handler on the root logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    Output goes to stderr so the launched process owns stdout.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when debug records from this logger would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured debug records.

    None values are dropped so formatters only see populated fields.
    """
    return {k: v for k, v in fields.items() if v is not None}
