"""Logging helpers shared by the store client and the CLI."""

from __future__ import annotations

import logging
import sys

_DEFAULT_FORMAT = "%(levelname)s %(name)s %(message)s"
_VERBOSE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything but the first *keep* characters masked.

    Short values are masked completely so that nothing meaningful leaks.
    """
    if not value:
        return ""
    if keep <= 0 or len(value) <= keep * 2:
        return "*" * min(len(value), 8)
    return f"{value[:keep]}****"


def configure_logging(verbose: bool = False) -> None:
    """Configure the ``cws-publisher`` logger hierarchy for CLI use.

    Only the package loggers are touched; the root logger and third-party
    loggers (``urllib3``…) keep their defaults.
    """
    logger = logging.getLogger("cws-publisher")
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setFormatter(
            logging.Formatter(_VERBOSE_FORMAT if verbose else _DEFAULT_FORMAT)
        )
