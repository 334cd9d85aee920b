"""Input checks performed before any network activity.

Every helper raises :class:`ValidationError` with a message fit for direct
display to an operator.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

from cws_publisher.store_client.errors import ValidationError

SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = (".zip", ".crx")
MIN_MAX_WAIT_SECONDS: Final[float] = 5.0
MIN_WATCH_INTERVAL_SECONDS: Final[float] = 5.0

_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"-?[0-9]+")


def validate_upload_file(file_path: str | os.PathLike[str]) -> Path:
    """Return *file_path* as a ``Path`` once it is a non-empty .zip/.crx file."""
    path = Path(file_path)
    if not path.exists():
        raise ValidationError(f"File not found: {file_path}")
    if not path.is_file():
        raise ValidationError(f"Not a regular file: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported file type: {suffix or '(none)'}. "
            "Only .zip and .crx files are supported."
        )
    if path.stat().st_size == 0:
        raise ValidationError(f"File is empty: {file_path}")
    return path


def validate_deploy_percentage(value: int | float | str) -> int:
    """Return *value* as an int in ``[0, 100]``."""
    if isinstance(value, bool):
        raise ValidationError("Deploy percentage must be a number between 0 and 100")
    if isinstance(value, str):
        text = value.strip()
        # ASCII digits only
        if not _INTEGER_RE.fullmatch(text):
            raise ValidationError(
                "Deploy percentage must be a number between 0 and 100"
            )
        value = int(text)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("Deploy percentage must be a whole number")
        value = int(value)
    if not isinstance(value, int) or not 0 <= value <= 100:
        raise ValidationError("Deploy percentage must be a number between 0 and 100")
    return value


def validate_max_wait(seconds: float) -> float:
    if seconds < MIN_MAX_WAIT_SECONDS:
        raise ValidationError(
            f"Max wait time must be at least {int(MIN_MAX_WAIT_SECONDS)} seconds"
        )
    return float(seconds)


def validate_watch_interval(seconds: float) -> float:
    if seconds < MIN_WATCH_INTERVAL_SECONDS:
        raise ValidationError(
            f"Interval must be at least {int(MIN_WATCH_INTERVAL_SECONDS)} seconds"
        )
    return float(seconds)
