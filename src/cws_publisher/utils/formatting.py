"""Human-readable rendering helpers for CLI output."""

from __future__ import annotations

_SIZES = ("Bytes", "KB", "MB", "GB")


def format_file_size(num_bytes: int) -> str:
    """Format *num_bytes* with a binary unit, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZES) - 1:
        value /= 1024
        unit += 1
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZES[unit]}"
