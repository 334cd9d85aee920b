"""Command-line client for publishing extensions to the Chrome Web Store."""

__version__ = "1.0.0"
