"""Clock and sleep abstractions for testable time handling.

All time-based decisions inside the store_client package (token expiry,
poll deadlines) MUST depend on an injected ``Clock`` instance rather than
calling ``time.time()`` directly.  Likewise the poller waits through an
injected ``Sleeper`` so tests can advance a fake clock instead of blocking.

Example
-------
>>> from cws_publisher.store_client.clock import default_clock
>>> now = default_clock()
>>> isinstance(now, float)
True
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Callable protocol returning *seconds* since the UNIX epoch."""

    def __call__(self) -> float: ...


@runtime_checkable
class Sleeper(Protocol):
    """Callable protocol suspending the caller for *seconds*."""

    def __call__(self, seconds: float) -> None: ...


def default_clock() -> float:
    """Default implementation that delegates to ``time.time()``."""
    return time.time()


def default_sleep(seconds: float) -> None:
    time.sleep(seconds)
