"""Periodic status polling until an explicit stop signal.

Unlike :class:`~cws_publisher.store_client.poller.UploadCompletionPoller`
this loop has no deadline: it runs until ``stop_event`` is set, which makes
shutdown deterministic (signal handler, test, or outer service sets it).
Failed fetches are logged and reported; the loop keeps going.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from cws_publisher.store_client.errors import StoreError
from cws_publisher.store_client.models import ItemStatusSnapshot
from cws_publisher.store_client.poller import StatusSource
from cws_publisher.store_client.validation import validate_watch_interval

_LOG = logging.getLogger("cws-publisher.store_client.watch")

DEFAULT_WATCH_INTERVAL_SECONDS = 30.0


class StatusWatcher:
    def __init__(
        self,
        client: StatusSource,
        *,
        interval_seconds: float = DEFAULT_WATCH_INTERVAL_SECONDS,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.client = client
        self.interval_seconds = validate_watch_interval(interval_seconds)
        self.stop_event = stop_event or threading.Event()

    def stop(self) -> None:
        self.stop_event.set()

    def run(
        self,
        item_id: str,
        on_snapshot: Callable[[ItemStatusSnapshot], None],
        on_error: Callable[[StoreError], None] | None = None,
    ) -> int:
        """Poll until stopped; return the number of completed fetch attempts."""
        attempts = 0
        while not self.stop_event.is_set():
            attempts += 1
            try:
                snapshot = self.client.fetch_status(item_id)
            except StoreError as exc:
                _LOG.warning("Status check for %s failed: %s", item_id[:8], exc)
                if on_error is not None:
                    on_error(exc)
            else:
                on_snapshot(snapshot)
            self.stop_event.wait(self.interval_seconds)
        _LOG.debug("Stopped watching %s after %d attempts", item_id[:8], attempts)
        return attempts
