"""Bounded wait for an asynchronous server-side upload job.

``UploadCompletionPoller`` calls ``fetch_status`` until the item's
``lastAsyncUploadState`` leaves ``IN_PROGRESS`` or the deadline passes::

    WAITING ──► SUCCEEDED | FAILED | <any other state>   (returned)
       │
       └──────► timeout                                  (UploadTimeoutError)

Polls are strictly sequential with a fixed interval and no backoff.  States
outside ``{IN_PROGRESS, SUCCEEDED, FAILED}`` (``NOT_FOUND``, unknown strings)
are handed back unchanged; the caller decides what they mean.
"""

from __future__ import annotations

import logging
import threading
from typing import Final, Protocol

from cws_publisher.store_client.clock import Clock, Sleeper, default_clock, default_sleep
from cws_publisher.store_client.errors import OperationCancelledError, UploadTimeoutError
from cws_publisher.store_client.models import ItemStatusSnapshot, UploadState

_LOG = logging.getLogger("cws-publisher.store_client.poller")

POLL_INTERVAL_SECONDS: Final[float] = 2.0
DEFAULT_MAX_WAIT_SECONDS: Final[float] = 300.0


class StatusSource(Protocol):
    def fetch_status(self, item_id: str) -> ItemStatusSnapshot: ...


class UploadCompletionPoller:
    """Wait for the last asynchronous upload of an item to finish."""

    def __init__(
        self,
        client: StatusSource,
        *,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        clock: Clock = default_clock,
        sleep: Sleeper = default_sleep,
    ) -> None:
        self.client = client
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._sleep = sleep

    def wait_for_completion(
        self,
        item_id: str,
        max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
        *,
        cancel_event: threading.Event | None = None,
    ) -> UploadState | str:
        """Return the first terminal upload state observed.

        Raises
        ------
        UploadTimeoutError
            When *max_wait_seconds* elapse without a terminal state.
        OperationCancelledError
            When *cancel_event* is set while waiting.
        StoreError
            Any error from ``fetch_status`` propagates unchanged.
        """
        start = self._clock()
        polls = 0
        while self._clock() - start < max_wait_seconds:
            self._check_cancelled(item_id, cancel_event)
            snapshot = self.client.fetch_status(item_id)
            polls += 1
            state = snapshot.last_async_upload_state
            _LOG.debug("Poll #%d for %s: upload state %s", polls, item_id[:8], state)

            if state and state != UploadState.IN_PROGRESS:
                if state not in (UploadState.SUCCEEDED, UploadState.FAILED):
                    _LOG.warning(
                        "Upload for %s ended in unexpected state %s", item_id[:8], state
                    )
                return state

            self._wait(cancel_event)

        waited = self._clock() - start
        _LOG.info("Gave up on %s after %d polls (%.1fs)", item_id[:8], polls, waited)
        raise UploadTimeoutError(item_id, waited)

    def _wait(self, cancel_event: threading.Event | None) -> None:
        if cancel_event is None:
            self._sleep(self.interval_seconds)
        else:
            cancel_event.wait(self.interval_seconds)

    @staticmethod
    def _check_cancelled(item_id: str, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelledError(f"Waiting for upload of {item_id} was cancelled")
