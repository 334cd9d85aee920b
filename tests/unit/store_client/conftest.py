"""Shared helpers for store_client unit tests: fake clock and HTTP seam."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import pytest
import requests

from cws_publisher.store_client.models import Credentials


# --------------------------------------------------------------------------- #
# Clock                                                                       #
# --------------------------------------------------------------------------- #
class FakeClock:
    """Deterministic clock whose ``sleep`` advances time instantly."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# --------------------------------------------------------------------------- #
# HTTP                                                                        #
# --------------------------------------------------------------------------- #
def fake_response(status_code: int = 200, body: Any = None) -> SimpleNamespace:
    """Return a minimal stand-in for ``requests.Response``."""
    if body is None:
        text = ""
    elif isinstance(body, str):
        text = body
    else:
        text = json.dumps(body)
    return SimpleNamespace(status_code=status_code, text=text)


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: dict[str, str]
    data: Any
    timeout: Any


@dataclass
class RecordingSession:
    """Replays queued responses and records every request it receives."""

    responses: list[Any] = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)

    def queue(self, status_code: int = 200, body: Any = None) -> "RecordingSession":
        self.responses.append(fake_response(status_code, body))
        return self

    def queue_exception(self, exc: Exception) -> "RecordingSession":
        self.responses.append(exc)
        return self

    def request(self, method, url, headers=None, data=None, timeout=None):  # noqa: ANN001
        self.calls.append(
            RecordedCall(method, url, dict(headers or {}), data, timeout)
        )
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture()
def credentials() -> Credentials:
    return Credentials(
        client_id="cid.apps.googleusercontent.com",
        client_secret="csecret",
        refresh_token="rtoken",
        publisher_id="pub-1",
    )


@pytest.fixture()
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
