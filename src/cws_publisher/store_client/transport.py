"""Single-request HTTP transport for the Chrome Web Store API.

``HttpTransport`` is the one place where wire-level failures surface:

* every request carries the fixed ``User-Agent`` header,
* any non-2xx response becomes :class:`HttpError` with the response text,
* connection-level failures become :class:`HttpError` with ``status == 0``,
* a successful empty body yields ``{}``, otherwise the parsed JSON value.

No domain semantics are interpreted here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Final, Mapping, Tuple, Union

import requests

from cws_publisher import __version__
from cws_publisher.store_client.errors import HttpError

_LOG = logging.getLogger("cws-publisher.store_client.transport")

USER_AGENT: Final[str] = f"cws-publisher/{__version__}"

# (connect, read) seconds, as accepted by ``requests``
Timeout = Union[float, Tuple[float, float]]
DEFAULT_TIMEOUT: Final[Tuple[float, float]] = (5, 60)

_ERROR_BODY_LOG_LIMIT = 200


class HttpTransport:
    """Execute one HTTP request and map the outcome to data or :class:`HttpError`."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: Timeout = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
        *,
        timeout: Timeout | None = None,
    ) -> Any:
        """Send the request and return the parsed JSON body (``{}`` when empty).

        Raises
        ------
        HttpError
            On a non-2xx status, on a body that is not valid JSON, or when no
            response was received (``status == 0``).
        """
        merged: dict[str, str] = dict(headers or {})
        merged["User-Agent"] = self.user_agent

        _LOG.debug(
            "%s %s (headers: %s)", method, url, ", ".join(sorted(merged.keys()))
        )
        try:
            resp = self.session.request(
                method,
                url,
                headers=merged,
                data=body,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as exc:
            _LOG.warning("%s %s failed before a response arrived: %s", method, url, exc)
            raise HttpError(0, f"Request failed: {exc}", url=url) from exc

        text = resp.text or ""
        if not 200 <= resp.status_code < 300:
            _LOG.info(
                "%s %s returned %s: %s",
                method,
                url,
                resp.status_code,
                text[:_ERROR_BODY_LOG_LIMIT],
            )
            raise HttpError(resp.status_code, text, url=url)

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as exc:
            raise HttpError(
                resp.status_code, f"Response body is not valid JSON: {text[:200]}", url=url
            ) from exc
