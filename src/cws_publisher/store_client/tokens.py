"""OAuth 2.0 access-token lifecycle for the store client.

``TokenProvider`` owns the cached :class:`AccessToken`.  A refresh-token grant
is performed lazily, only when a caller asks for a token and the cached one is
missing or within ``grace_seconds`` of its expiry.  No retry is attempted.

Refreshes are single-flight: the refresh path is serialised by a lock and the
cached token is re-checked once the lock is held, so concurrent callers that
all observe an expired token trigger exactly one grant request and share its
result.

Secrets (client secret, refresh token, access token) are never logged.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Final
from urllib.parse import urlencode

from cws_publisher.store_client.clock import Clock, default_clock
from cws_publisher.store_client.errors import AuthError, HttpError
from cws_publisher.store_client.models import AccessToken, Credentials
from cws_publisher.store_client.transport import HttpTransport
from cws_publisher.utils.logging import mask_sensitive

_LOG = logging.getLogger("cws-publisher.store_client.tokens")

TOKEN_URL: Final[str] = "https://oauth2.googleapis.com/token"
DEFAULT_GRACE_SECONDS: Final[int] = 60


class TokenProvider:
    """Hand out a valid access token, refreshing on demand."""

    def __init__(
        self,
        credentials: Credentials,
        transport: HttpTransport,
        *,
        token_url: str = TOKEN_URL,
        clock: Clock = default_clock,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
    ) -> None:
        self._credentials = credentials
        self._transport = transport
        self._token_url = token_url
        self._clock = clock
        self._grace_seconds = grace_seconds
        self._token: AccessToken | None = None
        self._refresh_lock = threading.Lock()

    @property
    def cached_token(self) -> AccessToken | None:
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs a refresh."""
        self._token = None

    def get_valid_token(self) -> AccessToken:
        """Return the cached token if still valid, otherwise refresh it.

        Raises
        ------
        AuthError
            If the token endpoint is unreachable, rejects the grant or returns
            a body without a usable ``access_token`` / ``expires_in``.
        """
        current = self._token
        if current is not None and current.is_valid(self._clock(), self._grace_seconds):
            return current

        with self._refresh_lock:
            # Another caller may have refreshed while we waited for the lock.
            latest = self._token
            if latest is not None and latest.is_valid(self._clock(), self._grace_seconds):
                return latest
            refreshed = self._refresh()
            self._token = refreshed
            return refreshed

    # ---------------- internal helpers --------------------------------- #
    def _refresh(self) -> AccessToken:
        creds = self._credentials
        form = urlencode(
            {
                "grant_type": "refresh_token",
                "refresh_token": creds.refresh_token,
                "client_id": creds.client_id,
                "client_secret": creds.client_secret,
            }
        )
        _LOG.debug(
            "Refreshing access token for client_id=%s",
            mask_sensitive(creds.client_id, 6),
        )
        try:
            data = self._transport.request(
                "POST",
                self._token_url,
                {"Content-Type": "application/x-www-form-urlencoded"},
                form,
            )
        except HttpError as exc:
            if exc.status:
                raise AuthError(
                    f"Token endpoint returned {exc.status}: {exc.body[:200]}",
                    status=exc.status,
                ) from exc
            raise AuthError(f"Token request failed: {exc.body}") from exc

        token = self._parse_token(data)
        _LOG.info("Refreshed access token (expires in %ss)", int(token.ttl))
        return token

    def _parse_token(self, data: Any) -> AccessToken:
        if not isinstance(data, dict):
            raise AuthError("Token response is not a JSON object")
        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise AuthError("Token response missing access_token")
        try:
            expires_in = float(data["expires_in"])
        except (KeyError, TypeError, ValueError):
            raise AuthError("Token response missing expires_in") from None
        obtained_at = self._clock()
        return AccessToken(
            token=access_token,
            expires_at=obtained_at + expires_in,
            obtained_at=obtained_at,
        )
