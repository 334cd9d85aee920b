"""RemoteStoreClient – the five Chrome Web Store item operations.

Each operation obtains a valid access token from :class:`TokenProvider`,
builds the item path under the configured publisher and hands a single
request to :class:`HttpTransport`.  Input is validated before any network
activity and no client state is mutated by a failed call.

Paths
-----
``/upload/v2/publishers/{pub}/items/{item}:upload`` for uploads and
``/v2/publishers/{pub}/items/{item}:<verb>`` for everything else.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Final
from urllib.parse import quote

from cws_publisher.store_client.clock import Clock, default_clock
from cws_publisher.store_client.log_utils import get_store_logger
from cws_publisher.store_client.models import (
    Credentials,
    ItemStatusSnapshot,
    PublishRequest,
    PublishResponse,
    UploadResponse,
)
from cws_publisher.store_client.multipart import encode_file_field
from cws_publisher.store_client.tokens import TOKEN_URL, TokenProvider
from cws_publisher.store_client.transport import HttpTransport, Timeout
from cws_publisher.store_client.validation import (
    validate_deploy_percentage,
    validate_upload_file,
)

_LOG_NAME = "cws-publisher.store_client.client"

BASE_URL: Final[str] = "https://chromewebstore.googleapis.com"
UPLOAD_TIMEOUT: Final[tuple[float, float]] = (5, 300)


class RemoteStoreClient:
    """Authenticated client for one publisher's items."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = BASE_URL,
        token_url: str = TOKEN_URL,
        transport: HttpTransport | None = None,
        token_provider: TokenProvider | None = None,
        clock: Clock = default_clock,
        upload_timeout: Timeout = UPLOAD_TIMEOUT,
        correlation_id: str | None = None,
    ) -> None:
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.transport = transport or HttpTransport()
        self.tokens = token_provider or TokenProvider(
            credentials, self.transport, token_url=token_url, clock=clock
        )
        self.upload_timeout = upload_timeout
        self.correlation_id = correlation_id

    # ------------------------------------------------------------------ #
    # Path helpers                                                       #
    # ------------------------------------------------------------------ #
    def _item_path(self, item_id: str, verb: str) -> str:
        publisher = quote(self.credentials.publisher_id, safe="")
        item = quote(item_id, safe="")
        return f"/v2/publishers/{publisher}/items/{item}:{verb}"

    def _upload_path(self, item_id: str) -> str:
        return "/upload" + self._item_path(item_id, "upload")

    def _logger(self, item_id: str, operation: str) -> logging.LoggerAdapter:
        return get_store_logger(
            base_logger_name=_LOG_NAME,
            publisher_id=self.credentials.publisher_id,
            item_id=item_id,
            operation=operation,
            correlation_id=self.correlation_id,
        )

    def _auth_headers(self) -> dict[str, str]:
        token = self.tokens.get_valid_token()
        return {"Authorization": f"Bearer {token.token}"}

    def _make_request(self, method: str, path: str, body: Any = None) -> Any:
        """Send an authenticated request, JSON-encoding *body* when given."""
        headers = self._auth_headers()
        payload: str | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            payload = json.dumps(body)
        return self.transport.request(method, f"{self.base_url}{path}", headers, payload)

    # ------------------------------------------------------------------ #
    # Public operations                                                  #
    # ------------------------------------------------------------------ #
    def upload(self, item_id: str, file_path: str | os.PathLike[str]) -> UploadResponse:
        """Upload a .zip/.crx package as the item's new draft.

        Raises
        ------
        ValidationError
            If the file is missing, empty or not a .zip/.crx, before any
            network activity.
        """
        path = validate_upload_file(file_path)
        data = path.read_bytes()
        encoded = encode_file_field(path.name, data)

        log = self._logger(item_id, "upload")
        log.info("Uploading %s (%d bytes)", path.name, len(data))

        headers = self._auth_headers()
        headers.update(encoded.headers)
        result = self.transport.request(
            "POST",
            f"{self.base_url}{self._upload_path(item_id)}",
            headers,
            encoded.body,
            timeout=self.upload_timeout,
        )
        response = UploadResponse.from_api(result or {})
        log.info("Upload accepted (state=%s)", response.upload_state)
        return response

    def publish(self, item_id: str, request: PublishRequest) -> PublishResponse:
        log = self._logger(item_id, "publish")
        log.info("Publishing (type=%s)", request.publish_type)
        result = self._make_request(
            "POST", self._item_path(item_id, "publish"), request.to_payload()
        )
        return PublishResponse.from_api(result or {})

    def fetch_status(self, item_id: str) -> ItemStatusSnapshot:
        self._logger(item_id, "fetchStatus").debug("Fetching item status")
        result = self._make_request("GET", self._item_path(item_id, "fetchStatus"))
        return ItemStatusSnapshot.from_api(result or {})

    def cancel_submission(self, item_id: str) -> None:
        self._logger(item_id, "cancelSubmission").info("Cancelling submission")
        self._make_request("POST", self._item_path(item_id, "cancelSubmission"), {})

    def set_deploy_percentage(self, item_id: str, percentage: int) -> None:
        """Change the rollout percentage of the published revision.

        Raises
        ------
        ValidationError
            If *percentage* is not an integer in ``[0, 100]``.
        """
        pct = validate_deploy_percentage(percentage)
        self._logger(item_id, "setPublishedDeployPercentage").info(
            "Setting deploy percentage to %d%%", pct
        )
        self._make_request(
            "POST",
            self._item_path(item_id, "setPublishedDeployPercentage"),
            {"deployPercentage": pct},
        )
