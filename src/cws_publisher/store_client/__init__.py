"""Chrome Web Store remote-service client.

This namespace hosts the stateful core of the tool: token lifecycle, wire
encoding and the upload completion state machine.  It never prints, prompts
or reads process configuration; the CLI layer does that.

Sub-modules
-----------
clock
    Test-friendly time and sleep abstractions.
errors
    Exception taxonomy surfaced to callers.
models
    Immutable request/response dataclasses and wire enums.
validation
    Input checks performed before any network call.
tokens
    OAuth 2.0 refresh-token grant with single-flight caching.
transport
    One-request HTTP execution and error mapping (``requests``).
multipart
    ``multipart/form-data`` body for a single binary file.
client
    ``RemoteStoreClient`` – upload, publish, status, cancel, deploy %.
poller
    Bounded wait for an asynchronous upload job.
watch
    Stop-event driven periodic status polling.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, Sleeper, default_clock, default_sleep  # noqa: F401
from .errors import (  # noqa: F401
    AuthError,
    HttpError,
    OperationCancelledError,
    StoreError,
    UploadTimeoutError,
    ValidationError,
)
from .models import (  # noqa: F401
    AccessToken,
    Credentials,
    DeployInfo,
    DistributionChannel,
    ItemState,
    ItemStatusSnapshot,
    PublishRequest,
    PublishResponse,
    PublishType,
    RevisionStatus,
    UploadResponse,
    UploadState,
)
from .multipart import MultipartBody, encode_file_field  # noqa: F401
from .transport import HttpTransport  # noqa: F401
from .tokens import TokenProvider  # noqa: F401
from .client import RemoteStoreClient  # noqa: F401
from .poller import UploadCompletionPoller  # noqa: F401
from .watch import StatusWatcher  # noqa: F401
from .log_utils import get_store_logger  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "Sleeper",
    "default_clock",
    "default_sleep",
    # errors
    "StoreError",
    "ValidationError",
    "AuthError",
    "HttpError",
    "UploadTimeoutError",
    "OperationCancelledError",
    # models
    "Credentials",
    "AccessToken",
    "DeployInfo",
    "PublishRequest",
    "PublishType",
    "ItemState",
    "UploadState",
    "DistributionChannel",
    "RevisionStatus",
    "ItemStatusSnapshot",
    "UploadResponse",
    "PublishResponse",
    # wire
    "MultipartBody",
    "encode_file_field",
    "HttpTransport",
    "TokenProvider",
    # operations
    "RemoteStoreClient",
    "UploadCompletionPoller",
    "StatusWatcher",
    # logging helpers
    "get_store_logger",
]
