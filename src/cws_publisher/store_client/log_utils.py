"""Per-operation log context for the store client.

Log records emitted by :class:`~cws_publisher.store_client.client.RemoteStoreClient`
carry a small, fixed set of attributes so that one upload or publish can be
followed through the log without ever attaching a credential:

=================  ==========================================================
``publisher_id``   publisher namespace the client operates under
``item_id``        item being operated on, cut to its first 8 characters
``operation``      store verb (``upload``, ``publish``, ``fetchStatus``...)
``correlation_id`` caller-chosen id shared by every call of one client
=================  ==========================================================

Any other key handed to :func:`get_store_logger` is dropped, so a stray
``refresh_token=`` cannot end up in a record.  Extras given at the call site
win over the bound context.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping, MutableMapping

CONTEXT_FIELDS: Final[tuple[str, ...]] = (
    "publisher_id",
    "item_id",
    "operation",
    "correlation_id",
)
_TRUNCATE: Final[dict[str, int]] = {"item_id": 8}


def _bound_context(context: Mapping[str, Any]) -> dict[str, Any]:
    bound: dict[str, Any] = {}
    for name in CONTEXT_FIELDS:
        value = context.get(name)
        if value is None:
            continue
        limit = _TRUNCATE.get(name)
        bound[name] = str(value)[:limit] if limit else value
    return bound


class StoreLogAdapter(logging.LoggerAdapter):
    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_store_logger(
    base_logger_name: str = "cws-publisher.store_client", **context: Any
) -> StoreLogAdapter:
    """Return an adapter for *base_logger_name* bound to the whitelisted *context*."""
    return StoreLogAdapter(logging.getLogger(base_logger_name), _bound_context(context))
