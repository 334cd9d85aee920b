"""``multipart/form-data`` encoding for a single binary file field.

Encoding is delegated to :func:`urllib3.filepost.encode_multipart_formdata`,
the encoder ``requests`` itself uses.  The boundary is drawn fresh from
:mod:`secrets` on every call; with 32 hex characters of randomness it does not
occur inside real package bytes in practice.  Nothing checks that.

File bytes are copied verbatim between the part headers and the closing
delimiter, never decoded or re-encoded.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Final

from urllib3.filepost import encode_multipart_formdata

_BOUNDARY_PREFIX: Final[str] = "----CwsPublisherBoundary"
OCTET_STREAM: Final[str] = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class MultipartBody:
    """An encoded body together with the headers needed to send it."""

    body: bytes
    content_type: str

    @property
    def boundary(self) -> str:
        return self.content_type.partition("boundary=")[2]

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": self.content_type,
            "Content-Length": str(len(self.body)),
        }


def generate_boundary() -> str:
    return _BOUNDARY_PREFIX + secrets.token_hex(16)


def encode_file_field(
    filename: str,
    data: bytes,
    *,
    field_name: str = "file",
    boundary: str | None = None,
) -> MultipartBody:
    """Encode *data* as the only part of a ``multipart/form-data`` body.

    The file name is escaped by urllib3 (``"`` becomes ``%22``, line breaks
    are percent-encoded), so it cannot terminate the header parameter early.
    """
    body, content_type = encode_multipart_formdata(
        {field_name: (filename, bytes(data), OCTET_STREAM)},
        boundary=boundary or generate_boundary(),
    )
    return MultipartBody(body=body, content_type=content_type)
