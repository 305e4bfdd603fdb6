"""
=============================================================================
RESPONSE ENCODER
=============================================================================

Turns a handler result into the bytes written back to the client.

=============================================================================
RESPONSE ANATOMY
=============================================================================

The reply is a fixed status-line literal followed directly by the body:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      RESPONSE STRUCTURE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  200:  HTTP/1.1 200 OK\r\n                                          │
    │        Content-Type: application/json\r\n                           │
    │        \r\n                                                          │
    │        {"id":42,"name":"Alice","email":"a@x.com"}                   │
    │                                                                      │
    │  404:  HTTP/1.1 404 NOT FOUND\r\n                                   │
    │        \r\n                                                          │
    │        User not found                                                │
    │                                                                      │
    │  500:  HTTP/1.1 500 INTERNAL ERROR\r\n                              │
    │        \r\n                                                          │
    │        Error connecting to the database                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is NO Content-Length header. The server closes the connection
after writing, and the client treats EOF as the end of the body.
Only the 200 literal carries a Content-Type header.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Union
import json

from .status_codes import HTTPStatus


# =============================================================================
# STATUS LINE LITERALS
# =============================================================================

OK_RESPONSE = "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
NOT_FOUND_RESPONSE = "HTTP/1.1 404 NOT FOUND\r\n\r\n"
INTERNAL_ERROR_RESPONSE = "HTTP/1.1 500 INTERNAL ERROR\r\n\r\n"

STATUS_HEADS: Dict[HTTPStatus, str] = {
    HTTPStatus.OK: OK_RESPONSE,
    HTTPStatus.NOT_FOUND: NOT_FOUND_RESPONSE,
    HTTPStatus.INTERNAL_SERVER_ERROR: INTERNAL_ERROR_RESPONSE,
}


@dataclass
class HTTPResponse:
    """
    A response ready to be encoded.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   status head   ─────►    raw bytes
                                 + body

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    body: bytes = b""

    @property
    def head(self) -> str:
        """Status line plus headers plus the blank separator line."""
        return STATUS_HEADS[self.status]

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (for logs and tests)."""
        return self.body.decode("utf-8", errors="replace")

    def to_bytes(self) -> bytes:
        """
        Serialize for a single socket write.

        Returns:
            Status head bytes immediately followed by the body bytes.
        """
        return self.head.encode("utf-8") + self.body


def encode_body(body: Union[str, bytes, Dict[str, Any], list]) -> bytes:
    """
    Normalize a body to bytes.

    dict/list → compact JSON, str → UTF-8, bytes → unchanged.
    """
    if isinstance(body, (dict, list)):
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    if isinstance(body, str):
        return body.encode("utf-8")
    return body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
#     return ok(user.to_json())
#     return not_found("User not found")
#     return internal_error("Error connecting to the database")
#
# =============================================================================

def ok(body: Union[str, bytes, Dict[str, Any], list] = "") -> HTTPResponse:
    """200 with a JSON body (dicts and lists are serialized)."""
    return HTTPResponse(status=HTTPStatus.OK, body=encode_body(body))


def not_found(message: str = "404 not found") -> HTTPResponse:
    """404 with a plain-text body."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND, body=encode_body(message))


def internal_error(message: str = "Internal error") -> HTTPResponse:
    """500 with a plain-text body. Keep the message generic."""
    return HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR, body=encode_body(message))


def error_response(status_code: int, message: str) -> HTTPResponse:
    """
    Build an error response from a numeric status.

    Anything other than 404 is answered as 500, since those are the only
    two error statuses on the wire.
    """
    if status_code == HTTPStatus.NOT_FOUND:
        return not_found(message)
    return internal_error(message)
