"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The request/response side of the service:

    request.py       bytes → HTTPRequest (method, path, body)
    router.py        HTTPRequest → handler, first match wins
    response.py      HTTPResponse → bytes (fixed status literals + body)
    status_codes.py  the three statuses used on the wire

    GET /users/42 HTTP/1.1\r\n            HTTP/1.1 200 OK\r\n
    Host: localhost\r\n                   Content-Type: application/json\r\n
    \r\n                                  \r\n
                                          {"id":42,"name":"Alice",...}

=============================================================================
"""

from .request import HTTPRequest, RequestParser
from .response import (
    HTTPResponse,
    ok,              # 200 OK
    not_found,       # 404 Not Found
    internal_error,  # 500 Internal Error
    error_response,
)
from .router import Router, Route
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",

    # Response encoding
    "HTTPResponse",
    "ok",
    "not_found",
    "internal_error",
    "error_response",

    # Routing
    "Router",
    "Route",

    # Status codes
    "HTTPStatus",
]
