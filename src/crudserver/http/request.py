"""
=============================================================================
REQUEST PARSER
=============================================================================

Turns the bytes of a single socket read into a structured request.

Only a sliver of HTTP is understood: the method, the path and the body.
Headers are skipped, Content-Length is ignored, chunked bodies are not
decoded.

=============================================================================
WHAT GETS EXTRACTED
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    POST /users HTTP/1.1\r\n          ← request line                 │
    │    ──┬─ ───┬──                                                       │
    │      │     └── path    (2nd whitespace token)                       │
    │      └──────── method  (1st whitespace token)                       │
    │                                                                      │
    │    Host: localhost:8080\r\n          ← headers: skipped             │
    │    Content-Type: application/json\r\n                               │
    │    \r\n                              ← FIRST blank line             │
    │    {"name":"Alice","email":"a@x.com"}  ← body: everything after     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
EDGE CASES
=============================================================================

- Invalid UTF-8 is replaced with U+FFFD instead of failing.
- No blank line at all → body is "".
- Empty input or a one-token request line → missing parts are "".
- A request bigger than one read is simply cut off; the truncated body
  will usually fail JSON parsing further down.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Tuple


HEADER_TERMINATOR = "\r\n\r\n"


@dataclass
class HTTPRequest:
    """
    A parsed request.

    Attributes:
        method: First token of the request line ("" if absent).
        path: Second token of the request line ("" if absent).
        body: Text after the first blank line ("" if absent).
        client_address: (ip, port) of the peer, when known.
    """

    method: str = ""
    path: str = ""
    body: str = ""
    client_address: Tuple[str, int] = ("", 0)


class RequestParser:
    """
    Parse raw request bytes.

    Usage:
        parser = RequestParser()
        request = parser.parse(data, ("127.0.0.1", 54321))
        request.method   # "GET"
        request.path     # "/users/42"
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def parse(self, data: bytes, client_address: Optional[Tuple[str, int]] = None) -> HTTPRequest:
        """
        Parse one read's worth of bytes.

        Never raises on malformed input: whatever cannot be found is
        left empty and routing falls through to 404.

        Args:
            data: Bytes from a single socket read.
            client_address: Peer address for logging.

        Returns:
            Parsed HTTPRequest.
        """
        text = data.decode(self.encoding, errors="replace")

        method, path = self._parse_request_line(text)

        # Only the first terminator counts; later ones belong to the body
        _, separator, body = text.partition(HEADER_TERMINATOR)
        if not separator:
            body = ""

        return HTTPRequest(
            method=method,
            path=path,
            body=body,
            client_address=client_address or ("", 0),
        )

    def _parse_request_line(self, text: str) -> Tuple[str, str]:
        """
        Pull method and path out of the first line.

        "GET /users/7 HTTP/1.1" → ("GET", "/users/7")
        """
        first_line = text.split("\r\n", 1)[0].split("\n", 1)[0]
        tokens = first_line.split(None, 2)

        method = tokens[0] if len(tokens) > 0 else ""
        path = tokens[1] if len(tokens) > 1 else ""
        return method, path
