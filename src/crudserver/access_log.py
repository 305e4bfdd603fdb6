"""
=============================================================================
ACCESS LOG
=============================================================================

One line per serviced request on the "crudserver.access" logger:

    127.0.0.1 - - [19/Oct/2026:12:00:00 +0000] "GET /users/42" 200 43 1.87ms
    ─────┬───       ───────────┬──────────────  ──────┬──────  ─┬─ ─┬ ──┬───
         │                     │                      │         │   │   │
     client ip             timestamp           request line  status │ duration
                                                                  body bytes

Configure it separately from the rest of the service if needed:
    logging.getLogger("crudserver.access").setLevel(logging.WARNING)

=============================================================================
"""

import logging
import time
from dataclasses import dataclass

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("crudserver.access")


@dataclass
class RequestLog:
    """Structured log entry for one request."""

    connection_id: str
    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Apache-style line."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    connection_id: str,
    request: HTTPRequest,
    response: HTTPResponse,
    started_at: float,
) -> RequestLog:
    """
    Build and emit the access-log entry for a request.

    Args:
        connection_id: Id of the connection that carried the request.
        request: The parsed request.
        response: The response about to be written.
        started_at: time.time() when the request was read.

    Returns:
        The emitted entry.
    """
    entry = RequestLog(
        connection_id=connection_id,
        method=request.method or "-",
        path=request.path or "-",
        client_ip=request.client_address[0],
        status_code=int(response.status),
        content_length=len(response.body),
        duration_ms=(time.time() - started_at) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )
    logger.info(entry.to_text())
    return entry
