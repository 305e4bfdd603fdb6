"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The service answers with exactly three statuses. Each one maps to a fixed
status-line literal (see response.py):

    ┌────────┬──────────────────┬──────────────────────────────────────────┐
    │  Code  │  Phrase on wire  │  Used for                                │
    ├────────┼──────────────────┼──────────────────────────────────────────┤
    │  200   │  OK              │  user created / user found               │
    │  404   │  NOT FOUND       │  unknown id, bad id, unknown route       │
    │  500   │  INTERNAL ERROR  │  bad payload, storage failures           │
    └────────┴──────────────────┴──────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Supported response statuses.

    IntEnum so a status compares equal to its number:
        HTTPStatus.OK == 200  → True
    """

    OK = 200
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500

    def __str__(self) -> str:
        return str(self.value)
