"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the service knows how to answer is one of these exceptions.
Each carries the HTTP status code the client should see, the same way
a parse error carries its status code in a hand-written HTTP server.

    ┌──────────────────────┬────────┬────────────────────────────────────┐
    │  Exception           │ Status │  Raised when                       │
    ├──────────────────────┼────────┼────────────────────────────────────┤
    │  MalformedPayload    │  500   │  body is not a valid user object   │
    │  StorageUnavailable  │  500   │  cannot connect to the database    │
    │  StorageError        │  500   │  statement failed (id collision..) │
    │  NotFound            │  404   │  point lookup matched no row       │
    └──────────────────────┴────────┴────────────────────────────────────┘

Socket read/write failures are plain OSError and are not wrapped.

=============================================================================
"""


class CRUDServerError(Exception):
    """
    Base class for all service errors.

    Handlers catch this one type and turn it into a response using
    status_code and the default message.
    """

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class MalformedPayload(CRUDServerError):
    """Request body is not JSON, or name/email are missing or not strings."""

    status_code = 500
    default_message = "Invalid user payload"


class StorageUnavailable(CRUDServerError):
    """A connection to the relational store could not be established."""

    status_code = 500
    default_message = "Error connecting to the database"


class StorageError(CRUDServerError):
    """
    A statement reached the store but failed.

    This includes primary-key collisions on insert. Nothing is retried.
    """

    status_code = 500
    default_message = "Error executing database statement"


class NotFound(CRUDServerError):
    status_code = 404
    default_message = "User not found"
