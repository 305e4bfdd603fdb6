"""
=============================================================================
USER HANDLERS
=============================================================================

The two operations the service exposes:

    ┌───────────┬──────────────┬──────────────────────────┬───────────────┐
    │ Method    │ Path         │ Success                  │ Failure       │
    ├───────────┼──────────────┼──────────────────────────┼───────────────┤
    │ POST      │ /users       │ 200 {"id":N,"status":…}  │ 500           │
    │ GET       │ /users/{id}  │ 200 user JSON            │ 404 / 500     │
    └───────────┴──────────────┴──────────────────────────┴───────────────┘

=============================================================================
ID EXTRACTION
=============================================================================

The id is whatever sits between the second and third "/":

    /users/42        → "42"    → 42
    /users/42/posts  → "42"    → 42   (trailing segments ignored)
    /users/abc       → "abc"   → 404
    /users/42?x=1    → "42?x=1"→ 404  (query strings are not understood)
    /users/          → ""      → 404

It must be a plain decimal integer that fits the 32-bit `id` column.

=============================================================================
"""

import logging
import re
from typing import Optional

from ..errors import CRUDServerError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, not_found, internal_error, error_response
from ..http.router import Router
from ..models import parse_creation_payload
from ..storage.gateway import StorageGateway, DB_ID_MIN, DB_ID_MAX


logger = logging.getLogger(__name__)


_DECIMAL_ID = re.compile(r"[+-]?[0-9]+")


def extract_id_segment(path: str) -> str:
    """Return the third "/"-separated piece of path, cut at whitespace."""
    segments = path.split("/")
    if len(segments) < 3:
        return ""
    tokens = segments[2].split()
    return tokens[0] if tokens else ""


def parse_user_id(segment: str) -> Optional[int]:
    """
    Parse an id segment.

    Returns:
        The id, or None if it is not a decimal integer in column range.
    """
    if not _DECIMAL_ID.fullmatch(segment):
        return None
    value = int(segment)
    if not DB_ID_MIN <= value <= DB_ID_MAX:
        return None
    return value


class UserHandler:
    """
    Create and read users through a storage gateway.

    Usage:
        handler = UserHandler(StorageGateway(config.database_url))
        handler.register(router)
    """

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    def register(self, router: Router) -> None:
        """
        Add both rules to router, create first.

        Order matters: "POST /users/…" also starts with "/users" and is
        therefore a create.
        """
        router.post("/users", name="create_user")(self.create)
        router.get("/users/", name="get_user")(self.get)

    def create(self, request: HTTPRequest) -> HTTPResponse:
        """
        POST /users

        Body: {"name": "...", "email": "..."}. Any failure is a 500.
        """
        try:
            user = parse_creation_payload(request.body)
            user_id = self.gateway.create_user(user.name, user.email)
        except CRUDServerError as e:
            logger.warning(f"Create user failed: {type(e).__name__}: {e}")
            return internal_error(e.default_message)

        return ok({"id": user_id, "status": "created"})

    def get(self, request: HTTPRequest) -> HTTPResponse:
        """GET /users/{id}"""
        user_id = parse_user_id(extract_id_segment(request.path))
        if user_id is None:
            return not_found("User not found")

        try:
            user = self.gateway.get_user_by_id(user_id)
        except CRUDServerError as e:
            if e.status_code != 404:
                logger.warning(f"Get user {user_id} failed: {type(e).__name__}: {e}")
            return error_response(e.status_code, e.default_message)

        return ok(user.to_json())
