"""
Request handlers.

    UserHandler    POST /users, GET /users/{id}
"""

from .users import UserHandler, extract_id_segment, parse_user_id

__all__ = [
    "UserHandler",
    "extract_id_segment",
    "parse_user_id",
]
