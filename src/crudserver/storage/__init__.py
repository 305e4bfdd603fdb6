"""
Storage layer: the users table and the gateway that reads and writes it.
"""

from .gateway import (
    StorageGateway,
    random_user_id,
    users,
    metadata,
    USER_ID_MIN,
    USER_ID_MAX,
)

__all__ = [
    "StorageGateway",
    "random_user_id",
    "users",
    "metadata",
    "USER_ID_MIN",
    "USER_ID_MAX",
]
