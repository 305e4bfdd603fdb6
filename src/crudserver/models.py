"""
=============================================================================
USER RECORD MODEL
=============================================================================

The only entity in the system. The same shape travels over the wire
(as JSON) and lives in the `users` table.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         USER LIFECYCLE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST /users  {"name": "Alice", "email": "a@x.com"}                │
    │        │                                                             │
    │        ▼                                                             │
    │   User(id=None, name="Alice", email="a@x.com")   ← creation payload │
    │        │                                                             │
    │        ▼  gateway assigns id                                        │
    │   users row (42, "Alice", "a@x.com")                                │
    │        │                                                             │
    │        ▼  GET /users/42                                             │
    │   User(id=42, name="Alice", email="a@x.com")                        │
    │        │                                                             │
    │        ▼                                                             │
    │   {"id":42,"name":"Alice","email":"a@x.com"}                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Users are never updated or deleted.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
import json

from .errors import MalformedPayload


@dataclass(frozen=True)
class User:
    """
    A user record.

    Attributes:
        id: Assigned by the storage gateway; None before creation.
        name: Non-empty text.
        email: Non-empty text. Not validated as an address.
    """

    id: Optional[int]
    name: str
    email: str

    def to_dict(self) -> Dict[str, Any]:
        """Field order is id, name, email on the wire."""
        return {"id": self.id, "name": self.name, "email": self.email}

    def to_json(self) -> str:
        """Serialize to compact JSON: {"id":1,"name":"...","email":"..."}"""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        """
        Build a User from a decoded JSON value.

        `id` may be missing or null. When present it must be an integer.

        Raises:
            MalformedPayload: If data is not an object, or a field has the
                              wrong type, or name/email are empty.
        """
        if not isinstance(data, dict):
            raise MalformedPayload("User payload must be a JSON object")

        user_id = data.get("id")
        # bool is an int subclass; true/false are not ids
        if user_id is not None and (isinstance(user_id, bool) or not isinstance(user_id, int)):
            raise MalformedPayload("Field 'id' must be an integer or null")

        return cls(
            id=user_id,
            name=_required_text(data, "name"),
            email=_required_text(data, "email"),
        )

    @classmethod
    def from_json(cls, text: str) -> "User":
        """
        Deserialize a User from JSON text.

        Raises:
            MalformedPayload: If text is not valid JSON or not a valid user.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedPayload(f"Invalid JSON body: {e}") from e
        return cls.from_dict(data)


def parse_creation_payload(body: str) -> User:
    """
    Parse the body of POST /users.

    Any `id` in the body is ignored: the gateway assigns its own.

    Raises:
        MalformedPayload: If the body is not a valid creation payload.
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedPayload(f"Invalid JSON body: {e}") from e

    if not isinstance(data, dict):
        raise MalformedPayload("User payload must be a JSON object")

    return User(
        id=None,
        name=_required_text(data, "name"),
        email=_required_text(data, "email"),
    )


def _required_text(data: Dict[str, Any], field_name: str) -> str:
    value = data.get(field_name)
    if not isinstance(value, str):
        raise MalformedPayload(f"Field '{field_name}' must be a string")
    if not value:
        raise MalformedPayload(f"Field '{field_name}' must not be empty")
    return value
