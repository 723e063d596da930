"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic beyond views). The store
and the service do the work; api/models.py owns the HTTP contract.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    password always holds the bcrypt hash, never the plaintext. It is left
    out of public_view() so it never reaches an HTTP response.
    """

    username: str
    password: str  # bcrypt hash
    firstname: str
    lastname: str
    id: int | None = None
    created_at: str | None = None

    def public_view(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "created_at": self.created_at or "",
        }
