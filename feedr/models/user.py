from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from feedr.models.common import new_id, utc_now_iso


@dataclass(frozen=True, slots=True)
class User:
    id: str
    org_id: str
    email: str  # always lowercased + stripped
    password_hash: str
    created_at: str

    @staticmethod
    def new(*, org_id: str, email: str, password_hash: str) -> User:
        return User(
            id=new_id(),
            org_id=org_id,
            email=email.strip().lower(),
            password_hash=password_hash,
            created_at=utc_now_iso(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orgId": self.org_id,
            "email": self.email,
            "passwordHash": self.password_hash,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> User:
        return User(
            id=data["id"],
            org_id=data["orgId"],
            email=data["email"],
            password_hash=data["passwordHash"],
            created_at=data["createdAt"],
        )
