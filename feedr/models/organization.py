from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from feedr.models.common import new_id, utc_now_iso

PLANS = ("free", "pro", "business", "enterprise")


@dataclass(frozen=True, slots=True)
class Organization:
    id: str
    name: str
    created_at: str
    plan: str = "free"  # free|pro|business|enterprise; signup only assigns free

    @staticmethod
    def new(*, name: str, plan: str = "free") -> Organization:
        if plan not in PLANS:
            raise ValueError(f"unknown plan {plan!r}")
        return Organization(id=new_id(), name=name, plan=plan, created_at=utc_now_iso())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "plan": self.plan,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Organization:
        return Organization(
            id=data["id"],
            name=data["name"],
            plan=data.get("plan", "free"),
            created_at=data["createdAt"],
        )
