from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """Acting identity extracted from a verified session cookie.

    Carried through the request via FastAPI's dependency system.  org_id
    is the tenant every dashboard read and write is scoped to.
    """

    user_id: str
    org_id: str
    email: str
