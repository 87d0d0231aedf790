"""Helpers shared by the persisted entity dataclasses."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with microseconds, e.g. ``2026-01-02T03:04:05.123456Z``.

    Fixed-width output means lexical order equals chronological order,
    which the newest-first sorts rely on.
    """
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
