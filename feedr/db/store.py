"""Whole-document persistence: load everything, mutate in memory, persist everything.

CONTRACT
--------
  load()            -> the current Document (a fresh empty one if nothing
                       has been persisted yet; absence is not an error)
  persist(document) -> overwrite the entire stored document
  mutate()          -> async context manager: lock, load, yield, persist

There are no partial writes and no transactions.  ``mutate()`` holds one
process-wide asyncio.Lock across load/modify/persist, so two requests in
the same process can no longer both pass a uniqueness pre-check (email,
slug) before either persists.  If the body raises, nothing is persisted.

LIMITATION: the lock is per process.  Two processes pointed at the same
file still race and the last writer wins.  Run a single worker.

Two backends, chosen at import time from DATA_PATH (same conditional
singleton pattern as feedr.db.redis):
  JsonFileDocumentStore: DATA_PATH set (default data/db.json)
  InMemoryDocumentStore: DATA_PATH="" (tests, demos)
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol, runtime_checkable

from feedr.core.config import SETTINGS
from feedr.db.document import Document

logger = logging.getLogger(__name__)


@runtime_checkable
class DocumentStore(Protocol):
    async def load(self) -> Document: ...
    async def persist(self, document: Document) -> None: ...
    def mutate(self): ...
    def describe(self) -> str: ...


class _LockedStore:
    """Shared mutate() implementation; subclasses provide load/persist."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def load(self) -> Document:
        raise NotImplementedError

    async def persist(self, document: Document) -> None:
        raise NotImplementedError

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[Document]:
        async with self._lock:
            document = await self.load()
            yield document
            await self.persist(document)


class InMemoryDocumentStore(_LockedStore):
    """Keeps the document in process memory.  Deep-copies in and out."""

    def __init__(self) -> None:
        super().__init__()
        self._data: dict | None = None

    async def load(self) -> Document:
        if self._data is None:
            return Document.empty()
        return Document.from_raw(copy.deepcopy(self._data))

    async def persist(self, document: Document) -> None:
        self._data = copy.deepcopy(document.to_raw())

    def reset(self) -> None:
        self._data = None

    def describe(self) -> str:
        return "memory"


class JsonFileDocumentStore(_LockedStore):
    """Stores the document as one JSON file.

    persist() writes a temp file next to the target and os.replace()s it,
    so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Document:
        if not self._path.exists():
            return Document.empty()
        with self._path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        if not isinstance(raw, dict):
            raise RuntimeError(f"{self._path} does not contain a JSON object")
        return Document.from_raw(raw)

    def _write(self, document: Document) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document.to_raw(), fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def load(self) -> Document:
        return await asyncio.to_thread(self._read)

    async def persist(self, document: Document) -> None:
        await asyncio.to_thread(self._write, document)
        logger.debug("Persisted document to %s", self._path)

    def describe(self) -> str:
        return f"file:{self._path}"


if SETTINGS.data_path:
    document_store: DocumentStore = JsonFileDocumentStore(SETTINGS.data_path)
else:
    document_store = InMemoryDocumentStore()


def get_document_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide store."""
    return document_store


@asynccontextmanager
async def lifespan_store():
    """Startup hook: load the document once so a corrupt or too-new file fails fast."""
    document = await document_store.load()
    logger.info(
        "Document store ready: %s (orgs=%d walls=%d items=%d)",
        document_store.describe(),
        document.count_orgs(),
        document.count_walls(),
        document.count_items(),
    )
    yield
