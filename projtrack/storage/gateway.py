# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Protocol, Tuple

from projtrack.domain.models import Project, projects_from_json, projects_to_json
from projtrack.storage.repos import AppStateRepo

logger = logging.getLogger(__name__)

STORAGE_KEY = "projects"


class PersistenceError(Exception):
    pass


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class SqliteKeyValueStore:
    """
    Async face over the app_state table. SQLite calls are quick and run
    inline on the UI thread; the connection is not shared across threads.
    """

    def __init__(self, repo: AppStateRepo):
        self.repo = repo

    async def get(self, key: str) -> Optional[str]:
        value = self.repo.get(key)
        if value is not None:
            logger.debug("read %r (written at %s)", key, self.repo.updated_at(key))
        return value

    async def set(self, key: str, value: str) -> None:
        self.repo.set(key, value)


class MemoryKeyValueStore:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class ProjectGateway:
    """
    Saves / loads the entire project tree as one JSON array under a fixed key.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    async def load(self) -> Tuple[Project, ...]:
        raw = await self.store.get(self.key)
        if not raw:
            # nothing saved yet
            return ()
        try:
            return projects_from_json(raw)
        except (ValueError, TypeError, AttributeError) as e:
            raise PersistenceError(f"Stored projects under {self.key!r} are unreadable: {e}") from e

    async def save(self, projects: Iterable[Project]) -> None:
        blob = projects_to_json(projects)
        await self.store.set(self.key, blob)
        logger.debug("saved %d bytes under %r", len(blob), self.key)
