# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional, Set, Tuple

from projtrack.core.clock import Clock, now_ms
from projtrack.core.timer_registry import TimerRegistry
from projtrack.domain.models import Project, TimeEntry, find_project
from projtrack.services.recorder import TimeEntryRecorder
from projtrack.storage.gateway import ProjectGateway

logger = logging.getLogger(__name__)

Tree = Tuple[Project, ...]


def _log_commit(project_id: str, task_id: str, entry: TimeEntry) -> None:
    logger.debug("recorded %d ms on %s/%s", entry.duration, project_id, task_id)


class TimerService:
    """
    Owns the session state:
    - the project tree (replaced wholesale on every change)
    - the timer registry (in memory only; lost on restart)
    - fire-and-forget saves through the gateway
    - callbacks for UI

    Timer operations never raise. Persistence failures are logged and the
    in-memory tree stays authoritative until the next successful save.
    """

    def __init__(
        self,
        gateway: ProjectGateway,
        registry: Optional[TimerRegistry] = None,
        recorder: Optional[TimeEntryRecorder] = None,
        clock: Clock = now_ms,
        spawn: Optional[Callable[[Awaitable[None]], None]] = None,
    ):
        self.gateway = gateway
        self.registry = registry or TimerRegistry(clock=clock)
        self.recorder = recorder or TimeEntryRecorder(on_commit=_log_commit)
        self._spawn_fn = spawn

        self._projects: Tree = ()
        self._pending: Set[asyncio.Task] = set()

        self._on_change: Optional[Callable[[Tree], None]] = None
        self._on_state_change: Optional[Callable[[], None]] = None

    # ----- Callbacks -----
    def set_on_change(self, fn: Callable[[Tree], None]) -> None:
        self._on_change = fn

    def set_on_state_change(self, fn: Callable[[], None]) -> None:
        self._on_state_change = fn

    def _emit_change(self) -> None:
        if self._on_change:
            self._on_change(self._projects)

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change()

    # ----- Tree -----
    @property
    def projects(self) -> Tree:
        return self._projects

    def get_project(self, project_id: str) -> Optional[Project]:
        return find_project(self._projects, project_id)

    async def load(self) -> Tree:
        try:
            self._projects = await self.gateway.load()
        except Exception:
            logger.exception("loading projects failed; starting empty")
            self._projects = ()
        logger.info("loaded %d project(s)", len(self._projects))
        self._emit_change()
        return self._projects

    def replace_projects(self, projects: Iterable[Project], persist: bool = True) -> Tree:
        new_tree = tuple(projects)
        self._forget_orphan_timers(new_tree)
        self._projects = new_tree
        if persist:
            self.save()
        self._emit_change()
        return self._projects

    def save(self) -> None:
        self._spawn(self._save(self._projects))

    async def _save(self, projects: Tree) -> None:
        try:
            await self.gateway.save(projects)
        except Exception:
            logger.exception("saving %d project(s) failed", len(projects))

    async def flush(self) -> None:
        """
        Wait for saves launched on the running loop.
        """
        pending = [t for t in self._pending if not t.done()]
        if pending:
            await asyncio.gather(*pending)

    # ----- Timers -----
    def start(self, project_id: str, task_id: str) -> None:
        project = self.get_project(project_id)
        if project is None or project.find_task(task_id) is None:
            return
        self.registry.start(project_id, task_id)
        self._emit_state_change()

    def stop(self, project_id: str, task_id: str) -> Optional[TimeEntry]:
        run = self.registry.stop(project_id, task_id)
        if run is None:
            return None

        new_tree = self.recorder.commit(
            self._projects, project_id, task_id, run.started_at, run.elapsed
        )
        self._emit_state_change()
        if new_tree is None:
            return None

        self.replace_projects(new_tree)
        task = find_project(new_tree, project_id).find_task(task_id)
        return task.time_entries[-1]

    def toggle(self, project_id: str, task_id: str) -> None:
        if self.registry.is_running(project_id, task_id):
            self.stop(project_id, task_id)
        else:
            self.start(project_id, task_id)

    def tick(self) -> bool:
        return self.registry.refresh()

    def is_running(self, project_id: str, task_id: str) -> bool:
        return self.registry.is_running(project_id, task_id)

    def elapsed(self, project_id: str, task_id: str) -> int:
        return self.registry.elapsed(project_id, task_id)

    def shutdown(self) -> None:
        # running timers are discarded, not committed
        if self.registry.has_running():
            logger.info("discarding %d running timer(s)", len(self.registry.running_keys()))
        self.registry.clear()

    # ----- internals -----
    def _forget_orphan_timers(self, new_tree: Tree) -> None:
        for project_id, task_id in self.registry.running_keys():
            project = find_project(new_tree, project_id)
            if project is None:
                self.registry.discard_project(project_id)
            elif project.find_task(task_id) is None:
                self.registry.discard(project_id, task_id)

    def _spawn(self, coro: Awaitable[None]) -> None:
        """
        Launch a save.
        - custom spawn: handed over as-is
        - inside a running loop: scheduled as a task (see flush)
        - no loop (the Tk app): run to completion with asyncio.run on the
          calling thread, so the save blocks the UI until SQLite returns
        """
        if self._spawn_fn is not None:
            self._spawn_fn(coro)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
