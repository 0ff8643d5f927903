# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from projtrack.core.clock import Clock, now_ms

TimerKey = Tuple[str, str]  # (project_id, task_id)


@dataclass
class ActiveTimer:
    running: bool
    started_at: int
    elapsed_display: int = 0


@dataclass(frozen=True)
class StoppedRun:
    started_at: int
    elapsed: int


class TimerRegistry:
    """
    In-memory table of running task timers (no Tkinter, no storage).
    Elapsed time is always measured from started_at, never accumulated,
    so a suspended machine shows the right value on the next tick.
    """

    def __init__(self, clock: Clock = now_ms):
        self.clock = clock
        self._timers: Dict[TimerKey, ActiveTimer] = {}

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, key: TimerKey) -> bool:
        return key in self._timers

    def get(self, project_id: str, task_id: str) -> Optional[ActiveTimer]:
        return self._timers.get((project_id, task_id))

    def is_running(self, project_id: str, task_id: str) -> bool:
        t = self._timers.get((project_id, task_id))
        return bool(t and t.running)

    def elapsed(self, project_id: str, task_id: str) -> int:
        t = self._timers.get((project_id, task_id))
        return t.elapsed_display if t else 0

    def running_keys(self) -> List[TimerKey]:
        return [k for k, t in self._timers.items() if t.running]

    def has_running(self) -> bool:
        return any(t.running for t in self._timers.values())

    def start(self, project_id: str, task_id: str) -> ActiveTimer:
        # overwrites an existing run for the same key (restart)
        timer = ActiveTimer(running=True, started_at=self.clock(), elapsed_display=0)
        self._timers[(project_id, task_id)] = timer
        return timer

    def stop(self, project_id: str, task_id: str) -> Optional[StoppedRun]:
        key = (project_id, task_id)
        timer = self._timers.get(key)
        if timer is None or not timer.running:
            return None

        elapsed = max(0, self.clock() - timer.started_at)
        del self._timers[key]
        return StoppedRun(started_at=timer.started_at, elapsed=elapsed)

    def refresh(self) -> bool:
        """
        One tick. Returns True if any running timer was recomputed.
        """
        running = [t for t in self._timers.values() if t.running]
        if not running:
            return False

        now = self.clock()
        for t in running:
            t.elapsed_display = max(0, now - t.started_at)
        return True

    def discard(self, project_id: str, task_id: str) -> None:
        self._timers.pop((project_id, task_id), None)

    def discard_project(self, project_id: str) -> None:
        for key in [k for k in self._timers if k[0] == project_id]:
            del self._timers[key]

    def clear(self) -> None:
        self._timers.clear()
