# -*- coding: utf-8 -*-

import logging
from typing import Any, Callable, Optional

from projtrack.core.clock import Clock, now_ms
from projtrack.core.timer_registry import TimerRegistry

logger = logging.getLogger(__name__)


class TkAfterBackend:
    """
    Adapts any Tk widget (after / after_cancel) to the scheduler backend.
    """

    def __init__(self, widget):
        self.widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self.widget.after(delay_ms, callback)

    def cancel(self, handle: Any) -> None:
        self.widget.after_cancel(handle)


class TickScheduler:
    """
    Periodic refresh of every running timer.

    - cadence is anchored to the wall clock at start(), so slow ticks do not
      push later ticks back
    - the next tick is armed only after the current one returns, so at most
      one tick is ever in flight
    - on_tick is only called when the registry had running timers
    """

    def __init__(
        self,
        registry: TimerRegistry,
        backend,
        on_tick: Optional[Callable[[], None]] = None,
        interval_ms: int = 1000,
        clock: Clock = now_ms,
    ):
        if interval_ms <= 0:
            raise ValueError("Tick interval must be positive.")
        self.registry = registry
        self.backend = backend
        self.on_tick = on_tick
        self.interval_ms = int(interval_ms)
        self.clock = clock

        self._anchor: Optional[int] = None
        self._job = None

    @property
    def running(self) -> bool:
        return self._anchor is not None

    def start(self) -> None:
        if self.running:
            return
        self._anchor = self.clock()
        self._arm()

    def stop(self) -> None:
        if self._job is not None:
            try:
                self.backend.cancel(self._job)
            except Exception:
                logger.debug("tick cancel failed", exc_info=True)
        self._job = None
        self._anchor = None

    def next_delay(self) -> int:
        if self._anchor is None:
            return self.interval_ms
        behind = (self.clock() - self._anchor) % self.interval_ms
        return self.interval_ms - behind

    def tick_once(self) -> None:
        self._job = None
        try:
            changed = self.registry.refresh()
            if changed and self.on_tick:
                self.on_tick()
        except Exception:
            logger.exception("tick callback failed")
        finally:
            # stop() may have been called from inside on_tick
            if self.running:
                self._arm()

    def _arm(self) -> None:
        self._job = self.backend.schedule(self.next_delay(), self.tick_once)
