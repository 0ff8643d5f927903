from __future__ import annotations

from typing import Any, Callable

from projtrack.domain.models import Project, Task


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeBackend:
    """Stands in for Tk after/after_cancel; callbacks run only via fire()."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[int, int, Callable[[], None]]] = []
        self.cancelled: list[int] = []
        self._next = 0

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        self._next += 1
        self.scheduled.append((self._next, delay_ms, callback))
        return self._next

    def cancel(self, handle: Any) -> None:
        self.cancelled.append(handle)
        self.scheduled = [s for s in self.scheduled if s[0] != handle]

    @property
    def pending(self) -> int:
        return len(self.scheduled)

    @property
    def last_delay(self) -> int:
        return self.scheduled[-1][1]

    def fire(self) -> None:
        _, _, callback = self.scheduled.pop(0)
        callback()


class FailingStore:
    def __init__(self) -> None:
        self.set_calls = 0

    async def get(self, key: str):
        raise OSError("disk gone")

    async def set(self, key: str, value: str) -> None:
        self.set_calls += 1
        raise OSError("disk gone")


def sample_projects() -> tuple[Project, ...]:
    return (
        Project(
            id="p1",
            name="Website",
            status="development",
            priority="high",
            start_date="2026-01-01",
            end_date="2026-03-01",
            tasks=(
                Task(id="t1", text="Landing page", completed=True),
                Task(id="t2", text="Contact form"),
            ),
            notes="- [x] domain\n- [ ] hosting",
            created_at=1_700_000_000_000,
        ),
        Project(id="p2", name="Garden", created_at=1_700_000_100_000),
    )
