from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from core.models import Door

# Late enough that every default December door has unlocked in any timezone
AFTER_ALL_OPENINGS = datetime(2026, 12, 25, 12, 0, tzinfo=timezone.utc)


class FakeScheduler:
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.pending: dict[int, tuple[int, Callable[[], None]]] = {}
        self.cancelled: list[int] = []
        self._next = 0

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        self._next += 1
        self.pending[self._next] = (delay_ms, callback)
        return self._next

    def cancel(self, handle: object) -> None:
        if self.pending.pop(handle, None) is not None:  # type: ignore[arg-type]
            self.cancelled.append(handle)  # type: ignore[arg-type]

    def fire_all(self) -> int:
        due = list(self.pending.items())
        self.pending.clear()
        for _handle, (_delay, callback) in due:
            callback()
        return len(due)


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_door(door_id: int = 1, **overrides) -> Door:
    values = {
        "id": door_id,
        "x": 10.0 * door_id,
        "y": 20.0,
        "opening_date": datetime(2026, 12, door_id, tzinfo=timezone.utc),
        "content": f"content {door_id}",
    }
    values.update(overrides)
    return Door(**values)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(AFTER_ALL_OPENINGS)
