"""
Tick schedulers. The loop only talks to schedule_tick()/cancel(), so tests can
drive ticks synchronously without real time passing.
"""

from typing import Callable, Dict, Optional

TickCallback = Callable[[float], None]


class Scheduler:
    """Interface for a cooperative tick scheduler"""

    def schedule_tick(self, callback: TickCallback, interval: float):
        raise NotImplementedError

    def cancel(self, handle):
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """Fires scheduled callbacks only when asked to"""

    def __init__(self):
        self.callbacks: Dict[int, TickCallback] = {}
        self.intervals: Dict[int, float] = {}
        self._next_handle = 0

    def schedule_tick(self, callback: TickCallback, interval: float) -> int:
        self._next_handle += 1
        self.callbacks[self._next_handle] = callback
        self.intervals[self._next_handle] = interval
        return self._next_handle

    def cancel(self, handle: Optional[int]):
        self.callbacks.pop(handle, None)
        self.intervals.pop(handle, None)

    @property
    def active(self) -> int:
        return len(self.callbacks)

    def run_pending(self, dt: Optional[float] = None, times: int = 1):
        for _ in range(times):
            # Copy: a callback may cancel or reschedule itself
            for handle, callback in list(self.callbacks.items()):
                if handle not in self.callbacks:
                    continue
                callback(self.intervals[handle] if dt is None else dt)
