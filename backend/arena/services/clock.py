import time
from typing import Callable

from arena.models import ClockState


class MatchClock:
    """Shared countdown: Running <-> Paused, then Over (terminal).

    The clock does not keep time itself; an external scheduler calls
    ``tick`` once per interval.
    """

    def __init__(self, duration: int = 120):
        if duration < 1:
            raise ValueError('match duration must be at least one second')
        self.remaining = int(duration)
        self.paused = False
        self.over = False

    @property
    def state(self) -> str:
        if self.over:
            return 'over'
        return 'paused' if self.paused else 'running'

    def tick(self) -> bool:
        """Advance one interval. Returns True if ``remaining`` changed."""
        if self.over or self.paused:
            return False
        self.remaining -= 1
        if self.remaining <= 0:
            self.remaining = 0
            self.over = True
        return True

    def toggle(self) -> bool:
        """Flip pause. Returns False when the match is already over."""
        if self.over:
            return False
        self.paused = not self.paused
        return True

    def is_over(self) -> bool:
        return self.over

    def snapshot(self) -> ClockState:
        return ClockState(remaining=self.remaining, paused=self.paused, over=self.over)


class ClockTicker:
    """Fixed-period background worker that drives ``on_tick``.

    Tick n is due at ``start + n * interval`` on the monotonic clock, so time
    spent handling a tick (or waiting on the router lock) never accumulates
    as drift. ``on_tick`` returns True to keep going.
    """

    def __init__(self, socketio, on_tick: Callable[[], bool], interval: float = 1.0,
                 logger=None, monotonic=time.monotonic):
        self.socketio = socketio
        self.on_tick = on_tick
        self.interval = float(interval)
        self.logger = logger
        self._monotonic = monotonic
        self._running = False

    def start(self):
        if self._running:
            return
        self._running = True
        self.socketio.start_background_task(self._worker)

    def stop(self):
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def _worker(self):
        started = self._monotonic()
        ticks = 0
        if self.logger:
            self.logger.info(f"[ticker-start] interval={self.interval}s")
        while self._running:
            ticks += 1
            deadline = started + ticks * self.interval
            delay = deadline - self._monotonic()
            if delay > 0:
                self.socketio.sleep(delay)
            if not self._running:
                break
            if not self.on_tick():
                self._running = False
        if self.logger:
            self.logger.info(f"[ticker-stop] ticks={ticks}")
