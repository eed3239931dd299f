import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """A one-shot deferred callback that can be cancelled before it fires."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.active:
            return
        self.fired = True
        self.callback()


class Scheduler:
    """Interface for running a callback once after ``delay`` seconds."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class BackgroundScheduler(Scheduler):
    """Fire timers from Socket.IO background tasks.

    ``heartbeat`` (seconds) splits the wait into steps and logs the time
    remaining after each one; 0 disables it.
    """

    def __init__(self, socketio, heartbeat: int = 0, logger: Optional[logging.Logger] = None) -> None:
        self.socketio = socketio
        self.heartbeat = heartbeat
        self.logger = logger or logging.getLogger(__name__)

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, callback)
        self.logger.info(f"[timer-set] timer={id(handle):x} delay={delay}s heartbeat={self.heartbeat}s")
        self.socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: TimerHandle) -> None:
        if self.heartbeat and self.heartbeat > 0:
            slept = 0.0
            while slept < handle.delay and handle.active:
                step = min(self.heartbeat, handle.delay - slept)
                self.socketio.sleep(step)
                slept += step
                self.logger.info(f"[timer-heartbeat] remaining={max(0.0, handle.delay - slept)}s")
        else:
            self.socketio.sleep(handle.delay)
        if handle.cancelled:
            self.logger.info(f"[timer-abort] timer={id(handle):x} cancelled before firing")
            return
        self.logger.info(f"[timer-fire] timer={id(handle):x} delay={handle.delay}s")
        try:
            handle.fire()
        except Exception:
            self.logger.exception('[timer-error] deferred callback failed')


class ManualScheduler(Scheduler):
    """Virtual clock: timers fire only when ``advance`` moves time past them."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> List[TimerHandle]:
        return [handle for _, _, handle in sorted(self._queue) if handle.active]

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire every due timer. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._queue)
            self.now = deadline
            if handle.active:
                handle.fire()
                fired += 1
        self.now = target
        return fired

    def run_all(self) -> int:
        """Fire everything still queued, however far in the future."""
        if not self._queue:
            return 0
        latest = max(deadline for deadline, _, _ in self._queue)
        return self.advance(max(0.0, latest - self.now))

