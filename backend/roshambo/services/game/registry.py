import logging
import random
import string
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from .rules import generate_opponent_choice
from .scheduler import Scheduler
from .session import GameSession


class SessionNotFound(KeyError):
    pass


def generate_session_code(length=4, taken=()):
    """Generate a short session code not present in ``taken``."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


def _key(code) -> str:
    return str(code).upper() if code else ''


class SessionRegistry:
    """In-memory store of live game sessions keyed by session code.

    ``emitter`` is called as ``emitter(code, snapshot)`` after every state
    change of every session it created. Sessions nobody has looked up for
    ``idle_timeout`` seconds are ended on the next create or lookup
    (None or 0 keeps them until ended explicitly).
    """

    def __init__(
        self,
        scheduler: Scheduler,
        thinking_delay: float = 1.0,
        history_limit: int = 10,
        seed: Optional[int] = None,
        emitter: Optional[Callable[[str, dict], None]] = None,
        logger: Optional[logging.Logger] = None,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.scheduler = scheduler
        self.thinking_delay = thinking_delay
        self.history_limit = history_limit
        self.emitter = emitter
        self.logger = logger or logging.getLogger(__name__)
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._rng = random.Random(seed)
        self._sessions: Dict[str, GameSession] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def create(self) -> Tuple[str, GameSession]:
        self.expire_idle()
        with self._lock:
            code = generate_session_code(taken=self._sessions)
            session = GameSession(
                self.scheduler,
                opponent=lambda: generate_opponent_choice(self._rng),
                thinking_delay=self.thinking_delay,
                history_limit=self.history_limit,
                logger=self.logger,
                name=code,
            )
            self._sessions[code] = session
            self._last_seen[code] = self._clock()
        if self.emitter is not None:
            session.subscribe(lambda snapshot, code=code: self.emitter(code, snapshot))
        self.logger.info(f"[session-create] session={code} live={len(self)}")
        return code, session

    def get(self, code: str) -> GameSession:
        self.expire_idle()
        key = _key(code)
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                raise SessionNotFound(code)
            self._last_seen[key] = self._clock()
        return session

    def end(self, code: str) -> bool:
        key = _key(code)
        with self._lock:
            session = self._sessions.pop(key, None)
            self._last_seen.pop(key, None)
        if session is None:
            return False
        session.close()
        self.logger.info(f"[session-end] session={key} live={len(self)}")
        return True

    def expire_idle(self) -> List[str]:
        """End every session idle for longer than ``idle_timeout``."""
        if not self.idle_timeout:
            return []
        cutoff = self._clock() - self.idle_timeout
        with self._lock:
            stale = [code for code, seen in self._last_seen.items() if seen < cutoff]
        for code in stale:
            self.logger.info(f"[session-expire] session={code} idle_timeout={self.idle_timeout}s")
            self.end(code)
        return stale

    def __contains__(self, code) -> bool:
        return _key(code) in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
