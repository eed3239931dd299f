"""Single-player game session: turn lifecycle, score and history.

A turn moves idle -> resolving -> resolved. Selecting a choice schedules the
opponent's reply on the injected scheduler after ``thinking_delay`` seconds;
the caller is never blocked. ``new_game`` and ``reset_score`` cancel a
pending reply, and a reply that still arrives for a superseded turn is
dropped by comparing its ticket with the current turn id.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from roshambo.models import Choice, HistoryEntry, MatchHistory, ScoreBoard, TurnState
from .rules import determine_outcome, generate_opponent_choice
from .scheduler import Scheduler, TimerHandle


Observer = Callable[[dict], None]


class Phase(str, Enum):
    IDLE = 'idle'
    RESOLVING = 'resolving'
    RESOLVED = 'resolved'


@dataclass(frozen=True)
class ResolutionTicket:
    """Identifies the turn a pending resolution belongs to."""
    turn_id: int
    player_choice: Choice


class GameSession:
    def __init__(
        self,
        scheduler: Scheduler,
        opponent: Optional[Callable[[], Choice]] = None,
        thinking_delay: float = 1.0,
        history_limit: int = 10,
        logger: Optional[logging.Logger] = None,
        name: str = '-',
    ) -> None:
        self.scheduler = scheduler
        self.opponent = opponent or generate_opponent_choice
        self.thinking_delay = thinking_delay
        self.logger = logger or logging.getLogger(__name__)
        self.name = name
        self.turn = TurnState()
        self.score = ScoreBoard()
        self.history = MatchHistory(history_limit)
        self._turn_id = 0
        self._timer: Optional[TimerHandle] = None
        self._observers: List[Observer] = []
        self._lock = threading.RLock()

    @property
    def phase(self) -> Phase:
        if self.turn.resolving:
            return Phase.RESOLVING
        if self.turn.outcome is not None:
            return Phase.RESOLVED
        return Phase.IDLE

    # ---- commands ----

    def select_choice(self, choice) -> Optional[ResolutionTicket]:
        """Start a turn with the player's choice.

        Returns the ticket for the scheduled resolution, or None when a turn
        is already resolving (the extra input is ignored).
        """
        choice = Choice.parse(choice)
        with self._lock:
            if self.turn.resolving:
                self.logger.info(f"[turn-ignored] session={self.name} choice={choice.value} phase=resolving")
                return None
            self._turn_id += 1
            ticket = ResolutionTicket(self._turn_id, choice)
            self.turn = TurnState(player_choice=choice, resolving=True)
            self._timer = self.scheduler.schedule(self.thinking_delay, lambda: self.resolve(ticket))
            self.logger.info(
                f"[turn-select] session={self.name} turn={ticket.turn_id} choice={choice.value} delay={self.thinking_delay}s"
            )
            self._notify()
        return ticket

    def resolve(self, ticket: ResolutionTicket) -> bool:
        """Apply the opponent's reply for ``ticket``. Returns False if the ticket is stale."""
        with self._lock:
            if ticket.turn_id != self._turn_id or not self.turn.resolving:
                self.logger.info(
                    f"[timer-abort] session={self.name} turn={ticket.turn_id} current_turn={self._turn_id} phase={self.phase.value}"
                )
                return False
            opponent_choice = Choice.parse(self.opponent())
            outcome = determine_outcome(ticket.player_choice, opponent_choice)
            self.score.record(outcome)
            self.history.add(HistoryEntry(ticket.player_choice, opponent_choice, outcome))
            self.turn = TurnState(
                player_choice=ticket.player_choice,
                opponent_choice=opponent_choice,
                outcome=outcome,
                resolving=False,
            )
            self._timer = None
            self.logger.info(
                f"[turn-resolve] session={self.name} turn={ticket.turn_id} player={ticket.player_choice.value} "
                f"opponent={opponent_choice.value} outcome={outcome.value}"
            )
            self._notify()
        return True

    def new_game(self) -> None:
        """Clear the current turn; score and history are kept."""
        with self._lock:
            self._clear_turn()
            self._notify()

    def reset_score(self) -> None:
        """Clear the current turn, the score and the history."""
        with self._lock:
            self._clear_turn()
            self.score = ScoreBoard()
            self.history.clear()
            self.logger.info(f"[score-reset] session={self.name}")
            self._notify()

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._observers.clear()

    def _clear_turn(self) -> None:
        self._cancel_timer()
        # invalidates any ticket already handed out
        self._turn_id += 1
        self.turn = TurnState()

    def _cancel_timer(self) -> None:
        if self._timer is not None and self._timer.active:
            self._timer.cancel()
            self.logger.info(f"[timer-cancel] session={self.name} turn={self._turn_id}")
        self._timer = None

    # ---- read model ----

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def to_dict(self) -> dict:
        with self._lock:
            return {
                'phase': self.phase.value,
                'turn': self.turn.to_dict(),
                'score': self.score.to_dict(),
                'history': self.history.to_list(),
            }

    def _notify(self) -> None:
        # Called with the lock held so observers see snapshots in command order
        snapshot = self.to_dict()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                self.logger.exception(f"[observer-error] session={self.name}")
