from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, List, Optional


class InvalidChoiceError(ValueError):
    """Raised when a command carries something other than rock, paper or scissors."""


class Choice(str, Enum):
    ROCK = 'rock'
    PAPER = 'paper'
    SCISSORS = 'scissors'

    @classmethod
    def parse(cls, value) -> 'Choice':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidChoiceError(
                f"Invalid choice {value!r}. Valid choices are: {', '.join(c.value for c in cls)}"
            ) from None


class Outcome(str, Enum):
    """Result of a turn from the player's point of view."""
    WIN = 'win'
    LOSE = 'lose'
    TIE = 'tie'


CHOICES = tuple(Choice)


@dataclass
class ScoreBoard:
    player_wins: int = 0
    opponent_wins: int = 0
    ties: int = 0

    @property
    def total(self) -> int:
        return self.player_wins + self.opponent_wins + self.ties

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.WIN:
            self.player_wins += 1
        elif outcome is Outcome.LOSE:
            self.opponent_wins += 1
        else:
            self.ties += 1

    def to_dict(self):
        return {
            'player_wins': self.player_wins,
            'opponent_wins': self.opponent_wins,
            'ties': self.ties,
            'total': self.total,
        }


@dataclass(frozen=True)
class HistoryEntry:
    player_choice: Choice
    opponent_choice: Choice
    outcome: Outcome

    def to_dict(self):
        return {
            'player_choice': self.player_choice.value,
            'opponent_choice': self.opponent_choice.value,
            'outcome': self.outcome.value,
        }


class MatchHistory:
    """Most-recent-first list of resolved turns, capped at ``limit`` entries.

    Older entries fall off the end as new ones are added; index 0 is always
    the latest turn.
    """

    def __init__(self, limit: int = 10) -> None:
        if limit < 1:
            raise ValueError('history limit must be at least 1')
        self.limit = limit
        self._entries: Deque[HistoryEntry] = deque(maxlen=limit)

    def add(self, entry: HistoryEntry) -> None:
        self._entries.appendleft(entry)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def to_list(self) -> List[dict]:
        count = len(self._entries)
        items = []
        for idx, entry in enumerate(self._entries):
            item = entry.to_dict()
            item['number'] = count - idx
            items.append(item)
        return items


@dataclass
class TurnState:
    player_choice: Optional[Choice] = None
    opponent_choice: Optional[Choice] = None
    outcome: Optional[Outcome] = None
    resolving: bool = False

    def to_dict(self):
        return {
            'player_choice': self.player_choice.value if self.player_choice else None,
            'opponent_choice': self.opponent_choice.value if self.opponent_choice else None,
            'outcome': self.outcome.value if self.outcome else None,
            'resolving': self.resolving,
        }
