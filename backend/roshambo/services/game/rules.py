import random
from typing import Optional

from roshambo.models import CHOICES, Choice, Outcome


# What each choice defeats
_BEATS = {
    Choice.ROCK: Choice.SCISSORS,
    Choice.PAPER: Choice.ROCK,
    Choice.SCISSORS: Choice.PAPER,
}

RULES = {
    Choice.ROCK: 'Rock crushes scissors but is covered by paper.',
    Choice.PAPER: 'Paper covers rock but is cut by scissors.',
    Choice.SCISSORS: 'Scissors cut paper but are crushed by rock.',
}

RESULT_MESSAGES = {
    Outcome.WIN: 'You win!',
    Outcome.LOSE: 'You lose!',
    Outcome.TIE: "It's a tie!",
}

HISTORY_LABELS = {
    Outcome.WIN: 'Win',
    Outcome.LOSE: 'Loss',
    Outcome.TIE: 'Tie',
}


def beats(choice: Choice) -> Choice:
    return _BEATS[choice]


def generate_opponent_choice(rng: Optional[random.Random] = None) -> Choice:
    """Pick rock, paper or scissors with equal probability."""
    return (rng or random).choice(CHOICES)


def determine_outcome(player: Choice, opponent: Choice) -> Outcome:
    """Score a turn from the player's side: win, lose or tie."""
    if player == opponent:
        return Outcome.TIE
    if _BEATS[player] == opponent:
        return Outcome.WIN
    return Outcome.LOSE
