import random
from collections import Counter
from itertools import product

import pytest

from roshambo.models import Choice, Outcome
from roshambo.services.game.rules import beats, determine_outcome, generate_opponent_choice

ROCK, PAPER, SCISSORS = Choice.ROCK, Choice.PAPER, Choice.SCISSORS


@pytest.mark.parametrize('player, opponent, expected', [
    (ROCK, SCISSORS, Outcome.WIN),
    (PAPER, ROCK, Outcome.WIN),
    (SCISSORS, PAPER, Outcome.WIN),
    (ROCK, PAPER, Outcome.LOSE),
    (PAPER, SCISSORS, Outcome.LOSE),
    (SCISSORS, ROCK, Outcome.LOSE),
    (ROCK, ROCK, Outcome.TIE),
    (PAPER, PAPER, Outcome.TIE),
    (SCISSORS, SCISSORS, Outcome.TIE),
])
def test_rule_table(player, opponent, expected):
    assert determine_outcome(player, opponent) is expected


def test_outcome_is_antisymmetric_for_distinct_choices():
    for a, b in product(Choice, Choice):
        forward, backward = determine_outcome(a, b), determine_outcome(b, a)
        if a == b:
            assert forward is Outcome.TIE
        else:
            assert {forward, backward} == {Outcome.WIN, Outcome.LOSE}


def test_beats_matches_rule_table():
    for choice in Choice:
        assert determine_outcome(choice, beats(choice)) is Outcome.WIN


def test_opponent_choice_is_uniform():
    rng = random.Random(42)
    samples = 30000
    counts = Counter(generate_opponent_choice(rng) for _ in range(samples))
    assert set(counts) == set(Choice)
    for choice in Choice:
        # ~8 standard deviations of a binomial(30000, 1/3)
        assert abs(counts[choice] / samples - 1 / 3) < 0.02


def test_opponent_choice_uses_module_random_by_default():
    random.seed(7)
    first = [generate_opponent_choice() for _ in range(20)]
    random.seed(7)
    second = [generate_opponent_choice() for _ in range(20)]
    assert first == second
    assert all(isinstance(c, Choice) for c in first)
