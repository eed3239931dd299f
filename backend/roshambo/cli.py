"""Terminal front end: ``flask play``.

Renders a session as text and feeds keyboard input back to it. The session
runs on a manual scheduler; the thinking pause is slept here in the view,
then the clock is advanced so the pending turn resolves.
"""

import random
import time

import click
from flask import current_app
from flask.cli import with_appcontext

from roshambo.models import Choice, Outcome
from roshambo.services.game import GameSession, ManualScheduler, generate_opponent_choice
from roshambo.services.game.rules import HISTORY_LABELS, RESULT_MESSAGES, RULES


HANDS = {
    Choice.ROCK: """
    _______
---'   ____)
      (_____)
      (_____)
      (____)
---.__(___)
""",
    Choice.PAPER: """
    _______
---'   ____)____
          ______)
          _______)
         _______)
---.__________)
""",
    Choice.SCISSORS: """
    _______
---'   ____)____
          ______)
       __________)
      (____)
---.__(___)
""",
}

SHORTCUTS = {
    'r': 'rock', 'p': 'paper', 's': 'scissors',
}

RESULT_COLORS = {'win': 'green', 'lose': 'red', 'tie': 'yellow'}


def render_turn(state):
    turn = state['turn']
    lines = []
    if turn['player_choice']:
        lines.append(f"You: {turn['player_choice']}")
        lines.append(HANDS[Choice(turn['player_choice'])])
    if turn['resolving']:
        lines.append('Computer is thinking...')
    elif turn['opponent_choice']:
        lines.append(f"Computer: {turn['opponent_choice']}")
        lines.append(HANDS[Choice(turn['opponent_choice'])])
    return '\n'.join(lines)


def render_score(state):
    score = state['score']
    return f"Score  You {score['player_wins']} | Ties {score['ties']} | Computer {score['opponent_wins']}"


def render_history(state):
    if not state['history']:
        return 'No games played yet'
    rows = []
    for item in state['history']:
        label = HISTORY_LABELS[Outcome(item['outcome'])]
        rows.append(f"#{item['number']:<3} {item['player_choice']:>8} vs {item['opponent_choice']:<8} {label}")
    return '\n'.join(rows)


@click.command('play')
@click.option('--rounds', type=int, default=0, help='Stop after this many resolved turns (0 = until quit).')
@click.option('--seed', type=int, default=None, help='Seed for the computer opponent.')
@click.option('--delay', type=float, default=None, help='Thinking delay in seconds (defaults to THINKING_DELAY_SEC).')
@with_appcontext
def play_command(rounds, seed, delay):
    """Play Rock Paper Scissors against the computer in the terminal."""
    cfg = current_app.config
    if seed is None:
        seed = cfg.get('OPPONENT_SEED')
    if delay is None:
        delay = float(cfg.get('THINKING_DELAY_SEC', 1.0))
    rng = random.Random(seed)
    scheduler = ManualScheduler()
    session = GameSession(
        scheduler,
        opponent=lambda: generate_opponent_choice(rng),
        thinking_delay=delay,
        history_limit=int(cfg.get('HISTORY_LIMIT', 10)),
        logger=current_app.logger,
        name='terminal',
    )

    click.secho('Rock Paper Scissors', bold=True)
    for choice in Choice:
        click.echo(f"  {choice.value.capitalize()}: {RULES[choice]}")
    click.echo('Choose your weapon! [r]ock [p]aper [s]cissors, [n]ew game, reset s[c]ore, [h]istory, [q]uit')

    played = 0
    while not rounds or played < rounds:
        command = click.prompt('>', prompt_suffix=' ', default='', show_default=False).strip().lower()
        if not command:
            continue
        if command in ('q', 'quit'):
            break
        if command in ('n', 'new'):
            session.new_game()
            click.echo('New game.')
            continue
        if command in ('c', 'reset'):
            session.reset_score()
            click.echo(render_score(session.to_dict()))
            continue
        if command in ('h', 'history'):
            click.echo(render_history(session.to_dict()))
            continue

        try:
            ticket = session.select_choice(SHORTCUTS.get(command, command))
        except ValueError as exc:
            click.secho(str(exc), fg='red')
            continue
        if ticket is None:
            continue
        click.echo(render_turn(session.to_dict()))
        if delay > 0:
            time.sleep(delay)
        scheduler.advance(delay)

        state = session.to_dict()
        click.echo(render_turn(state))
        outcome = state['turn']['outcome']
        click.secho(RESULT_MESSAGES[Outcome(outcome)], fg=RESULT_COLORS[outcome], bold=True)
        click.echo(render_score(state))
        played += 1

    click.echo('\nGame History')
    click.echo(render_history(session.to_dict()))
    session.close()
