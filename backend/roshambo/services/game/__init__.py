"""Game domain services: rules, timers and the session engine.

This package contains pure(ish) domain logic that is driven by HTTP
routes, socket handlers and the terminal command, keeping transport
concerns separated from core game mechanics.
"""

from .registry import SessionNotFound, SessionRegistry
from .rules import determine_outcome, generate_opponent_choice
from .scheduler import BackgroundScheduler, ManualScheduler
from .session import GameSession, Phase, ResolutionTicket
