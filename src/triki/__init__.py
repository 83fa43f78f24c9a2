"""Triki package exposing the board rules, AI opponents, and match sessions."""

from .ai import (
    Difficulty,
    HeuristicStrategy,
    InvalidDifficulty,
    MinimaxStrategy,
    RandomStrategy,
)
from .board import Board, InvalidMove, Mark
from .session import GameMode, GameSession, InvalidMode, SessionState, new_session

__all__ = [
    "Board",
    "Difficulty",
    "GameMode",
    "GameSession",
    "HeuristicStrategy",
    "InvalidDifficulty",
    "InvalidMode",
    "InvalidMove",
    "Mark",
    "MinimaxStrategy",
    "RandomStrategy",
    "SessionState",
    "new_session",
]
