"""Computer opponents for Triki: random, heuristic and full minimax."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union
import logging
import math
import random

from .board import CENTER, Board, Mark

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class InvalidDifficulty(ValueError):
    """Raised for a difficulty outside easy/medium/hard."""


def _require_moves(board: Board) -> list:
    moves = board.available_moves()
    if not moves:
        raise ValueError("No valid moves available")
    return moves


@dataclass
class RandomStrategy:
    """Easy: a uniformly random empty cell."""

    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Board, ai_mark: Mark, human_mark: Mark) -> int:
        return self.rng.choice(_require_moves(board))


@dataclass
class HeuristicStrategy:
    """Medium: win, else block, else take the center, else play at random."""

    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Board, ai_mark: Mark, human_mark: Mark) -> int:
        _require_moves(board)

        winning = find_winning_move(board, ai_mark)
        if winning is not None:
            return winning

        blocking = find_winning_move(board, human_mark)
        if blocking is not None:
            return blocking

        if board.is_empty(CENTER):
            return CENTER

        return self.rng.choice(board.available_moves())


@dataclass
class MinimaxStrategy:
    """Hard: exhaustive minimax over the shared board, never loses.

    Every hypothetical placement is undone before the call that made it
    returns, so the board handed in comes back unchanged.
    """

    def choose(self, board: Board, ai_mark: Mark, human_mark: Mark) -> int:
        best_score = -math.inf
        best_move: Optional[int] = None

        for position in _require_moves(board):
            board.apply_move(position, ai_mark)
            try:
                score = self.minimax(board, 0, False, ai_mark, human_mark)
            finally:
                board.undo_move(position)
            # strict '>' keeps the lowest index among equal scores
            if score > best_score:
                best_score, best_move = score, position

        logger.debug("minimax picked %s (score %s)", best_move, best_score)
        if best_move is None:
            raise RuntimeError("No valid moves available")
        return best_move

    def minimax(
        self,
        board: Board,
        depth: int,
        maximizing: bool,
        ai_mark: Mark,
        human_mark: Mark,
    ) -> float:
        if board.check_winner(ai_mark):
            return 10 - depth
        if board.check_winner(human_mark):
            return depth - 10
        moves = board.available_moves()
        if not moves:
            return 0

        if maximizing:
            value = -math.inf
            for position in moves:
                board.apply_move(position, ai_mark)
                score = self.minimax(board, depth + 1, False, ai_mark, human_mark)
                board.undo_move(position)
                value = max(value, score)
        else:
            value = math.inf
            for position in moves:
                board.apply_move(position, human_mark)
                score = self.minimax(board, depth + 1, True, ai_mark, human_mark)
                board.undo_move(position)
                value = min(value, score)
        return value


Strategy = Union[RandomStrategy, HeuristicStrategy, MinimaxStrategy]


def find_winning_move(board: Board, mark: Mark) -> Optional[int]:
    """First empty cell (ascending) that completes a line for ``mark``."""
    for position in board.available_moves():
        board.apply_move(position, mark)
        won = board.check_winner(mark)
        board.undo_move(position)
        if won:
            return position
    return None


def parse_difficulty(value: Union[Difficulty, str]) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError as exc:
        choices = ", ".join(d.value for d in Difficulty)
        raise InvalidDifficulty(
            f"Unsupported difficulty {value!r}. Choose one of {choices}."
        ) from exc


def strategy_for(
    difficulty: Union[Difficulty, str], rng: Optional[random.Random] = None
) -> Strategy:
    level = parse_difficulty(difficulty)
    rng = rng or random.Random()
    if level is Difficulty.EASY:
        return RandomStrategy(rng=rng)
    if level is Difficulty.MEDIUM:
        return HeuristicStrategy(rng=rng)
    return MinimaxStrategy()
