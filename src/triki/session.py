"""Turn orchestration for a Triki match, independent of any front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union
import logging
import random

from .ai import Difficulty, InvalidDifficulty, Strategy, parse_difficulty, strategy_for
from .board import Board, Cell, InvalidMove, Line, Mark, to_index

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    TWO_HUMAN = "pvp"
    HUMAN_VS_AI = "ai"


class SessionState(str, Enum):
    MODE_SELECT = "mode_select"
    DIFFICULTY_SELECT = "difficulty_select"
    PLAYING = "playing"
    TERMINAL = "terminal"


class InvalidMode(ValueError):
    """Raised for an unknown game mode or a mode change at the wrong time."""


@dataclass(frozen=True)
class Outcome:
    result: str = "ongoing"  # "ongoing", "win" or "draw"
    winner: Optional[Mark] = None
    line: Optional[Line] = None

    @property
    def is_terminal(self) -> bool:
        return self.result != "ongoing"


ONGOING = Outcome()
DRAW = Outcome(result="draw")


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a front end needs to redraw after a state change."""

    cells: Tuple[Cell, ...]
    current_player: Mark
    state: SessionState
    mode: Optional[GameMode]
    difficulty: Optional[Difficulty]
    outcome: Outcome
    move_log: Tuple[Tuple[Mark, int], ...]

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "state": self.state.value,
            "mode": self.mode.value if self.mode else None,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "board": [c.value if c else "" for c in self.cells],
            "currentPlayer": self.current_player.value,
            "outcome": {
                "result": self.outcome.result,
                "winner": self.outcome.winner.value if self.outcome.winner else None,
                "line": list(self.outcome.line) if self.outcome.line else None,
            },
            "moveLog": [
                {"player": mark.value, "position": position}
                for mark, position in self.move_log
            ],
        }
        if self.move_log:
            data["lastMove"] = data["moveLog"][-1]  # type: ignore[index]
        return data


Listener = Callable[[SessionSnapshot], None]
MoveInput = Union[int, Tuple[int, int]]


def parse_mode(value: Union[GameMode, str]) -> GameMode:
    try:
        return GameMode(value)
    except ValueError as exc:
        choices = ", ".join(m.value for m in GameMode)
        raise InvalidMode(f"Unsupported mode {value!r}. Choose one of {choices}.") from exc


@dataclass
class GameSession:
    """One match: board, turn order, mode/difficulty bindings and outcome.

    With ``auto_play_ai`` the computer answers inside ``submit_human_move``.
    Front ends that want a visible "thinking" pause turn it off and call
    ``play_ai_turn`` themselves once ``ai_to_move`` is true.
    """

    human_mark: Mark = Mark.X
    auto_play_ai: bool = True
    rng: Optional[random.Random] = field(default=None, repr=False)

    board: Board = field(default_factory=Board, init=False)
    current_player: Mark = field(default=Mark.X, init=False)
    state: SessionState = field(default=SessionState.MODE_SELECT, init=False)
    mode: Optional[GameMode] = field(default=None, init=False)
    difficulty: Optional[Difficulty] = field(default=None, init=False)
    outcome: Outcome = field(default=ONGOING, init=False)
    move_log: List[Tuple[Mark, int]] = field(default_factory=list, init=False)

    _strategy: Optional[Strategy] = field(default=None, init=False, repr=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    @property
    def ai_mark(self) -> Mark:
        return self.human_mark.opponent()

    @property
    def ai_to_move(self) -> bool:
        return (
            self.state is SessionState.PLAYING
            and self.mode is GameMode.HUMAN_VS_AI
            and self.current_player is self.ai_mark
        )

    # ---- selection ----

    def select_mode(self, mode: Union[GameMode, str]) -> None:
        chosen = parse_mode(mode)
        if self.state is not SessionState.MODE_SELECT:
            raise InvalidMode("A mode is already selected; change mode first")

        self.mode = chosen
        if chosen is GameMode.TWO_HUMAN:
            self.difficulty = None
            self._strategy = None
            self._start()
        else:
            self._transition(SessionState.DIFFICULTY_SELECT)

    def select_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        level = parse_difficulty(difficulty)
        if self.state is not SessionState.DIFFICULTY_SELECT:
            raise InvalidDifficulty("Difficulty can only be chosen after the AI mode")

        self.difficulty = level
        self._strategy = strategy_for(level, self.rng)
        self._start()

    # ---- moves ----

    def submit_human_move(self, position: MoveInput) -> None:
        if self.state is not SessionState.PLAYING:
            raise InvalidMove(f"Moves are not accepted while {self.state.value}")
        if self.ai_to_move:
            raise InvalidMove("It is the computer's turn")
        if isinstance(position, tuple):
            if len(position) != 2:
                raise InvalidMove(
                    f"A move needs a row and a column, got {position!r}"
                )
            position = to_index(*position)

        mark = self.current_player
        try:
            self.board.apply_move(position, mark)
        except InvalidMove:
            logger.info("rejected move %r for %s", position, mark.value)
            raise
        self._after_move(mark, position)

    def play_ai_turn(self) -> int:
        if not self.ai_to_move:
            raise InvalidMove("It is not the computer's turn")
        if self._strategy is None:
            raise RuntimeError("No strategy bound for the computer player")

        mark = self.ai_mark
        position = self._strategy.choose(self.board, mark, self.human_mark)
        logger.debug("%s chose %s for %s", type(self._strategy).__name__, position, mark.value)
        self.board.apply_move(position, mark)
        self._after_move(mark, position)
        return position

    # ---- lifecycle ----

    def reset(self) -> None:
        if self.mode is None:
            self._clear_board()
            self._transition(SessionState.MODE_SELECT)
        elif self.mode is GameMode.HUMAN_VS_AI and self._strategy is None:
            self._clear_board()
            self._transition(SessionState.DIFFICULTY_SELECT)
        else:
            self._start()

    def change_mode(self) -> None:
        self.mode = None
        self.difficulty = None
        self._strategy = None
        self._clear_board()
        self._transition(SessionState.MODE_SELECT)

    # ---- observation ----

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            cells=self.board.cells,
            current_player=self.current_player,
            state=self.state,
            mode=self.mode,
            difficulty=self.difficulty,
            outcome=self.outcome,
            move_log=tuple(self.move_log),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- helpers ----

    def _clear_board(self) -> None:
        self.board.reset()
        self.current_player = Mark.X
        self.outcome = ONGOING
        self.move_log.clear()

    def _start(self) -> None:
        self._clear_board()
        self._transition(SessionState.PLAYING)
        if self.auto_play_ai and self.ai_to_move:
            self.play_ai_turn()

    def _after_move(self, mark: Mark, position: int) -> None:
        self.move_log.append((mark, position))

        line = self.board.winning_line(mark)
        if line is not None:
            self.outcome = Outcome(result="win", winner=mark, line=line)
            self._transition(SessionState.TERMINAL)
            return
        if self.board.is_full():
            self.outcome = DRAW
            self._transition(SessionState.TERMINAL)
            return

        self.current_player = mark.opponent()
        self._emit()
        if self.auto_play_ai and self.ai_to_move:
            self.play_ai_turn()

    def _transition(self, state: SessionState) -> None:
        logger.debug("session %s -> %s", self.state.value, state.value)
        self.state = state
        self._emit()

    def _emit(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)


def new_session(
    mode: Union[GameMode, str],
    difficulty: Optional[Union[Difficulty, str]] = None,
    **kwargs: object,
) -> GameSession:
    """Create a session already in play for ``mode`` (and ``difficulty``)."""
    chosen = parse_mode(mode)
    if chosen is GameMode.HUMAN_VS_AI and difficulty is None:
        raise InvalidDifficulty("The AI mode needs a difficulty")

    session = GameSession(**kwargs)  # type: ignore[arg-type]
    session.select_mode(chosen)
    if chosen is GameMode.HUMAN_VS_AI:
        session.select_difficulty(difficulty)  # type: ignore[arg-type]
    return session
