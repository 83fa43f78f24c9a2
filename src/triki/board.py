"""Board state and rules for Triki (3x3 Tic-Tac-Toe)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple


class Mark(str, Enum):
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


Cell = Optional[Mark]  # None means empty
Line = Tuple[int, int, int]

SIZE = 3
CELL_COUNT = SIZE * SIZE
CENTER = 4

WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidMove(ValueError):
    """Raised when a move cannot be played in the current position."""


# ---------- Position addressing ----------


def _is_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def to_index(row: int, column: int) -> int:
    if not (_is_index(row) and _is_index(column)):
        raise InvalidMove(f"Row and column must be integers, got {row!r}, {column!r}")
    if not (0 <= row < SIZE and 0 <= column < SIZE):
        raise InvalidMove(f"Row and column must be between 0 and 2, got {row}, {column}")
    return row * SIZE + column


def to_row_col(index: int) -> Tuple[int, int]:
    if not _is_index(index) or not 0 <= index < CELL_COUNT:
        raise InvalidMove(f"Position must be between 0 and 8, got {index!r}")
    return divmod(index, SIZE)


def _parse_cell(value: object) -> Cell:
    if value is None or value in ("", " "):
        return None
    try:
        return Mark(value)
    except ValueError as exc:
        raise ValueError(f"Unknown cell value {value!r}") from exc


# ---------- Board ----------


@dataclass
class Board:
    _cells: List[Cell] = field(default_factory=lambda: [None] * CELL_COUNT)

    @classmethod
    def from_cells(cls, cells: Iterable[object]) -> "Board":
        """Build a board from 9 values: 'X', 'O', or None/''/' ' for empty."""
        parsed = [_parse_cell(c) for c in cells]
        if len(parsed) != CELL_COUNT:
            raise ValueError(f"A board needs {CELL_COUNT} cells, got {len(parsed)}")
        return cls(parsed)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def __getitem__(self, position: int) -> Cell:
        return self._cells[position]

    # ---- queries ----

    def available_moves(self) -> List[int]:
        return [i for i, c in enumerate(self._cells) if c is None]

    def is_empty(self, position: int) -> bool:
        return self._cells[position] is None

    def winning_line(self, mark: Mark) -> Optional[Line]:
        cells = self._cells
        for a, b, c in WINNING_LINES:
            if cells[a] == mark and cells[b] == mark and cells[c] == mark:
                return (a, b, c)
        return None

    def check_winner(self, mark: Mark) -> bool:
        return self.winning_line(mark) is not None

    def is_full(self) -> bool:
        return all(c is not None for c in self._cells)

    def is_draw(self) -> bool:
        return (
            self.is_full()
            and not self.check_winner(Mark.X)
            and not self.check_winner(Mark.O)
        )

    # ---- mutation ----

    def apply_move(self, position: int, mark: Mark) -> None:
        if not _is_index(position) or not 0 <= position < CELL_COUNT:
            raise InvalidMove(f"Position must be between 0 and 8, got {position!r}")
        if self._cells[position] is not None:
            raise InvalidMove(f"Cell {position} is already occupied")
        self._cells[position] = Mark(mark)

    def undo_move(self, position: int) -> None:
        self._cells[position] = None

    def reset(self) -> None:
        self._cells[:] = [None] * CELL_COUNT

    def render(self) -> str:
        rows: List[str] = []
        for r in range(SIZE):
            row: Sequence[Cell] = self._cells[r * SIZE : (r + 1) * SIZE]
            rows.append(" " + " | ".join(c.value if c else " " for c in row))
        return "\n---+---+---\n".join(rows)
