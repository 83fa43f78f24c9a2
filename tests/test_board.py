"""Unit tests for Triki board rules."""

import itertools

import pytest

from triki.board import (
    WINNING_LINES,
    Board,
    InvalidMove,
    Mark,
    to_index,
    to_row_col,
)


def test_new_board_offers_every_cell_in_order():
    board = Board()
    assert board.available_moves() == list(range(9))
    assert not board.is_full()


def test_position_addressing_round_trips():
    for index in range(9):
        assert to_index(*to_row_col(index)) == index
    assert to_row_col(5) == (1, 2)


@pytest.mark.parametrize("row, column", [(-1, 0), (0, 3), (3, 3)])
def test_to_index_rejects_out_of_range(row, column):
    with pytest.raises(InvalidMove):
        to_index(row, column)


def test_apply_move_sets_only_that_cell():
    board = Board()
    board.apply_move(4, Mark.X)
    assert board[4] is Mark.X
    assert board.available_moves() == [0, 1, 2, 3, 5, 6, 7, 8]


def test_occupied_cell_rejected_without_mutation():
    board = Board.from_cells(["X", "O", None, None, None, None, None, None, None])
    before = board.cells
    with pytest.raises(InvalidMove):
        board.apply_move(0, Mark.O)
    with pytest.raises(InvalidMove):
        board.apply_move(1, Mark.X)
    assert board.cells == before


@pytest.mark.parametrize("position", [-1, 9, 42, True, "4"])
def test_out_of_range_position_rejected(position):
    board = Board()
    with pytest.raises(InvalidMove):
        board.apply_move(position, Mark.X)
    assert board.cells == Board().cells


def test_apply_then_undo_restores_board():
    board = Board.from_cells(["X", "", "O", "", "X", "", "", "O", ""])
    before = board.cells
    for position in board.available_moves():
        board.apply_move(position, Mark.O)
        board.undo_move(position)
        assert board.cells == before


def test_every_line_is_detected():
    for line in WINNING_LINES:
        board = Board()
        for position in line:
            board.apply_move(position, Mark.O)
        assert board.check_winner(Mark.O)
        assert not board.check_winner(Mark.X)
        assert board.winning_line(Mark.O) == line


def test_check_winner_does_not_mutate():
    board = Board.from_cells(["X", "X", "X", "O", "O", "", "", "", ""])
    before = board.cells
    assert board.check_winner(Mark.X)
    assert board.cells == before


def test_full_board_without_line_is_draw():
    board = Board.from_cells(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert board.is_full()
    assert board.is_draw()
    assert not board.check_winner(Mark.X)
    assert not board.check_winner(Mark.O)


def test_full_board_with_line_is_not_draw():
    board = Board.from_cells(["X", "X", "X", "O", "O", "X", "O", "X", "O"])
    assert board.is_full()
    assert not board.is_draw()


def test_both_marks_never_win_on_alternating_play():
    # Play every move order until the first win and confirm only one side wins.
    for order in itertools.permutations(range(9), 6):
        board = Board()
        mark = Mark.X
        for position in order:
            board.apply_move(position, mark)
            if board.check_winner(mark):
                break
            mark = mark.opponent()
        assert not (board.check_winner(Mark.X) and board.check_winner(Mark.O))


def test_reset_clears_all_cells():
    board = Board.from_cells(["X", "O", "X", "", "", "", "", "", ""])
    board.reset()
    assert board.available_moves() == list(range(9))


def test_from_cells_rejects_bad_input():
    with pytest.raises(ValueError):
        Board.from_cells(["X"] * 8)
    with pytest.raises(ValueError):
        Board.from_cells(["Z"] + [None] * 8)


def test_render_draws_grid():
    board = Board.from_cells(["X", "", "", "", "O", "", "", "", "X"])
    assert board.render() == (
        " X |   |  \n---+---+---\n   | O |  \n---+---+---\n   |   | X"
    )
