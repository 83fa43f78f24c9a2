"""Tests for the Triki computer opponents."""

import random

import pytest

from triki.ai import (
    Difficulty,
    HeuristicStrategy,
    InvalidDifficulty,
    MinimaxStrategy,
    RandomStrategy,
    find_winning_move,
    strategy_for,
)
from triki.board import Board, Mark

_ = None


def _board(*cells):
    return Board.from_cells(cells)


def test_random_picks_an_empty_cell():
    board = _board("X", "O", "X", "O", _, "X", "O", _, _)
    ai = RandomStrategy(rng=random.Random(3))
    for _i in range(20):
        assert ai.choose(board, Mark.O, Mark.X) in (4, 7, 8)


def test_random_is_reproducible_with_a_seed():
    first = RandomStrategy(rng=random.Random(11)).choose(Board(), Mark.O, Mark.X)
    second = RandomStrategy(rng=random.Random(11)).choose(Board(), Mark.O, Mark.X)
    assert first == second


@pytest.mark.parametrize("ai", [RandomStrategy(), HeuristicStrategy(), MinimaxStrategy()])
def test_full_board_has_no_move(ai):
    board = _board("X", "O", "X", "X", "O", "O", "O", "X", "X")
    with pytest.raises(ValueError):
        ai.choose(board, Mark.O, Mark.X)


def test_find_winning_move_scans_in_order():
    board = _board("O", _, "O", _, _, _, "O", _, _)
    # both 1 and 3 complete a line; the lower index wins
    assert find_winning_move(board, Mark.O) == 1
    assert find_winning_move(board, Mark.X) is None
    assert board.cells == _board("O", _, "O", _, _, _, "O", _, _).cells


def test_heuristic_takes_immediate_win():
    board = _board("X", "X", _, "O", "O", _, "X", _, _)
    assert HeuristicStrategy().choose(board, Mark.O, Mark.X) == 5


def test_heuristic_blocks_opponent():
    board = _board("X", "X", _, _, "O", _, _, _, _)
    assert HeuristicStrategy().choose(board, Mark.O, Mark.X) == 2


def test_heuristic_prefers_win_over_block():
    board = _board("X", "X", _, "O", "O", _, _, _, _)
    assert HeuristicStrategy().choose(board, Mark.O, Mark.X) == 5


def test_heuristic_takes_center():
    board = _board("X", _, _, _, _, _, _, _, _)
    assert HeuristicStrategy().choose(board, Mark.O, Mark.X) == 4


def test_heuristic_falls_back_to_random():
    board = _board("X", _, _, _, "O", _, _, _, "X")
    move = HeuristicStrategy(rng=random.Random(5)).choose(board, Mark.O, Mark.X)
    assert move in board.available_moves()


def test_minimax_takes_immediate_win():
    board = _board("O", "O", _, "X", "X", _, "X", _, _)
    assert MinimaxStrategy().choose(board, Mark.O, Mark.X) == 2


def test_minimax_blocks_opponent():
    board = _board(_, _, _, _, "O", _, _, "X", "X")
    assert MinimaxStrategy().choose(board, Mark.O, Mark.X) == 6


def test_minimax_leaves_board_untouched():
    board = _board("X", _, _, _, _, _, _, _, _)
    before = board.cells
    MinimaxStrategy().choose(board, Mark.O, Mark.X)
    assert board.cells == before


# Fixed replies for positions where several moves tie; the lowest index wins.
REFERENCE_REPLIES = [
    ((_, _, _, _, _, _, _, _, _), Mark.X, 0),
    (("X", _, _, _, _, _, _, _, _), Mark.O, 4),
    ((_, _, _, _, "X", _, _, _, _), Mark.O, 0),
]


@pytest.mark.parametrize("cells, ai_mark, expected", REFERENCE_REPLIES)
def test_minimax_reference_replies(cells, ai_mark, expected):
    ai = MinimaxStrategy()
    board = Board.from_cells(cells)
    assert ai.choose(board, ai_mark, ai_mark.opponent()) == expected


def test_minimax_repeated_calls_agree():
    board = _board("X", _, _, _, _, _, _, _, _)
    ai = MinimaxStrategy()
    assert {ai.choose(board, Mark.O, Mark.X) for _i in range(3)} == {4}


def test_minimax_scores_depend_on_depth():
    ai = MinimaxStrategy()
    won = _board("O", "O", "O", "X", "X", _, "X", _, _)
    assert ai.minimax(won, 3, True, Mark.O, Mark.X) == 7
    assert ai.minimax(won, 3, True, Mark.X, Mark.O) == -7
    drawn = _board("X", "O", "X", "X", "O", "O", "O", "X", "X")
    assert ai.minimax(drawn, 5, False, Mark.O, Mark.X) == 0


def _play_out(x_player, o_player):
    board = Board()
    players = {Mark.X: x_player, Mark.O: o_player}
    mark = Mark.X
    while True:
        board.apply_move(players[mark].choose(board, mark, mark.opponent()), mark)
        if board.check_winner(mark):
            return mark
        if board.is_full():
            return None
        mark = mark.opponent()


def test_minimax_self_play_is_a_draw():
    assert _play_out(MinimaxStrategy(), MinimaxStrategy()) is None


@pytest.mark.parametrize("seed", range(8))
def test_minimax_never_loses_to_random(seed):
    winner = _play_out(RandomStrategy(rng=random.Random(seed)), MinimaxStrategy())
    assert winner is not Mark.X


@pytest.mark.parametrize("seed", range(4))
def test_minimax_never_loses_to_heuristic(seed):
    winner = _play_out(HeuristicStrategy(rng=random.Random(seed)), MinimaxStrategy())
    assert winner is not Mark.X


def test_strategy_for_maps_difficulties():
    assert isinstance(strategy_for(Difficulty.EASY), RandomStrategy)
    assert isinstance(strategy_for("medium"), HeuristicStrategy)
    assert isinstance(strategy_for(Difficulty.HARD), MinimaxStrategy)


def test_strategy_for_rejects_unknown_level():
    with pytest.raises(InvalidDifficulty):
        strategy_for("impossible")
