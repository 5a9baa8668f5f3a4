"""Tests for the tic-tac-toe minimax AI."""

import pytest

from tictactoe.ai import NO_MOVE, MinimaxAI, best_move
from tictactoe.game import EMPTY, Outcome, TicTacToeGame, empty_board, evaluate, place_mark

_ = EMPTY


def test_ai_takes_immediate_win():
    board = ["X", "X", _, "O", "O", _, _, _, _]
    assert best_move(board, "X") == 2


def test_equal_scores_resolve_to_lowest_index():
    # Both 2 (block, then fork on 3-4-5 and 2-4-6) and 5 win for O
    board = ["X", "X", _, "O", "O", _, _, _, _]
    assert best_move(board, "O") == 2


def test_nested_forced_sequence():
    board = ["X", "O", "X", "O", "X", "O", _, _, "O"]
    # X completes the 2-4-6 diagonal
    assert best_move(board, "X") == 6
    # O has no win and must block the same cell
    move = best_move(board, "O")
    assert move == 6
    after_block = place_mark(board, 6, "O")
    assert evaluate(place_mark(after_block, 7, "X")) is Outcome.DRAW
    after_other = place_mark(board, 7, "O")
    assert evaluate(place_mark(after_other, 6, "X")) is Outcome.X_WINS


def test_blocks_opponent_line():
    board = ["X", "X", _, _, "O", _, _, _, _]
    assert best_move(board, "O") == 2


def test_full_board_returns_no_move():
    board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    assert best_move(board, "O") is NO_MOVE


def test_search_is_deterministic_and_leaves_board_untouched():
    board = ["X", _, _, _, _, _, _, _, _]
    snapshot = list(board)
    first = best_move(board, "O")
    assert best_move(board, "O") == first
    assert board == snapshot
    # Only the centre avoids a forced loss after a corner opening
    assert first == 4


def test_rejects_unknown_mark_and_bad_board():
    with pytest.raises(ValueError):
        best_move(empty_board(), "Z")
    with pytest.raises(ValueError):
        best_move([_] * 8, "X")


def test_self_play_from_empty_board_draws():
    board = empty_board()
    player = "X"
    while evaluate(board) is Outcome.IN_PROGRESS:
        move = best_move(board, player)
        assert move is not None
        board = place_mark(board, move, player)
        player = "O" if player == "X" else "X"

    assert evaluate(board) is Outcome.DRAW


def test_minimax_ai_plays_on_its_turn():
    game = TicTacToeGame()
    game.play_move(0)
    ai = MinimaxAI(player="O")

    move = ai.choose(game)

    assert move in game.available_moves()
    assert move == 4


def test_minimax_ai_refuses_out_of_turn():
    game = TicTacToeGame()
    ai = MinimaxAI(player="O")
    with pytest.raises(ValueError):
        ai.choose(game)


def test_ai_never_loses_to_any_human_line():
    # Exhaust every human (X) reply against the bot (O)
    ai = MinimaxAI(player="O")

    def explore(game: TicTacToeGame) -> None:
        if game.is_over():
            assert game.outcome is not Outcome.X_WINS
            return
        if game.current_player == "O":
            game.play_move(ai.choose(game))
            explore(game)
            return
        for idx in game.available_moves():
            branch = TicTacToeGame(
                cells=list(game.cells),
                current_player=game.current_player,
                outcome=game.outcome,
            )
            branch.play_move(idx)
            explore(branch)

    explore(TicTacToeGame())
