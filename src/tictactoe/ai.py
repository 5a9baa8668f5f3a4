"""Exhaustive minimax opponent for 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import logging
import math

from .game import (
    BOARD_SIZE,
    MARKS,
    Board,
    Outcome,
    Player,
    TicTacToeGame,
    empty_cells,
    evaluate,
    opponent,
    place_mark,
    win_for,
)

logger = logging.getLogger(__name__)

NO_MOVE: Optional[int] = None

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


def _score_table(player: Player) -> Dict[Outcome, int]:
    # Scores are always from the automated side's point of view
    return {
        win_for(player): WIN_SCORE,
        win_for(opponent(player)): LOSS_SCORE,
        Outcome.DRAW: DRAW_SCORE,
    }


def _minimax(
    board: Tuple[str, ...],
    maximizing: bool,
    player: Player,
    scores: Dict[Outcome, int],
) -> int:
    outcome = evaluate(board)
    if outcome is not Outcome.IN_PROGRESS:
        return scores[outcome]

    if maximizing:
        value = -math.inf
        for idx in empty_cells(board):
            child = place_mark(board, idx, player)
            value = max(value, _minimax(child, False, player, scores))
    else:
        value = math.inf
        opp = opponent(player)
        for idx in empty_cells(board):
            child = place_mark(board, idx, opp)
            value = min(value, _minimax(child, True, player, scores))
    return int(value)


def best_move(board: Board, player: Player) -> Optional[int]:
    """Optimal cell for ``player`` to play on ``board``.

    Returns ``NO_MOVE`` when the board is full. Among equally scored moves
    the lowest index wins. The caller must not pass a board whose outcome
    is already decided.
    """
    if player not in MARKS:
        raise ValueError(f"Unknown mark {player!r}")
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")

    root = tuple(board)
    scores = _score_table(player)
    best_score = -math.inf
    move: Optional[int] = NO_MOVE

    for idx in empty_cells(root):
        child = place_mark(root, idx, player)
        score = _minimax(child, False, player, scores)
        if score > best_score:
            best_score, move = score, idx

    logger.debug("best_move for %s -> %s (score %s)", player, move, best_score)
    return move


@dataclass
class MinimaxAI:
    """Automated player driven by :func:`best_move`.

      - MinimaxAI(player="O")
      - choose(game) -> cell_index
    """

    player: Player = "O"

    def __post_init__(self) -> None:
        if self.player not in MARKS:
            raise ValueError(f"Unknown mark {self.player!r}")

    def choose(self, game: TicTacToeGame) -> int:
        if game.is_over():
            raise ValueError("Game already finished")
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")

        move = best_move(game.cells, self.player)
        if move is NO_MOVE:
            raise RuntimeError("No valid moves available")
        return move
