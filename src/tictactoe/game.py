"""Core rules for 3x3 tic-tac-toe: board, lines, outcome and game state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Board = Sequence[str]

EMPTY = " "
PLAYER_X: Player = "X"
PLAYER_O: Player = "O"
MARKS: Tuple[Player, Player] = (PLAYER_X, PLAYER_O)
BOARD_SIZE = 9


class Line(NamedTuple):
    cells: Tuple[int, int, int]
    strike: str


# Order matters: the first complete line found is the one reported.
WINNING_LINES: Tuple[Line, ...] = (
    # rows
    Line((0, 1, 2), "strike-row-1"),
    Line((3, 4, 5), "strike-row-2"),
    Line((6, 7, 8), "strike-row-3"),
    # columns
    Line((0, 3, 6), "strike-column-1"),
    Line((1, 4, 7), "strike-column-2"),
    Line((2, 5, 8), "strike-column-3"),
    # diagonals
    Line((0, 4, 8), "strike-diagonal-1"),
    Line((2, 4, 6), "strike-diagonal-2"),
)


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"

    @property
    def winner(self) -> Optional[Player]:
        if self is Outcome.X_WINS:
            return PLAYER_X
        if self is Outcome.O_WINS:
            return PLAYER_O
        return None


def win_for(player: Player) -> Outcome:
    if player not in MARKS:
        raise ValueError(f"Unknown mark {player!r}")
    return Outcome.X_WINS if player == PLAYER_X else Outcome.O_WINS


def opponent(player: Player) -> Player:
    if player not in MARKS:
        raise ValueError(f"Unknown mark {player!r}")
    return PLAYER_O if player == PLAYER_X else PLAYER_X


# ---------- Board helpers ----------


def empty_board() -> Tuple[str, ...]:
    return (EMPTY,) * BOARD_SIZE


def empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def place_mark(board: Board, index: int, player: Player) -> Tuple[str, ...]:
    """Return a copy of ``board`` with ``player`` written at ``index``.

    Occupancy is not checked here; the search only branches on empty cells
    and :class:`TicTacToeGame` validates human moves itself.
    """
    if not 0 <= index < BOARD_SIZE:
        raise ValueError(f"Cell index {index} is outside 0..{BOARD_SIZE - 1}")
    if player not in MARKS:
        raise ValueError(f"Unknown mark {player!r}")
    cells = list(board)
    cells[index] = player
    return tuple(cells)


def winning_line(board: Board) -> Optional[Line]:
    """First complete line on ``board``, used by the UI to draw the strike."""
    for line in WINNING_LINES:
        a, b, c = line.cells
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return line
    return None


def evaluate(board: Board) -> Outcome:
    """Classify ``board``. Pure; any 9-cell combination is accepted."""
    line = winning_line(board)
    if line is not None:
        return win_for(board[line.cells[0]])
    if all(c != EMPTY for c in board):
        return Outcome.DRAW
    return Outcome.IN_PROGRESS


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: list(empty_board()))
    current_player: Player = PLAYER_X
    outcome: Outcome = Outcome.IN_PROGRESS

    # ---- API used by UI & AI ----

    @property
    def winner(self) -> Optional[Player]:
        return self.outcome.winner

    def is_over(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS

    def available_moves(self) -> List[int]:
        if self.is_over():
            return []
        return empty_cells(self.cells)

    def winning_line(self) -> Optional[Line]:
        return winning_line(self.cells)

    def play_move(self, index: int) -> Outcome:
        """Apply a move for the side to play, re-evaluate, and pass the turn."""
        if self.is_over():
            raise ValueError("Game already finished")
        if not 0 <= index < BOARD_SIZE:
            raise ValueError(f"Cell index {index} is outside 0..{BOARD_SIZE - 1}")
        if self.cells[index] != EMPTY:
            raise ValueError("Cell already occupied")

        self.cells = list(place_mark(self.cells, index, self.current_player))
        self.outcome = evaluate(self.cells)

        # Turn only passes while the game is live
        if self.outcome is Outcome.IN_PROGRESS:
            self.current_player = opponent(self.current_player)
        return self.outcome

    def reset(self) -> None:
        self.cells = list(empty_board())
        self.current_player = PLAYER_X
        self.outcome = Outcome.IN_PROGRESS
