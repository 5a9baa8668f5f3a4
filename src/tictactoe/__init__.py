"""Tic-tac-toe package exposing game logic, the minimax opponent, and the web application."""

from .ai import NO_MOVE, MinimaxAI, best_move
from .game import Outcome, TicTacToeGame, evaluate, winning_line
from .ui import app

__all__ = [
    "NO_MOVE",
    "MinimaxAI",
    "Outcome",
    "TicTacToeGame",
    "app",
    "best_move",
    "evaluate",
    "winning_line",
]
