"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import MinimaxAI
from .game import EMPTY, PLAYER_O, TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and, in bot mode, its AI opponent."""

    game: TicTacToeGame
    mode: str
    ai: Optional[MinimaxAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic Tac Toe", description="Tic-tac-toe against a friend or an unbeatable bot")


MODES: Tuple[str, ...] = ("pvp", "pvb")
AI_THINK_DELAY: Tuple[float, float] = (0.1, 0.1)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: str = Field(
        default="pvb",
        description="'pvp' for two humans, 'pvb' to play against the bot",
    )

    @field_validator("mode")
    @classmethod
    def ensure_supported_mode(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in MODES:
            raise ValueError(
                f"Unsupported mode {value!r}. Choose one of {', '.join(MODES)}."
            )
        return value


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(mode: str) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai = MinimaxAI(player=PLAYER_O) if mode == "pvb" else None
    session = GameSession(game=TicTacToeGame(), mode=mode, ai=ai)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created %s game %s", mode, session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai:
                return
            game = session.game
            if game.is_over():
                return
            if game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            logger.debug("Game %s: bot played %d", game_id, cell_index)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        line = game.winning_line()
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "cells": [c if c != EMPTY else "" for c in game.cells],
            "currentPlayer": game.current_player,
            "outcome": game.outcome.value,
            "winner": game.winner,
            "strike": line.strike if line else None,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "lastMove": session.move_log[-1] if session.move_log else None,
        }
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_over():
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="Not your turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})

        should_schedule_ai = bool(
            session.ai
            and not game.is_over()
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True
        if game.is_over():
            logger.info("Game %s finished: %s", game_id, game.outcome.value)

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _reset_session(game_id: str, session: GameSession) -> None:
    with session.lock:
        session.game.reset()
        session.move_log.clear()
        session.ai_pending = False
    logger.info("Reset game %s", game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _reset_session(game_id, session)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      body {
        font-family: sans-serif;
        background: #1f2430;
        color: #f0f0f0;
        text-align: center;
      }
      .buttons, .tile {
        cursor: pointer;
      }
      .buttons {
        margin: 0.5rem;
        padding: 0.6rem 1.2rem;
        font-size: 1rem;
      }
      #board {
        position: relative;
        display: grid;
        grid-template-columns: repeat(3, 100px);
        grid-template-rows: repeat(3, 100px);
        gap: 4px;
        justify-content: center;
        margin: 1.5rem auto;
        width: 308px;
      }
      .tile {
        display: flex;
        align-items: center;
        justify-content: center;
        background: #2c3242;
        font-size: 3rem;
        font-weight: bold;
      }
      .tile.x { color: #ff6b6b; }
      .tile.o { color: #4dabf7; }
      #strike {
        position: absolute;
        background: #ffd43b;
        display: none;
      }
      .strike-row-1 { display: block !important; width: 100%; height: 4px; top: 50px; left: 0; }
      .strike-row-2 { display: block !important; width: 100%; height: 4px; top: 154px; left: 0; }
      .strike-row-3 { display: block !important; width: 100%; height: 4px; top: 258px; left: 0; }
      .strike-column-1 { display: block !important; height: 100%; width: 4px; left: 50px; top: 0; }
      .strike-column-2 { display: block !important; height: 100%; width: 4px; left: 154px; top: 0; }
      .strike-column-3 { display: block !important; height: 100%; width: 4px; left: 258px; top: 0; }
      .strike-diagonal-1 { display: block !important; width: 435px; height: 4px; top: 154px; left: -64px; transform: rotate(45deg); }
      .strike-diagonal-2 { display: block !important; width: 435px; height: 4px; top: 154px; left: -64px; transform: rotate(-45deg); }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <h1>TIC TAC TOE</h1>
    <div id=\"home\">
      <button class=\"buttons\" onclick=\"startGame('pvp')\">Player vs Player</button>
      <button class=\"buttons\" onclick=\"startGame('pvb')\">Player vs Bot</button>
    </div>
    <div id=\"play\" class=\"hidden\">
      <button class=\"buttons\" onclick=\"goHome()\">Back</button>
      <div id=\"board\"><div id=\"strike\"></div></div>
      <p id=\"status\"></p>
      <button id=\"reset\" class=\"buttons hidden\" onclick=\"resetGame()\">Play Again</button>
    </div>
    <script>
      let gameId = null;
      let pollTimer = null;

      const board = document.getElementById("board");
      for (let i = 0; i < 9; i++) {
        const tile = document.createElement("div");
        tile.className = "tile";
        tile.dataset.index = i;
        tile.addEventListener("click", () => play(i));
        board.appendChild(tile);
      }

      async function api(path, body) {
        const options = body === undefined
          ? {}
          : { method: "POST", headers: { "Content-Type": "application/json" }, body: JSON.stringify(body) };
        const response = await fetch(path, options);
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || "Request failed");
        }
        return payload;
      }

      function render(state) {
        document.querySelectorAll(".tile").forEach((tile, i) => {
          const mark = state.cells[i];
          tile.textContent = mark;
          tile.className = "tile" + (mark ? " " + mark.toLowerCase() : "");
        });
        document.getElementById("strike").className = state.strike || "";
        let status;
        if (state.outcome === "draw") {
          status = "Draw";
        } else if (state.winner) {
          status = state.winner + " wins";
        } else if (state.aiPending) {
          status = "Bot is thinking...";
        } else {
          status = state.currentPlayer + "'s turn";
        }
        document.getElementById("status").textContent = status;
        document.getElementById("reset").classList.toggle("hidden", state.outcome === "in_progress");
        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(refresh, 150);
        }
      }

      async function refresh() {
        render(await api(`/api/game/${gameId}`));
      }

      async function startGame(mode) {
        const state = await api("/api/game", { mode });
        gameId = state.id;
        document.getElementById("home").classList.add("hidden");
        document.getElementById("play").classList.remove("hidden");
        render(state);
      }

      async function play(index) {
        if (!gameId) return;
        try {
          render(await api(`/api/game/${gameId}/move`, { cellIndex: index }));
        } catch (err) {
          console.warn(err.message);
        }
      }

      async function resetGame() {
        render(await api(`/api/game/${gameId}/reset`, {}));
      }

      function goHome() {
        clearTimeout(pollTimer);
        gameId = null;
        document.getElementById("play").classList.add("hidden");
        document.getElementById("home").classList.remove("hidden");
      }
    </script>
  </body>
</html>
"""
