"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .game import Game, Outcome, Player, RoundResult


@dataclass
class GameSession:
    """Container for one browser's game."""

    game: Game
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self) -> None:
        self.last_seen = time.time()


SESSIONS: Dict[str, GameSession] = {}
SESSIONS_LOCK = threading.Lock()
app = FastAPI(title="Tic-Tac-Toe", description="Two-player tic-tac-toe in the browser")


SESSION_TTL_SECONDS = 60 * 30  # 30 minutes


def _cleanup_sessions() -> None:
    """Drop sessions nobody has touched for a while."""

    now = time.time()
    expired = [
        game_id
        for game_id, session in list(SESSIONS.items())
        if now - session.last_seen >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        SESSIONS.pop(game_id, None)


class MoveRequest(BaseModel):
    """Request payload for marking a cell on an existing game."""

    index: int = Field(ge=0, le=8, description="Cell index, row-major from the top left")


def _create_session() -> Tuple[str, GameSession]:
    game = Game()
    game.start()
    session = GameSession(game=game)
    session_id = uuid.uuid4().hex
    with SESSIONS_LOCK:
        _cleanup_sessions()
        SESSIONS[session_id] = session
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    with SESSIONS_LOCK:
        try:
            session = SESSIONS[game_id]
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Game not found") from exc
    session.touch()
    return session


def _serialize_player(player: Optional[Player]) -> Optional[Dict[str, str]]:
    if player is None:
        return None
    return {"name": player.name, "mark": player.mark}


def _serialize_result(result: Optional[RoundResult]) -> Optional[Dict[str, object]]:
    if result is None:
        return None
    return {
        "outcome": result.outcome.value,
        "player": _serialize_player(result.player),
        "index": result.index,
    }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        snapshot = game.snapshot()
        return {
            "id": game_id,
            "cells": list(snapshot.cells),
            "currentPlayer": _serialize_player(snapshot.active_player),
            "players": [_serialize_player(p) for p in game.players],
            "status": snapshot.status.value,
            "gameOver": snapshot.is_over,
            "winner": _serialize_player(snapshot.winner),
            "drawn": snapshot.drawn,
            "lastResult": _serialize_result(snapshot.last_result),
            "message": game.status_message(),
        }


def _apply_player_move(session: GameSession, index: int) -> RoundResult:
    with session.lock:
        result = session.game.play_round(index)
    if result.outcome is Outcome.GAME_OVER:
        raise HTTPException(status_code=400, detail="Game already finished")
    if result.outcome is Outcome.INVALID:
        raise HTTPException(status_code=400, detail=result.message)
    return result


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(session, request.index)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.game.start()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .message {
        min-height: 1.5rem;
        margin-bottom: 1.25rem;
        font-weight: 600;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        margin: 0 auto 1.5rem;
        width: min(300px, 100%);
      }
      .cell {
        aspect-ratio: 1;
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 2.5rem;
        font-weight: 700;
        background: #eef1ff;
        border-radius: 12px;
        cursor: pointer;
        user-select: none;
      }
      .cell.taken,
      .board.over .cell {
        cursor: default;
      }
      .cell.x {
        color: #3a66ff;
      }
      .cell.o {
        color: #ff5a5f;
      }
      button {
        font-size: 1rem;
        padding: 0.55rem 1.2rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"message\"></div>
      <div class=\"board\"></div>
      <button id=\"restart\" type=\"button\">Restart</button>
    </main>
    <script>
      const boardDiv = document.querySelector('.board');
      const messageDiv = document.querySelector('.message');
      const restartButton = document.querySelector('#restart');
      let state = null;

      function renderBoard() {
        boardDiv.innerHTML = '';
        boardDiv.classList.toggle('over', state.gameOver);
        state.cells.forEach((cell, index) => {
          const cellDiv = document.createElement('div');
          cellDiv.classList.add('cell');
          if (cell) {
            cellDiv.classList.add('taken', cell.toLowerCase());
          }
          cellDiv.dataset.index = index;
          cellDiv.textContent = cell;
          boardDiv.appendChild(cellDiv);
        });
      }

      function updateDisplay(data) {
        state = data;
        renderBoard();
        messageDiv.textContent = state.message;
      }

      async function request(url) {
        const response = await fetch(url, { method: 'POST' });
        const payload = await response.json();
        if (!response.ok) {
          messageDiv.textContent = payload.detail || 'Request failed';
          return null;
        }
        return payload;
      }

      async function startGame() {
        const data = await request('/api/game');
        if (data) {
          updateDisplay(data);
        }
      }

      boardDiv.addEventListener('click', async (event) => {
        if (!state || state.gameOver || !event.target.classList.contains('cell')) {
          return;
        }
        const index = parseInt(event.target.dataset.index, 10);
        const response = await fetch(`/api/game/${state.id}/move`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ index }),
        });
        const payload = await response.json();
        if (!response.ok) {
          messageDiv.textContent = payload.detail || 'Move rejected';
          return;
        }
        updateDisplay(payload);
      });

      restartButton.addEventListener('click', async () => {
        if (!state) {
          await startGame();
          return;
        }
        const data = await request(`/api/game/${state.id}/restart`);
        if (data) {
          updateDisplay(data);
        }
      });

      document.addEventListener('DOMContentLoaded', startGame);
    </script>
  </body>
</html>
"""
