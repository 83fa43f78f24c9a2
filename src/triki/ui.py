"""FastAPI-powered web board for playing Triki in the browser."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field, model_validator

from .ai import Difficulty, InvalidDifficulty
from .board import InvalidMove, to_index
from .session import GameMode, GameSession, InvalidMode

logger = logging.getLogger(__name__)


@dataclass
class WebSession:
    """Container for a browser's match and its pending AI turn."""

    session: GameSession
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, WebSession] = {}
app = FastAPI(title="Triki", description="Tic-tac-toe played in the browser")


AI_THINK_DELAY: Tuple[float, float] = (0.5, 0.5)
ENGINE_ERRORS = (InvalidMove, InvalidMode, InvalidDifficulty)


class NewSessionRequest(BaseModel):
    """Request payload for opening a session, optionally already in play."""

    mode: Optional[GameMode] = None
    difficulty: Optional[Difficulty] = None


class ModeRequest(BaseModel):
    mode: GameMode


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class MoveRequest(BaseModel):
    """A move given either as a board index or as a row/column pair."""

    position: Optional[int] = Field(default=None, ge=0, le=8)
    row: Optional[int] = Field(default=None, ge=0, le=2)
    column: Optional[int] = Field(default=None, ge=0, le=2)

    @model_validator(mode="after")
    def ensure_single_address(self) -> "MoveRequest":
        has_index = self.position is not None
        has_pair = self.row is not None and self.column is not None
        if has_index == has_pair:
            raise ValueError("Send either 'position' or both 'row' and 'column'")
        return self

    def index(self) -> int:
        if self.position is not None:
            return self.position
        return to_index(self.row, self.column)  # type: ignore[arg-type]


def _create_session() -> Tuple[str, WebSession]:
    """Create a new session and register it for later access."""

    web = WebSession(session=GameSession(auto_play_ai=False))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = web
    return session_id, web


def _get_session(session_id: str) -> WebSession:
    try:
        return SESSIONS[session_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


def _run_ai_turn(session_id: str) -> None:
    web = SESSIONS.get(session_id)
    if not web:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with web.lock:
        try:
            if web.session.ai_to_move:
                web.session.play_ai_turn()
        finally:
            web.ai_pending = False


def _schedule_ai(
    session_id: str, web: WebSession, background_tasks: Optional[BackgroundTasks]
) -> None:
    # caller holds web.lock
    if web.session.ai_to_move and not web.ai_pending and background_tasks is not None:
        web.ai_pending = True
        background_tasks.add_task(_run_ai_turn, session_id)


def _serialize_session(session_id: str, web: WebSession) -> Dict[str, object]:
    with web.lock:
        state = web.session.snapshot().to_dict()
        state["id"] = session_id
        state["aiPending"] = web.ai_pending
        return state


def _apply(
    session_id: str,
    web: WebSession,
    action: Callable[[GameSession], None],
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with web.lock:
        if web.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        try:
            action(web.session)
        except ENGINE_ERRORS as exc:
            logger.info("session %s rejected action: %s", session_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        _schedule_ai(session_id, web, background_tasks)


@app.post("/api/session")
def create_session(
    request: NewSessionRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session_id, web = _create_session()
    if request.mode is not None:
        _apply(session_id, web, lambda s: s.select_mode(request.mode))
        if request.difficulty is not None and request.mode is GameMode.HUMAN_VS_AI:
            _apply(
                session_id,
                web,
                lambda s: s.select_difficulty(request.difficulty),
                background_tasks,
            )
    return _serialize_session(session_id, web)


@app.get("/api/session/{session_id}")
def get_session(session_id: str) -> Dict[str, object]:
    web = _get_session(session_id)
    return _serialize_session(session_id, web)


@app.post("/api/session/{session_id}/mode")
def select_mode(session_id: str, request: ModeRequest) -> Dict[str, object]:
    web = _get_session(session_id)
    _apply(session_id, web, lambda s: s.select_mode(request.mode))
    return _serialize_session(session_id, web)


@app.post("/api/session/{session_id}/difficulty")
def select_difficulty(
    session_id: str, request: DifficultyRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    web = _get_session(session_id)
    _apply(
        session_id,
        web,
        lambda s: s.select_difficulty(request.difficulty),
        background_tasks,
    )
    return _serialize_session(session_id, web)


@app.post("/api/session/{session_id}/move")
def make_move(
    session_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    web = _get_session(session_id)
    position = request.index()
    _apply(session_id, web, lambda s: s.submit_human_move(position), background_tasks)
    return _serialize_session(session_id, web)


@app.post("/api/session/{session_id}/reset")
def reset_session(
    session_id: str, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    web = _get_session(session_id)
    _apply(session_id, web, lambda s: s.reset(), background_tasks)
    return _serialize_session(session_id, web)


@app.post("/api/session/{session_id}/change-mode")
def change_mode(session_id: str) -> Dict[str, object]:
    web = _get_session(session_id)
    _apply(session_id, web, lambda s: s.change_mode())
    return _serialize_session(session_id, web)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"es\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Triki</title>
    <style>
      body { font-family: sans-serif; background: #1e1b4b; color: #f8fafc;
             display: flex; flex-direction: column; align-items: center; }
      .hidden { display: none !important; }
      button { font-size: 1rem; margin: 0.3rem; padding: 0.5rem 1rem;
               border-radius: 8px; border: none; cursor: pointer; }
      .board { display: grid; grid-template-columns: repeat(3, 90px); gap: 6px; }
      .cell { width: 90px; height: 90px; font-size: 2.5rem; background: #312e81;
              color: #f8fafc; margin: 0; }
      .cell.x { color: #f472b6; }
      .cell.o { color: #38bdf8; }
      .cell.winner { background: #16a34a; }
      .status { min-height: 1.5rem; margin: 1rem; font-weight: 600; }
    </style>
  </head>
  <body>
    <h1>Triki</h1>
    <section id=\"modeSelection\">
      <button data-mode=\"pvp\">Dos Jugadores</button>
      <button data-mode=\"ai\">Vs Computadora</button>
    </section>
    <section id=\"difficultySelection\" class=\"hidden\">
      <button data-difficulty=\"easy\">Fácil</button>
      <button data-difficulty=\"medium\">Medio</button>
      <button data-difficulty=\"hard\">Difícil</button>
    </section>
    <section id=\"gameBoard\" class=\"hidden\">
      <p>Turno: <span id=\"currentPlayer\"></span></p>
      <div class=\"board\" id=\"board\"></div>
      <div class=\"status\" id=\"gameStatus\"></div>
      <button id=\"resetBtn\">Reiniciar</button>
      <button id=\"changeModeBtn\">Cambiar modo</button>
    </section>
    <script>
      let sessionId = null;
      let poll = null;

      async function call(path, body) {
        const response = await fetch(path, {
          method: \"POST\",
          headers: { \"Content-Type\": \"application/json\" },
          body: JSON.stringify(body || {}),
        });
        const payload = await response.json();
        if (!response.ok) {
          document.getElementById(\"gameStatus\").textContent = payload.detail;
          return null;
        }
        render(payload);
        return payload;
      }

      function statusText(state) {
        const outcome = state.outcome;
        if (outcome.result === \"draw\") return \"¡Es un empate!\";
        if (outcome.result === \"win\") {
          if (state.mode === \"ai\") {
            return outcome.winner === \"O\"
              ? \"¡La computadora ha ganado!\"
              : \"¡Felicidades! ¡Has ganado!\";
          }
          return `¡El jugador ${outcome.winner} ha ganado!`;
        }
        return state.aiPending ? \"La computadora está pensando...\" : \"\";
      }

      function render(state) {
        document.getElementById(\"modeSelection\").classList.toggle(\"hidden\", state.state !== \"mode_select\");
        document.getElementById(\"difficultySelection\").classList.toggle(\"hidden\", state.state !== \"difficulty_select\");
        const playing = state.state === \"playing\" || state.state === \"terminal\";
        document.getElementById(\"gameBoard\").classList.toggle(\"hidden\", !playing);
        document.getElementById(\"currentPlayer\").textContent = state.currentPlayer;
        const line = state.outcome.line || [];
        const board = document.getElementById(\"board\");
        board.innerHTML = \"\";
        state.board.forEach((value, index) => {
          const cell = document.createElement(\"button\");
          cell.className = \"cell\" + (value ? \" \" + value.toLowerCase() : \"\");
          if (line.includes(index)) cell.classList.add(\"winner\");
          cell.textContent = value;
          cell.addEventListener(\"click\", () => call(`/api/session/${sessionId}/move`, { position: index }));
          board.appendChild(cell);
        });
        document.getElementById(\"gameStatus\").textContent = statusText(state);
        clearTimeout(poll);
        if (state.aiPending) {
          poll = setTimeout(async () => {
            const response = await fetch(`/api/session/${sessionId}`);
            render(await response.json());
          }, 300);
        }
      }

      document.querySelectorAll(\"[data-mode]\").forEach((btn) =>
        btn.addEventListener(\"click\", () => call(`/api/session/${sessionId}/mode`, { mode: btn.dataset.mode }))
      );
      document.querySelectorAll(\"[data-difficulty]\").forEach((btn) =>
        btn.addEventListener(\"click\", () =>
          call(`/api/session/${sessionId}/difficulty`, { difficulty: btn.dataset.difficulty })
        )
      );
      document.getElementById(\"resetBtn\").addEventListener(\"click\", () => call(`/api/session/${sessionId}/reset`));
      document.getElementById(\"changeModeBtn\").addEventListener(\"click\", () => call(`/api/session/${sessionId}/change-mode`));

      call(\"/api/session\").then((state) => { sessionId = state.id; });
    </script>
  </body>
</html>
"""
