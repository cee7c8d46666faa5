"""FastAPI application serving the tic-tac-toe page and its view-model."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .client import SessionClient
from .config import Settings
from .controller import SyncController
from .view import build_view_model


class CellRequest(BaseModel):
    """Request payload for activating one board cell."""

    row: int = Field(ge=0, le=2)
    col: int = Field(ge=0, le=2)


def _get_controller(request: Request) -> SyncController:
    controller: Optional[SyncController] = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Game client is not running")
    return controller


def _serialize_view(controller: SyncController, settings: Settings) -> Dict[str, object]:
    state = build_view_model(controller.snapshot()).to_dict()
    state["apiBaseUrl"] = settings.api_base_url
    return state


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the web app.

    The session client and controller live for as long as the app does: the
    first game is created at startup and polling stops at shutdown.
    ``transport`` replaces the network layer of the session client.
    """

    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = SessionClient(
            settings.api_base_url, timeout=settings.request_timeout, transport=transport
        )
        controller = SyncController(client, poll_interval=settings.poll_interval)
        app.state.controller = controller
        try:
            await controller.start()
            yield
        finally:
            await controller.close()
            await client.aclose()
            app.state.controller = None

    app = FastAPI(
        title="Tic-Tac-Toe",
        description="Browser client for a remote tic-tac-toe server",
        lifespan=lifespan,
    )

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return HTML_PAGE

    @app.get("/api/view")
    async def get_view(request: Request) -> Dict[str, object]:
        return _serialize_view(_get_controller(request), settings)

    @app.post("/api/cell")
    async def activate_cell(request: Request, move: CellRequest) -> Dict[str, object]:
        controller = _get_controller(request)
        await controller.submit_move(move.row, move.col)
        return _serialize_view(controller, settings)

    @app.post("/api/new-game")
    async def new_game(request: Request) -> Dict[str, object]:
        controller = _get_controller(request)
        await controller.new_game()
        return _serialize_view(controller, settings)

    return app


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\" data-theme=\"light\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        --bg: #f8f9fa;
        --panel: #ffffff;
        --text: #424242;
      }
      [data-theme='dark'] {
        color-scheme: dark;
        --bg: #1a1a1a;
        --panel: #262626;
        --text: #e0e0e0;
      }
      body {
        margin: 0;
        min-height: 100vh;
        background: var(--bg);
        color: var(--text);
        display: flex;
        flex-direction: column;
        align-items: center;
        padding-top: 40px;
        transition: background 0.3s ease;
      }
      h1 {
        color: #1976d2;
        font-size: 2.22rem;
        margin: 0 0 4px;
        letter-spacing: -0.03em;
        user-select: none;
      }
      .tagline {
        margin-bottom: 13px;
        font-size: 1.1em;
      }
      .theme-toggle {
        position: absolute;
        top: 16px;
        right: 16px;
      }
      #status {
        font-size: 1.3rem;
        font-weight: bold;
        margin: 18px 0 15px;
        min-height: 32px;
      }
      #error {
        background: #ffeaea;
        color: #ce0033;
        padding: 10px 16px;
        border-radius: 8px;
        margin: 16px 0;
        font-weight: 500;
      }
      #spinner {
        margin: 20px 0;
      }
      #spinner .wheel {
        display: inline-block;
        width: 28px;
        height: 28px;
        border: 4px solid #424242;
        border-top-color: #f50057;
        border-radius: 50%;
        animation: spin 1s linear infinite;
        vertical-align: middle;
      }
      @keyframes spin {
        0% { transform: rotate(0); }
        100% { transform: rotate(360deg); }
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        max-width: 320px;
        margin: 0 auto;
      }
      #board button {
        width: 90px;
        height: 90px;
        font-size: 2.2rem;
        font-weight: 600;
        background: var(--panel);
        border: 2px solid #424242;
        border-radius: 12px;
        cursor: pointer;
      }
      #board button:disabled {
        cursor: not-allowed;
      }
      .controls {
        margin-top: 28px;
        display: flex;
        gap: 16px;
        justify-content: center;
        align-items: center;
      }
      #new-game {
        padding: 10px 28px;
        background: #1976d2;
        color: #fff;
        border: none;
        border-radius: 7px;
        font-weight: 600;
        font-size: 1.11rem;
        cursor: pointer;
      }
      #new-game:disabled {
        opacity: 0.6;
        cursor: default;
      }
      footer {
        position: fixed;
        left: 0;
        right: 0;
        bottom: 0;
        text-align: center;
        font-size: 13px;
        padding: 6px;
        border-top: 1px solid #eee;
        background: var(--panel);
      }
      .hidden {
        display: none;
      }
    </style>
  </head>
  <body>
    <button class=\"theme-toggle\" id=\"theme-toggle\" aria-label=\"Switch to dark mode\">🌙 Dark</button>
    <h1>Tic-Tac-Toe</h1>
    <div class=\"tagline\">Play against a friend (X vs O)</div>
    <div id=\"status\"></div>
    <div id=\"error\" class=\"hidden\"></div>
    <div id=\"spinner\" class=\"hidden\"><span class=\"wheel\"></span> <span id=\"spinner-text\"></span></div>
    <div id=\"board\"></div>
    <div class=\"controls\">
      <button id=\"new-game\" aria-label=\"Start New Game\">New Game</button>
      <span>Moves: <strong id=\"moves\">0</strong></span>
    </div>
    <footer>Powered by game server at <code id=\"api-base\"></code></footer>
    <script>
      const statusEl = document.getElementById('status');
      const errorEl = document.getElementById('error');
      const spinnerEl = document.getElementById('spinner');
      const spinnerTextEl = document.getElementById('spinner-text');
      const boardEl = document.getElementById('board');
      const movesEl = document.getElementById('moves');
      const newGameButton = document.getElementById('new-game');
      const themeToggle = document.getElementById('theme-toggle');
      const apiBaseEl = document.getElementById('api-base');

      let requestPending = false;

      function render(view) {
        statusEl.textContent = view.banner;
        statusEl.style.color = view.bannerColor;
        errorEl.textContent = view.error;
        errorEl.classList.toggle('hidden', !view.error);
        spinnerTextEl.textContent = view.loadingText;
        spinnerEl.classList.toggle('hidden', !view.loading);
        movesEl.textContent = view.moves;
        newGameButton.disabled = !view.newGameEnabled;
        apiBaseEl.textContent = view.apiBaseUrl;
        boardEl.innerHTML = '';
        view.cells.forEach((row) => {
          row.forEach((cell) => {
            const button = document.createElement('button');
            button.textContent = cell.symbol;
            button.style.color = cell.color;
            button.disabled = !cell.enabled;
            button.setAttribute('aria-label', cell.label);
            button.addEventListener('click', () => activateCell(cell.row, cell.col));
            boardEl.appendChild(button);
          });
        });
      }

      async function send(path, body) {
        if (requestPending) return;
        requestPending = true;
        try {
          const response = await fetch(path, {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: body ? JSON.stringify(body) : undefined,
          });
          if (response.ok) {
            render(await response.json());
          }
        } catch (error) {
          console.error('Request failed', error);
        } finally {
          requestPending = false;
        }
      }

      function activateCell(row, col) {
        send('/api/cell', { row, col });
      }

      async function refresh() {
        if (requestPending) return;
        try {
          const response = await fetch('/api/view');
          if (response.ok) {
            render(await response.json());
          }
        } catch (error) {
          console.error('Refresh failed', error);
        }
      }

      themeToggle.addEventListener('click', () => {
        const root = document.documentElement;
        const next = root.getAttribute('data-theme') === 'light' ? 'dark' : 'light';
        root.setAttribute('data-theme', next);
        themeToggle.textContent = next === 'light' ? '🌙 Dark' : '☀️ Light';
        themeToggle.setAttribute('aria-label', `Switch to ${next === 'light' ? 'dark' : 'light'} mode`);
      });
      newGameButton.addEventListener('click', () => send('/api/new-game'));

      refresh();
      window.setInterval(refresh, 500);
    </script>
  </body>
</html>
"""
