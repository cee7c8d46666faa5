"""Shared fixtures: an in-memory game server reachable through httpx."""

from __future__ import annotations

import asyncio
import itertools
import json
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from tictac_frontend.client import SessionClient

BASE_URL = "http://game.test"

WINNING_LINES: Tuple[Tuple[Tuple[int, int], ...], ...] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


@dataclass
class FakeGame:
    id: str
    board: List[List[str]] = field(default_factory=lambda: [[""] * 3 for _ in range(3)])
    current_player: str = "X"
    status: str = "ongoing"
    winner: Optional[str] = None
    moves: int = 0

    def play(self, row: int, col: int) -> Optional[str]:
        if self.status != "ongoing":
            return "Game already finished"
        if self.board[row][col] != "":
            return "Illegal move"
        self.board[row][col] = self.current_player
        self.moves += 1
        for line in WINNING_LINES:
            values = {self.board[r][c] for r, c in line}
            if values == {self.current_player}:
                self.status = "win"
                self.winner = self.current_player
                return None
        if self.moves == 9:
            self.status = "draw"
            return None
        self.current_player = "O" if self.current_player == "X" else "X"
        return None

    def to_json(self, include_id: bool = True) -> Dict[str, object]:
        data: Dict[str, object] = {
            "board": [row[:] for row in self.board],
            "current_player": self.current_player,
            "status": self.status,
            "winner": self.winner,
            "moves": self.moves,
        }
        if include_id:
            data["id"] = self.id
        return data


Responder = Callable[[httpx.Request], httpx.Response]


class FakeGameServer:
    """Plays by the real rules and records every request it receives.

    ``queue(path, responder)`` overrides the next request to ``path``;
    ``offline`` makes every request fail with a connection error.
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self.games: Dict[str, FakeGame] = {}
        self.requests: List[Tuple[str, str]] = []
        self.offline = False
        self.in_flight = 0
        self.max_in_flight = 0
        self._ids = itertools.count(1)
        self._overrides: Dict[str, List[Responder]] = {}

    def queue(self, path: str, responder: Responder) -> None:
        self._overrides.setdefault(path, []).append(responder)

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency:
                await asyncio.sleep(self.latency)
            if self.offline:
                raise httpx.ConnectError("server unreachable", request=request)
            pending = self._overrides.get(path)
            if pending:
                return pending.pop(0)(request)
            return self._route(request, path)
        finally:
            self.in_flight -= 1

    def _route(self, request: httpx.Request, path: str) -> httpx.Response:
        if request.method == "POST" and path == "/game":
            game = FakeGame(id=f"g{next(self._ids)}")
            self.games[game.id] = game
            return httpx.Response(200, json=game.to_json())
        if request.method == "GET" and path.startswith("/game/"):
            game = self.games.get(path[len("/game/"):])
            if game is None:
                return httpx.Response(404, json={"detail": "Game not found"})
            return httpx.Response(200, json=game.to_json())
        if request.method == "POST" and path == "/move":
            body = json.loads(request.content)
            game = self.games.get(body["game_id"])
            if game is None:
                return httpx.Response(404, json={"detail": "Game not found"})
            error = game.play(body["row"], body["col"])
            if error:
                return httpx.Response(200, json={"valid": False, "error": error})
            return httpx.Response(200, json={"valid": True, "state": game.to_json(include_id=False)})
        return httpx.Response(404, json={"detail": "Not found"})


@pytest.fixture
def server() -> FakeGameServer:
    return FakeGameServer()


@pytest.fixture
def transport(server: FakeGameServer) -> httpx.MockTransport:
    return httpx.MockTransport(server.handle)


@pytest.fixture
def make_client(transport: httpx.MockTransport) -> Callable[[], SessionClient]:
    def factory() -> SessionClient:
        return SessionClient(BASE_URL, timeout=1.0, transport=transport)

    return factory
