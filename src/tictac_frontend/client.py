"""Typed async wrapper around the remote game server's HTTP API."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from .errors import ProtocolError, TransportError
from .models import BOARD_SIZE, GameState, GameStatePayload, MoveResponsePayload, MoveResult

logger = logging.getLogger(__name__)

DEFAULT_ILLEGAL_MOVE_REASON = "Illegal move"


class SessionClient:
    """Client for ``POST /game``, ``GET /game/{id}`` and ``POST /move``.

    Every call either returns a fully parsed value or raises
    :class:`~tictac_frontend.errors.TransportError` /
    :class:`~tictac_frontend.errors.ProtocolError`. A move the server refuses
    is not an error; it comes back as a rejected :class:`MoveResult`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_session(self) -> GameState:
        body = await self._request("POST", "/game", failure="Failed to start new game")
        payload = _parse(GameStatePayload, body)
        if not payload.id:
            raise ProtocolError("Server did not assign a game id")
        return _to_state(payload, payload.id, default_moves=0)

    async def fetch_state(self, game_id: str) -> GameState:
        if not game_id:
            raise ValueError("fetch_state requires a game id")
        body = await self._request(
            "GET", f"/game/{quote(game_id, safe='')}", failure="Failed to fetch game state"
        )
        payload = _parse(GameStatePayload, body)
        if payload.id and payload.id != game_id:
            raise ProtocolError(
                f"Asked for game {game_id!r} but the server answered for {payload.id!r}"
            )
        return _to_state(payload, game_id)

    async def submit_move(self, game_id: str, row: int, col: int) -> MoveResult:
        if not game_id:
            raise ValueError("submit_move requires a game id")
        for name, value in (("row", row), ("col", col)):
            if not 0 <= value < BOARD_SIZE:
                raise ValueError(f"{name} must be between 0 and {BOARD_SIZE - 1}, got {value}")

        body = await self._request(
            "POST",
            "/move",
            json={"game_id": game_id, "row": row, "col": col},
            failure="Move failed",
            include_status=True,
        )
        payload = _parse(MoveResponsePayload, body)
        if not payload.valid:
            reason = payload.error or DEFAULT_ILLEGAL_MOVE_REASON
            logger.info("Move (%d, %d) in game %s rejected: %s", row, col, game_id, reason)
            return MoveResult.reject(reason)
        if payload.state is None:
            raise ProtocolError("Accepted move response carried no state")
        return MoveResult.accept(_to_state(payload.state, game_id))

    # ---- helpers ----

    async def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        json: Optional[dict] = None,
        include_status: bool = False,
    ) -> Any:
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(failure) from exc

        if not response.is_success:
            logger.warning("%s %s returned HTTP %d", method, path, response.status_code)
            message = f"{failure} ({response.status_code})" if include_status else failure
            raise TransportError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError(f"{method} {path} returned a body that is not JSON") from exc


def _parse(model: type[BaseModel], body: Any) -> Any:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ProtocolError(f"Unexpected response shape: {exc.error_count()} error(s)") from exc


def _to_state(
    payload: GameStatePayload, game_id: str, default_moves: Optional[int] = None
) -> GameState:
    try:
        return payload.to_state(game_id, default_moves=default_moves)
    except ValueError as exc:
        raise ProtocolError(str(exc)) from exc
