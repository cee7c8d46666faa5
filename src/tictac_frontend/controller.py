"""Keeps the client's copy of a game in sync with the server."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from .client import SessionClient
from .errors import SessionClientError
from .models import ClientViewState, GameState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.5


class PollTimer:
    """A single recurring tick, owned by one controller.

    The timer has one task slot: ``start`` always releases whatever occupied
    it first, so two ticking tasks can never coexist. ``stop`` bumps the
    generation before cancelling, so a task that is already past its sleep
    sees it was released and returns without ticking.
    """

    def __init__(self, interval: float, on_tick: Callable[[], Awaitable[None]]) -> None:
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self.interval = interval
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self.active = False

    def start(self) -> None:
        self.stop()
        self.active = True
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))

    def stop(self) -> Optional[asyncio.Task]:
        """Release the timer; returns the cancelled task, if one was running."""

        self._generation += 1
        self.active = False
        task, self._task = self._task, None
        if task is None or task.done():
            return None
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is current:
            # Stopped from inside its own tick; the loop exits once the tick returns.
            return None
        task.cancel()
        return task

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            await asyncio.sleep(self.interval)
            if generation != self._generation:
                return
            try:
                await self._on_tick()
            except Exception:
                logger.exception("Poll tick failed")


class SyncController:
    """Owns the client view state and drives every transition of it.

    ``new_game``, ``submit_move`` and ``poll_once`` are the only ways the
    state changes. All three run under the ``loading`` guard, so at most one
    request is in flight at a time, and all three hand server responses to
    ``_replace_session``, which is also the only place the poll timer is
    started or stopped.
    """

    def __init__(self, client: SessionClient, *, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._client = client
        self._session: Optional[GameState] = None
        self._loading = False
        self._error = ""
        self._closed = False
        self._poller = PollTimer(poll_interval, self.poll_once)

    # ---- read side ----

    @property
    def session(self) -> Optional[GameState]:
        return self._session

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str:
        return self._error

    @property
    def polling(self) -> bool:
        return self._poller.active

    def snapshot(self) -> ClientViewState:
        return ClientViewState(
            session=self._session,
            loading=self._loading,
            error=self._error,
            polling=self._poller.active,
        )

    # ---- transitions ----

    async def start(self) -> None:
        """Create the first session."""

        await self.new_game()

    async def new_game(self) -> None:
        """Drop the current session, if any, and create a fresh one."""

        if self._loading or self._closed:
            return
        self._replace_session(None)
        async with self._request():
            try:
                state = await self._client.create_session()
            except SessionClientError as exc:
                self._fail("create a game", exc)
                return
            if self._closed:
                logger.debug("Discarding game %s created after shutdown", state.id)
                return
            logger.info("Started game %s", state.id)
            self._replace_session(state)

    async def submit_move(self, row: int, col: int) -> None:
        session = self._session
        if self._loading or self._closed or session is None or session.is_terminal:
            return
        async with self._request():
            try:
                result = await self._client.submit_move(session.id, row, col)
            except SessionClientError as exc:
                self._fail("submit a move", exc)
                return
            if not result.accepted:
                self._error = result.reason
                return
            self._accept(session.id, result.state)

    async def poll_once(self) -> None:
        """One poll tick: refresh the session from the server."""

        session = self._session
        if self._loading or self._closed or session is None or session.is_terminal:
            return
        async with self._request():
            try:
                state = await self._client.fetch_state(session.id)
            except SessionClientError as exc:
                self._fail("refresh the game", exc)
                return
            self._accept(session.id, state)

    async def close(self) -> None:
        """Stop polling for good. Later ticks and calls are no-ops."""

        self._closed = True
        task = self._poller.stop()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    # ---- helpers ----

    @asynccontextmanager
    async def _request(self) -> AsyncIterator[None]:
        self._loading = True
        self._error = ""
        try:
            yield
        finally:
            self._loading = False

    def _fail(self, action: str, exc: SessionClientError) -> None:
        logger.warning("Could not %s: %s", action, exc)
        self._error = str(exc)

    def _accept(self, game_id: str, state: Optional[GameState]) -> None:
        current = self._session
        if state is None or current is None or current.id != game_id:
            logger.debug("Discarding response for replaced game %s", game_id)
            return
        if current.is_terminal:
            logger.debug("Discarding response for finished game %s", game_id)
            return
        if state.move_count < current.move_count:
            logger.debug(
                "Discarding stale state for game %s (%d moves < %d)",
                game_id,
                state.move_count,
                current.move_count,
            )
            return
        if state.is_terminal:
            logger.info("Game %s finished: %s", game_id, state.status.value)
        self._replace_session(state)

    def _replace_session(self, state: Optional[GameState]) -> None:
        self._session = state
        live = state is not None and not state.is_terminal and not self._closed
        if live and not self._poller.active:
            self._poller.start()
        elif not live and self._poller.active:
            self._poller.stop()
