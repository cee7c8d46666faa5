"""Maps a controller snapshot to what the page renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List

from .models import BOARD_SIZE, Cell, ClientViewState, Player, Status, Winner

LOADING_TEXT = "Loading..."
STARTING_TEXT = "Starting game..."


@dataclass(frozen=True)
class Theme:
    primary: str = "#1976d2"
    secondary: str = "#424242"
    accent: str = "#f50057"

    def player_color(self, symbol: str) -> str:
        if symbol == "X":
            return self.primary
        if symbol == "O":
            return self.accent
        return self.secondary


DEFAULT_THEME = Theme()


@dataclass(frozen=True)
class CellView:
    row: int
    col: int
    symbol: str
    enabled: bool
    color: str
    label: str


@dataclass(frozen=True)
class ViewModel:
    cells: List[List[CellView]]
    banner: str
    banner_color: str
    moves: int
    error: str
    loading: bool
    loading_text: str
    new_game_enabled: bool

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        return {
            "cells": data["cells"],
            "banner": self.banner,
            "bannerColor": self.banner_color,
            "moves": self.moves,
            "error": self.error,
            "loading": self.loading,
            "loadingText": self.loading_text,
            "newGameEnabled": self.new_game_enabled,
        }


def _banner(state: ClientViewState, theme: Theme) -> tuple[str, str]:
    session = state.session
    if session is None:
        return STARTING_TEXT, theme.secondary
    if session.status is Status.WIN and session.winner is not Winner.NONE:
        return f"Winner: {session.winner.value}", theme.player_color(session.winner.value)
    if session.status is Status.DRAW:
        return "Draw Game", theme.secondary
    player: Player = session.current_player
    return f"Turn: {player.value}", theme.player_color(player.value)


def build_view_model(state: ClientViewState, theme: Theme = DEFAULT_THEME) -> ViewModel:
    session = state.session
    playable = session is not None and session.status is Status.ONGOING and not state.loading

    cells: List[List[CellView]] = []
    for r in range(BOARD_SIZE):
        row: List[CellView] = []
        for c in range(BOARD_SIZE):
            value = session.cell(r, c) if session is not None else Cell.EMPTY
            row.append(
                CellView(
                    row=r,
                    col=c,
                    symbol=value.value,
                    enabled=playable and value is Cell.EMPTY,
                    color=theme.player_color(value.value),
                    label=f"Row {r + 1} Col {c + 1}",
                )
            )
        cells.append(row)

    banner, banner_color = _banner(state, theme)
    return ViewModel(
        cells=cells,
        banner=banner,
        banner_color=banner_color,
        moves=session.move_count if session is not None else 0,
        error=state.error,
        loading=state.loading,
        loading_text=LOADING_TEXT,
        new_game_enabled=not state.loading,
    )
