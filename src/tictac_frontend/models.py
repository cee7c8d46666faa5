"""Game state types shared by the client, the controller and the view."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOARD_SIZE = 3


class Cell(str, Enum):
    EMPTY = ""
    X = "X"
    O = "O"


class Player(str, Enum):
    X = "X"
    O = "O"


class Winner(str, Enum):
    X = "X"
    O = "O"
    NONE = ""


class Status(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


Board = Tuple[Tuple[Cell, ...], ...]


def empty_board() -> Board:
    return tuple(tuple(Cell.EMPTY for _ in range(BOARD_SIZE)) for _ in range(BOARD_SIZE))


@dataclass(frozen=True)
class GameState:
    """Client copy of one server-side game.

    Instances are never edited in place; every server response produces a new
    one that replaces the previous copy as a whole.
    """

    id: str
    board: Board
    current_player: Player
    status: Status
    winner: Winner = Winner.NONE
    move_count: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Game id must be non-empty")
        if len(self.board) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in self.board):
            raise ValueError("Board must be 3x3")
        if self.move_count < 0:
            raise ValueError("Move count must be non-negative")
        if (self.status is Status.WIN) != (self.winner is not Winner.NONE):
            raise ValueError("A winner is set exactly when the status is 'win'")

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.ONGOING

    def cell(self, row: int, col: int) -> Cell:
        return self.board[row][col]


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move the server processed: accepted with a state, or rejected."""

    accepted: bool
    state: Optional[GameState] = None
    reason: str = ""

    @classmethod
    def accept(cls, state: GameState) -> "MoveResult":
        return cls(accepted=True, state=state)

    @classmethod
    def reject(cls, reason: str) -> "MoveResult":
        return cls(accepted=False, reason=reason)


@dataclass(frozen=True)
class ClientViewState:
    """Snapshot of the controller's state handed to the presentation layer."""

    session: Optional[GameState] = None
    loading: bool = False
    error: str = ""
    polling: bool = False


# ---------- Wire payloads ----------


CellValue = Literal["", "X", "O"]


class GameStatePayload(BaseModel):
    """Game state as returned by ``POST /game``, ``GET /game/{id}`` and ``POST /move``."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    board: List[List[CellValue]]
    current_player: Literal["X", "O"]
    status: Literal["ongoing", "win", "draw"]
    winner: Optional[Literal["X", "O", ""]] = None
    moves: Optional[int] = Field(default=None, ge=0)

    @field_validator("board")
    @classmethod
    def ensure_three_by_three(cls, value: List[List[str]]) -> List[List[str]]:
        if len(value) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in value):
            raise ValueError("board must be a 3x3 grid")
        return value

    def to_state(self, game_id: str, default_moves: Optional[int] = None) -> GameState:
        """Convert to a :class:`GameState`.

        ``default_moves`` is only supplied for session creation; anywhere else a
        missing move counter is an error rather than a silent zero.
        """

        moves = self.moves if self.moves is not None else default_moves
        if moves is None:
            raise ValueError("response is missing the move counter")
        status = Status(self.status)
        if status is Status.WIN:
            if not self.winner:
                raise ValueError("status is 'win' but no winner was given")
            winner = Winner(self.winner)
        else:
            winner = Winner.NONE
        return GameState(
            id=game_id,
            board=tuple(tuple(Cell(value) for value in row) for row in self.board),
            current_player=Player(self.current_player),
            status=status,
            winner=winner,
            move_count=moves,
        )


class MoveResponsePayload(BaseModel):
    """Body of the ``POST /move`` response."""

    model_config = ConfigDict(extra="ignore")

    valid: bool
    state: Optional[GameStatePayload] = None
    error: Optional[str] = None
