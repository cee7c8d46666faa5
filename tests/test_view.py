"""Tests for the presentation adapter."""

from tictac_frontend.models import (
    BOARD_SIZE,
    Cell,
    ClientViewState,
    GameState,
    Player,
    Status,
    Winner,
    empty_board,
)
from tictac_frontend.view import DEFAULT_THEME, LOADING_TEXT, build_view_model


def _board(*rows):
    return tuple(tuple(Cell(value) for value in row) for row in rows)


def _game(**overrides):
    fields = dict(
        id="g1",
        board=empty_board(),
        current_player=Player.X,
        status=Status.ONGOING,
        winner=Winner.NONE,
        move_count=0,
    )
    fields.update(overrides)
    return GameState(**fields)


def test_no_session_shows_empty_disabled_board():
    view = build_view_model(ClientViewState(loading=True))
    assert len(view.cells) == BOARD_SIZE
    assert all(len(row) == BOARD_SIZE for row in view.cells)
    assert view.banner == "Starting game..."
    assert view.moves == 0
    assert view.loading
    assert view.loading_text == LOADING_TEXT
    assert not view.new_game_enabled
    assert all(cell.symbol == "" and not cell.enabled for row in view.cells for cell in row)


def test_ongoing_game_enables_only_empty_cells():
    board = _board(["X", "", ""], ["", "O", ""], ["", "", ""])
    view = build_view_model(ClientViewState(session=_game(board=board, move_count=2)))
    assert view.banner == "Turn: X"
    assert view.banner_color == DEFAULT_THEME.primary
    assert view.moves == 2
    assert not view.cells[0][0].enabled
    assert not view.cells[1][1].enabled
    assert view.cells[2][2].enabled
    assert view.cells[0][0].color == DEFAULT_THEME.primary
    assert view.cells[1][1].color == DEFAULT_THEME.accent
    assert view.cells[2][2].color == DEFAULT_THEME.secondary
    assert view.cells[2][1].label == "Row 3 Col 2"


def test_loading_disables_every_cell():
    view = build_view_model(ClientViewState(session=_game(), loading=True))
    assert not any(cell.enabled for row in view.cells for cell in row)
    assert view.loading


def test_turn_banner_uses_player_color():
    view = build_view_model(ClientViewState(session=_game(current_player=Player.O)))
    assert view.banner == "Turn: O"
    assert view.banner_color == DEFAULT_THEME.accent


def test_win_announces_winner_and_locks_board():
    board = _board(["O", "O", "O"], ["X", "X", ""], ["X", "", ""])
    game = _game(board=board, status=Status.WIN, winner=Winner.O, move_count=6)
    view = build_view_model(ClientViewState(session=game))
    assert view.banner == "Winner: O"
    assert view.banner_color == DEFAULT_THEME.accent
    assert not any(cell.enabled for row in view.cells for cell in row)


def test_draw_announcement():
    board = _board(["X", "O", "X"], ["X", "O", "O"], ["O", "X", "X"])
    game = _game(board=board, status=Status.DRAW, move_count=9)
    view = build_view_model(ClientViewState(session=game))
    assert view.banner == "Draw Game"
    assert view.moves == 9


def test_error_text_passes_through_and_output_is_stable():
    state = ClientViewState(session=_game(), error="Illegal move")
    first = build_view_model(state)
    second = build_view_model(state)
    assert first.error == "Illegal move"
    assert first == second


def test_to_dict_uses_page_field_names():
    data = build_view_model(ClientViewState(session=_game())).to_dict()
    assert data["banner"] == "Turn: X"
    assert data["newGameEnabled"] is True
    assert data["cells"][1][2] == {
        "row": 1,
        "col": 2,
        "symbol": "",
        "enabled": True,
        "color": DEFAULT_THEME.secondary,
        "label": "Row 2 Col 3",
    }
