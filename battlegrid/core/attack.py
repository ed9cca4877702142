"""Single-board attack resolution for practice games."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from battlegrid.core.board import create_empty_board, in_bounds, with_cell
from battlegrid.core.layout import build_ships, check_game_won, check_ship_sunk
from battlegrid.core.models import (
    AttackOutcome,
    CellState,
    GameStatus,
    Grid,
    Position,
    Ship,
    display_name,
)

logger = logging.getLogger(__name__)

VICTORY_MESSAGE = "🎉 Victory! All ships destroyed! 🎉"


@dataclass(frozen=True, slots=True)
class GameState:
    """Practice game snapshot."""

    board: Grid
    ships: tuple[Ship, ...]
    game_status: GameStatus = GameStatus.PLAYING
    total_shots: int = 0
    hits: int = 0


@dataclass(frozen=True, slots=True)
class AttackResult:
    """Outcome of `attack_cell`."""

    game_state: GameState
    result: AttackOutcome
    message: str


def create_game_state(ships: tuple[Ship, ...]) -> GameState:
    """Create a fresh practice state over an empty board."""
    return GameState(board=create_empty_board(), ships=ships)


def create_practice_game(layout: object) -> GameState:
    """Create a practice state from a static layout.

    An invalid layout is logged and yields a state with no ships; the
    caller should check the layout separately before relying on it.
    """
    result = build_ships(layout)
    if not result.ok:
        logger.error("ship_layout_invalid errors=%s", list(result.validation.errors))
    return create_game_state(result.ships)


def attack_cell(row: object, col: object, game_state: GameState) -> AttackResult:
    """Resolve one attack against a practice board."""
    if not isinstance(game_state, GameState):
        return AttackResult(game_state, AttackOutcome.OUT_OF_BOUNDS, "Invalid game state provided.")

    num_row = _floor_coordinate(row)
    num_col = _floor_coordinate(col)
    if num_row is None or num_col is None:
        return AttackResult(
            game_state,
            AttackOutcome.OUT_OF_BOUNDS,
            f"Invalid coordinates [{row}, {col}]. Please provide valid numbers.",
        )

    if game_state.game_status is GameStatus.WON:
        return AttackResult(
            game_state,
            AttackOutcome.GAME_OVER,
            "Game is already complete! All ships have been destroyed.",
        )

    size = len(game_state.board)
    if not in_bounds(num_row, num_col, size) or len(game_state.board[num_row]) != size:
        return AttackResult(
            game_state,
            AttackOutcome.OUT_OF_BOUNDS,
            f"Invalid coordinates [{num_row}, {num_col}]. Please click within the game board.",
        )

    if game_state.board[num_row][num_col].is_attacked:
        return AttackResult(
            game_state,
            AttackOutcome.DUPLICATE,
            "You've already fired at this position! Try a different cell.",
        )

    target = Position(num_row, num_col)
    ships = game_state.ships
    hits = game_state.hits
    hit_index, hit_ship = _find_ship(ships, target)

    if hit_ship is None:
        board = with_cell(game_state.board, num_row, num_col, CellState(is_attacked=True))
        outcome = AttackOutcome.MISS
        message = "Miss! No ship at this location."
    else:
        updated = _mark_hit(hit_ship, target)
        ships = ships[:hit_index] + (updated,) + ships[hit_index + 1 :]
        board = with_cell(
            game_state.board,
            num_row,
            num_col,
            CellState(is_attacked=True, is_hit=True, ship_name=hit_ship.name),
        )
        hits += 1
        outcome = AttackOutcome.HIT
        if updated.is_sunk:
            message = f"Hit! {display_name(updated.name)} Sunk!"
        else:
            message = "Hit! You struck a ship!"

    won = check_game_won(ships)
    if won:
        message = VICTORY_MESSAGE
        logger.info("practice_game_won total_shots=%d hits=%d", game_state.total_shots + 1, hits)

    new_state = replace(
        game_state,
        board=board,
        ships=ships,
        total_shots=game_state.total_shots + 1,
        hits=hits,
        game_status=GameStatus.WON if won else GameStatus.PLAYING,
    )
    logger.debug("practice_attack row=%d col=%d result=%s", num_row, num_col, outcome.value)
    return AttackResult(new_state, outcome, message)


def _floor_coordinate(value: object) -> int | None:
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.floor(number)


def _find_ship(ships: tuple[Ship, ...], target: Position) -> tuple[int, Ship | None]:
    for index, ship in enumerate(ships):
        if ship.index_of(target) != -1:
            return index, ship
    return -1, None


def _mark_hit(ship: Ship, target: Position) -> Ship:
    position_index = ship.index_of(target)
    hits = ship.hits[:position_index] + (True,) + ship.hits[position_index + 1 :]
    updated = replace(ship, hits=hits)
    return replace(updated, is_sunk=check_ship_sunk(updated))
