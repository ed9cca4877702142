"""Fleet placement validation and mutation for the placement phase."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

from battlegrid.core.board import in_bounds
from battlegrid.core.models import (
    BOARD_SIZE,
    SHIP_TYPES,
    FleetShip,
    Orientation,
    Position,
    ShipTypeConfig,
)

logger = logging.getLogger(__name__)

MAX_RANDOM_ATTEMPTS = 1000

Fleet = tuple[FleetShip, ...]


@dataclass(frozen=True, slots=True)
class PlacementValidation:
    """Whether a ship fits at a start position and why not."""

    is_valid: bool
    can_place: bool
    error_message: str | None = None
    conflicting_positions: tuple[Position, ...] = ()


def create_ship_template(
    name: str, size: int, orientation: Orientation = Orientation.HORIZONTAL
) -> FleetShip:
    """Create an unplaced ship."""
    return FleetShip(name=name, size=size, orientation=orientation)


def create_fleet(ship_types: Mapping[str, ShipTypeConfig] = SHIP_TYPES) -> Fleet:
    """Create unplaced templates for every ship of the type table.

    Types with a count above one get numbered names so names stay unique.
    """
    ships: list[FleetShip] = []
    for name, config in ship_types.items():
        for copy_index in range(config.count):
            ship_name = name if copy_index == 0 else f"{name}-{copy_index + 1}"
            ships.append(create_ship_template(ship_name, config.size))
    return tuple(ships)


def generate_ship_positions(start: Position, size: int, orientation: Orientation) -> tuple[Position, ...]:
    """Compute the cells of a ship extending right or down from `start`."""
    if orientation is Orientation.HORIZONTAL:
        return tuple(Position(start.row, start.col + i) for i in range(size))
    return tuple(Position(start.row + i, start.col) for i in range(size))


def can_place_ship(
    ships: Sequence[FleetShip],
    start: Position,
    size: int,
    orientation: Orientation,
    board_size: int = BOARD_SIZE,
) -> PlacementValidation:
    """Check bounds and overlap against already placed ships."""
    positions = generate_ship_positions(start, size, orientation)
    for position in positions:
        if not in_bounds(position.row, position.col, board_size):
            return PlacementValidation(
                is_valid=False,
                can_place=False,
                error_message="Ship extends outside the board",
            )

    occupied = _occupied_cells(ships)
    conflicts = tuple(position for position in positions if position in occupied)
    if conflicts:
        return PlacementValidation(
            is_valid=False,
            can_place=False,
            error_message="Ship overlaps with existing ship",
            conflicting_positions=conflicts,
        )
    return PlacementValidation(is_valid=True, can_place=True)


def place_ship(ships: Sequence[FleetShip], name: str, start: Position, orientation: Orientation) -> Fleet:
    """Place the named ship; any previous hit state is cleared."""
    return tuple(
        _placed(ship, start, orientation) if ship.name == name else ship for ship in ships
    )


def remove_ship_from_board(ships: Sequence[FleetShip], name: str) -> Fleet:
    """Return the named ship to the unplaced pool."""
    return tuple(
        replace(ship, positions=(), hits=(False,) * ship.size, is_placed=False, is_sunk=False)
        if ship.name == name
        else ship
        for ship in ships
    )


def rotate_ship(ships: Sequence[FleetShip], name: str) -> Fleet:
    """Flip a placed ship about its anchor; unchanged when the new cells conflict."""
    result: list[FleetShip] = []
    for ship in ships:
        if ship.name != name or not ship.is_placed or not ship.positions:
            result.append(ship)
            continue
        anchor = ship.positions[0]
        orientation = ship.orientation.flipped()
        others = [other for other in ships if other.name != name]
        if can_place_ship(others, anchor, ship.size, orientation).can_place:
            result.append(
                replace(
                    ship,
                    orientation=orientation,
                    positions=generate_ship_positions(anchor, ship.size, orientation),
                )
            )
        else:
            result.append(ship)
    return tuple(result)


def all_ships_placed(ships: Sequence[FleetShip]) -> bool:
    """Return whether every ship is on the board."""
    return all(ship.is_placed for ship in ships)


def placed_ships(ships: Sequence[FleetShip]) -> Fleet:
    return tuple(ship for ship in ships if ship.is_placed)


def unplaced_ships(ships: Sequence[FleetShip]) -> Fleet:
    return tuple(ship for ship in ships if not ship.is_placed)


def auto_place_ships(
    ships: Sequence[FleetShip], rng: random.Random, board_size: int = BOARD_SIZE
) -> Fleet:
    """Randomly place every unplaced ship, avoiding ships placed before it.

    Falls back to a systematic scan after `MAX_RANDOM_ATTEMPTS` draws. A ship
    that fits nowhere stays unplaced; callers must re-check `all_ships_placed`.
    """
    fleet = list(ships)
    for index, ship in enumerate(fleet):
        if ship.is_placed:
            continue
        placed = _random_slot(fleet, ship, rng, board_size)
        if placed is None:
            logger.warning(
                "auto_place_random_exhausted ship=%s attempts=%d", ship.name, MAX_RANDOM_ATTEMPTS
            )
            placed = _systematic_slot(fleet, ship, board_size)
        if placed is None:
            logger.warning("auto_place_failed ship=%s size=%d", ship.name, ship.size)
            continue
        fleet[index] = placed
    return tuple(fleet)


def auto_place_remaining_ships(
    ships: Sequence[FleetShip], rng: random.Random, board_size: int = BOARD_SIZE
) -> Fleet:
    """Auto-place only when something is still unplaced."""
    if all_ships_placed(ships):
        return tuple(ships)
    return auto_place_ships(ships, rng, board_size)


def _random_slot(
    fleet: Sequence[FleetShip], ship: FleetShip, rng: random.Random, board_size: int
) -> FleetShip | None:
    for _ in range(MAX_RANDOM_ATTEMPTS):
        start = Position(rng.randrange(board_size), rng.randrange(board_size))
        orientation = Orientation.HORIZONTAL if rng.random() < 0.5 else Orientation.VERTICAL
        if can_place_ship(fleet, start, ship.size, orientation, board_size).can_place:
            return _placed(ship, start, orientation)
    return None


def _systematic_slot(fleet: Sequence[FleetShip], ship: FleetShip, board_size: int) -> FleetShip | None:
    for row in range(board_size):
        for col in range(board_size):
            for orientation in (Orientation.HORIZONTAL, Orientation.VERTICAL):
                start = Position(row, col)
                if can_place_ship(fleet, start, ship.size, orientation, board_size).can_place:
                    return _placed(ship, start, orientation)
    return None


def _placed(ship: FleetShip, start: Position, orientation: Orientation) -> FleetShip:
    return replace(
        ship,
        positions=generate_ship_positions(start, ship.size, orientation),
        orientation=orientation,
        hits=(False,) * ship.size,
        is_placed=True,
        is_sunk=False,
    )


def _occupied_cells(ships: Sequence[FleetShip]) -> set[Position]:
    return {position for ship in ships if ship.is_placed for position in ship.positions}
