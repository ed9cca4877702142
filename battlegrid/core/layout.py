"""Static ship layout validation and ship construction."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from battlegrid.core.models import BOARD_SIZE, Position, Ship

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShipLayout:
    """One ship of a static layout: name plus [row, col] cells."""

    ship: str
    positions: tuple[tuple[int, int], ...]


@dataclass(frozen=True, slots=True)
class LayoutValidation:
    """Accumulated layout validation outcome."""

    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LayoutResult:
    """Ships built from a layout, or the reasons they could not be built."""

    ships: tuple[Ship, ...]
    validation: LayoutValidation = field(default_factory=lambda: LayoutValidation(is_valid=True))

    @property
    def ok(self) -> bool:
        return self.validation.is_valid


def validate_ship_layout(layout: object, size: int = BOARD_SIZE) -> LayoutValidation:
    """Validate a static layout, reporting every violation found."""
    errors: list[str] = []

    if not _is_sequence(layout):
        return LayoutValidation(is_valid=False, errors=("Ship layout must be an array",))
    if len(layout) == 0:
        return LayoutValidation(is_valid=False, errors=("Ship layout cannot be empty",))

    entries = [_read_entry(item) for item in layout]
    for index, entry in enumerate(entries):
        if entry is None:
            errors.append(f"Ship at index {index} is not a valid object")
            continue
        name, positions = entry
        if not isinstance(name, str) or not name:
            errors.append(f"Ship at index {index} has invalid or missing name")
        if not _is_sequence(positions):
            errors.append(f'Ship "{name}" has invalid positions array')
            continue
        if len(positions) == 0:
            errors.append(f'Ship "{name}" has no positions')
            continue
        for pos_index, position in enumerate(positions):
            errors.extend(_position_errors(name, pos_index, position, size))

    seen: set[str] = set()
    for entry in entries:
        if entry is None or not _is_sequence(entry[1]):
            continue
        for position in entry[1]:
            if not _is_pair(position):
                continue
            key = f"{_coordinate(position[0])}, {_coordinate(position[1])}"
            if key in seen:
                errors.append(f"Overlapping ship positions found at [{key}]")
            seen.add(key)

    return LayoutValidation(is_valid=not errors, errors=tuple(errors))


def build_ships(layout: object, size: int = BOARD_SIZE) -> LayoutResult:
    """Build ships from a layout; on failure ships is empty and errors are returned."""
    validation = validate_ship_layout(layout, size=size)
    if not validation.is_valid:
        return LayoutResult(ships=(), validation=validation)
    ships: list[Ship] = []
    for item in layout:  # type: ignore[union-attr]
        name, positions = _read_entry(item)  # type: ignore[misc]
        cells = tuple(Position(int(row), int(col)) for row, col in positions)
        ships.append(Ship(name=name, positions=cells, hits=(False,) * len(cells)))
    return LayoutResult(ships=tuple(ships), validation=validation)


def initialize_ships(layout: object, size: int = BOARD_SIZE) -> tuple[Ship, ...]:
    """Build ships from a layout, logging and returning () when it is invalid."""
    result = build_ships(layout, size=size)
    if not result.ok:
        logger.error("ship_layout_invalid errors=%s", list(result.validation.errors))
    return result.ships


def check_ship_sunk(ship: Ship) -> bool:
    """Return whether every cell of the ship was hit."""
    return all(ship.hits)


def check_game_won(ships: Sequence[Ship]) -> bool:
    """Return whether every ship has been sunk."""
    return all(check_ship_sunk(ship) for ship in ships)


def _read_entry(item: object) -> tuple[object, object] | None:
    if isinstance(item, ShipLayout):
        return item.ship, item.positions
    if isinstance(item, Mapping):
        return item.get("ship"), item.get("positions")
    return None


def _position_errors(name: object, pos_index: int, position: object, size: int) -> list[str]:
    if not _is_pair(position):
        return [f'Ship "{name}" position {pos_index} is not a valid [row, col] array']
    row, col = position[0], position[1]
    errors: list[str] = []
    if not (_is_int(row) and _is_int(col)):
        errors.append(f'Ship "{name}" position {pos_index} contains non-integer coordinates')
    # NaN compares false both ways and is not reported as out of bounds.
    if _is_number(row) and _is_number(col) and (row < 0 or row >= size or col < 0 or col >= size):
        errors.append(
            f'Ship "{name}" position {pos_index} [{_coordinate(row)}, {_coordinate(col)}] is out of bounds'
        )
    return errors


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_pair(value: object) -> bool:
    return _is_sequence(value) and len(value) == 2  # type: ignore[arg-type]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: object) -> bool:
    """Whole numbers count, so JSON values such as 1.0 are accepted."""
    if isinstance(value, float):
        return value.is_integer()
    return _is_number(value)


def _coordinate(value: object) -> object:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
