"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

BOARD_SIZE = 10


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def flipped(self) -> Orientation:
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


class AttackOutcome(StrEnum):
    """Result tag of a single-board attack."""

    HIT = "hit"
    MISS = "miss"
    DUPLICATE = "duplicate"
    OUT_OF_BOUNDS = "out_of_bounds"
    GAME_OVER = "game_over"


class GameStatus(StrEnum):
    """Practice game status."""

    PLAYING = "playing"
    WON = "won"


class MatchPhase(StrEnum):
    """Two-player match phase, strictly ordered."""

    PLACEMENT = "placement"
    BATTLE = "battle"
    GAME_OVER = "gameOver"


class Side(StrEnum):
    """Match participant."""

    PLAYER = "player"
    COMPUTER = "computer"

    @property
    def opponent(self) -> Side:
        return Side.COMPUTER if self is Side.PLAYER else Side.PLAYER


@dataclass(frozen=True, slots=True)
class Position:
    """Board coordinate."""

    row: int
    col: int

    def label(self) -> str:
        """Return the A1-style label (column letter, 1-based row)."""
        return f"{chr(ord('A') + self.col)}{self.row + 1}"


@dataclass(frozen=True, slots=True)
class CellState:
    """Attack state of a single board cell."""

    is_attacked: bool = False
    is_hit: bool = False
    ship_name: str | None = None


Grid = tuple[tuple[CellState, ...], ...]
EMPTY_CELL = CellState()


@dataclass(frozen=True, slots=True)
class Ship:
    """Ship placed from a static layout."""

    name: str
    positions: tuple[Position, ...]
    hits: tuple[bool, ...]
    is_sunk: bool = False

    def index_of(self, position: Position) -> int:
        """Return the index of `position` in this ship, or -1."""
        for index, own in enumerate(self.positions):
            if own == position:
                return index
        return -1


@dataclass(frozen=True, slots=True)
class FleetShip:
    """Ship arranged by a player during the placement phase."""

    name: str
    size: int
    orientation: Orientation = Orientation.HORIZONTAL
    positions: tuple[Position, ...] = ()
    hits: tuple[bool, ...] = ()
    is_placed: bool = False
    is_sunk: bool = False

    def __post_init__(self) -> None:
        if not self.hits:
            object.__setattr__(self, "hits", (False,) * self.size)

    def index_of(self, position: Position) -> int:
        """Return the index of `position` in this ship, or -1."""
        for index, own in enumerate(self.positions):
            if own == position:
                return index
        return -1


@dataclass(frozen=True, slots=True)
class ShipTypeConfig:
    """Size and count of one ship type in a fleet."""

    size: int
    count: int = 1


SHIP_TYPES: dict[str, ShipTypeConfig] = {
    "carrier": ShipTypeConfig(size=5),
    "battleship": ShipTypeConfig(size=4),
    "cruiser": ShipTypeConfig(size=3),
    "submarine": ShipTypeConfig(size=3),
    "destroyer": ShipTypeConfig(size=2),
}

DEFAULT_SHIP_SIZES: tuple[int, ...] = tuple(config.size for config in SHIP_TYPES.values())


def display_name(name: str) -> str:
    """Capitalize the first letter of a ship name for status messages."""
    return name[:1].upper() + name[1:]
