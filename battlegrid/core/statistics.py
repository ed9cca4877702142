"""Derived statistics for status panels."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from battlegrid.core.attack import GameState
from battlegrid.core.models import FleetShip, Ship, display_name


@dataclass(frozen=True, slots=True)
class GameStatistics:
    """Aggregate shot and fleet statistics."""

    total_shots: int
    hits: int
    misses: int
    accuracy: int
    ships_remaining: int
    ships_sunk: int
    ships_total: int
    game_progress: int


@dataclass(frozen=True, slots=True)
class ShipStatus:
    """Per-ship row of a fleet status panel."""

    name: str
    display_name: str
    size: int
    hit_count: int
    is_sunk: bool


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, rounding halves up; 0 when `whole` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def accuracy(total_shots: int, hits: int) -> int:
    return percentage(hits, total_shots)


def fleet_statistics(
    total_shots: int, hits: int, ships: Sequence[Ship | FleetShip]
) -> GameStatistics:
    """Build statistics from raw counters and a ship set."""
    ships_sunk = sum(1 for ship in ships if ship.is_sunk)
    total_cells = sum(len(ship.positions) for ship in ships)
    hit_cells = sum(sum(1 for hit in ship.hits if hit) for ship in ships)
    return GameStatistics(
        total_shots=total_shots,
        hits=hits,
        misses=total_shots - hits,
        accuracy=accuracy(total_shots, hits),
        ships_remaining=len(ships) - ships_sunk,
        ships_sunk=ships_sunk,
        ships_total=len(ships),
        game_progress=percentage(hit_cells, total_cells),
    )


def game_statistics(state: GameState) -> GameStatistics:
    return fleet_statistics(state.total_shots, state.hits, state.ships)


def ship_statuses(ships: Sequence[Ship | FleetShip]) -> tuple[ShipStatus, ...]:
    """Project ships into status panel rows."""
    return tuple(
        ShipStatus(
            name=ship.name,
            display_name=display_name(ship.name),
            size=len(ship.positions) if ship.positions else len(ship.hits),
            hit_count=sum(1 for hit in ship.hits if hit),
            is_sunk=ship.is_sunk,
        )
        for ship in ships
    )
