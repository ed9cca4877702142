from __future__ import annotations

import random
from collections.abc import Callable, Sequence

import pytest

from battlegrid.core.engagement import FleetBoard
from battlegrid.core.models import FleetShip, Orientation, Position
from battlegrid.core.placement import create_fleet, place_ship


class ScriptedRandom(random.Random):
    """Random source whose `random()` draws come from a fixed script.

    `choice` picks the first candidate so tests can predict targets.
    """

    def __init__(self, draws: Sequence[float] = (), seed: int = 7) -> None:
        super().__init__(seed)
        self._draws = list(draws)

    def random(self) -> float:
        if self._draws:
            return self._draws.pop(0)
        return super().random()

    def choice(self, seq):
        return seq[0]


def make_placed_fleet() -> tuple[FleetShip, ...]:
    """Default fleet laid out horizontally on rows 0, 2, 4, 6 and 8 from column 0."""
    ships = create_fleet()
    for index, ship in enumerate(ships):
        ships = place_ship(ships, ship.name, Position(index * 2, 0), Orientation.HORIZONTAL)
    return ships


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRandom]:
    def _make(*draws: float) -> ScriptedRandom:
        return ScriptedRandom(draws)

    return _make


@pytest.fixture
def destroyer_layout() -> list[dict[str, object]]:
    return [{"ship": "destroyer", "positions": [[0, 0], [1, 0]]}]


@pytest.fixture
def two_ship_layout() -> list[dict[str, object]]:
    return [
        {"ship": "destroyer", "positions": [[0, 0], [1, 0]]},
        {"ship": "submarine", "positions": [[3, 0], [3, 1], [3, 2]]},
    ]


@pytest.fixture
def placed_fleet() -> tuple[FleetShip, ...]:
    return make_placed_fleet()


@pytest.fixture
def fleet_board(placed_fleet: tuple[FleetShip, ...]) -> FleetBoard:
    return FleetBoard(ships=placed_fleet)
