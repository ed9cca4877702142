"""Tests for the placement engine."""

import logging
import random

from battlegrid.core.models import FleetShip, Orientation, Position, ShipTypeConfig
from battlegrid.core.placement import (
    all_ships_placed,
    auto_place_remaining_ships,
    auto_place_ships,
    can_place_ship,
    create_fleet,
    create_ship_template,
    generate_ship_positions,
    place_ship,
    placed_ships,
    remove_ship_from_board,
    rotate_ship,
    unplaced_ships,
)


def test_create_fleet_builds_unplaced_templates() -> None:
    fleet = create_fleet()
    assert [ship.name for ship in fleet] == ["carrier", "battleship", "cruiser", "submarine", "destroyer"]
    assert [ship.size for ship in fleet] == [5, 4, 3, 3, 2]
    assert all(not ship.is_placed and ship.positions == () for ship in fleet)
    assert fleet[0].hits == (False,) * 5


def test_create_fleet_numbers_repeated_types() -> None:
    fleet = create_fleet({"patrol": ShipTypeConfig(size=2, count=3)})
    assert [ship.name for ship in fleet] == ["patrol", "patrol-2", "patrol-3"]


def test_generate_positions_along_axis() -> None:
    assert generate_ship_positions(Position(2, 3), 3, Orientation.HORIZONTAL) == (
        Position(2, 3),
        Position(2, 4),
        Position(2, 5),
    )
    assert generate_ship_positions(Position(2, 3), 2, Orientation.VERTICAL) == (Position(2, 3), Position(3, 3))


def test_can_place_rejects_out_of_board() -> None:
    validation = can_place_ship([], Position(0, 8), 3, Orientation.HORIZONTAL)
    assert not validation.can_place
    assert validation.error_message == "Ship extends outside the board"


def test_can_place_reports_conflicting_positions(placed_fleet) -> None:
    validation = can_place_ship(placed_fleet, Position(0, 3), 3, Orientation.VERTICAL)
    assert not validation.can_place
    assert not validation.is_valid
    assert validation.error_message == "Ship overlaps with existing ship"
    assert validation.conflicting_positions == (Position(0, 3), Position(2, 3))


def test_can_place_ignores_unplaced_ships() -> None:
    fleet = create_fleet()
    validation = can_place_ship(fleet, Position(0, 0), 5, Orientation.HORIZONTAL)
    assert validation.can_place
    assert validation.is_valid


def test_can_place_is_pure(placed_fleet) -> None:
    first = can_place_ship(placed_fleet, Position(9, 0), 4, Orientation.HORIZONTAL)
    second = can_place_ship(placed_fleet, Position(9, 0), 4, Orientation.HORIZONTAL)
    assert first == second


def test_place_ship_resets_hits() -> None:
    ship = FleetShip(name="destroyer", size=2, hits=(True, True), is_placed=False)
    fleet = place_ship((ship,), "destroyer", Position(5, 5), Orientation.VERTICAL)
    assert fleet[0].positions == (Position(5, 5), Position(6, 5))
    assert fleet[0].hits == (False, False)
    assert fleet[0].is_placed
    assert fleet[0].orientation is Orientation.VERTICAL


def test_remove_ship_from_board(placed_fleet) -> None:
    fleet = remove_ship_from_board(placed_fleet, "cruiser")
    cruiser = next(ship for ship in fleet if ship.name == "cruiser")
    assert cruiser.positions == ()
    assert not cruiser.is_placed
    assert len(placed_ships(fleet)) == 4
    assert [ship.name for ship in unplaced_ships(fleet)] == ["cruiser"]


def test_rotate_ship_about_anchor() -> None:
    fleet = place_ship(create_fleet(), "destroyer", Position(5, 5), Orientation.HORIZONTAL)
    rotated = rotate_ship(fleet, "destroyer")
    destroyer = next(ship for ship in rotated if ship.name == "destroyer")
    assert destroyer.orientation is Orientation.VERTICAL
    assert destroyer.positions == (Position(5, 5), Position(6, 5))


def test_rotate_ship_is_noop_on_conflict(placed_fleet) -> None:
    # Carrier at row 0 would rotate down through the battleship on row 2.
    assert rotate_ship(placed_fleet, "carrier") == placed_fleet


def test_rotate_ship_is_noop_out_of_board() -> None:
    fleet = place_ship(create_fleet(), "carrier", Position(8, 0), Orientation.HORIZONTAL)
    assert rotate_ship(fleet, "carrier") == fleet


def test_rotate_unplaced_ship_is_noop() -> None:
    fleet = create_fleet()
    assert rotate_ship(fleet, "carrier") == fleet


def test_auto_place_places_every_ship_without_overlap() -> None:
    fleet = auto_place_ships(create_fleet(), random.Random(5))
    assert all_ships_placed(fleet)
    cells = [position for ship in fleet for position in ship.positions]
    assert len(cells) == len(set(cells)) == 17
    assert all(0 <= cell.row < 10 and 0 <= cell.col < 10 for cell in cells)


def test_auto_place_keeps_already_placed_ships(placed_fleet) -> None:
    fleet = remove_ship_from_board(placed_fleet, "destroyer")
    result = auto_place_remaining_ships(fleet, random.Random(3))
    assert all_ships_placed(result)
    assert result[0] == placed_fleet[0]


def test_auto_place_remaining_returns_complete_fleet_unchanged(placed_fleet) -> None:
    assert auto_place_remaining_ships(placed_fleet, random.Random(3)) == placed_fleet


def test_auto_place_falls_back_to_systematic_scan(caplog) -> None:
    class _CornerRandom(random.Random):
        def randrange(self, *args, **kwargs):
            return 9

        def random(self) -> float:
            return 0.1

    with caplog.at_level(logging.WARNING, logger="battlegrid.core.placement"):
        fleet = auto_place_ships((create_ship_template("destroyer", 2),), _CornerRandom())
    assert fleet[0].is_placed
    assert fleet[0].positions == (Position(0, 0), Position(0, 1))
    assert "auto_place_random_exhausted" in caplog.text


def test_auto_place_exhaustion_leaves_ship_unplaced_with_warning(caplog) -> None:
    fleet = (create_ship_template("titan", 11),)
    with caplog.at_level(logging.WARNING, logger="battlegrid.core.placement"):
        result = auto_place_ships(fleet, random.Random(1))
    assert not all_ships_placed(result)
    assert "auto_place_failed ship=titan" in caplog.text
