"""Shot resolution between the two fleets of a match."""

from __future__ import annotations

from dataclasses import dataclass, replace

from battlegrid.core.board import create_empty_board, in_bounds, with_cell
from battlegrid.core.models import CellState, FleetShip, Grid, Position, Side, display_name


@dataclass(frozen=True, slots=True)
class FleetBoard:
    """One side's fleet plus the attacks it has received."""

    ships: tuple[FleetShip, ...] = ()
    attacks: Grid = ()

    def __post_init__(self) -> None:
        if not self.attacks:
            object.__setattr__(self, "attacks", create_empty_board())

    def all_sunk(self) -> bool:
        """Return whether every ship of this fleet is sunk."""
        return all(ship.is_sunk for ship in self.ships)


@dataclass(frozen=True, slots=True)
class EngagementResult:
    """Outcome of one shot plus the updated target board and attack grid."""

    hit: bool
    game_won: bool
    message: str
    target_board: FleetBoard
    attack_grid: Grid
    ship_sunk: FleetShip | None = None
    applied: bool = True


def attack_position(position: Position, target_board: FleetBoard, attack_grid: Grid) -> EngagementResult:
    """Fire at `position`; inputs are left untouched and new snapshots returned."""
    row, col = position.row, position.col
    if not in_bounds(row, col, len(attack_grid)):
        return EngagementResult(
            hit=False,
            game_won=False,
            message="Invalid target position!",
            target_board=target_board,
            attack_grid=attack_grid,
            applied=False,
        )
    if attack_grid[row][col].is_attacked:
        return EngagementResult(
            hit=False,
            game_won=False,
            message="Already attacked this position!",
            target_board=target_board,
            attack_grid=attack_grid,
            applied=False,
        )

    ships = target_board.ships
    for index, ship in enumerate(ships):
        position_index = ship.index_of(position)
        if position_index == -1:
            continue
        hits = ship.hits[:position_index] + (True,) + ship.hits[position_index + 1 :]
        sunk = all(hits)
        updated = replace(ship, hits=hits, is_sunk=sunk)
        ships = ships[:index] + (updated,) + ships[index + 1 :]
        cell = CellState(is_attacked=True, is_hit=True, ship_name=ship.name)
        board = replace(
            target_board,
            ships=ships,
            attacks=with_cell(target_board.attacks, row, col, cell),
        )
        return EngagementResult(
            hit=True,
            game_won=board.all_sunk(),
            message=f"{display_name(ship.name)} Sunk!" if sunk else "Hit!",
            target_board=board,
            attack_grid=with_cell(attack_grid, row, col, cell),
            ship_sunk=updated if sunk else None,
        )

    miss = CellState(is_attacked=True)
    return EngagementResult(
        hit=False,
        game_won=False,
        message="Miss!",
        target_board=replace(
            target_board,
            attacks=with_cell(target_board.attacks, row, col, miss),
        ),
        attack_grid=with_cell(attack_grid, row, col, miss),
    )


def check_game_over(player_board: FleetBoard, computer_board: FleetBoard) -> tuple[bool, Side | None]:
    """Return whether the match is over and which side won."""
    if player_board.all_sunk():
        return True, Side.COMPUTER
    if computer_board.all_sunk():
        return True, Side.PLAYER
    return False, None
