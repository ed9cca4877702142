"""Two-player match orchestration: placement, battle and game over."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace

from battlegrid.ai.opponent import NoTargetsError, make_computer_attack
from battlegrid.ai.settings import AIState, Difficulty, initialize_ai, resolve_difficulty
from battlegrid.app.scheduler import TurnScheduler
from battlegrid.core.board import create_empty_board
from battlegrid.core.engagement import EngagementResult, FleetBoard, attack_position
from battlegrid.core.models import (
    SHIP_TYPES,
    FleetShip,
    Grid,
    MatchPhase,
    Orientation,
    Position,
    ShipTypeConfig,
    Side,
)
from battlegrid.core.placement import (
    PlacementValidation,
    all_ships_placed,
    auto_place_remaining_ships,
    auto_place_ships,
    can_place_ship,
    create_fleet,
    place_ship,
    placed_ships,
    remove_ship_from_board,
    rotate_ship,
    unplaced_ships,
)
from battlegrid.core.statistics import GameStatistics, fleet_statistics

logger = logging.getLogger(__name__)

YOUR_TURN_MESSAGE = "Your turn! Click on the enemy grid to attack."
COMPUTER_TURN_MESSAGE = "Computer's turn..."
PLAYER_VICTORY_MESSAGE = "🎉 Victory! You sank all enemy ships!"
COMPUTER_VICTORY_MESSAGE = "💥 Defeat! The computer sank all your ships!"


@dataclass(frozen=True, slots=True)
class SideCounter:
    """Per-side integer counter."""

    player: int = 0
    computer: int = 0

    def of(self, side: Side) -> int:
        return self.player if side is Side.PLAYER else self.computer

    def bump(self, side: Side, amount: int = 1) -> SideCounter:
        if side is Side.PLAYER:
            return replace(self, player=self.player + amount)
        return replace(self, computer=self.computer + amount)


@dataclass(frozen=True, slots=True)
class TwoPlayerGameState:
    """Full match snapshot handed to the presentation layer."""

    phase: MatchPhase
    current_turn: Side
    player_board: FleetBoard
    computer_board: FleetBoard
    player_attacks: Grid
    computer_attacks: Grid
    winner: Side | None = None
    total_shots: SideCounter = SideCounter()
    hits: SideCounter = SideCounter()


@dataclass(frozen=True, slots=True)
class MatchTimings:
    """Pacing delays in seconds between turn steps.

    `computer_think_delay` of None uses the opponent's per-difficulty delay
    multiplied by `ai_delay_factor`.
    """

    player_miss_delay: float = 1.5
    computer_think_delay: float | None = None
    computer_continue_delay: float = 1.5
    computer_miss_delay: float = 2.0
    ai_delay_factor: float = 1.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value is not None and value < 0.0:
                raise ValueError(f"{item.name} must be >= 0")

    def scaled(self, factor: float) -> MatchTimings:
        """Multiply every delay by `factor`."""
        if factor < 0.0:
            raise ValueError("factor must be >= 0")
        think = None if self.computer_think_delay is None else self.computer_think_delay * factor
        return MatchTimings(
            player_miss_delay=self.player_miss_delay * factor,
            computer_think_delay=think,
            computer_continue_delay=self.computer_continue_delay * factor,
            computer_miss_delay=self.computer_miss_delay * factor,
            ai_delay_factor=self.ai_delay_factor * factor,
        )


def initialize_match_state(
    rng: random.Random, ship_types: Mapping[str, ShipTypeConfig] = SHIP_TYPES
) -> TwoPlayerGameState:
    """Fresh match: player templates unplaced, computer fleet auto-placed."""
    computer_ships = auto_place_ships(create_fleet(ship_types), rng)
    if not all_ships_placed(computer_ships):
        logger.warning(
            "computer_fleet_incomplete unplaced=%s",
            [ship.name for ship in unplaced_ships(computer_ships)],
        )
    return TwoPlayerGameState(
        phase=MatchPhase.PLACEMENT,
        current_turn=Side.PLAYER,
        player_board=FleetBoard(ships=create_fleet(ship_types)),
        computer_board=FleetBoard(ships=computer_ships),
        player_attacks=create_empty_board(),
        computer_attacks=create_empty_board(),
    )


class TwoPlayerMatch:
    """Human vs. computer match state machine.

    Every inbound action is a no-op when it is not legal in the current
    phase or turn. Turn hand-overs are scheduled on the injected scheduler
    and run when the driver advances it.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        scheduler: TurnScheduler | None = None,
        difficulty: str | Difficulty = Difficulty.MEDIUM,
        timings: MatchTimings | None = None,
        ship_types: Mapping[str, ShipTypeConfig] = SHIP_TYPES,
    ) -> None:
        self._rng = rng or random.Random()
        self._scheduler = scheduler or TurnScheduler()
        self._timings = timings or MatchTimings()
        self._ship_types = dict(ship_types)
        self._difficulty = resolve_difficulty(difficulty)
        self._ai_state = initialize_ai(self._difficulty)
        self._task_ids: set[int] = set()
        self._state = initialize_match_state(self._rng, self._ship_types)
        self._message = ""

    @property
    def state(self) -> TwoPlayerGameState:
        return self._state

    @property
    def message(self) -> str:
        return self._message

    @property
    def ai_state(self) -> AIState:
        return self._ai_state

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def scheduler(self) -> TurnScheduler:
        return self._scheduler

    @property
    def timings(self) -> MatchTimings:
        return self._timings

    @property
    def phase(self) -> MatchPhase:
        return self._state.phase

    @property
    def current_turn(self) -> Side:
        return self._state.current_turn

    @property
    def turn_in_progress(self) -> bool:
        """True while a scheduled turn step has not run yet."""
        return bool(self._task_ids)

    @property
    def can_start_battle(self) -> bool:
        return all_ships_placed(self._state.player_board.ships)

    @property
    def placed_ships(self) -> tuple[FleetShip, ...]:
        return placed_ships(self._state.player_board.ships)

    @property
    def unplaced_ships(self) -> tuple[FleetShip, ...]:
        return unplaced_ships(self._state.player_board.ships)

    def statistics(self, side: Side) -> GameStatistics:
        """Shot statistics of `side` against the opposing fleet."""
        target = self._state.computer_board if side is Side.PLAYER else self._state.player_board
        return fleet_statistics(self._state.total_shots.of(side), self._state.hits.of(side), target.ships)

    # Placement phase.

    def place_ship(self, name: str, position: Position, orientation: Orientation) -> PlacementValidation:
        """Place or move one of the player's ships."""
        if self._state.phase is not MatchPhase.PLACEMENT:
            return PlacementValidation(
                is_valid=False, can_place=False, error_message="Ships can only be placed before battle"
            )
        ships = self._state.player_board.ships
        ship = next((candidate for candidate in ships if candidate.name == name), None)
        if ship is None:
            return PlacementValidation(is_valid=False, can_place=False, error_message="Ship not found")
        others = [other for other in ships if other.name != name]
        validation = can_place_ship(others, position, ship.size, orientation)
        if validation.can_place:
            self._set_player_ships(place_ship(ships, name, position, orientation))
            logger.debug("ship_placed name=%s at=%s orientation=%s", name, position.label(), orientation.value)
        return validation

    def remove_ship(self, name: str) -> None:
        if self._state.phase is MatchPhase.PLACEMENT:
            self._set_player_ships(remove_ship_from_board(self._state.player_board.ships, name))

    def rotate_ship(self, name: str) -> None:
        if self._state.phase is MatchPhase.PLACEMENT:
            self._set_player_ships(rotate_ship(self._state.player_board.ships, name))

    def auto_place(self) -> bool:
        """Auto-place the player's remaining ships; returns whether all are placed."""
        if self._state.phase is not MatchPhase.PLACEMENT:
            return False
        self._set_player_ships(auto_place_remaining_ships(self._state.player_board.ships, self._rng))
        return self.can_start_battle

    def set_difficulty(self, level: str | Difficulty) -> bool:
        """Switch difficulty and reset the opponent's memory."""
        try:
            difficulty = resolve_difficulty(level)
        except ValueError:
            logger.warning("difficulty_rejected level=%r", level)
            return False
        self._difficulty = difficulty
        self._ai_state = initialize_ai(difficulty)
        logger.info("difficulty_changed difficulty=%s", difficulty.value)
        return True

    def start_battle(self) -> bool:
        if self._state.phase is not MatchPhase.PLACEMENT or not self.can_start_battle:
            return False
        self._state = replace(self._state, phase=MatchPhase.BATTLE, current_turn=Side.PLAYER)
        self._message = YOUR_TURN_MESSAGE
        logger.info("battle_started difficulty=%s", self._difficulty.value)
        return True

    def reset_match(self) -> None:
        """Cancel pending turn steps and start over with fresh fleets."""
        for task_id in self._task_ids:
            self._scheduler.cancel(task_id)
        self._task_ids.clear()
        self._state = initialize_match_state(self._rng, self._ship_types)
        self._ai_state = initialize_ai(self._difficulty)
        self._message = ""
        logger.info("match_reset difficulty=%s", self._difficulty.value)

    # Battle phase.

    def attack(self, position: Position) -> EngagementResult | None:
        return self.attack_computer(position)

    def attack_computer(self, position: Position) -> EngagementResult | None:
        """Fire at the computer's fleet; None when the action is not legal now."""
        state = self._state
        if state.phase is not MatchPhase.BATTLE or state.current_turn is not Side.PLAYER:
            return None
        if self.turn_in_progress:
            return None

        result = attack_position(position, state.computer_board, state.player_attacks)
        if not result.applied:
            self._message = result.message
            return result

        self._state = replace(
            state,
            computer_board=result.target_board,
            player_attacks=result.attack_grid,
            total_shots=state.total_shots.bump(Side.PLAYER),
            hits=state.hits.bump(Side.PLAYER, 1 if result.hit else 0),
        )
        logger.debug("player_attack target=%s hit=%s", position.label(), result.hit)

        if result.game_won:
            self._finish(Side.PLAYER)
            return result

        self._message = result.message
        if not result.hit:
            self._schedule(self._timings.player_miss_delay, self._hand_to_computer, "hand_to_computer")
        return result

    def _hand_to_computer(self) -> None:
        if self._state.phase is not MatchPhase.BATTLE:
            return
        self._state = replace(self._state, current_turn=Side.COMPUTER)
        self._message = COMPUTER_TURN_MESSAGE
        self._schedule(self._think_delay(), self._computer_step, "computer_attack")

    def _computer_step(self) -> None:
        state = self._state
        if state.phase is not MatchPhase.BATTLE or state.current_turn is not Side.COMPUTER:
            return
        try:
            attack = make_computer_attack(state.player_board, state.computer_attacks, self._ai_state, self._rng)
        except NoTargetsError:
            logger.error("computer_no_targets shots=%d", state.total_shots.computer)
            self._hand_to_player()
            return

        self._ai_state = attack.ai_state
        result = attack.result
        self._state = replace(
            state,
            player_board=result.target_board,
            computer_attacks=result.attack_grid,
            total_shots=state.total_shots.bump(Side.COMPUTER),
            hits=state.hits.bump(Side.COMPUTER, 1 if result.hit else 0),
        )

        if result.game_won:
            self._finish(Side.COMPUTER)
            return

        self._message = f"Computer {result.message.lower()} at {attack.position.label()}"
        if result.hit:
            self._schedule(self._timings.computer_continue_delay, self._computer_step, "computer_attack")
        else:
            self._schedule(self._timings.computer_miss_delay, self._hand_to_player, "hand_to_player")

    def _hand_to_player(self) -> None:
        if self._state.phase is not MatchPhase.BATTLE:
            return
        self._state = replace(self._state, current_turn=Side.PLAYER)
        self._message = YOUR_TURN_MESSAGE

    def _finish(self, winner: Side) -> None:
        self._state = replace(self._state, phase=MatchPhase.GAME_OVER, winner=winner)
        self._message = PLAYER_VICTORY_MESSAGE if winner is Side.PLAYER else COMPUTER_VICTORY_MESSAGE
        logger.info(
            "match_over winner=%s player_shots=%d computer_shots=%d",
            winner.value,
            self._state.total_shots.player,
            self._state.total_shots.computer,
        )

    def _think_delay(self) -> float:
        if self._timings.computer_think_delay is not None:
            return self._timings.computer_think_delay
        return self._ai_state.delay_between_moves / 1000.0 * self._timings.ai_delay_factor

    def _schedule(self, delay_seconds: float, step: Callable[[], None], label: str) -> None:
        task_id = 0

        def _run() -> None:
            self._task_ids.discard(task_id)
            step()

        task_id = self._scheduler.call_later(delay_seconds, _run, label=label)
        self._task_ids.add(task_id)

    def _set_player_ships(self, ships: tuple[FleetShip, ...]) -> None:
        self._state = replace(self._state, player_board=replace(self._state.player_board, ships=ships))
