"""Queue-driven hunt/target computer opponent."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace

from battlegrid.ai.settings import AIState, Difficulty, TargetStrategy
from battlegrid.core.board import in_bounds, unattacked_positions
from battlegrid.core.engagement import EngagementResult, FleetBoard, attack_position
from battlegrid.core.models import Grid, Position

logger = logging.getLogger(__name__)

# Up, down, left, right.
_NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class NoTargetsError(RuntimeError):
    """Raised when every cell of the attack grid was already attacked."""


@dataclass(frozen=True, slots=True)
class ComputerAttack:
    """One computer shot: where it fired, what happened, and the next AI state."""

    position: Position
    result: EngagementResult
    ai_state: AIState


def make_computer_attack(
    target_board: FleetBoard,
    attack_grid: Grid,
    ai_state: AIState,
    rng: random.Random,
) -> ComputerAttack:
    """Pick a target, fire at it and fold the result into the AI state.

    Queued follow-up cells are popped without re-checking whether they were
    attacked meanwhile; such a shot resolves as an already-attacked no-op.
    """
    position, ai_state = choose_target(attack_grid, ai_state, rng)
    result = attack_position(position, target_board, attack_grid)
    next_state = update_ai_state(ai_state, position, result, size=len(attack_grid))
    logger.debug(
        "computer_attack difficulty=%s target=%s hit=%s sunk=%s queue=%d",
        ai_state.difficulty.value,
        position.label(),
        result.hit,
        result.ship_sunk.name if result.ship_sunk else None,
        len(next_state.target_queue),
    )
    return ComputerAttack(position=position, result=result, ai_state=next_state)


def choose_target(attack_grid: Grid, ai_state: AIState, rng: random.Random) -> tuple[Position, AIState]:
    """Return the next target and the state with any consumed queue entry removed."""
    optimal = rng.random() < ai_state.hit_probability

    if optimal and ai_state.smart_targeting and ai_state.target_queue:
        head, *rest = ai_state.target_queue
        return head, replace(ai_state, target_queue=tuple(rest))

    if optimal and ai_state.strategy is TargetStrategy.SMART:
        strategic = strategic_target(attack_grid, ai_state, rng)
        if strategic is not None:
            return strategic, ai_state

    return random_target(attack_grid, rng), ai_state


def strategic_target(attack_grid: Grid, ai_state: AIState, rng: random.Random) -> Position | None:
    """Checkerboard search on hard difficulty; None when not applicable."""
    if ai_state.difficulty is not Difficulty.HARD:
        return None
    candidates = unattacked_positions(attack_grid, parity=0)
    if not candidates:
        return None
    return rng.choice(candidates)


def random_target(attack_grid: Grid, rng: random.Random) -> Position:
    """Uniformly random cell that has not been attacked."""
    candidates = unattacked_positions(attack_grid)
    if not candidates:
        raise NoTargetsError("No unattacked cells left to target.")
    return rng.choice(candidates)


def update_ai_state(
    ai_state: AIState, position: Position, result: EngagementResult, size: int
) -> AIState:
    """Enter hunt mode on a hit, clear it on a sink; a miss changes nothing."""
    if result.ship_sunk is not None:
        sizes = list(ai_state.ship_sizes)
        if result.ship_sunk.size in sizes:
            sizes.remove(result.ship_sunk.size)
        return replace(
            ai_state,
            hunt_mode=False,
            target_queue=(),
            last_hit=None,
            ship_sizes=tuple(sizes),
        )

    if result.hit:
        queue = list(ai_state.target_queue)
        for neighbor in adjacent_positions(position, size):
            if neighbor not in queue:
                queue.append(neighbor)
        return replace(ai_state, hunt_mode=True, last_hit=position, target_queue=tuple(queue))

    return ai_state


def adjacent_positions(position: Position, size: int) -> list[Position]:
    """In-bounds orthogonal neighbours of a cell."""
    result: list[Position] = []
    for d_row, d_col in _NEIGHBOR_OFFSETS:
        row, col = position.row + d_row, position.col + d_col
        if in_bounds(row, col, size):
            result.append(Position(row, col))
    return result
