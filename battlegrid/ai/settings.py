"""Computer opponent state and difficulty tiers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from battlegrid.core.models import DEFAULT_SHIP_SIZES, Position


class Difficulty(StrEnum):
    """Computer opponent difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TargetStrategy(StrEnum):
    """Broad search strategy of the computer opponent."""

    RANDOM = "random"
    SMART = "smart"


@dataclass(frozen=True, slots=True)
class DifficultySettings:
    """Fixed tuning of one difficulty tier."""

    hit_probability: float
    smart_targeting: bool
    strategy: TargetStrategy
    delay_between_moves: int


DIFFICULTY_SETTINGS: dict[Difficulty, DifficultySettings] = {
    Difficulty.EASY: DifficultySettings(
        hit_probability=0.3,
        smart_targeting=False,
        strategy=TargetStrategy.RANDOM,
        delay_between_moves=2000,
    ),
    Difficulty.MEDIUM: DifficultySettings(
        hit_probability=0.7,
        smart_targeting=True,
        strategy=TargetStrategy.SMART,
        delay_between_moves=1500,
    ),
    Difficulty.HARD: DifficultySettings(
        hit_probability=0.9,
        smart_targeting=True,
        strategy=TargetStrategy.SMART,
        delay_between_moves=1000,
    ),
}


@dataclass(frozen=True, slots=True)
class AIState:
    """Snapshot of the computer opponent's memory between attacks."""

    difficulty: Difficulty
    strategy: TargetStrategy
    hit_probability: float
    smart_targeting: bool
    delay_between_moves: int
    target_queue: tuple[Position, ...] = ()
    last_hit: Position | None = None
    hunt_mode: bool = False
    ship_sizes: tuple[int, ...] = DEFAULT_SHIP_SIZES


def resolve_difficulty(value: str | Difficulty) -> Difficulty:
    """Parse a difficulty name; raises ValueError for unknown names."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown difficulty: {value!r}.") from None


def initialize_ai(difficulty: str | Difficulty = Difficulty.MEDIUM) -> AIState:
    """Create a fresh opponent state for a difficulty tier."""
    selected = resolve_difficulty(difficulty)
    settings = DIFFICULTY_SETTINGS[selected]
    return AIState(
        difficulty=selected,
        strategy=settings.strategy,
        hit_probability=settings.hit_probability,
        smart_targeting=settings.smart_targeting,
        delay_between_moves=settings.delay_between_moves,
    )
