"""Headless drivers that play sessions without a presentation layer."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from battlegrid.ai.settings import Difficulty
from battlegrid.app.match import MatchTimings, TwoPlayerMatch
from battlegrid.app.practice import PracticeSession
from battlegrid.app.scheduler import TurnScheduler
from battlegrid.core.board import unattacked_positions
from battlegrid.core.models import AttackOutcome, MatchPhase, Side
from battlegrid.core.statistics import GameStatistics
from battlegrid.data.layouts import DEFAULT_LAYOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchReport:
    """Summary of a headless match."""

    winner: Side | None
    steps: int
    elapsed_seconds: float
    player: GameStatistics
    computer: GameStatistics
    messages: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class PracticeReport:
    """Summary of a headless practice run."""

    won: bool
    statistics: GameStatistics
    last_action: str


def run_headless_match(
    *,
    seed: int | None = None,
    difficulty: str | Difficulty = Difficulty.MEDIUM,
    timings: MatchTimings | None = None,
    max_steps: int = 2_000,
) -> MatchReport:
    """Play a full match where the human side fires at random free cells."""
    scheduler = TurnScheduler()
    match = TwoPlayerMatch(
        rng=random.Random(seed),
        scheduler=scheduler,
        difficulty=difficulty,
        timings=timings,
    )
    shooter = random.Random(None if seed is None else seed + 1)
    messages: list[str] = []

    match.auto_place()
    if not match.start_battle():
        logger.warning("headless_match_not_started unplaced=%s", [s.name for s in match.unplaced_ships])
        return _match_report(match, 0, messages)
    messages.append(match.message)

    steps = 0
    while steps < max_steps and match.phase is not MatchPhase.GAME_OVER:
        steps += 1
        if match.current_turn is Side.PLAYER and not match.turn_in_progress:
            targets = unattacked_positions(match.state.player_attacks)
            if not targets:
                break
            match.attack(shooter.choice(targets))
        elif scheduler.advance_to_next() == 0:
            logger.warning("headless_match_stalled steps=%d", steps)
            break
        messages.append(match.message)

    return _match_report(match, steps, messages)


def run_headless_practice(layout: object = DEFAULT_LAYOUT, *, seed: int | None = None) -> PracticeReport:
    """Fire at every cell in random order until the practice game is won."""
    session = PracticeSession(layout)
    rng = random.Random(seed)
    cells = [(row, col) for row in range(len(session.state.board)) for col in range(len(session.state.board))]
    rng.shuffle(cells)
    for row, col in cells:
        if session.handle_attack(row, col) is AttackOutcome.GAME_OVER or session.is_game_won:
            break
    return PracticeReport(won=session.is_game_won, statistics=session.statistics, last_action=session.last_action)


def _match_report(match: TwoPlayerMatch, steps: int, messages: list[str]) -> MatchReport:
    return MatchReport(
        winner=match.state.winner,
        steps=steps,
        elapsed_seconds=match.scheduler.now_seconds,
        player=match.statistics(Side.PLAYER),
        computer=match.statistics(Side.COMPUTER),
        messages=tuple(messages),
    )
