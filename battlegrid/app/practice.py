"""Single-player practice session against a static layout."""

from __future__ import annotations

import logging

from battlegrid.core.attack import GameState, attack_cell, create_game_state
from battlegrid.core.layout import LayoutValidation, build_ships
from battlegrid.core.models import AttackOutcome, GameStatus
from battlegrid.core.statistics import GameStatistics, ShipStatus, game_statistics, ship_statuses
from battlegrid.data.layouts import DEFAULT_LAYOUT

logger = logging.getLogger(__name__)


class PracticeSession:
    """Holds the current practice state and the last status message."""

    def __init__(self, layout: object = DEFAULT_LAYOUT) -> None:
        result = build_ships(layout)
        if not result.ok:
            logger.error("practice_layout_invalid errors=%s", list(result.validation.errors))
        self._validation: LayoutValidation = result.validation
        self._initial = create_game_state(result.ships)
        self._state = self._initial
        self._last_action = ""

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def last_action(self) -> str:
        return self._last_action

    @property
    def layout_validation(self) -> LayoutValidation:
        return self._validation

    @property
    def is_playable(self) -> bool:
        """False when the layout was rejected and the session has no ships."""
        return self._validation.is_valid and bool(self._initial.ships)

    @property
    def is_game_won(self) -> bool:
        return self._state.game_status is GameStatus.WON

    @property
    def statistics(self) -> GameStatistics:
        return game_statistics(self._state)

    @property
    def ship_statuses(self) -> tuple[ShipStatus, ...]:
        return ship_statuses(self._state.ships)

    def handle_attack(self, row: object, col: object) -> AttackOutcome:
        """Fire at a cell; only hits and misses replace the current state."""
        result = attack_cell(row, col, self._state)
        if result.result in (AttackOutcome.HIT, AttackOutcome.MISS):
            self._state = result.game_state
        self._last_action = result.message
        return result.result

    def restart(self) -> None:
        self._state = self._initial
        self._last_action = ""
