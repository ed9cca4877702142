from __future__ import annotations

import logging

from battlegrid.app.practice import PracticeSession
from battlegrid.core.attack import VICTORY_MESSAGE
from battlegrid.core.models import AttackOutcome


def test_default_session_is_playable() -> None:
    session = PracticeSession()
    assert session.is_playable
    assert not session.is_game_won
    assert session.statistics.ships_total == 5
    assert session.last_action == ""


def test_hit_and_miss_advance_state() -> None:
    session = PracticeSession()
    assert session.handle_attack(1, 1) is AttackOutcome.HIT
    assert session.last_action == "Hit! You struck a ship!"
    assert session.handle_attack(0, 0) is AttackOutcome.MISS
    assert session.last_action == "Miss! No ship at this location."
    assert session.statistics.total_shots == 2
    assert session.statistics.hits == 1


def test_rejected_attacks_keep_state() -> None:
    session = PracticeSession()
    session.handle_attack(1, 1)
    before = session.state
    assert session.handle_attack(1, 1) is AttackOutcome.DUPLICATE
    assert session.handle_attack(12, 0) is AttackOutcome.OUT_OF_BOUNDS
    assert session.handle_attack("x", 0) is AttackOutcome.OUT_OF_BOUNDS
    assert session.state is before
    assert session.statistics.total_shots == 1


def test_sinking_every_ship_wins(destroyer_layout) -> None:
    session = PracticeSession(destroyer_layout)
    session.handle_attack(0, 0)
    assert session.handle_attack(1, 0) is AttackOutcome.HIT
    assert session.is_game_won
    assert session.last_action == VICTORY_MESSAGE
    assert session.handle_attack(5, 5) is AttackOutcome.GAME_OVER
    assert session.ship_statuses[0].is_sunk


def test_restart_returns_to_initial_state(destroyer_layout) -> None:
    session = PracticeSession(destroyer_layout)
    initial = session.state
    session.handle_attack(0, 0)
    session.restart()
    assert session.state is initial
    assert session.last_action == ""


def test_invalid_layout_is_logged_and_not_playable(caplog) -> None:
    layout = [{"ship": "destroyer", "positions": [[0, 0], [0, 0]]}]
    with caplog.at_level(logging.ERROR, logger="battlegrid.app.practice"):
        session = PracticeSession(layout)
    assert not session.is_playable
    assert not session.layout_validation.is_valid
    assert session.state.ships == ()
    assert "practice_layout_invalid" in caplog.text
