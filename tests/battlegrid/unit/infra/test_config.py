from __future__ import annotations

import logging

from battlegrid.ai.settings import Difficulty
from battlegrid.infra.config import GameConfig, load_default_env_files, load_env_file, load_game_config

_ENV_KEYS = ("BATTLEGRID_DIFFICULTY", "BATTLEGRID_TIME_SCALE", "BATTLEGRID_SEED", "BATTLEGRID_LAYOUT_FILE")


def _clear_env(monkeypatch) -> None:
    # setenv first so monkeypatch restores keys that env files write directly.
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults_without_environment(monkeypatch) -> None:
    _clear_env(monkeypatch)
    assert load_game_config() == GameConfig()


def test_reads_environment(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("BATTLEGRID_DIFFICULTY", " Hard ")
    monkeypatch.setenv("BATTLEGRID_TIME_SCALE", "0.25")
    monkeypatch.setenv("BATTLEGRID_SEED", "99")
    monkeypatch.setenv("BATTLEGRID_LAYOUT_FILE", "layouts/custom.json")
    config = load_game_config()
    assert config.difficulty is Difficulty.HARD
    assert config.time_scale == 0.25
    assert config.seed == 99
    assert config.layout_file == "layouts/custom.json"


def test_invalid_values_fall_back(monkeypatch, caplog) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("BATTLEGRID_DIFFICULTY", "brutal")
    monkeypatch.setenv("BATTLEGRID_TIME_SCALE", "-3")
    monkeypatch.setenv("BATTLEGRID_SEED", "abc")
    with caplog.at_level(logging.WARNING, logger="battlegrid.infra.config"):
        config = load_game_config()
    assert config.difficulty is Difficulty.MEDIUM
    assert config.time_scale == 0.0
    assert config.seed is None
    assert "config_invalid_difficulty" in caplog.text


def test_load_env_file_parses_and_overrides(monkeypatch, tmp_path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("BATTLEGRID_SEED", "1")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n\nBATTLEGRID_SEED=7\nBATTLEGRID_DIFFICULTY='easy'\nnot a pair\n",
        encoding="utf-8",
    )
    load_env_file(str(env_file))
    config = load_game_config()
    assert config.seed == 7
    assert config.difficulty is Difficulty.EASY


def test_load_env_file_can_keep_existing(monkeypatch, tmp_path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("BATTLEGRID_SEED", "1")
    env_file = tmp_path / ".env"
    env_file.write_text("BATTLEGRID_SEED=7\n", encoding="utf-8")
    load_env_file(str(env_file), override_existing=False)
    assert load_game_config().seed == 1


def test_later_env_files_win(monkeypatch, tmp_path) -> None:
    _clear_env(monkeypatch)
    base = tmp_path / ".env.battlegrid"
    local = tmp_path / ".env.battlegrid.local"
    base.write_text("BATTLEGRID_SEED=3\nBATTLEGRID_DIFFICULTY=hard\n", encoding="utf-8")
    local.write_text("BATTLEGRID_SEED=4\n", encoding="utf-8")
    load_default_env_files(paths=[str(base), str(local), str(tmp_path / "missing")])
    config = load_game_config()
    assert config.seed == 4
    assert config.difficulty is Difficulty.HARD
