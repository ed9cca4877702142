"""Game configuration and env loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from battlegrid.ai.settings import Difficulty

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Immutable runtime configuration sourced from environment."""

    difficulty: Difficulty = Difficulty.MEDIUM
    time_scale: float = 1.0
    seed: int | None = None
    layout_file: str | None = None


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        pair = _parse_env_line(raw_line)
        if pair is None:
            continue
        key, value = pair
        if override_existing or key not in os.environ:
            os.environ[key] = value
        logger.debug("env_loaded key=%s source=%s", key, env_path)


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files in order; later files win over earlier ones."""
    to_load = tuple(paths) if paths is not None else (".env.battlegrid", ".env.battlegrid.local")
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def load_game_config() -> GameConfig:
    """Load game configuration from BATTLEGRID_* env vars."""
    return GameConfig(
        difficulty=_difficulty("BATTLEGRID_DIFFICULTY", Difficulty.MEDIUM),
        time_scale=max(0.0, _float("BATTLEGRID_TIME_SCALE", 1.0)),
        seed=_optional_int("BATTLEGRID_SEED"),
        layout_file=os.getenv("BATTLEGRID_LAYOUT_FILE", "").strip() or None,
    )


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def _difficulty(name: str, default: Difficulty) -> Difficulty:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return Difficulty(raw.strip().lower())
    except ValueError:
        logger.warning("config_invalid_difficulty value=%r fallback=%s", raw, default.value)
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None
