"""Application entry point for headless battlegrid runs."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from battlegrid.ai.settings import Difficulty
from battlegrid.app.driver import run_headless_match, run_headless_practice
from battlegrid.app.match import MatchTimings
from battlegrid.data.layouts import DEFAULT_LAYOUT, load_layout_file
from battlegrid.infra.config import load_default_env_files, load_game_config
from battlegrid.infra.logging import setup_logging, shutdown_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="battlegrid", description="Play a headless battlegrid session.")
    parser.add_argument("--mode", choices=("match", "practice"), default="match")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (defaults to BATTLEGRID_SEED).")
    parser.add_argument(
        "--difficulty",
        choices=[difficulty.value for difficulty in Difficulty],
        default=None,
        help="Computer difficulty (defaults to BATTLEGRID_DIFFICULTY).",
    )
    parser.add_argument("--layout", default=None, help="JSON practice layout file.")
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one headless session and log its outcome."""
    load_default_env_files()
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper() if args.log_level else None)
    config = load_game_config()
    seed = args.seed if args.seed is not None else config.seed

    try:
        if args.mode == "practice":
            layout_path = args.layout or config.layout_file
            layout = load_layout_file(layout_path) if layout_path else DEFAULT_LAYOUT
            practice = run_headless_practice(layout, seed=seed)
            logger.info(
                "practice_finished won=%s shots=%d accuracy=%d%% message=%s",
                practice.won,
                practice.statistics.total_shots,
                practice.statistics.accuracy,
                practice.last_action,
            )
            return 0 if practice.won else 1

        report = run_headless_match(
            seed=seed,
            difficulty=args.difficulty or config.difficulty,
            timings=MatchTimings().scaled(config.time_scale),
        )
        logger.info(
            "match_finished winner=%s steps=%d elapsed=%.1fs player_accuracy=%d%% computer_accuracy=%d%%",
            report.winner.value if report.winner else None,
            report.steps,
            report.elapsed_seconds,
            report.player.accuracy,
            report.computer.accuracy,
        )
        return 0 if report.winner is not None else 1
    except (OSError, ValueError):
        logger.exception("session_failed mode=%s", args.mode)
        return 2
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
