#!/usr/bin/env python3
"""Auto-play shapefit games for one or more difficulties and collect stage results."""

from __future__ import annotations

import argparse

from dotenv import load_dotenv

from shapefit.core.config import GameConfig, load_config
from shapefit.game.session import PlaySession
from shapefit.game.state_machine import GameStateMachine
from shapefit.utils.display import LiveLogger, StatusDisplay
from shapefit.utils.logger import SessionLogger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="shapefit auto-play demo.")
    parser.add_argument("--config", help="Path to a shapefit YAML config")
    parser.add_argument("--difficulties", nargs="+", default=["easy", "normal", "hard"],
                        help="Difficulties to play")
    parser.add_argument("--runs", type=int, default=1, help="Games per difficulty")
    parser.add_argument("--seed-base", type=int, default=None, help="Base seed for deterministic runs")
    parser.add_argument("--log-dir", default="logs", help="Where session logs go")
    return parser


def main() -> int:
    load_dotenv()
    args = build_parser().parse_args()
    base = load_config(args.config) if args.config else GameConfig()

    rows = []
    for difficulty in args.difficulties:
        for run in range(max(1, args.runs)):
            seed = None if args.seed_base is None else args.seed_base + run
            config = GameConfig.from_dict({**base.to_dict(), "default_difficulty": difficulty, "seed": seed})
            machine = GameStateMachine(config)
            session_logger = SessionLogger(args.log_dir, f"demo_{difficulty}_{run}")
            session_logger.attach(machine)
            stages = PlaySession(machine, live_logger=LiveLogger(verbose=False)).auto_solve()
            session_logger.save_logs()
            session_logger.save_stage_results()
            rows.append({"difficulty": difficulty, "run": run, "seed": seed, "stages": len(stages)})

    StatusDisplay.print_header("Demo Results")
    StatusDisplay.print_table(rows, ["difficulty", "run", "seed", "stages"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())


# python examples/play_demo.py --difficulties easy hard --runs 2 --seed-base 100
