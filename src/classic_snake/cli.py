"""Command-line tools for classic-snake."""

from __future__ import annotations

import argparse
import logging
import sys

from classic_snake.config import GameConfig
from classic_snake.grid import WallMode

logger = logging.getLogger(__name__)


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    parser.add_argument("--grid-width", type=int, default=None)
    parser.add_argument("--grid-height", type=int, default=None)
    parser.add_argument(
        "--wall-mode", choices=[m.value for m in WallMode], default=None,
        help="death ends the game at the edge; wrap teleports to the far side.",
    )
    parser.add_argument("--initial-length", type=int, default=None)
    parser.add_argument("--food-reward", type=int, default=None)
    parser.add_argument("--tick-ms", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classic-snake",
        description="Classic snake simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play headless games with a random policy.",
    )
    _add_config_flags(sim_p)
    sim_p.add_argument("--games", type=int, default=100)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)
    sim_p.add_argument("--turn-probability", type=float, default=0.2)

    # --- config ---
    cfg_p = sub.add_parser(
        "config", help="Write a game config to a JSON file.",
    )
    _add_config_flags(cfg_p)
    cfg_p.add_argument("output", help="Destination JSON path.")

    return parser


def _config_from_args(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    flag_map = {
        "grid_width": "grid_width",
        "grid_height": "grid_height",
        "initial_length": "initial_length",
        "food_reward": "food_reward",
        "tick_ms": "tick_interval_ms",
        "seed": "seed",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    if args.wall_mode is not None:
        overrides["wall_mode"] = WallMode(args.wall_mode)

    if overrides:
        config = config.with_overrides(**overrides)
    return config


def _run_simulate(args: argparse.Namespace) -> int:
    from classic_snake.simulate import simulate_games

    config = _config_from_args(args)
    result = simulate_games(
        config,
        num_games=args.games,
        max_ticks=args.max_ticks,
        turn_probability=args.turn_probability,
        seed=config.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    config.save(args.output)
    print(f"Wrote config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``classic-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
