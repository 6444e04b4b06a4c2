"""Command-line interface for Rally Pairing.

Subcommands: ``plan`` prints the stage plan for a field size, ``simulate``
runs a seeded tournament, ``rate`` computes a single doubles rating change
and ``shell`` starts the interactive prompt.
"""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from rallypairing.constants import WAVE_FORMATS
from rallypairing.exceptions import InvalidConfigurationException, RallyPairingException
from rallypairing.models.tournament import SchedulePrefs
from rallypairing.utils import configure_logging, setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


def load_prefs(path: Optional[str]) -> SchedulePrefs:
    """Load schedule preferences from a JSON file, or the defaults.

    Raises:
        InvalidConfigurationException: If the file is unreadable or invalid
    """
    if not path:
        return SchedulePrefs()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigurationException(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigurationException(f"Config {path} must hold a JSON object")
    return SchedulePrefs.from_dict(data).validate()


def run_plan_command(args: argparse.Namespace) -> int:
    """Print the stage plan with waves per round."""
    from rallypairing.tournament import compute_round_plan, total_waves_for

    prefs = load_prefs(args.config)
    if args.three_round_cap:
        prefs.three_round_cap = True
    plan = compute_round_plan(args.players, prefs)
    if not plan:
        print(
            f"{Colors.FAIL}Cannot plan a tournament for {args.players} players"
            f"{Colors.ENDC}"
        )
        return 1

    print(f"\n{Colors.BOLD}Round plan for {args.players} players:{Colors.ENDC}")
    field_size = args.players
    for entry in plan:
        waves = total_waves_for(entry.kind, entry.index, field_size, prefs)
        print(
            f"  Round {entry.index}: {entry.kind:7} {field_size:3} players, "
            f"{waves} waves, cap {prefs.score_cap(entry.index)} -> {entry.target_size}"
        )
        field_size = entry.target_size
    print()
    return 0


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run a simulated tournament and print the standings."""
    from rallypairing.simulation import (
        RatingDistribution,
        ScorePattern,
        SimulationConfig,
        TournamentSimulator,
        export_json,
    )

    prefs = load_prefs(getattr(args, "config", None))
    config = SimulationConfig(
        num_players=args.players,
        seed=args.seed,
        wave_format=args.format or prefs.wave_format,
        courts=args.courts if args.courts is not None else prefs.courts,
        three_round_cap=args.three_round_cap or prefs.three_round_cap,
        rating_distribution=RatingDistribution(args.distribution),
        score_pattern=ScorePattern(args.pattern),
    )

    print(f"\n{Colors.BOLD}Simulating tournament...{Colors.ENDC}")
    report = TournamentSimulator(config).run()

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(export_json(report), encoding="utf-8")
        print(f"{Colors.OKGREEN}Report saved to: {output_path}{Colors.ENDC}")

    print(f"\n{Colors.BOLD}Standings:{Colors.ENDC}")
    for row in report["standings"][: args.top]:
        print(
            f"  {row['place']:3}. {row['name']:12} seed {row['seed']:3} "
            f"rating {row['rating']:5} diff {row['point_diff']:+4}"
        )
    print(f"\n  Champion: {report['champion']}")
    if report["wave_issues"]:
        print(f"{Colors.WARNING}Wave issues:{Colors.ENDC}")
        for issue in report["wave_issues"]:
            print(f"  {issue}")
        return 1
    return 0


def run_rate_command(args: argparse.Namespace) -> int:
    """Print the rating change of a single doubles match."""
    from rallypairing.rating import doubles_elo_delta

    ra1, ra2, rb1, rb2 = args.ratings
    score_a, score_b = args.score
    delta = doubles_elo_delta(
        ra1,
        ra2,
        rb1,
        rb2,
        score_a,
        score_b,
        args.round,
        args.wave,
        avg_games_played=args.games,
    )
    print(f"Team A ({ra1}, {ra2}): {delta.d_a:+.2f}")
    print(f"Team B ({rb1}, {rb2}): {delta.d_b:+.2f}")
    return 0


def run_shell_command(args: argparse.Namespace) -> int:
    from rallypairing.shell import run_interactive_mode

    return run_interactive_mode()


def _add_plan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--players", type=int, required=True, help="Field size")
    parser.add_argument(
        "--three-round-cap",
        action="store_true",
        help="Collapse long plans to prelim, eight and final",
    )
    parser.add_argument("--config", help="Schedule preferences JSON file")


def _add_simulate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--players", type=int, default=16, help="Field size")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--format", choices=list(WAVE_FORMATS), help="Wave format")
    parser.add_argument("--courts", type=int, help="Courts available")
    parser.add_argument("--three-round-cap", action="store_true")
    parser.add_argument(
        "--distribution",
        choices=["uniform", "normal", "skewed", "club"],
        default="normal",
    )
    parser.add_argument(
        "--pattern",
        choices=["realistic", "close", "blowout", "random"],
        default="realistic",
    )
    parser.add_argument("--top", type=int, default=8, help="Standings rows to show")
    parser.add_argument("--config", help="Schedule preferences JSON file")
    parser.add_argument("--output", help="Write the full report as JSON")


def _add_rate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "ratings", type=int, nargs=4, metavar="R", help="Ratings of A1 A2 B1 B2"
    )
    parser.add_argument(
        "--score", type=int, nargs=2, metavar=("A", "B"), required=True
    )
    parser.add_argument("--round", type=int, default=1, help="Round index")
    parser.add_argument("--wave", type=int, help="Wave index")
    parser.add_argument(
        "--games", type=float, default=1.0, help="Average games played so far"
    )


def create_plan_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plan", description="Show the round plan")
    _add_plan_arguments(parser)
    return parser


def create_simulate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simulate", description="Simulate a tournament"
    )
    _add_simulate_arguments(parser)
    return parser


def create_rate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rate", description="Doubles rating change")
    _add_rate_arguments(parser)
    return parser


def create_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="rallypairing",
        description="Doubles elimination tournament pairing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rallypairing plan --players 24
  rallypairing simulate --players 16 --seed 7 --format gated
  rallypairing rate 1000 1000 1000 1000 --score 21 15
  rallypairing shell
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    plan_parser = subparsers.add_parser("plan", help="Show the round plan")
    _add_plan_arguments(plan_parser)
    plan_parser.set_defaults(func=run_plan_command)

    sim_parser = subparsers.add_parser("simulate", help="Simulate a tournament")
    _add_simulate_arguments(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    rate_parser = subparsers.add_parser("rate", help="Doubles rating change")
    _add_rate_arguments(rate_parser)
    rate_parser.set_defaults(func=run_rate_command)

    shell_parser = subparsers.add_parser("shell", help="Interactive prompt")
    shell_parser.set_defaults(func=run_shell_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except RallyPairingException as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.error("Command failed: %s", e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
