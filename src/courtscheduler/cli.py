"""Command-line interface for the court scheduler.

Sub-commands generate a season, list the pairings of a court group and
validate a saved schedule. Without arguments (or with ``-i``) the
interactive shell is started instead.
"""

# Court Scheduler
# Copyright (C) 2025  Court Scheduler developers
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
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from courtscheduler.constants import (
    DEFAULT_GENERATE_ATTEMPTS,
    DEFAULT_STRATEGY,
    REFERENCE_NUM_PARTICIPANTS,
    REFERENCE_NUM_WEEKS,
    SAVE_FILE_EXTENSION,
    STRATEGIES,
)
from courtscheduler.exceptions import (
    CourtSchedulerException,
    ScheduleFileException,
)
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import (
    CourtGroup,
    SeasonConfig,
    default_court_groups,
)
from courtscheduler.pairing.enumerator import PairingEnumerator
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.engine import ScheduleResult, generate_schedule
from courtscheduler.utils import set_log_level, setup_logger
from courtscheduler.utils.print import (
    format_opponent_matrix,
    format_pairings,
    format_schedule_table,
    format_stats,
)
from courtscheduler.utils.validation import (
    parse_group_spec,
    validate_positive_integer,
)
from courtscheduler.validation.schedule_validator import (
    ValidationReport,
    check_season_feasibility,
    create_schedule_validator,
)

logger = setup_logger(__name__)


def parse_group_arg(value: str) -> Tuple[int, ...]:
    """Parse a ``--group`` value such as ``0,1,2,3`` or ``4-7``.

    Raises:
        argparse.ArgumentTypeError: If the value is not a list of integers
    """
    result = parse_group_spec(value)
    if not result:
        raise argparse.ArgumentTypeError(result.error_message)
    return result.sanitized_value


def parse_positive_int(value: str) -> int:
    """Parse a strictly positive integer argument.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive integer
    """
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'")
    result = validate_positive_integer(number)
    if not result:
        raise argparse.ArgumentTypeError(result.error_message)
    return result.sanitized_value


def load_json_file(path: str) -> Dict[str, Any]:
    """Load a JSON object from ``path``.

    Raises:
        ScheduleFileException: If the file is missing or not a JSON object
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ScheduleFileException(f"File not found: {path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ScheduleFileException(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ScheduleFileException(f"Expected a JSON object in {path}")
    logger.info("Loaded %s", path)
    return data


def build_season_config(args: argparse.Namespace) -> SeasonConfig:
    """Combine ``--config`` with command-line overrides."""
    data: Dict[str, Any] = {}
    if getattr(args, "config", None):
        data = load_json_file(args.config)
        data = data.get("config", data)

    num_participants = (
        args.participants
        or data.get("num_participants")
        or REFERENCE_NUM_PARTICIPANTS
    )
    num_weeks = args.weeks or data.get("num_weeks") or REFERENCE_NUM_WEEKS

    if args.group:
        groups = [CourtGroup(members=members) for members in args.group]
    elif data.get("court_groups") is not None and not args.participants:
        groups = [CourtGroup.from_dict(g) for g in data["court_groups"]]
    else:
        groups = default_court_groups(num_participants)

    return SeasonConfig(
        num_participants=num_participants,
        num_weeks=num_weeks,
        court_groups=groups,
        allow_overlap=args.allow_overlap or data.get("allow_overlap", False),
        exclude_baseline_pairs=(
            not args.keep_baseline_pairs and data.get("exclude_baseline_pairs", True)
        ),
    )


def save_schedule(
    path: str,
    config: SeasonConfig,
    result: ScheduleResult,
    match_index: MatchIndex,
) -> Path:
    """Write configuration, schedule and statistics as JSON."""
    file_path = Path(path)
    if not file_path.suffix:
        file_path = file_path.with_suffix(SAVE_FILE_EXTENSION)
    payload = {"config": config.to_dict()}
    payload.update(result.to_dict(match_index))
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
    except OSError as e:
        raise ScheduleFileException(f"Could not write {file_path}: {e}") from e
    logger.info("Schedule saved to %s", file_path)
    return file_path


def load_schedule(path: str) -> Tuple[Schedule, Optional[SeasonConfig]]:
    """Read a schedule saved by :func:`save_schedule`.

    A bare schedule object (without the ``config`` wrapper) is accepted too.
    """
    data = load_json_file(path)
    try:
        schedule = Schedule.from_dict(data.get("schedule", data))
    except (KeyError, TypeError, ValueError) as e:
        raise ScheduleFileException(f"Malformed schedule in {path}: {e}") from e
    config = SeasonConfig.from_dict(data["config"]) if "config" in data else None
    return schedule, config


def print_report(report: ValidationReport) -> None:
    print(f"\n{report.summary}")
    for violation in report.violations:
        print(f"  - {violation}")


def run_generate_command(args: argparse.Namespace) -> int:
    """Build, print and optionally save a season schedule."""
    config = build_season_config(args)

    shortfall = check_season_feasibility(config)
    if shortfall is not None:
        logger.error("Infeasible season: %s", shortfall.description)
        return 1

    result = generate_schedule(
        config,
        strategy=args.strategy,
        seed=args.seed,
        max_attempts=args.attempts,
    )
    match_index = MatchIndex(config.num_participants)

    print()
    print(format_schedule_table(result.schedule, config, match_index))
    if args.matrix:
        print()
        print(format_opponent_matrix(result.schedule, config, match_index))
    print_report(result.report)
    print(f"\nStrategy: {result.strategy} (attempt {result.attempts})")
    print(format_stats(result.stats.to_dict()))

    if args.output:
        saved = save_schedule(args.output, config, result, match_index)
        print(f"\nSaved to: {saved}")

    return 0 if result.is_valid else 1


def run_pairings_command(args: argparse.Namespace) -> int:
    """List the admissible pairings of one court group."""
    enumerator = PairingEnumerator(args.group)
    print(format_pairings(enumerator))
    return 0


def run_validate_command(args: argparse.Namespace) -> int:
    """Validate a saved schedule; exit code 1 when it has violations."""
    schedule, saved_config = load_schedule(args.file)
    if args.config:
        data = load_json_file(args.config)
        config = SeasonConfig.from_dict(data.get("config", data))
    elif saved_config is not None:
        config = saved_config
    else:
        config = SeasonConfig(
            num_participants=schedule.num_participants,
            num_weeks=max(schedule.num_weeks, 1),
            court_groups=default_court_groups(schedule.num_participants),
        )

    report = create_schedule_validator(config).validate(schedule)
    print(format_schedule_table(schedule, config))
    print_report(report)
    return 0 if report.is_valid else 1


def add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=DEFAULT_STRATEGY,
        help=f"Scheduling strategy (default: {DEFAULT_STRATEGY})",
    )
    parser.add_argument(
        "--participants",
        type=parse_positive_int,
        help=f"Roster size, even (default: {REFERENCE_NUM_PARTICIPANTS})",
    )
    parser.add_argument(
        "--weeks",
        type=parse_positive_int,
        help=f"Number of weeks (default: {REFERENCE_NUM_WEEKS})",
    )
    parser.add_argument(
        "--group",
        type=parse_group_arg,
        action="append",
        help="Court group such as 0,1,2,3 or 4-7 (repeat for more courts)",
    )
    parser.add_argument(
        "--allow-overlap",
        action="store_true",
        help="Allow a participant to appear in more than one court group",
    )
    parser.add_argument(
        "--keep-baseline-pairs",
        action="store_true",
        help="Do not block the consecutive-pair baseline of each court",
    )
    parser.add_argument("--config", help="Load the season from a JSON file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument(
        "--attempts",
        type=parse_positive_int,
        default=DEFAULT_GENERATE_ATTEMPTS,
        help=f"Fresh attempts before giving up (default: {DEFAULT_GENERATE_ATTEMPTS})",
    )
    parser.add_argument("--output", help="Save the schedule as JSON")
    parser.add_argument(
        "--matrix", action="store_true", help="Also print the opponent matrix"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")


def add_pairings_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--group",
        type=parse_group_arg,
        default=(0, 1, 2, 3),
        help="Court group such as 0,1,2,3 (default: 0,1,2,3)",
    )


def add_validate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file", required=True, help="Saved schedule (JSON)")
    parser.add_argument("--config", help="Season configuration to validate against")


def create_generate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="generate", description="Generate a season")
    add_generate_arguments(parser)
    parser.set_defaults(func=run_generate_command)
    return parser


def create_pairings_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairings", description="List the pairings of a court group"
    )
    add_pairings_arguments(parser)
    parser.set_defaults(func=run_pairings_command)
    return parser


def create_validate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate", description="Validate a saved schedule"
    )
    add_validate_arguments(parser)
    parser.set_defaults(func=run_validate_command)
    return parser


def create_main_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="court-scheduler",
        description="Round-robin style court scheduling without repeat matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  court-scheduler

  # Reference season: 16 teams, four courts of four, seven weeks
  court-scheduler generate

  # Randomized strategy with a fixed seed, saved to disk
  court-scheduler generate --strategy randomized --seed 7 --output season.json

  # Custom courts
  court-scheduler generate --participants 8 --weeks 3 --group 0-3 --group 4-7

  # Pairings of one court
  court-scheduler pairings --group 0,1,2,3

  # Validate a saved schedule
  court-scheduler validate --file season.json
        """,
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a season schedule")
    add_generate_arguments(gen_parser)
    gen_parser.set_defaults(func=run_generate_command)

    pair_parser = subparsers.add_parser("pairings", help="List court pairings")
    add_pairings_arguments(pair_parser)
    pair_parser.set_defaults(func=run_pairings_command)

    val_parser = subparsers.add_parser("validate", help="Validate a saved schedule")
    add_validate_arguments(val_parser)
    val_parser.set_defaults(func=run_validate_command)

    return parser


def run_command(args: argparse.Namespace) -> int:
    """Run a parsed sub-command, mapping scheduler errors to exit code 1."""
    if getattr(args, "verbose", False):
        set_log_level(logging.DEBUG)
    try:
        return args.func(args)
    except CourtSchedulerException as e:
        logger.error("%s", e)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    arguments: List[str] = list(sys.argv[1:] if argv is None else argv)

    if not arguments or "--interactive" in arguments or "-i" in arguments:
        from courtscheduler.shell import run_interactive_mode

        return run_interactive_mode()

    parser = create_main_parser()
    args = parser.parse_args(arguments)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return run_command(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
