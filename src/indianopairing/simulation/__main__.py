"""Command line entry point for the tournament simulator.

Usage::

    python -m indianopairing.simulation --players 9 --rounds 8 --seed 42
"""

# Indiano Pairing
# Copyright (C) 2025  Indiano Pairing developers
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

from indianopairing.constants import (
    DEFAULT_POINTS_TO_WIN,
    LEADERBOARD_MODES,
    LEADERBOARD_PPG,
    SKILL_ELO,
    SKILL_EPSILON,
)
from indianopairing.exceptions import IndianoPairingException
from indianopairing.simulation.simulator import (
    RatingDistribution,
    SimulationConfig,
    SimulationReport,
    TournamentSimulator,
)
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="indiano-simulate",
        description="Simulate a random Indiano tournament",
    )
    parser.add_argument("--players", type=int, default=9, help="Number of players")
    parser.add_argument("--rounds", type=int, default=8, help="Number of rounds")
    parser.add_argument(
        "--distribution",
        choices=[d.value for d in RatingDistribution],
        default=RatingDistribution.NORMAL.value,
        help="Rating distribution of the generated players",
    )
    parser.add_argument(
        "--min-rating", type=int, default=1200, help="Lowest generated rating"
    )
    parser.add_argument(
        "--max-rating", type=int, default=1800, help="Highest generated rating"
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument(
        "--upset-rate",
        type=float,
        default=0.1,
        help="Chance that the expected winner loses (default: 0.1)",
    )
    parser.add_argument(
        "--skill",
        choices=sorted(SKILL_EPSILON),
        default=SKILL_ELO,
        help="Skill metric used for pairing",
    )
    parser.add_argument(
        "--points-to-win",
        type=int,
        default=DEFAULT_POINTS_TO_WIN,
        help=f"Target score of a match (default: {DEFAULT_POINTS_TO_WIN})",
    )
    parser.add_argument(
        "--leaderboard",
        choices=LEADERBOARD_MODES,
        default=LEADERBOARD_PPG,
        help="Leaderboard ordering",
    )
    parser.add_argument(
        "--no-ratings", action="store_true", help="Do not update Elo ratings"
    )
    parser.add_argument("--output", help="Write the full report as JSON to this file")
    return parser


def print_report(report: SimulationReport) -> None:
    """Print a leaderboard and fairness summary."""
    print(f"\n{Colors.BOLD}Tournament Simulated:{Colors.ENDC}")
    print(f"  Rounds: {report.rounds_played}")
    print(f"  Matches: {report.matches_played}")

    spread_colour = Colors.OKGREEN if report.sit_out_spread <= 1 else Colors.WARNING
    print(f"  Sit-out spread: {spread_colour}{report.sit_out_spread}{Colors.ENDC}")
    print(f"  Repeat partnerships: {report.repeat_partnerships}")
    print(f"  Repeat oppositions: {report.repeat_oppositions}")

    print(f"\n{Colors.BOLD}{'#':>3}  {'Player':<12} {'PPG':>6} {'Win %':>6} {'Elo':>5}{Colors.ENDC}")
    for row in report.leaderboard:
        print(
            f"{row.rank:>3}  {row.name:<12} {row.formatted_ppg:>6} "
            f"{row.formatted_win_rate:>6} {row.player.elo_rating:>5}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = SimulationConfig(
        num_players=args.players,
        num_rounds=args.rounds,
        rating_distribution=RatingDistribution(args.distribution),
        rating_range=(args.min_rating, args.max_rating),
        seed=args.seed,
        upset_rate=args.upset_rate,
        skill_metric=args.skill,
        points_to_win=args.points_to_win,
        ratings_enabled=not args.no_ratings,
        leaderboard_mode=args.leaderboard,
    )

    try:
        report = TournamentSimulator(config).run()
    except IndianoPairingException as e:
        print(f"{Colors.FAIL}Simulation failed: {e}{Colors.ENDC}", file=sys.stderr)
        return 1

    print_report(report)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        print(f"{Colors.OKGREEN}Report saved to: {output_path}{Colors.ENDC}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
