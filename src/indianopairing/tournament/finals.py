"""Finals match between the top four of the leaderboard."""

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

from dataclasses import replace
from typing import Sequence

from indianopairing.constants import FINALS_MATCH_ID, FIRST_SERVER, PLAYERS_PER_MATCH
from indianopairing.exceptions import (
    InsufficientPlayersException,
    InvalidMatchStateException,
)
from indianopairing.models.tournament import FinalsMatch, Pair
from indianopairing.tournament.tiebreak_calculator import PlayerWithStats
from indianopairing.type_hints import Team
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


def create_finals_match(leaderboard: Sequence[PlayerWithStats]) -> FinalsMatch:
    """Seed the finals: first and fourth against second and third.

    Raises:
        InsufficientPlayersException: With fewer than four ranked players
    """
    if len(leaderboard) < PLAYERS_PER_MATCH:
        raise InsufficientPlayersException(
            f"Need at least {PLAYERS_PER_MATCH} players who have played matches "
            f"to start finals, have {len(leaderboard)}"
        )
    first, second, third, fourth = (row.player for row in leaderboard[:4])
    pair1 = Pair(
        id=f"{FINALS_MATCH_ID}-pair1",
        players=(first, fourth),
        name=f"{first.name} & {fourth.name}",
    )
    pair2 = Pair(
        id=f"{FINALS_MATCH_ID}-pair2",
        players=(second, third),
        name=f"{second.name} & {third.name}",
    )
    logger.info(f"Finals: {pair1.name} vs {pair2.name}")
    return FinalsMatch(pair1=pair1, pair2=pair2, current_server=FIRST_SERVER)


def update_finals_score(
    finals: FinalsMatch, team: Team, delta: int, points_to_win: int
) -> FinalsMatch:
    """Move one side's finals score and re-check the winner.

    Once a winner stands only corrections (negative deltas) are accepted.

    Raises:
        InvalidMatchStateException: If the finals are completed, or a point
            is added after the winner was decided
    """
    if team not in (1, 2):
        raise ValueError(f"Team must be 1 or 2, not {team!r}")
    if finals.completed:
        raise InvalidMatchStateException("Finals are already completed")
    if finals.winner is not None and delta > 0:
        raise InvalidMatchStateException("Finals already have a winner")
    return finals.with_score_delta(team, delta, points_to_win)


def complete_finals(finals: FinalsMatch) -> FinalsMatch:
    """Close the finals.

    Raises:
        InvalidMatchStateException: If no side has won yet, or already completed
    """
    if finals.completed:
        raise InvalidMatchStateException("Finals are already completed")
    if finals.winner is None:
        raise InvalidMatchStateException(
            "Please finish the game before completing the match"
        )
    winners = finals.winning_pair
    logger.info(f"Finals completed, champions: {winners.display_name if winners else '-'}")
    return replace(finals, completed=True)
