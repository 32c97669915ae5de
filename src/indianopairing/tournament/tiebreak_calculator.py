"""Leaderboard ranking with tie-breaks.

This module orders players for the Indiano leaderboard. In the default
points-per-game mode ties are broken by a cascade of head-to-head and
schedule-based criteria; the simpler total-points mode only falls back to
win rate.
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

import functools
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Sequence, Set

from indianopairing.constants import (
    LEADERBOARD_ELO,
    LEADERBOARD_MODES,
    LEADERBOARD_PPG,
    LEADERBOARD_TOTAL,
    RANKING_EPSILON,
)
from indianopairing.exceptions import InvalidConfigurationException
from indianopairing.models.player import Player
from indianopairing.models.tournament import Round
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class HeadToHeadRecord:
    """Direct meetings of one player against another, from the first player's side.

    Attributes:
        wins: Meetings the first player won
        losses: Meetings the first player lost
        points_for: Points scored by the first player's side
        points_against: Points scored by the second player's side
    """

    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0

    @property
    def balance(self) -> int:
        return self.wins - self.losses

    @property
    def point_difference(self) -> int:
        return self.points_for - self.points_against


@dataclass(frozen=True)
class PlayerWithStats:
    """A leaderboard row: the player plus derived stats and final rank."""

    player: Player
    ppg: float
    win_rate: float
    rank: int = 0

    @classmethod
    def of(cls, player: Player) -> "PlayerWithStats":
        return cls(player=player, ppg=player.ppg, win_rate=player.win_rate)

    @property
    def id(self) -> str:
        return self.player.id

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def formatted_ppg(self) -> str:
        return f"{self.ppg:.2f}"

    @property
    def formatted_win_rate(self) -> str:
        """Win rate as a percentage with one decimal, e.g. ``"66.7"``."""
        return f"{self.win_rate * 100:.1f}"

    def to_dict(self):
        data = self.player.to_dict()
        data.update(
            {
                "rank": self.rank,
                "ppg": self.formatted_ppg,
                "win_rate": self.formatted_win_rate,
            }
        )
        return data


# ========== Head-to-head and schedule ==========


def get_head_to_head(
    player1_id: str, player2_id: str, rounds: Sequence[Round]
) -> HeadToHeadRecord:
    """Tally completed matches where the two players were on opposite sides."""
    wins = losses = points_for = points_against = 0
    for round_data in rounds:
        for match in round_data.matches:
            if not match.completed:
                continue
            side1 = match.side_of(player1_id)
            side2 = match.side_of(player2_id)
            if side1 is None or side2 is None or side1 == side2:
                continue
            own = match.score1 if side1 == 1 else match.score2
            other = match.score2 if side1 == 1 else match.score1
            points_for += own
            points_against += other
            if own > other:
                wins += 1
            elif own < other:
                losses += 1
    return HeadToHeadRecord(wins, losses, points_for, points_against)


def _opponents_of(player_id: str, rounds: Sequence[Round]) -> Set[str]:
    opponents: Set[str] = set()
    for round_data in rounds:
        for match in round_data.matches:
            if not match.completed:
                continue
            side = match.side_of(player_id)
            if side == 1:
                opponents.update(match.pair2.player_ids)
            elif side == 2:
                opponents.update(match.pair1.player_ids)
    return opponents


def get_opponent_quality(
    player_id: str, rounds: Sequence[Round], players: Sequence[Player]
) -> float:
    """Strength of schedule: mean PPG of the distinct opponents faced.

    Opponents missing from ``players`` still count towards the number of
    opponents but add nothing to the total.
    """
    opponents = _opponents_of(player_id, rounds)
    if not opponents:
        return 0.0
    by_id = {p.id: p for p in players}
    total = sum(by_id[o].ppg for o in opponents if o in by_id)
    return total / len(opponents)


# ========== Comparators ==========

# Each comparator returns a negative number when ``a`` ranks above ``b``.
Comparator = Callable[[PlayerWithStats, PlayerWithStats], float]


def _compare_desc(a: float, b: float, epsilon: float = 0.0) -> float:
    diff = b - a
    if abs(diff) <= epsilon:
        return 0
    return diff


def _ppg_cascade(
    rounds: Sequence[Round], players: Sequence[Player]
) -> Comparator:
    quality_cache: Dict[str, float] = {}

    def quality(player_id: str) -> float:
        if player_id not in quality_cache:
            quality_cache[player_id] = get_opponent_quality(player_id, rounds, players)
        return quality_cache[player_id]

    def compare(a: PlayerWithStats, b: PlayerWithStats) -> float:
        result = _compare_desc(a.ppg, b.ppg, RANKING_EPSILON)
        if result:
            return result

        h2h = get_head_to_head(a.id, b.id, rounds)
        if h2h.balance:
            return -h2h.balance
        if h2h.point_difference:
            return -h2h.point_difference

        result = _compare_desc(a.win_rate, b.win_rate, RANKING_EPSILON)
        if result:
            return result

        result = _compare_desc(quality(a.id), quality(b.id), RANKING_EPSILON)
        if result:
            return result

        if a.player.matches_played != b.player.matches_played:
            return b.player.matches_played - a.player.matches_played
        return b.player.points - a.player.points

    return compare


def _total_points(a: PlayerWithStats, b: PlayerWithStats) -> float:
    if a.player.points != b.player.points:
        return b.player.points - a.player.points
    return _compare_desc(a.win_rate, b.win_rate)


def _elo_then(cascade: Comparator) -> Comparator:
    def compare(a: PlayerWithStats, b: PlayerWithStats) -> float:
        if a.player.elo_rating != b.player.elo_rating:
            return b.player.elo_rating - a.player.elo_rating
        return cascade(a, b)

    return compare


def rank_leaderboard(
    players: Sequence[Player],
    rounds: Sequence[Round],
    mode: str = LEADERBOARD_PPG,
) -> List[PlayerWithStats]:
    """Rank every player with at least one completed match.

    Args:
        players: Full roster
        rounds: All rounds, used for head-to-head and strength of schedule
        mode: ``"ppg"``, ``"total"`` or ``"elo"``

    Returns:
        Leaderboard rows, best first, with 1-based ``rank`` filled in

    Raises:
        InvalidConfigurationException: For an unknown mode
    """
    if mode not in LEADERBOARD_MODES:
        raise InvalidConfigurationException(f"Unknown leaderboard mode: {mode!r}")

    rows = [PlayerWithStats.of(p) for p in players if p.matches_played > 0]

    if mode == LEADERBOARD_TOTAL:
        compare = _total_points
    elif mode == LEADERBOARD_ELO:
        compare = _elo_then(_ppg_cascade(rounds, players))
    else:
        compare = _ppg_cascade(rounds, players)

    ordered = sorted(rows, key=functools.cmp_to_key(compare))
    logger.debug(f"Ranked {len(ordered)} players by {mode}")
    return [replace(row, rank=i + 1) for i, row in enumerate(ordered)]
