"""Random Indiano tournament simulator.

This module plays complete tournaments with generated players and
Elo-driven results. It exercises the whole engine (sit-outs, pairing,
matching, the result ledger and ratings) and reports how fair the pairings
turned out: how evenly sit-outs were spread and how often partnerships and
oppositions repeated.
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

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from indianopairing.constants import (
    DEFAULT_POINTS_TO_WIN,
    LEADERBOARD_PPG,
    SKILL_ELO,
)
from indianopairing.models.tournament import Match, PairHistory, TournamentSettings
from indianopairing.rating import calculate_expected_score, calculate_pair_rating
from indianopairing.tournament import PlayerWithStats, Tournament
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


class RatingDistribution(Enum):
    """Rating distribution patterns for generated players."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    EQUAL = "equal"


@dataclass
class SimulationConfig:
    """Configuration for a simulated tournament."""

    num_players: int
    num_rounds: int
    rating_distribution: RatingDistribution = RatingDistribution.NORMAL
    rating_range: Tuple[int, int] = (1200, 1800)
    seed: Optional[int] = None
    upset_rate: float = 0.1
    skill_metric: str = SKILL_ELO
    points_to_win: int = DEFAULT_POINTS_TO_WIN
    ratings_enabled: bool = True
    leaderboard_mode: str = LEADERBOARD_PPG

    def settings(self) -> TournamentSettings:
        return TournamentSettings(
            points_to_win=self.points_to_win,
            ratings_enabled=self.ratings_enabled,
            skill_metric=self.skill_metric,
            leaderboard_mode=self.leaderboard_mode,
            auto_generate_rounds=False,
        ).validate()


class PlayerFactory:
    """Factory for generated roster entries."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def create_roster(self) -> List[Tuple[str, int]]:
        """Return ``(name, rating)`` for every player to enter."""
        roster = []
        for i in range(self.config.num_players):
            rating = self._generate_rating()
            roster.append((self._generate_name(i + 1, rating), rating))
        logger.info(
            "Created %s players with %s distribution",
            len(roster),
            self.config.rating_distribution.value,
        )
        return roster

    def _generate_rating(self) -> int:
        min_rating, max_rating = self.config.rating_range
        if self.config.rating_distribution == RatingDistribution.EQUAL:
            return (min_rating + max_rating) // 2
        if self.config.rating_distribution == RatingDistribution.NORMAL:
            mean = (min_rating + max_rating) / 2
            std_dev = (max_rating - min_rating) / 6
            rating = int(self.random.gauss(mean, std_dev))
            return max(min_rating, min(max_rating, rating))
        return self.random.randint(min_rating, max_rating)

    def _generate_name(self, number: int, rating: int) -> str:
        if rating < 1300:
            prefix = "Rookie"
        elif rating < 1500:
            prefix = "Club"
        elif rating < 1700:
            prefix = "Strong"
        else:
            prefix = "Pro"
        return f"{prefix}-{number:03d}"


class ResultSimulator:
    """Simulates match scores from the pairs' ratings."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def simulate_match(self, match: Match, ratings: Dict[str, int]) -> Tuple[int, int]:
        """Return the final ``(score1, score2)``; the winner reaches the target."""
        pair1_rating = calculate_pair_rating(
            *(ratings[pid] for pid in match.pair1.player_ids)
        )
        pair2_rating = calculate_pair_rating(
            *(ratings[pid] for pid in match.pair2.player_ids)
        )
        pair1_expected = calculate_expected_score(pair1_rating, pair2_rating)
        pair1_wins = self.random.random() < pair1_expected
        if self.random.random() < self.config.upset_rate:
            pair1_wins = not pair1_wins

        target = self.config.points_to_win
        # closer matches leave the loser nearer to the target
        closeness = 1.0 - abs(pair1_expected - 0.5) * 2
        floor = int((target - 1) * closeness * 0.5)
        loser_score = self.random.randint(floor, target - 1)
        if pair1_wins:
            return target, loser_score
        return loser_score, target

    def rally_order(self, score1: int, score2: int) -> List[int]:
        """Shuffle the points of a final score into the order they were won."""
        points = [1] * score1 + [2] * score2
        self.random.shuffle(points)
        return points


@dataclass
class SimulationReport:
    """Outcome of one simulated tournament."""

    leaderboard: List[PlayerWithStats]
    rounds_played: int
    matches_played: int
    sit_out_counts: Dict[str, int] = field(default_factory=dict)
    repeat_partnerships: int = 0
    repeat_oppositions: int = 0
    snapshot: Dict[str, Any] = field(default_factory=dict)

    @property
    def sit_out_spread(self) -> int:
        """Largest difference in sit-out counts between two players."""
        if not self.sit_out_counts:
            return 0
        counts = self.sit_out_counts.values()
        return max(counts) - min(counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds_played": self.rounds_played,
            "matches_played": self.matches_played,
            "sit_out_spread": self.sit_out_spread,
            "repeat_partnerships": self.repeat_partnerships,
            "repeat_oppositions": self.repeat_oppositions,
            "leaderboard": [row.to_dict() for row in self.leaderboard],
            "tournament": self.snapshot,
        }


def count_repeats(history: PairHistory) -> int:
    """Meetings beyond the first, counted once per unordered pair of players."""
    return sum(n - 1 for a, b, n in history if a < b and n > 1)


class TournamentSimulator:
    """Plays a full tournament through the :class:`Tournament` facade."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.player_factory = PlayerFactory(config, self.random)
        self.result_simulator = ResultSimulator(config, self.random)

    def run(self) -> SimulationReport:
        """Generate players, play every round and report on the result."""
        logger.info(
            "Simulating tournament: %s players, %s rounds",
            self.config.num_players,
            self.config.num_rounds,
        )
        tournament = Tournament(settings=self.config.settings())
        for name, rating in self.player_factory.create_roster():
            tournament.add_player(name, initial_elo=rating)

        tournament.start_tournament(rng=self.random)
        self._play_round(tournament)
        for _ in range(self.config.num_rounds - 1):
            tournament.generate_next_round(rng=self.random)
            self._play_round(tournament)

        state = tournament.state
        report = SimulationReport(
            leaderboard=tournament.get_leaderboard(),
            rounds_played=len(state.rounds),
            matches_played=sum(len(r.matches) for r in state.rounds),
            sit_out_counts={p.id: p.sit_out_count for p in state.players},
            repeat_partnerships=count_repeats(state.partnership_history),
            repeat_oppositions=count_repeats(state.opposition_history),
            snapshot=tournament.to_dict(),
        )
        logger.info("Simulation complete")
        return report

    def _play_round(self, tournament: Tournament) -> None:
        round_data = tournament.current_round
        ratings = {p.id: p.elo_rating for p in tournament.players}
        for match in round_data.matches:
            score1, score2 = self.result_simulator.simulate_match(match, ratings)
            for team in self.result_simulator.rally_order(score1, score2):
                tournament.update_score(round_data.id, match.id, team, 1)
            tournament.complete_match(round_data.id, match.id)
