"""Elo rating system for doubles matches.

Pairs are rated by the arithmetic mean of their two players. Both players of
a pair receive the same adjustment; each new rating is rounded independently,
so the total rating of a match is only conserved up to rounding.
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

import math
from typing import Tuple

from indianopairing.constants import (
    ELO_SCALE,
    K_FACTOR,
    MAX_POINT_MULTIPLIER,
    MIN_POINT_MULTIPLIER,
    MULTIPLIER_SLOPE,
)
from indianopairing.type_hints import RatingChanges
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)

# (player id, current rating)
RatedPlayer = Tuple[str, float]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_expected_score(rating_a: float, rating_b: float) -> float:
    """Expected score (0 to 1) of side A against side B.

    Uses the standard formula ``E_A = 1 / (1 + 10^((R_B - R_A) / 400))``.
    """
    return 1.0 / (1.0 + math.pow(10, (rating_b - rating_a) / ELO_SCALE))


def calculate_new_rating(
    current_rating: float,
    expected_score: float,
    actual_score: float,
    k_factor: float = K_FACTOR,
) -> int:
    """Return ``R + K * (actual - expected)`` rounded to the nearest integer."""
    return _round_half_up(current_rating + k_factor * (actual_score - expected_score))


def calculate_pair_rating(player1_rating: float, player2_rating: float) -> float:
    """Average rating of a pair."""
    return (player1_rating + player2_rating) / 2


def calculate_point_multiplier(player_pair_elo: float, opponent_pair_elo: float) -> float:
    """Point multiplier based on the rating gap between two pairs.

    Beating a stronger pair is worth more than 1.0x, a weaker pair less.
    Every 400 rating points of difference move the multiplier by 0.7, and the
    result is clamped to [0.5, 1.5].

    Examples
    --------
    >>> calculate_point_multiplier(1500, 1500)
    1.0
    >>> round(calculate_point_multiplier(1400, 1600), 2)
    1.35
    """
    elo_difference = opponent_pair_elo - player_pair_elo
    multiplier = 1.0 + (elo_difference / ELO_SCALE) * MULTIPLIER_SLOPE
    return max(MIN_POINT_MULTIPLIER, min(MAX_POINT_MULTIPLIER, multiplier))


def calculate_weighted_points(
    base_points: float, player_pair_elo: float, opponent_pair_elo: float
) -> float:
    """Raw points times the point multiplier, rounded to one decimal."""
    multiplier = calculate_point_multiplier(player_pair_elo, opponent_pair_elo)
    return round(base_points * multiplier, 1)


def update_match_elo(
    pair1_player1: RatedPlayer,
    pair1_player2: RatedPlayer,
    pair2_player1: RatedPlayer,
    pair2_player2: RatedPlayer,
    pair1_won: bool,
    k_factor: float = K_FACTOR,
) -> RatingChanges:
    """Compute new ratings for all four players of a finished match.

    Args:
        pair1_player1: ``(id, rating)`` of the first player of pair 1
        pair1_player2: ``(id, rating)`` of the second player of pair 1
        pair2_player1: ``(id, rating)`` of the first player of pair 2
        pair2_player2: ``(id, rating)`` of the second player of pair 2
        pair1_won: Whether pair 1 won the match
        k_factor: Rating volatility

    Returns:
        Mapping of player id to new (integer) rating
    """
    pair1_rating = calculate_pair_rating(pair1_player1[1], pair1_player2[1])
    pair2_rating = calculate_pair_rating(pair2_player1[1], pair2_player2[1])

    pair1_expected = calculate_expected_score(pair1_rating, pair2_rating)
    pair2_expected = 1 - pair1_expected

    pair1_actual = 1.0 if pair1_won else 0.0
    pair2_actual = 1.0 - pair1_actual

    pair1_adjustment = k_factor * (pair1_actual - pair1_expected)
    pair2_adjustment = k_factor * (pair2_actual - pair2_expected)

    logger.debug(
        "Elo update: pair1 %.1f vs pair2 %.1f, expected %.3f, adjustments %+.2f / %+.2f",
        pair1_rating,
        pair2_rating,
        pair1_expected,
        pair1_adjustment,
        pair2_adjustment,
    )

    return {
        pair1_player1[0]: _round_half_up(pair1_player1[1] + pair1_adjustment),
        pair1_player2[0]: _round_half_up(pair1_player2[1] + pair1_adjustment),
        pair2_player1[0]: _round_half_up(pair2_player1[1] + pair2_adjustment),
        pair2_player2[0]: _round_half_up(pair2_player2[1] + pair2_adjustment),
    }
