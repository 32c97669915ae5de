"""Matching pairs against each other for one round."""

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

from datetime import datetime
from typing import List, Optional, Sequence, Set

from indianopairing.constants import (
    FIRST_SERVER,
    OPPONENT_BALANCE_WEIGHT,
    OPPONENT_NEW_BONUS,
    OPPONENT_REPEAT_PENALTY,
)
from indianopairing.models.tournament import Match, Pair, PairHistory
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


def opposition_count(pair1: Pair, pair2: Pair, history: PairHistory) -> int:
    """Sum of previous meetings over all four cross-pair player combinations."""
    return sum(history.count(a, b) for a in pair1.player_ids for b in pair2.player_ids)


def opponent_variety_score(opp_count: int) -> int:
    if opp_count == 0:
        return OPPONENT_NEW_BONUS
    return OPPONENT_REPEAT_PENALTY * opp_count


def _score_opponents(pair1: Pair, pair2: Pair, history: PairHistory) -> float:
    balance = -OPPONENT_BALANCE_WEIGHT * abs(pair1.avg_skill - pair2.avg_skill)
    return opponent_variety_score(opposition_count(pair1, pair2, history)) + balance


def match_pairs(
    pairs: Sequence[Pair],
    opposition_history: PairHistory,
    round_index: int,
    now: Optional[datetime] = None,
) -> List[Match]:
    """Build the matches of a round from its pairs.

    Pairs are walked in descending ``avg_skill`` order; each unmatched pair
    takes its best-scoring unmatched opponent further down the list. The
    choice is greedy per pair, not a global optimum. A pair left without an
    opponent is dropped from the round.

    Args:
        pairs: Pairs produced by the partner pairing
        opposition_history: How often each two players faced each other
        round_index: Round id, used in ``r{round}-m{k}`` match ids
        now: Start time stamped on every match

    Returns:
        The round's matches, all pending at 0-0
    """
    ordered = sorted(pairs, key=lambda p: p.avg_skill, reverse=True)
    used: Set[int] = set()
    matches: List[Match] = []

    for i, pair in enumerate(ordered):
        if i in used:
            continue
        best_j: Optional[int] = None
        best_score = float("-inf")
        for j in range(i + 1, len(ordered)):
            if j in used:
                continue
            score = _score_opponents(pair, ordered[j], opposition_history)
            if score > best_score:
                best_score = score
                best_j = j

        if best_j is None:
            logger.info("No opponent left for %s, dropped from round", pair.display_name)
            continue

        used.update((i, best_j))
        matches.append(
            Match(
                id=f"r{round_index}-m{len(matches)}",
                pair1=pair,
                pair2=ordered[best_j],
                start_time=now,
                current_server=FIRST_SERVER,
            )
        )
        logger.debug(
            "%s vs %s (score %.1f)",
            pair.display_name,
            ordered[best_j].display_name,
            best_score,
        )

    return matches
