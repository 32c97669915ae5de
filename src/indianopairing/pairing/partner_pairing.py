"""Greedy partner pairing for an Indiano round.

Players are teamed up two by two. Each candidate partnership is scored on
how new it is (partner variety) and how close the two skills are; the
globally best candidate of a full scan is committed, then the scan repeats
over the players still unpaired. This is a greedy O(n^3) approximation of
maximum-weight matching, not an optimal assignment.
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
import random
from typing import List, Optional, Sequence

from indianopairing.constants import (
    MIN_PAIRS_PER_ROUND,
    PARTNER_NEW_BONUS,
    PARTNER_ONCE_PENALTY,
    PARTNER_REPEAT_PENALTY,
    PARTNER_SKILL_WEIGHT,
    PARTNER_TWICE_PENALTY,
)
from indianopairing.exceptions import InsufficientPlayersException
from indianopairing.models.player import Player
from indianopairing.models.tournament import Pair, PairHistory
from indianopairing.pairing.skill import elo_skill, skill_epsilon
from indianopairing.type_hints import SkillFunction
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


def variety_score(partner_count: int) -> int:
    """Score how fresh a partnership is from the times it was already played.

    - 0: +2000
    - 1: -500
    - 2: -1500
    - n >= 3: -2000 * (n - 1)
    """
    if partner_count <= 0:
        return PARTNER_NEW_BONUS
    if partner_count == 1:
        return PARTNER_ONCE_PENALTY
    if partner_count == 2:
        return PARTNER_TWICE_PENALTY
    return PARTNER_REPEAT_PENALTY * (partner_count - 1)


def _score_partnership(
    p1: Player,
    p2: Player,
    history: PairHistory,
    skill: SkillFunction,
) -> float:
    skill_gap = abs(skill(p1) - skill(p2))
    return variety_score(history.count(p1.id, p2.id)) - PARTNER_SKILL_WEIGHT * skill_gap


def _sort_players_for_pairing(
    players: Sequence[Player],
    skill: SkillFunction,
    rng: random.Random,
    epsilon: float,
) -> List[Player]:
    """Sort by skill descending; near-equal skills land in random order.

    Skills are bucketed into ``epsilon``-wide bands. The roster is shuffled
    first and the sort is stable, so players sharing a band keep the
    shuffled order.
    """
    shuffled = list(players)
    rng.shuffle(shuffled)

    def band(player: Player) -> float:
        if epsilon <= 0:
            return skill(player)
        return math.floor(skill(player) / epsilon)

    return sorted(shuffled, key=band, reverse=True)


def generate_pairs(
    players: Sequence[Player],
    partnership_history: PairHistory,
    skill: SkillFunction = elo_skill,
    rng: Optional[random.Random] = None,
    epsilon: Optional[float] = None,
) -> List[Pair]:
    """
    Team up players for one round.

    - players: active players not sitting out this round
    - partnership_history: how often each two players were partners
    - skill: skill metric used for balancing (``elo_skill`` or ``ppg_skill``)
    - rng: random source for breaking near-equal skill ties
    - epsilon: skill gap treated as equal, defaults to the metric's own
    Returns: list of pairs in the order they were committed
    Raises: InsufficientPlayersException if fewer than two pairs result
    """
    rng = rng or random.Random()
    if epsilon is None:
        epsilon = skill_epsilon(skill)

    unpaired = _sort_players_for_pairing(players, skill, rng, epsilon)
    pairs: List[Pair] = []

    while len(unpaired) >= 2:
        best_score = float("-inf")
        best_i, best_j = 0, 1
        for i in range(len(unpaired)):
            for j in range(i + 1, len(unpaired)):
                score = _score_partnership(
                    unpaired[i], unpaired[j], partnership_history, skill
                )
                if score > best_score:
                    best_score = score
                    best_i, best_j = i, j

        p1, p2 = unpaired[best_i], unpaired[best_j]
        pair = Pair(
            id=f"pair-{len(pairs) + 1}",
            players=(p1, p2),
            avg_skill=(skill(p1) + skill(p2)) / 2,
        )
        pairs.append(pair)
        logger.debug(
            "Paired %s with %s (score %.1f)", p1.name, p2.name, best_score
        )
        # remove the higher index first so the lower one stays valid
        del unpaired[best_j]
        del unpaired[best_i]

    if unpaired:
        logger.debug("Left over without a partner: %s", unpaired[0].name)

    if len(pairs) < MIN_PAIRS_PER_ROUND:
        raise InsufficientPlayersException(
            f"Need at least {MIN_PAIRS_PER_ROUND} pairs, "
            f"got {len(pairs)} from {len(players)} players"
        )
    return pairs
