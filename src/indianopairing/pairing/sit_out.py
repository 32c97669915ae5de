"""Choosing who rests when the active pool does not fill whole courts."""

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

from typing import List, Optional, Sequence, Tuple

from indianopairing.constants import PLAYERS_PER_MATCH
from indianopairing.models.player import Player
from indianopairing.models.tournament import SittingOut
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


def _sit_out_priority(player: Player) -> Tuple[int, int]:
    # fewest sit-outs first, then whoever has played the most
    return player.sit_out_count, -player.matches_played


def select_sit_outs(active_players: Sequence[Player], count: int) -> List[Player]:
    """Pick ``count`` players to rest this round.

    Candidates are ordered by ascending sit-out count, then by descending
    matches played; the sort is stable so equal players keep roster order.

    Args:
        active_players: Players eligible to sit out
        count: How many to pick (1 or 2)

    Returns:
        The selected players, in priority order

    Raises:
        ValueError: If count is not 1 or 2
    """
    if count not in (1, 2):
        raise ValueError(f"Can only sit out 1 or 2 players at a time, not {count}")
    ordered = sorted(active_players, key=_sit_out_priority)
    return ordered[:count]


def plan_sit_outs(
    active_players: Sequence[Player],
) -> Tuple[List[Player], Optional[SittingOut]]:
    """Split the active pool into players to pair and players resting.

    With ``n % 4 == 2`` two players rest together. With ``n % 4`` equal to
    1 or 3 one player rests, and if the remaining count is then ``% 4 == 2``
    one more rests with them. At most two players rest; an odd player left
    over is dropped by partner pairing.

    Returns:
        Tuple of (players to pair, sitting-out record or None)
    """
    remaining = list(active_players)
    resting: List[Player] = []

    remainder = len(remaining) % PLAYERS_PER_MATCH
    if remainder in (1, 3):
        resting.extend(select_sit_outs(remaining, 1))
        remaining = [p for p in remaining if p.id not in {r.id for r in resting}]

    if len(remaining) % PLAYERS_PER_MATCH == 2:
        chosen = select_sit_outs(remaining, 1 if resting else 2)
        resting.extend(chosen)
        chosen_ids = {p.id for p in chosen}
        remaining = [p for p in remaining if p.id not in chosen_ids]

    sitting_out = SittingOut.of(resting)
    if sitting_out:
        logger.info(
            "%s sitting out (%d active, %d to pair)",
            sitting_out.name,
            len(active_players),
            len(remaining),
        )
    return remaining, sitting_out
