"""Round management for Indiano tournaments.

This module builds new rounds from the active roster (sit-outs, partner
pairing, opponent matching) and removes whole rounds again.
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
from dataclasses import replace
from datetime import datetime
from typing import Optional

from indianopairing.constants import PLAYERS_PER_MATCH
from indianopairing.controllers.tournament.result_recorder import reverse_match
from indianopairing.exceptions import InsufficientPlayersException
from indianopairing.models.tournament import Round, TournamentState
from indianopairing.pairing import (
    generate_pairs,
    get_skill_strategy,
    match_pairs,
    plan_sit_outs,
)
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


def generate_round(
    state: TournamentState,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> TournamentState:
    """Generate the next round and append it to the tournament.

    Args:
        state: Current tournament snapshot
        rng: Random source for near-equal skill ordering
        now: Start time stamped on the new matches

    Returns:
        New snapshot with the round appended and ``tournament_started`` set

    Raises:
        InsufficientPlayersException: With fewer than four active players or
            when no match could be formed
    """
    active = state.active_players()
    if len(active) < PLAYERS_PER_MATCH:
        raise InsufficientPlayersException(
            f"Need at least {PLAYERS_PER_MATCH} active players to generate a round, "
            f"have {len(active)}"
        )

    round_id = state.next_round_id
    to_pair, sitting_out = plan_sit_outs(active)
    skill = get_skill_strategy(state.settings.skill_metric)
    pairs = generate_pairs(to_pair, state.partnership_history, skill=skill, rng=rng)
    matches = match_pairs(
        pairs, state.opposition_history, round_id, now=now or datetime.now()
    )
    if not matches:
        raise InsufficientPlayersException("Not enough pairs to form a match")

    new_round = Round(id=round_id, matches=tuple(matches), sitting_out=sitting_out)
    logger.info(
        f"Generated round {new_round.round_number} with {len(matches)} "
        f"match{'es' if len(matches) > 1 else ''}"
    )
    return replace(
        state,
        rounds=state.rounds + (new_round,),
        tournament_started=True,
    )


def delete_round(state: TournamentState, round_id: int) -> TournamentState:
    """Reverse every completed match of a round, then drop the round."""
    round_data = state.get_round(round_id)
    for match in round_data.matches:
        if match.completed:
            state = reverse_match(state, round_id, match.id)
    logger.info(f"Deleted round {round_data.round_number}")
    return state.without_round(round_id)
