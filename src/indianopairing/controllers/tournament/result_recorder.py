"""Result recording for Indiano matches.

This module applies and reverses the effect of completed matches on player
statistics, partnership and opposition history, sit-out counts and Elo
ratings. Every function takes a :class:`TournamentState` and returns a new
one; a rejected call raises before anything is built, so the caller's
snapshot is never touched.

Completing a match and reversing it again is the identity on points,
matches played, wins, losses and both histories. Ratings and sit-out
counts are not rolled back: ratings form an append-only record and a round
that once completed keeps its sit-outs counted.
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

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from indianopairing.exceptions import InvalidMatchStateException
from indianopairing.models.player import Player
from indianopairing.models.tournament import Match, Round, TournamentState
from indianopairing.rating import (
    calculate_pair_rating,
    calculate_weighted_points,
    update_match_elo,
)
from indianopairing.type_hints import Team
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)


# ========== Helpers ==========


def _partnerships(match: Match) -> List[Tuple[str, str]]:
    return [match.pair1.player_ids, match.pair2.player_ids]


def _oppositions(match: Match) -> List[Tuple[str, str]]:
    return [(a, b) for a in match.pair1.player_ids for b in match.pair2.player_ids]


def _side_results(match: Match) -> List[Tuple[str, int, int]]:
    """(player id, scored, conceded) for each of the four players."""
    results = [(pid, match.score1, match.score2) for pid in match.pair1.player_ids]
    results += [(pid, match.score2, match.score1) for pid in match.pair2.player_ids]
    return results


def _apply_results(
    state: TournamentState, match: Match, reverse: bool = False
) -> Dict[str, Player]:
    players = state.players_by_id
    updated: Dict[str, Player] = {}
    for player_id, scored, conceded in _side_results(match):
        player = players.get(player_id)
        if player is None:
            logger.warning(f"Player {player_id} of match {match.id} is not on the roster")
            continue
        if reverse:
            updated[player_id] = player.without_match_result(scored, conceded)
        else:
            updated[player_id] = player.with_match_result(scored, conceded)
    return updated


def _rate_match(state: TournamentState, match: Match) -> Tuple[Match, Dict[str, Player]]:
    """Feed a match to the Elo ratings the first time it completes.

    Returns the match with ``pair_ratings`` and weighted points filled in
    and the re-rated players (empty when nothing changed).
    """
    if not state.settings.ratings_enabled:
        return match, {}

    updated: Dict[str, Player] = {}
    if not match.rated:
        players = state.players_by_id
        try:
            a1, a2, b1, b2 = (players[pid] for pid in match.player_ids)
        except KeyError as e:
            logger.warning(f"Cannot rate match {match.id}: unknown player {e}")
            return match, {}
        pair_ratings = (
            calculate_pair_rating(a1.elo_rating, a2.elo_rating),
            calculate_pair_rating(b1.elo_rating, b2.elo_rating),
        )
        match = replace(match, pair_ratings=pair_ratings)
        winner = match.winner
        if winner is not None:
            new_ratings = update_match_elo(
                (a1.id, a1.elo_rating),
                (a2.id, a2.elo_rating),
                (b1.id, b1.elo_rating),
                (b2.id, b2.elo_rating),
                pair1_won=winner == 1,
            )
            updated = {
                pid: players[pid].with_rating(rating)
                for pid, rating in new_ratings.items()
            }
            match = replace(match, rated=True)
            logger.info(f"Rated match {match.id}: {new_ratings}")
        else:
            logger.info(f"Match {match.id} ended in a tie, ratings unchanged")

    if match.pair_ratings is not None:
        pair1_rating, pair2_rating = match.pair_ratings
        match = replace(
            match,
            weighted_points1=calculate_weighted_points(
                match.score1, pair1_rating, pair2_rating
            ),
            weighted_points2=calculate_weighted_points(
                match.score2, pair2_rating, pair1_rating
            ),
        )
    return match, updated


def _record_sit_outs(
    state: TournamentState, round_data: Round
) -> Tuple[Round, Dict[str, Player]]:
    """Count the round's sit-outs once, the first time the round completes."""
    if not round_data.completed or round_data.sit_outs_recorded:
        return round_data, {}
    updated: Dict[str, Player] = {}
    if round_data.sitting_out is not None:
        players = state.players_by_id
        for player_id in round_data.sitting_out.player_ids:
            player = players.get(player_id)
            if player is not None:
                updated[player_id] = player.with_sit_out()
        logger.info(
            f"Round {round_data.round_number}: recorded sit-out for "
            f"{round_data.sitting_out.name}"
        )
    return replace(round_data, sit_outs_recorded=True), updated


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidMatchStateException(message)


# ========== Scoring ==========


def update_score(
    state: TournamentState, round_id: int, match_id: str, team: Team, delta: int
) -> TournamentState:
    """Move one side's score by ``delta`` (clamped at zero).

    Raises:
        InvalidMatchStateException: If the match is completed
        ValueError: If team is not 1 or 2
    """
    if team not in (1, 2):
        raise ValueError(f"Team must be 1 or 2, not {team!r}")
    round_data, match = state.get_match(round_id, match_id)
    _require(not match.completed, f"Match {match_id} is completed, reopen it to edit")

    updated = match.with_score_delta(team, delta)
    logger.debug(f"Match {match_id}: {updated.score1}-{updated.score2}")
    return state.with_round(round_data.with_match(updated))


# ========== Completion and reversal ==========


def complete_match(
    state: TournamentState,
    round_id: int,
    match_id: str,
    now: Optional[datetime] = None,
) -> TournamentState:
    """Mark a match completed and apply its result.

    Player stats and both histories are updated, the match is rated if it
    never was, and when the round becomes completed for the first time its
    sitting-out players get their sit-out count raised.

    Raises:
        InvalidMatchStateException: If the match is already completed
    """
    round_data, match = state.get_match(round_id, match_id)
    _require(not match.completed, f"Match {match_id} is already completed")

    updated_players = _apply_results(state, match)
    match, rated_players = _rate_match(state, match)
    for player_id, rated in rated_players.items():
        updated_players[player_id] = updated_players.get(player_id, rated).with_rating(
            rated.elo_rating
        )

    match = replace(
        match,
        completed=True,
        editing=False,
        end_time=now or datetime.now(),
        pre_edit_scores=None,
    )
    round_data = round_data.with_match(match)

    new_state = replace(
        state,
        partnership_history=state.partnership_history.add(_partnerships(match)),
        opposition_history=state.opposition_history.add(_oppositions(match)),
    ).with_players(updated_players)

    round_data, sat_out = _record_sit_outs(new_state, round_data)
    new_state = new_state.with_players(sat_out).with_round(round_data)

    logger.info(
        f"Completed match {match_id}: {match.pair1.display_name} {match.score1} - "
        f"{match.score2} {match.pair2.display_name}"
    )
    if round_data.completed:
        logger.info(f"Round {round_data.round_number} completed")
    return new_state


def reverse_match(state: TournamentState, round_id: int, match_id: str) -> TournamentState:
    """Take a completed match's result back out and mark it not completed.

    Ratings and sit-out counts are left as they are.

    Raises:
        InvalidMatchStateException: If the match is not completed
    """
    round_data, match = state.get_match(round_id, match_id)
    _require(match.completed, f"Match {match_id} is not completed")

    updated_players = _apply_results(state, match, reverse=True)
    match = replace(match, completed=False)

    logger.info(f"Reversed match {match_id}")
    return replace(
        state,
        partnership_history=state.partnership_history.remove(_partnerships(match)),
        opposition_history=state.opposition_history.remove(_oppositions(match)),
    ).with_players(updated_players).with_round(round_data.with_match(match))


# ========== Editing ==========


def start_editing(state: TournamentState, round_id: int, match_id: str) -> TournamentState:
    """Reopen a completed match so its score can be corrected."""
    _, match = state.get_match(round_id, match_id)
    _require(match.completed, f"Match {match_id} is not completed, nothing to edit")

    state = reverse_match(state, round_id, match_id)
    round_data, match = state.get_match(round_id, match_id)
    match = replace(match, editing=True, pre_edit_scores=(match.score1, match.score2))
    logger.info(f"Editing match {match_id}")
    return state.with_round(round_data.with_match(match))


def save_edit(
    state: TournamentState,
    round_id: int,
    match_id: str,
    now: Optional[datetime] = None,
) -> TournamentState:
    """Complete a reopened match again with its corrected score."""
    _, match = state.get_match(round_id, match_id)
    _require(match.editing, f"Match {match_id} is not being edited")
    return complete_match(state, round_id, match_id, now=now)


def cancel_edit(
    state: TournamentState,
    round_id: int,
    match_id: str,
    now: Optional[datetime] = None,
) -> TournamentState:
    """Drop pending corrections and complete the match with its old score."""
    round_data, match = state.get_match(round_id, match_id)
    _require(match.editing, f"Match {match_id} is not being edited")

    if match.pre_edit_scores is not None:
        score1, score2 = match.pre_edit_scores
        match = replace(match, score1=score1, score2=score2)
        state = state.with_round(round_data.with_match(match))
    logger.info(f"Cancelled edit of match {match_id}")
    return complete_match(state, round_id, match_id, now=now or match.end_time)


# ========== Deletion ==========


def delete_match(state: TournamentState, round_id: int, match_id: str) -> TournamentState:
    """Remove a match from its round, reversing its result if it was completed."""
    _, match = state.get_match(round_id, match_id)
    if match.completed:
        state = reverse_match(state, round_id, match_id)
    round_data = state.get_round(round_id).without_match(match_id)
    logger.info(f"Deleted match {match_id} from round {round_data.round_number}")
    round_data, sat_out = _record_sit_outs(state, round_data)
    return state.with_players(sat_out).with_round(round_data)
