"""Main Tournament class - orchestrates all Indiano tournament operations.

This is the primary interface for running a tournament. It holds the current
immutable :class:`TournamentState`, routes every action through the round
manager, result ledger, leaderboard ranker and finals helpers, and notifies
subscribers after each settled transition.
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
from typing import Any, Callable, Dict, List, Optional, Tuple

from indianopairing.controllers.tournament import result_recorder, round_manager
from indianopairing.exceptions import (
    DuplicatePlayerException,
    InsufficientPlayersException,
    InvalidMatchStateException,
    TournamentStateException,
)
from indianopairing.models.player import Player
from indianopairing.models.tournament import (
    FinalsMatch,
    PairHistory,
    Round,
    TournamentSettings,
    TournamentState,
)
from indianopairing.tournament import finals
from indianopairing.tournament.tiebreak_calculator import (
    PlayerWithStats,
    rank_leaderboard,
)
from indianopairing.type_hints import Team
from indianopairing.utils import setup_logger

logger = setup_logger(__name__)

StateListener = Callable[[TournamentState, TournamentState], None]
Clock = Callable[[], datetime]


class Tournament:
    """Main tournament management class.

    Every operation builds a new snapshot from the current one; the snapshot
    is only swapped in once the operation succeeded, so a failed call leaves
    the tournament untouched.

    Lifecycle violations (completing a completed match, adding a player
    after the start, ...) are logged as warnings and reported by returning
    ``False``. Missing players, rounds or matches, too few players and
    invalid input raise.
    """

    def __init__(
        self,
        settings: Optional[TournamentSettings] = None,
        state: Optional[TournamentState] = None,
        clock: Clock = datetime.now,
    ) -> None:
        """Initialize a tournament.

        Args
        ----
        settings: Tournament settings, ignored when ``state`` is given
        state: Snapshot to resume from
        clock: Source of match start and end times
        """
        if state is None:
            state = TournamentState(settings=(settings or TournamentSettings()).validate())
        self._state = state
        self._clock = clock
        self._listeners: List[StateListener] = []

    # ========== Properties ==========

    @property
    def state(self) -> TournamentState:
        """Current snapshot."""
        return self._state

    @property
    def settings(self) -> TournamentSettings:
        return self._state.settings

    @property
    def players(self) -> Tuple[Player, ...]:
        return self._state.players

    @property
    def rounds(self) -> Tuple[Round, ...]:
        return self._state.rounds

    @property
    def current_round(self) -> Optional[Round]:
        """Most recently generated round, if any."""
        return self._state.rounds[-1] if self._state.rounds else None

    @property
    def tournament_started(self) -> bool:
        return self._state.tournament_started

    @property
    def finals_match(self) -> Optional[FinalsMatch]:
        return self._state.finals_match

    # ========== Subscriptions ==========

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener(old_state, new_state)``.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: TournamentState) -> None:
        old_state = self._state
        self._state = new_state
        for listener in list(self._listeners):
            listener(old_state, new_state)

    def _attempt(
        self, action: str, transition: Callable[[TournamentState], TournamentState]
    ) -> bool:
        """Run a transition, committing its result or logging why it was refused."""
        try:
            new_state = transition(self._state)
        except (InvalidMatchStateException, TournamentStateException) as e:
            logger.warning(f"Cannot {action}: {e}")
            return False
        self._commit(new_state)
        return True

    # ========== Player Management ==========

    def get_player(self, player_id: str) -> Player:
        return self._state.get_player(player_id)

    def get_player_list(self, active_only: bool = False) -> List[Player]:
        """Get list of tournament players.

        Args:
            active_only: If True, only return active players
        """
        if active_only:
            return self._state.active_players()
        return list(self._state.players)

    def add_player(self, name: str, initial_elo: Optional[int] = None) -> Player:
        """Add a player to the roster.

        Args:
            name: Display name, must be unique on the roster
            initial_elo: Starting rating (100-3000), 1500 when omitted

        Returns:
            The created player

        Raises:
            DuplicatePlayerException: If the name is already taken
            PlayerNameValidationException: If the name is empty or too long
            RatingValidationException: If the rating is out of range
        """
        player = Player.create(name, initial_elo=initial_elo)
        taken = {p.name.casefold() for p in self._state.players}
        if player.name.casefold() in taken:
            raise DuplicatePlayerException(f"A player named {player.name!r} already exists")
        self._commit(replace(self._state, players=self._state.players + (player,)))
        logger.info(f"Added player: {player.name} ({player.id})")
        return player

    def remove_player(self, player_id: str) -> bool:
        """Remove a player; only possible before the tournament started."""
        player = self._state.get_player(player_id)

        def transition(state: TournamentState) -> TournamentState:
            if state.tournament_started:
                raise TournamentStateException(
                    "players cannot be removed once the tournament started"
                )
            return replace(
                state, players=tuple(p for p in state.players if p.id != player_id)
            )

        removed = self._attempt(f"remove {player.name}", transition)
        if removed:
            logger.info(f"Removed player: {player.name} ({player_id})")
        return removed

    def set_player_active(self, player_id: str, active: bool) -> bool:
        """Mark a player as taking part in upcoming rounds or away."""
        player = self._state.get_player(player_id)
        if player.active == active:
            return True
        self._commit(self._state.with_players({player_id: replace(player, active=active)}))
        logger.info(f"{player.name} is now {'active' if active else 'away'}")
        return True

    def toggle_player_active(self, player_id: str) -> bool:
        player = self._state.get_player(player_id)
        return self.set_player_active(player_id, not player.active)

    # ========== Round Management ==========

    def start_tournament(self, rng: Optional[random.Random] = None) -> bool:
        """Start the tournament and generate the first round.

        Raises:
            InsufficientPlayersException: With fewer than four active players
        """

        def transition(state: TournamentState) -> TournamentState:
            if state.tournament_started:
                raise TournamentStateException("tournament already started")
            return round_manager.generate_round(state, rng=rng, now=self._clock())

        started = self._attempt("start tournament", transition)
        if started:
            logger.info(f"Tournament started with {len(self._state.active_players())} players")
        return started

    def generate_next_round(self, rng: Optional[random.Random] = None) -> bool:
        """Generate the next round from the active roster.

        Raises:
            InsufficientPlayersException: With fewer than four active players
        """

        def transition(state: TournamentState) -> TournamentState:
            if state.finals_mode:
                raise TournamentStateException("finals are in progress")
            return round_manager.generate_round(state, rng=rng, now=self._clock())

        return self._attempt("generate round", transition)

    def delete_round(self, round_id: int) -> bool:
        """Delete a whole round, reversing all of its completed matches."""
        return self._attempt(
            f"delete round {round_id}",
            lambda state: round_manager.delete_round(state, round_id),
        )

    # ========== Match Management ==========

    def update_score(self, round_id: int, match_id: str, team: Team, delta: int) -> bool:
        return self._attempt(
            f"update score of {match_id}",
            lambda state: result_recorder.update_score(
                state, round_id, match_id, team, delta
            ),
        )

    def complete_match(
        self, round_id: int, match_id: str, rng: Optional[random.Random] = None
    ) -> bool:
        """Complete a match; may also generate the next round.

        With ``auto_generate_rounds`` on, completing the last match of the
        latest round generates the next one in the same transition. Too few
        players for another round is logged, not raised.
        """

        def transition(state: TournamentState) -> TournamentState:
            new_state = result_recorder.complete_match(
                state, round_id, match_id, now=self._clock()
            )
            return self._maybe_auto_generate(new_state, round_id, rng)

        return self._attempt(f"complete match {match_id}", transition)

    def _maybe_auto_generate(
        self,
        state: TournamentState,
        round_id: int,
        rng: Optional[random.Random],
    ) -> TournamentState:
        if not state.settings.auto_generate_rounds or state.finals_mode:
            return state
        latest = state.rounds[-1]
        if latest.id != round_id or not latest.completed:
            return state
        try:
            return round_manager.generate_round(state, rng=rng, now=self._clock())
        except InsufficientPlayersException as e:
            logger.warning(f"Next round not generated: {e}")
            return state

    def start_editing_match(self, round_id: int, match_id: str) -> bool:
        return self._attempt(
            f"edit match {match_id}",
            lambda state: result_recorder.start_editing(state, round_id, match_id),
        )

    def save_edited_match(self, round_id: int, match_id: str) -> bool:
        return self._attempt(
            f"save match {match_id}",
            lambda state: result_recorder.save_edit(
                state, round_id, match_id, now=self._clock()
            ),
        )

    def cancel_editing_match(self, round_id: int, match_id: str) -> bool:
        return self._attempt(
            f"cancel editing match {match_id}",
            lambda state: result_recorder.cancel_edit(state, round_id, match_id),
        )

    def delete_match(self, round_id: int, match_id: str) -> bool:
        return self._attempt(
            f"delete match {match_id}",
            lambda state: result_recorder.delete_match(state, round_id, match_id),
        )

    # ========== Standings ==========

    def get_leaderboard(self, mode: Optional[str] = None) -> List[PlayerWithStats]:
        """Rank players, using the configured leaderboard mode by default."""
        return rank_leaderboard(
            self._state.players,
            self._state.rounds,
            mode or self._state.settings.leaderboard_mode,
        )

    # ========== Finals ==========

    def initiate_finals(self) -> bool:
        """Create the finals match from the current top four.

        Raises:
            InsufficientPlayersException: With fewer than four ranked players
        """

        def transition(state: TournamentState) -> TournamentState:
            if state.finals_mode:
                raise TournamentStateException("finals already initiated")
            if not state.tournament_started:
                raise TournamentStateException("tournament has not started")
            finals_match = finals.create_finals_match(self.get_leaderboard())
            return replace(state, finals_mode=True, finals_match=finals_match)

        return self._attempt("initiate finals", transition)

    def update_finals_score(self, team: Team, delta: int) -> bool:
        def transition(state: TournamentState) -> TournamentState:
            if state.finals_match is None:
                raise TournamentStateException("finals have not been initiated")
            return replace(
                state,
                finals_match=finals.update_finals_score(
                    state.finals_match, team, delta, state.settings.points_to_win
                ),
            )

        return self._attempt("update finals score", transition)

    def complete_finals_match(self) -> bool:
        def transition(state: TournamentState) -> TournamentState:
            if state.finals_match is None:
                raise TournamentStateException("finals have not been initiated")
            return replace(state, finals_match=finals.complete_finals(state.finals_match))

        return self._attempt("complete finals", transition)

    # ========== Lifecycle ==========

    def reset_tournament(self) -> None:
        """Clear rounds, history and finals; players keep their names and ratings
        go back to where they started."""
        state = self._state
        self._commit(
            TournamentState(
                players=tuple(p.reset_stats() for p in state.players),
                partnership_history=PairHistory(),
                opposition_history=PairHistory(),
                settings=state.settings,
            )
        )
        logger.info("Tournament reset")

    def update_settings(self, **changes: Any) -> bool:
        """Change settings before the tournament starts.

        Raises:
            InvalidConfigurationException: If a new value is invalid
        """

        def transition(state: TournamentState) -> TournamentState:
            if state.tournament_started:
                raise TournamentStateException(
                    "settings cannot change once the tournament started"
                )
            return replace(state, settings=replace(state.settings, **changes).validate())

        updated = self._attempt("update settings", transition)
        if updated:
            logger.info(f"Settings updated: {changes}")
        return updated

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return self._state.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary.

        Raises:
            SnapshotVersionException: If the snapshot version is not supported
            SnapshotException: If the snapshot is malformed
        """
        tournament = cls(state=TournamentState.from_dict(data))
        logger.info(
            f"Loaded tournament: {len(tournament.players)} players, "
            f"{len(tournament.rounds)} rounds"
        )
        return tournament
