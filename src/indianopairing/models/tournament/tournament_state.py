"""Immutable snapshot of a whole tournament."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from indianopairing.constants import SNAPSHOT_VERSION
from indianopairing.exceptions import (
    MatchNotFoundException,
    PlayerNotFoundException,
    RoundNotFoundException,
    SnapshotException,
    SnapshotVersionException,
)
from indianopairing.models.player import Player
from indianopairing.models.tournament.match import FinalsMatch, Match
from indianopairing.models.tournament.pair_history import PairHistory
from indianopairing.models.tournament.round_data import Round
from indianopairing.models.tournament.tournament_config import TournamentSettings


@dataclass(frozen=True)
class TournamentState:
    """Everything the engine knows about one tournament.

    Every engine operation takes a state and returns a new one; nothing
    reachable from a state is ever modified in place, so collaborators (undo
    history, storage) can keep and diff older snapshots safely.

    Attributes
    ----------
    players : tuple of Player
        Roster in insertion order.
    rounds : tuple of Round
        Rounds in play order.
    tournament_started : bool
        Set once the first round was requested.
    partnership_history, opposition_history : PairHistory
        Symmetric counters of completed matches.
    finals_mode : bool
        Whether the finals match has been initiated.
    finals_match : FinalsMatch or None
    settings : TournamentSettings
    """

    players: Tuple[Player, ...] = ()
    rounds: Tuple[Round, ...] = ()
    tournament_started: bool = False
    partnership_history: PairHistory = field(default_factory=PairHistory)
    opposition_history: PairHistory = field(default_factory=PairHistory)
    finals_mode: bool = False
    finals_match: Optional[FinalsMatch] = None
    settings: TournamentSettings = field(default_factory=TournamentSettings)

    # ========== Lookups ==========

    @property
    def players_by_id(self) -> Dict[str, Player]:
        return {p.id: p for p in self.players}

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.active]

    def get_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise PlayerNotFoundException(f"No player with id {player_id}")

    def get_round(self, round_id: int) -> Round:
        for round_data in self.rounds:
            if round_data.id == round_id:
                return round_data
        raise RoundNotFoundException(f"Round {round_id} does not exist")

    def get_match(self, round_id: int, match_id: str) -> Tuple[Round, Match]:
        round_data = self.get_round(round_id)
        match = round_data.get_match(match_id)
        if match is None:
            raise MatchNotFoundException(
                f"Match {match_id} does not exist in round {round_id}"
            )
        return round_data, match

    @property
    def next_round_id(self) -> int:
        """Id for a newly generated round (one past the highest existing id)."""
        if not self.rounds:
            return 0
        return max(r.id for r in self.rounds) + 1

    # ========== Copy-on-write helpers ==========

    def with_players(self, updated: Mapping[str, Player]) -> "TournamentState":
        """Return a copy with the given players (by id) replaced."""
        players = tuple(updated.get(p.id, p) for p in self.players)
        return replace(self, players=players)

    def with_round(self, updated: Round) -> "TournamentState":
        rounds = tuple(updated if r.id == updated.id else r for r in self.rounds)
        return replace(self, rounds=rounds)

    def without_round(self, round_id: int) -> "TournamentState":
        return replace(self, rounds=tuple(r for r in self.rounds if r.id != round_id))

    def completed_matches(self) -> Iterable[Match]:
        for round_data in self.rounds:
            for match in round_data.matches:
                if match.completed:
                    yield match

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the snapshot, tagged with the schema version."""
        return {
            "version": SNAPSHOT_VERSION,
            "players": [p.to_dict() for p in self.players],
            "rounds": [r.to_dict() for r in self.rounds],
            "tournament_started": self.tournament_started,
            "partnership_history": self.partnership_history.to_dict(),
            "opposition_history": self.opposition_history.to_dict(),
            "finals_mode": self.finals_mode,
            "finals_match": self.finals_match.to_dict() if self.finals_match else None,
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentState":
        """Deserialize a snapshot.

        Raises:
            SnapshotVersionException: If the snapshot has another schema version
            SnapshotException: If a required field is missing or malformed
        """
        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise SnapshotVersionException(
                f"Snapshot version {version!r} is not supported "
                f"(expected {SNAPSHOT_VERSION})"
            )
        try:
            finals = data.get("finals_match")
            return cls(
                players=tuple(Player.from_dict(p) for p in data.get("players", [])),
                rounds=tuple(Round.from_dict(r) for r in data.get("rounds", [])),
                tournament_started=data.get("tournament_started", False),
                partnership_history=PairHistory.from_dict(
                    data.get("partnership_history", {})
                ),
                opposition_history=PairHistory.from_dict(
                    data.get("opposition_history", {})
                ),
                finals_mode=data.get("finals_mode", False),
                finals_match=FinalsMatch.from_dict(finals) if finals else None,
                settings=TournamentSettings.from_dict(data.get("settings", {})),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotException(f"Malformed tournament snapshot: {e}") from e
