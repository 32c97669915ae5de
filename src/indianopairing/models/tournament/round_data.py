"""Data model for tournament round."""

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

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from indianopairing.constants import MULTI_SIT_OUT_ID
from indianopairing.models.player import Player
from indianopairing.models.tournament.match import Match


@dataclass(frozen=True)
class SittingOut:
    """Players resting for a round, reported as a single unit.

    A single resting player keeps their own id; two or more players form a
    composite record with id ``"multi"`` and a joined name such as
    ``"Alice, Bob"``.
    """

    players: Tuple[Player, ...]

    def __post_init__(self) -> None:
        if not self.players:
            raise ValueError("A sit-out record needs at least one player")

    @classmethod
    def of(cls, players: Sequence[Player]) -> Optional["SittingOut"]:
        """Build a record from a list, or None if nobody sits out."""
        if not players:
            return None
        return cls(players=tuple(players))

    @property
    def id(self) -> str:
        if len(self.players) == 1:
            return self.players[0].id
        return MULTI_SIT_OUT_ID

    @property
    def name(self) -> str:
        return ", ".join(p.name for p in self.players)

    @property
    def is_composite(self) -> bool:
        return len(self.players) > 1

    @property
    def player_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.players)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SittingOut":
        return cls(players=tuple(Player.from_dict(p) for p in data["players"]))


@dataclass(frozen=True)
class Round:
    """Container for all data related to a single tournament round.

    Attributes
    ----------
    id : int
        Round index (0-based), also used in match ids.
    matches : tuple of Match
        Matches of the round, in court order.
    completed : bool
        True iff the round holds matches and all of them are completed.
    sitting_out : SittingOut or None
        Players resting this round.
    sit_outs_recorded : bool
        Whether the resting players' sit-out counts were already raised.
    """

    id: int
    matches: Tuple[Match, ...] = ()
    completed: bool = False
    sitting_out: Optional[SittingOut] = None
    sit_outs_recorded: bool = False

    @property
    def round_number(self) -> int:
        """1-indexed number for display."""
        return self.id + 1

    def get_match(self, match_id: str) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def with_match(self, updated: Match) -> "Round":
        """Return a copy with one match replaced and ``completed`` recomputed."""
        matches = tuple(updated if m.id == updated.id else m for m in self.matches)
        return replace(self, matches=matches, completed=_all_completed(matches))

    def without_match(self, match_id: str) -> "Round":
        matches = tuple(m for m in self.matches if m.id != match_id)
        return replace(self, matches=matches, completed=_all_completed(matches))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "id": self.id,
            "matches": [m.to_dict() for m in self.matches],
            "completed": self.completed,
            "sitting_out": self.sitting_out.to_dict() if self.sitting_out else None,
            "sit_outs_recorded": self.sit_outs_recorded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Round":
        """Deserialize round data from dictionary."""
        sitting_out = data.get("sitting_out")
        return cls(
            id=data["id"],
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
            completed=data.get("completed", False),
            sitting_out=SittingOut.from_dict(sitting_out) if sitting_out else None,
            sit_outs_recorded=data.get("sit_outs_recorded", False),
        )


def _all_completed(matches: Sequence[Match]) -> bool:
    # an empty round is never completed
    return bool(matches) and all(m.completed for m in matches)
