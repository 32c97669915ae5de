"""A player in an Indiano tournament."""

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

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from indianopairing.constants import INITIAL_ELO
from indianopairing.utils import generate_id, setup_logger
from indianopairing.utils.validation import (
    validate_player_name_strict,
    validate_rating_strict,
)

logger = setup_logger(__name__)


@dataclass(frozen=True)
class Player:
    """Represents a player on the tournament roster.

    Players are immutable snapshots: every stat change produces a new
    ``Player`` through :func:`dataclasses.replace`.

    Attributes:
        id: Unique identifier for the player
        name: Display name
        points: Cumulative points scored across completed matches
        matches_played: Number of completed matches
        wins: Matches won (strictly higher score)
        losses: Matches lost (strictly lower score)
        active: Whether the player takes part in the next round
        sit_out_count: Rounds this player has rested
        elo_rating: Current Elo rating
        initial_elo: Elo rating the player started with
    """

    id: str
    name: str
    points: int = 0
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    active: bool = True
    sit_out_count: int = 0
    elo_rating: int = INITIAL_ELO
    initial_elo: int = INITIAL_ELO

    @classmethod
    def create(cls, name: str, initial_elo: Optional[int] = None) -> "Player":
        """Create a new roster player with validated name and starting rating.

        Raises:
            PlayerNameValidationException: If the name is empty
            RatingValidationException: If the rating is outside 100-3000
        """
        clean_name = validate_player_name_strict(name)
        rating = validate_rating_strict(initial_elo)
        if rating is None:
            rating = INITIAL_ELO
        player = cls(
            id=generate_id(cls.__name__),
            name=clean_name,
            elo_rating=rating,
            initial_elo=rating,
        )
        logger.debug("Created player %s (%s) at %d", player.name, player.id, rating)
        return player

    # ========== Derived stats ==========

    @property
    def ppg(self) -> float:
        """Points per game, 0.0 before the first completed match."""
        if self.matches_played == 0:
            return 0.0
        return self.points / self.matches_played

    @property
    def win_rate(self) -> float:
        """Fraction of completed matches won (0.0 - 1.0)."""
        if self.matches_played == 0:
            return 0.0
        return self.wins / self.matches_played

    @property
    def draws(self) -> int:
        return self.matches_played - self.wins - self.losses

    # ========== Stat transitions ==========

    def with_match_result(self, scored: int, conceded: int) -> "Player":
        """Return a copy with one completed match added."""
        return replace(
            self,
            points=self.points + scored,
            matches_played=self.matches_played + 1,
            wins=self.wins + (1 if scored > conceded else 0),
            losses=self.losses + (1 if scored < conceded else 0),
        )

    def without_match_result(self, scored: int, conceded: int) -> "Player":
        """Return a copy with one completed match taken back out."""
        return replace(
            self,
            points=self.points - scored,
            matches_played=self.matches_played - 1,
            wins=self.wins - (1 if scored > conceded else 0),
            losses=self.losses - (1 if scored < conceded else 0),
        )

    def with_sit_out(self) -> "Player":
        return replace(self, sit_out_count=self.sit_out_count + 1)

    def with_rating(self, rating: int) -> "Player":
        return replace(self, elo_rating=rating)

    def reset_stats(self) -> "Player":
        """Return a copy back at tournament start: no matches, active, initial rating."""
        return replace(
            self,
            points=0,
            matches_played=0,
            wins=0,
            losses=0,
            active=True,
            sit_out_count=0,
            elo_rating=self.initial_elo,
        )

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "points": self.points,
            "matches_played": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
            "active": self.active,
            "sit_out_count": self.sit_out_count,
            "elo_rating": self.elo_rating,
            "initial_elo": self.initial_elo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        initial_elo = data.get("initial_elo", INITIAL_ELO)
        return cls(
            id=str(data["id"]),
            name=data["name"],
            points=data.get("points", 0),
            matches_played=data.get("matches_played", 0),
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            active=data.get("active", True),
            sit_out_count=data.get("sit_out_count", 0),
            elo_rating=data.get("elo_rating", initial_elo),
            initial_elo=initial_elo,
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.elo_rating})"
