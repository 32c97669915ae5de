"""TournamentSettings data class."""

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

from dataclasses import dataclass
from typing import Any, Dict

from indianopairing.constants import (
    DEFAULT_POINTS_TO_WIN,
    LEADERBOARD_MODES,
    LEADERBOARD_PPG,
    SKILL_ELO,
    SKILL_EPSILON,
)
from indianopairing.exceptions import InvalidConfigurationException
from indianopairing.utils.validation import validate_points_to_win


@dataclass(frozen=True)
class TournamentSettings:
    """Tournament configuration settings.

    Attributes
    ----------
    points_to_win : int
        Target score; the first side to reach it while ahead wins.
    ratings_enabled : bool
        Whether completed matches update Elo ratings.
    skill_metric : str
        Skill value used by the pairing engine: ``"elo"`` or ``"ppg"``.
    leaderboard_mode : str
        Default leaderboard ordering: ``"ppg"``, ``"total"`` or ``"elo"``.
    auto_generate_rounds : bool
        Generate the next round as soon as the latest one is completed.
    """

    points_to_win: int = DEFAULT_POINTS_TO_WIN
    ratings_enabled: bool = True
    skill_metric: str = SKILL_ELO
    leaderboard_mode: str = LEADERBOARD_PPG
    auto_generate_rounds: bool = True

    def validate(self) -> "TournamentSettings":
        """Check every field, returning self so calls can be chained.

        Raises:
            InvalidConfigurationException: On any out-of-range value
        """
        validate_points_to_win(self.points_to_win)
        if self.skill_metric not in SKILL_EPSILON:
            raise InvalidConfigurationException(
                f"Unknown skill metric: {self.skill_metric!r}"
            )
        if self.leaderboard_mode not in LEADERBOARD_MODES:
            raise InvalidConfigurationException(
                f"Unknown leaderboard mode: {self.leaderboard_mode!r}"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "points_to_win": self.points_to_win,
            "ratings_enabled": self.ratings_enabled,
            "skill_metric": self.skill_metric,
            "leaderboard_mode": self.leaderboard_mode,
            "auto_generate_rounds": self.auto_generate_rounds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentSettings":
        """Deserialize configuration from dictionary."""
        return cls(
            points_to_win=data.get("points_to_win", DEFAULT_POINTS_TO_WIN),
            ratings_enabled=data.get("ratings_enabled", True),
            skill_metric=data.get("skill_metric", SKILL_ELO),
            leaderboard_mode=data.get("leaderboard_mode", LEADERBOARD_PPG),
            auto_generate_rounds=data.get("auto_generate_rounds", True),
        ).validate()
