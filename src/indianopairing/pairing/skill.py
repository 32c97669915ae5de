"""Pluggable skill metrics used to balance pairs and matches."""

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

from typing import Dict

from indianopairing.constants import SKILL_ELO, SKILL_EPSILON, SKILL_PPG
from indianopairing.exceptions import InvalidConfigurationException
from indianopairing.models.player import Player
from indianopairing.type_hints import SkillFunction


def elo_skill(player: Player) -> float:
    """Current Elo rating."""
    return float(player.elo_rating)


def ppg_skill(player: Player) -> float:
    """Points per game, 0 for players without a completed match."""
    return player.ppg


_STRATEGIES: Dict[str, SkillFunction] = {
    SKILL_ELO: elo_skill,
    SKILL_PPG: ppg_skill,
}


def get_skill_strategy(metric: str) -> SkillFunction:
    """Resolve a metric name (``"elo"`` or ``"ppg"``) to its skill function."""
    try:
        return _STRATEGIES[metric]
    except KeyError:
        raise InvalidConfigurationException(f"Unknown skill metric: {metric!r}") from None


def skill_epsilon(skill: SkillFunction) -> float:
    """Gap below which two skill values count as equal when ordering players."""
    for metric, strategy in _STRATEGIES.items():
        if strategy is skill:
            return SKILL_EPSILON[metric]
    return SKILL_EPSILON[SKILL_ELO]
