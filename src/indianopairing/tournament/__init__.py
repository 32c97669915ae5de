"""Leaderboard, finals and the Tournament facade."""

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

from indianopairing.tournament.tiebreak_calculator import (
    HeadToHeadRecord,
    PlayerWithStats,
    get_head_to_head,
    get_opponent_quality,
    rank_leaderboard,
)
from indianopairing.tournament.finals import (
    complete_finals,
    create_finals_match,
    update_finals_score,
)
from indianopairing.tournament.tournament import Tournament

__all__ = [
    "Tournament",
    "HeadToHeadRecord",
    "PlayerWithStats",
    "get_head_to_head",
    "get_opponent_quality",
    "rank_leaderboard",
    "create_finals_match",
    "update_finals_score",
    "complete_finals",
]
