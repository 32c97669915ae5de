"""Tournament data models."""

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

from indianopairing.models.tournament.match import (
    FinalsMatch,
    Match,
    Pair,
    check_match_winner,
    format_duration,
    get_next_server,
)
from indianopairing.models.tournament.pair_history import PairHistory
from indianopairing.models.tournament.round_data import Round, SittingOut
from indianopairing.models.tournament.tournament_config import TournamentSettings
from indianopairing.models.tournament.tournament_state import TournamentState

__all__ = [
    "FinalsMatch",
    "Match",
    "Pair",
    "PairHistory",
    "Round",
    "SittingOut",
    "TournamentSettings",
    "TournamentState",
    "check_match_winner",
    "format_duration",
    "get_next_server",
]
