"""Round construction: sit-outs, partner pairing and opponent matching."""

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

from indianopairing.pairing.opponent_matching import match_pairs
from indianopairing.pairing.partner_pairing import generate_pairs, variety_score
from indianopairing.pairing.sit_out import plan_sit_outs, select_sit_outs
from indianopairing.pairing.skill import elo_skill, get_skill_strategy, ppg_skill

__all__ = [
    "elo_skill",
    "generate_pairs",
    "get_skill_strategy",
    "match_pairs",
    "plan_sit_outs",
    "ppg_skill",
    "select_sit_outs",
    "variety_score",
]
