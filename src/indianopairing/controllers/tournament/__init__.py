"""Round generation and the match result ledger."""

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

from indianopairing.controllers.tournament.result_recorder import (
    cancel_edit,
    complete_match,
    delete_match,
    reverse_match,
    save_edit,
    start_editing,
    update_score,
)
from indianopairing.controllers.tournament.round_manager import (
    delete_round,
    generate_round,
)

__all__ = [
    "cancel_edit",
    "complete_match",
    "delete_match",
    "delete_round",
    "generate_round",
    "reverse_match",
    "save_edit",
    "start_editing",
    "update_score",
]
