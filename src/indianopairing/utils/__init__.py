"""Shared helpers: logging setup and id generation."""

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

import uuid

from indianopairing.utils.logging import setup_logger


def generate_id(prefix: str = "") -> str:
    """Generate a unique identifier, optionally prefixed (e.g. ``Player_3f2a...``)."""
    unique = uuid.uuid4().hex[:12]
    if prefix:
        return f"{prefix}_{unique}"
    return unique


__all__ = ["generate_id", "setup_logger"]
