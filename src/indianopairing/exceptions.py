"""Exceptions for use in Indiano Pairing"""

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


# ========== Base Application Exception ==========


class IndianoPairingException(Exception):
    """Base exception for all Indiano Pairing errors.

    All custom exceptions in the application inherit from this class, so
    callers can catch every application-specific error with one clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(IndianoPairingException):
    """Base exception for pairing-related errors."""

    pass


class InsufficientPlayersException(PairingException):
    """Raised when too few players are available to build a round or finals."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(IndianoPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class InvalidMatchStateException(TournamentException):
    """Raised when a match operation does not fit the match's lifecycle stage.

    For example completing a match that is already completed, or editing
    one that was never completed.
    """

    pass


class RoundNotFoundException(TournamentException):
    """Raised when a requested round does not exist."""

    pass


class MatchNotFoundException(TournamentException):
    """Raised when a requested match does not exist in its round."""

    pass


# ========== Player Exceptions ==========


class PlayerException(IndianoPairingException):
    """Base exception for player-related errors."""

    pass


class PlayerNotFoundException(PlayerException):
    """Raised when a requested player cannot be found."""

    pass


class DuplicatePlayerException(PlayerException):
    """Raised when attempting to add a player that already exists."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(IndianoPairingException):
    """Base exception for validation errors."""

    pass


class PlayerNameValidationException(ValidationException):
    """Raised when a player name is empty or too long."""

    pass


class RatingValidationException(ValidationException):
    """Raised when a rating value is invalid."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(IndianoPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass


# ========== Snapshot Exceptions ==========


class SnapshotException(IndianoPairingException):
    """Base exception for snapshot (de)serialization errors."""

    pass


class SnapshotVersionException(SnapshotException):
    """Raised when a snapshot was written with an incompatible schema version."""

    pass
