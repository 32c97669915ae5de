"""Validation utilities for Indiano Pairing.

This module provides reusable validation functions with consistent error handling.
"""

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

from typing import Optional, Union

from indianopairing.constants import (
    MAX_ELO,
    MAX_POINTS_TO_WIN,
    MIN_ELO,
    MIN_POINTS_TO_WIN,
)
from indianopairing.exceptions import (
    InvalidConfigurationException,
    PlayerNameValidationException,
    RatingValidationException,
)

MAX_NAME_LENGTH = 40


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Union[str, int, None] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Name Validation ==========


def validate_player_name(name: Optional[str]) -> ValidationResult:
    """Validate a player display name.

    Surrounding whitespace is stripped; the result must be non-empty and at
    most ``MAX_NAME_LENGTH`` characters.

    Example:
        >>> validate_player_name("  Alice ").sanitized_value
        'Alice'
    """
    if not name or not name.strip():
        return ValidationResult(
            is_valid=False, error_message="Please enter a player name"
        )

    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        return ValidationResult(
            is_valid=False,
            error_message=f"Player name is longer than {MAX_NAME_LENGTH} characters",
        )
    return ValidationResult(is_valid=True, sanitized_value=name)


def validate_player_name_strict(name: Optional[str]) -> str:
    """Validate a name and raise if invalid.

    Raises:
        PlayerNameValidationException: If the name is invalid
    """
    result = validate_player_name(name)
    if not result.is_valid:
        raise PlayerNameValidationException(result.error_message)
    return result.sanitized_value


# ========== Rating Validation ==========


def validate_rating(rating: Union[int, float, str, None]) -> ValidationResult:
    """Validate a starting Elo rating.

    ``None`` is valid and means "use the default rating".
    """
    if rating is None or (isinstance(rating, str) and not rating.strip()):
        return ValidationResult(is_valid=True, sanitized_value=None)

    try:
        value = int(round(float(rating)))
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Rating must be a number: {rating!r}"
        )

    if not (MIN_ELO <= value <= MAX_ELO):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be between {MIN_ELO} and {MAX_ELO}: {value}",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_rating_strict(rating: Union[int, float, str, None]) -> Optional[int]:
    """Validate rating and raise exception if invalid.

    Raises:
        RatingValidationException: If rating is invalid
    """
    result = validate_rating(rating)
    if not result.is_valid:
        raise RatingValidationException(result.error_message)
    return result.sanitized_value


# ========== Settings Validation ==========


def validate_points_to_win(points: int) -> None:
    """Raise InvalidConfigurationException if a target score is out of range."""
    if isinstance(points, bool) or not isinstance(points, int):
        raise InvalidConfigurationException(
            f"Points to win must be an integer: {points!r}"
        )
    if not (MIN_POINTS_TO_WIN <= points <= MAX_POINTS_TO_WIN):
        raise InvalidConfigurationException(
            f"Points to win must be between {MIN_POINTS_TO_WIN} and "
            f"{MAX_POINTS_TO_WIN}: {points}"
        )
