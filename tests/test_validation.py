import pytest

from indianopairing.exceptions import (
    InvalidConfigurationException,
    PlayerNameValidationException,
    RatingValidationException,
)
from indianopairing.models.player import Player
from indianopairing.models.tournament import TournamentSettings
from indianopairing.utils.validation import (
    validate_player_name,
    validate_player_name_strict,
    validate_points_to_win,
    validate_rating,
    validate_rating_strict,
)


def test_player_name_is_stripped():
    assert validate_player_name_strict("  Alice ") == "Alice"


@pytest.mark.parametrize("name", ["", "   ", None, "x" * 41])
def test_invalid_player_names(name):
    assert not validate_player_name(name)
    with pytest.raises(PlayerNameValidationException):
        validate_player_name_strict(name)


@pytest.mark.parametrize("rating, expected", [(None, None), (100, 100), ("1650", 1650), (3000, 3000)])
def test_valid_ratings(rating, expected):
    assert validate_rating_strict(rating) == expected


@pytest.mark.parametrize("rating", [99, 3001, "strong"])
def test_invalid_ratings(rating):
    assert not validate_rating(rating)
    with pytest.raises(RatingValidationException):
        validate_rating_strict(rating)


def test_player_create_uses_default_rating():
    player = Player.create(" Bea ")
    assert player.name == "Bea"
    assert player.elo_rating == player.initial_elo == 1500
    assert player.id.startswith("Player_")


def test_player_create_with_rating():
    assert Player.create("Cas", initial_elo=1720).elo_rating == 1720


@pytest.mark.parametrize("points", [2, 100, True, 7.5])
def test_invalid_points_to_win(points):
    with pytest.raises(InvalidConfigurationException):
        validate_points_to_win(points)


def test_settings_validation():
    assert TournamentSettings(points_to_win=21).validate().points_to_win == 21
    with pytest.raises(InvalidConfigurationException):
        TournamentSettings(skill_metric="rank").validate()
    with pytest.raises(InvalidConfigurationException):
        TournamentSettings(leaderboard_mode="buchholz").validate()
