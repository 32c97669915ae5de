import pytest

from indianopairing.exceptions import InvalidConfigurationException
from indianopairing.models.player import Player
from indianopairing.models.tournament import Match, Pair, Round
from indianopairing.tournament import (
    get_head_to_head,
    get_opponent_quality,
    rank_leaderboard,
)


def _player(player_id, points=0, matches=0, wins=0, losses=0, elo=1500):
    return Player(
        id=player_id,
        name=player_id.upper(),
        points=points,
        matches_played=matches,
        wins=wins,
        losses=losses,
        elo_rating=elo,
    )


def _match(match_id, side1, side2, score1, score2, completed=True):
    def pair(pair_id, ids):
        return Pair(id=pair_id, players=tuple(Player(id=i, name=i.upper()) for i in ids))

    return Match(
        id=match_id,
        pair1=pair("pair-1", side1),
        pair2=pair("pair-2", side2),
        score1=score1,
        score2=score2,
        completed=completed,
    )


def _round(*matches):
    return Round(id=0, matches=tuple(matches), completed=all(m.completed for m in matches))


def _order(rows):
    return [row.id for row in rows]


def test_only_players_with_matches_are_ranked():
    players = [_player("a", 10, 1, 1), _player("b")]
    rows = rank_leaderboard(players, [])
    assert _order(rows) == ["a"]
    assert rows[0].rank == 1


def test_points_per_game_decides_first():
    players = [_player("a", 12, 2, 1, 1), _player("b", 16, 2, 1, 1)]
    assert _order(rank_leaderboard(players, [])) == ["b", "a"]


def test_head_to_head_wins_break_ppg_tie():
    players = [_player("b", 14, 2, 1, 1), _player("a", 14, 2, 1, 1)]
    rounds = [_round(_match("r0-m0", ("a", "x"), ("b", "y"), 7, 5))]
    assert _order(rank_leaderboard(players, rounds)) == ["a", "b"]


def test_head_to_head_points_break_equal_meetings():
    players = [_player("b", 14, 2, 1, 1), _player("a", 14, 2, 1, 1)]
    rounds = [
        _round(
            _match("r0-m0", ("a", "x"), ("b", "y"), 7, 1),
            _match("r0-m1", ("b", "z"), ("a", "w"), 7, 6),
        )
    ]
    record = get_head_to_head("a", "b", rounds)
    assert (record.wins, record.losses) == (1, 1)
    assert (record.points_for, record.points_against) == (13, 8)
    assert _order(rank_leaderboard(players, rounds)) == ["a", "b"]


def test_win_rate_breaks_tie_without_meetings():
    players = [_player("b", 14, 2, 1, 1), _player("a", 14, 2, 2, 0)]
    assert _order(rank_leaderboard(players, [])) == ["a", "b"]


def test_strength_of_schedule_breaks_tie():
    players = [
        _player("b", 7, 1, 1, 0),
        _player("a", 7, 1, 1, 0),
        _player("strong1", 30, 3),
        _player("strong2", 30, 3),
        _player("weak1", 3, 3),
        _player("weak2", 3, 3),
    ]
    rounds = [
        _round(
            _match("r0-m0", ("a", "x"), ("strong1", "strong2"), 7, 5),
            _match("r0-m1", ("b", "y"), ("weak1", "weak2"), 7, 5),
        )
    ]
    rows = rank_leaderboard(players, rounds)
    assert _order(rows).index("a") < _order(rows).index("b")


def test_matches_played_breaks_remaining_tie():
    players = [_player("b", 14, 2, 1, 1), _player("a", 28, 4, 2, 2)]
    assert _order(rank_leaderboard(players, [])) == ["a", "b"]


def test_total_mode_ranks_by_points_then_win_rate():
    players = [
        _player("a", 20, 4, 1, 3),
        _player("b", 18, 2, 2, 0),
        _player("c", 20, 4, 3, 1),
    ]
    assert _order(rank_leaderboard(players, [], mode="total")) == ["c", "a", "b"]


def test_elo_mode_ranks_by_rating_first():
    players = [_player("a", 20, 2, 2, 0, elo=1510), _player("b", 10, 2, 0, 2, elo=1600)]
    assert _order(rank_leaderboard(players, [], mode="elo")) == ["b", "a"]


def test_unknown_mode_rejected():
    with pytest.raises(InvalidConfigurationException):
        rank_leaderboard([], [], mode="buchholz")


def test_head_to_head_ignores_teammates_and_open_matches():
    rounds = [
        _round(
            _match("r0-m0", ("a", "b"), ("c", "d"), 7, 2),
            _match("r0-m1", ("a", "c"), ("b", "d"), 3, 7, completed=False),
        )
    ]
    record = get_head_to_head("a", "b", rounds)
    assert (record.wins, record.losses, record.points_for) == (0, 0, 0)
    assert get_head_to_head("a", "c", rounds).wins == 1


def test_opponent_quality_counts_unknown_opponents_as_zero():
    rounds = [_round(_match("r0-m0", ("a", "b"), ("c", "ghost"), 7, 2))]
    players = [_player("a"), _player("c", 20, 2)]
    assert get_opponent_quality("a", rounds, players) == pytest.approx(5.0)
    assert get_opponent_quality("nobody", rounds, players) == 0.0


def test_row_formatting():
    row = rank_leaderboard([_player("a", 20, 3, 2, 1)], [])[0]
    assert row.formatted_ppg == "6.67"
    assert row.formatted_win_rate == "66.7"
    assert row.to_dict()["rank"] == 1
