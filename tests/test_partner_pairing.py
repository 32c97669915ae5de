import random

import pytest

from indianopairing.exceptions import (
    InsufficientPlayersException,
    InvalidConfigurationException,
)
from indianopairing.models.player import Player
from indianopairing.models.tournament import PairHistory
from indianopairing.pairing import (
    elo_skill,
    generate_pairs,
    get_skill_strategy,
    ppg_skill,
    variety_score,
)
from indianopairing.pairing.partner_pairing import _sort_players_for_pairing


def _player(player_id, elo=1500, **kwargs):
    return Player(id=player_id, name=player_id.upper(), elo_rating=elo, **kwargs)


def _pair_sets(pairs):
    return {frozenset(pair.player_ids) for pair in pairs}


@pytest.mark.parametrize(
    "count, score", [(0, 2000), (1, -500), (2, -1500), (3, -4000), (4, -6000)]
)
def test_variety_score_table(count, score):
    assert variety_score(count) == score


def test_every_player_paired_once():
    players = [_player(f"p{i}", 1400 + 25 * i) for i in range(8)]
    pairs = generate_pairs(players, PairHistory(), rng=random.Random(3))
    assert len(pairs) == 4
    ids = [pid for pair in pairs for pid in pair.player_ids]
    assert sorted(ids) == sorted(p.id for p in players)


def test_pair_ids_and_average_skill():
    players = [_player("a", 1600), _player("b", 1600), _player("c", 1400), _player("d", 1400)]
    pairs = generate_pairs(players, PairHistory(), rng=random.Random(0))
    assert [p.id for p in pairs] == ["pair-1", "pair-2"]
    assert _pair_sets(pairs) == {frozenset({"a", "b"}), frozenset({"c", "d"})}
    assert sorted(p.avg_skill for p in pairs) == [1400.0, 1600.0]


def test_new_partner_preferred_over_closer_skill():
    players = [_player("a", 1500), _player("b", 1500), _player("c", 1590), _player("d", 1590)]
    history = PairHistory().add([("a", "b"), ("c", "d")])
    pairs = generate_pairs(players, history, rng=random.Random(0))
    for pair in pairs:
        assert len(set(pair.player_ids) & {"a", "b"}) == 1
        assert len(set(pair.player_ids) & {"c", "d"}) == 1


def test_leftover_odd_player_is_dropped():
    players = [_player(f"p{i}") for i in range(5)]
    pairs = generate_pairs(players, PairHistory(), rng=random.Random(1))
    assert len(pairs) == 2


@pytest.mark.parametrize("count", [2, 3])
def test_fewer_than_two_pairs_raises(count):
    players = [_player(f"p{i}") for i in range(count)]
    with pytest.raises(InsufficientPlayersException):
        generate_pairs(players, PairHistory())


def test_same_seed_gives_same_pairs():
    players = [_player(f"p{i}") for i in range(8)]
    first = generate_pairs(players, PairHistory(), rng=random.Random(42))
    second = generate_pairs(players, PairHistory(), rng=random.Random(42))
    assert [p.player_ids for p in first] == [p.player_ids for p in second]


def test_ppg_skill_balances_by_points_per_game():
    players = [
        _player("a", points=40, matches_played=4),
        _player("b", points=39, matches_played=4),
        _player("c", points=12, matches_played=4),
        _player("d", points=13, matches_played=4),
    ]
    pairs = generate_pairs(players, PairHistory(), skill=ppg_skill, rng=random.Random(0))
    assert _pair_sets(pairs) == {frozenset({"a", "b"}), frozenset({"c", "d"})}


def test_skill_strategies():
    player = _player("a", 1620, points=21, matches_played=3)
    assert elo_skill(player) == 1620
    assert ppg_skill(player) == pytest.approx(7.0)
    assert ppg_skill(_player("b")) == 0.0
    assert get_skill_strategy("elo") is elo_skill
    assert get_skill_strategy("ppg") is ppg_skill
    with pytest.raises(InvalidConfigurationException):
        get_skill_strategy("rank")


def test_near_equal_skills_shuffled_within_their_band():
    players = [_player("low", 1300)] + [_player(f"p{i}", 1500) for i in range(6)]
    orders = set()
    for seed in range(20):
        ordered = _sort_players_for_pairing(players, elo_skill, random.Random(seed), 10.0)
        assert ordered[-1].id == "low"
        orders.add(tuple(p.id for p in ordered[:-1]))
    assert len(orders) > 1


def test_pairing_order_does_not_depend_on_roster_order():
    players = [_player(f"p{i}", 1400 + 50 * i) for i in range(4)]
    forward = _sort_players_for_pairing(players, elo_skill, random.Random(5), 10.0)
    backward = _sort_players_for_pairing(players[::-1], elo_skill, random.Random(5), 10.0)
    assert [p.id for p in forward] == [p.id for p in backward] == ["p3", "p2", "p1", "p0"]
