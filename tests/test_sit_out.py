import pytest

from indianopairing.models.player import Player
from indianopairing.pairing import plan_sit_outs, select_sit_outs


def _roster(count, **overrides):
    return [Player(id=f"p{i}", name=f"P{i}", **overrides) for i in range(count)]


def test_fewest_sit_outs_rest_first():
    players = [
        Player(id="a", name="A", sit_out_count=2),
        Player(id="b", name="B", sit_out_count=0),
        Player(id="c", name="C", sit_out_count=1),
    ]
    assert [p.id for p in select_sit_outs(players, 2)] == ["b", "c"]


def test_more_matches_played_rests_first_on_equal_sit_outs():
    players = [
        Player(id="a", name="A", matches_played=1),
        Player(id="b", name="B", matches_played=3),
        Player(id="c", name="C", matches_played=2),
    ]
    assert [p.id for p in select_sit_outs(players, 1)] == ["b"]


def test_selection_is_stable_for_equal_players():
    players = _roster(5)
    assert [p.id for p in select_sit_outs(players, 2)] == ["p0", "p1"]


@pytest.mark.parametrize("count", [0, 3])
def test_only_one_or_two_players_can_sit_out(count):
    with pytest.raises(ValueError):
        select_sit_outs(_roster(5), count)


@pytest.mark.parametrize(
    "active, playing, resting",
    [(4, 4, 0), (5, 4, 1), (6, 4, 2), (7, 5, 2), (8, 8, 0), (9, 8, 1), (10, 8, 2), (11, 9, 2)],
)
def test_plan_fills_whole_courts(active, playing, resting):
    to_pair, sitting_out = plan_sit_outs(_roster(active))
    assert len(to_pair) == playing
    if resting:
        assert len(sitting_out.players) == resting
    else:
        assert sitting_out is None


def test_single_sit_out_keeps_player_id():
    _, sitting_out = plan_sit_outs(_roster(5))
    assert sitting_out.id == "p0"
    assert sitting_out.name == "P0"
    assert not sitting_out.is_composite


def test_two_sit_outs_form_composite_record():
    _, sitting_out = plan_sit_outs(_roster(6))
    assert sitting_out.id == "multi"
    assert sitting_out.name == "P0, P1"
    assert sitting_out.player_ids == ("p0", "p1")


def test_resting_players_are_not_paired():
    to_pair, sitting_out = plan_sit_outs(_roster(7))
    paired_ids = {p.id for p in to_pair}
    assert paired_ids.isdisjoint(sitting_out.player_ids)
    assert len(paired_ids | set(sitting_out.player_ids)) == 7


@pytest.mark.parametrize("count", range(4, 16))
def test_at_most_two_players_rest(count):
    to_pair, sitting_out = plan_sit_outs(_roster(count))
    if sitting_out is not None:
        assert len(sitting_out.players) <= 2
    assert len(to_pair) % 4 in (0, 1)
