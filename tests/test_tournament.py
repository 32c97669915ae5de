import json
import random
from datetime import datetime, timedelta

import pytest

from indianopairing import Tournament, TournamentSettings
from indianopairing.exceptions import (
    DuplicatePlayerException,
    InsufficientPlayersException,
    InvalidConfigurationException,
    PlayerNotFoundException,
    SnapshotVersionException,
)


class _Clock:
    def __init__(self):
        self.now = datetime(2025, 4, 12, 9, 0)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


def _tournament(count=5, **settings):
    tournament = Tournament(settings=TournamentSettings(**settings), clock=_Clock())
    for i in range(count):
        tournament.add_player(f"Player {i}", initial_elo=1400 + 20 * i)
    return tournament


def _play_round(tournament, score=(7, 3)):
    round_data = tournament.current_round
    for match in round_data.matches:
        for _ in range(score[0]):
            tournament.update_score(round_data.id, match.id, 1, 1)
        for _ in range(score[1]):
            tournament.update_score(round_data.id, match.id, 2, 1)
        tournament.complete_match(round_data.id, match.id, rng=random.Random(0))


def test_add_player_and_duplicates():
    tournament = Tournament()
    player = tournament.add_player(" Alice ", initial_elo=1600)
    assert tournament.get_player(player.id).name == "Alice"
    with pytest.raises(DuplicatePlayerException):
        tournament.add_player("alice")


def test_start_needs_four_active_players():
    tournament = _tournament(3)
    with pytest.raises(InsufficientPlayersException):
        tournament.start_tournament()
    assert not tournament.tournament_started


def test_start_generates_first_round():
    tournament = _tournament(5)
    assert tournament.start_tournament(rng=random.Random(1))
    assert tournament.tournament_started
    assert len(tournament.rounds) == 1
    assert len(tournament.current_round.matches) == 1
    assert not tournament.start_tournament()


def test_completing_round_auto_generates_next():
    tournament = _tournament(5)
    tournament.start_tournament(rng=random.Random(1))
    _play_round(tournament)
    assert len(tournament.rounds) == 2
    assert tournament.rounds[0].completed
    assert not tournament.rounds[1].completed


def test_auto_generation_can_be_switched_off():
    tournament = _tournament(4, auto_generate_rounds=False)
    tournament.start_tournament(rng=random.Random(1))
    _play_round(tournament)
    assert len(tournament.rounds) == 1
    assert tournament.generate_next_round(rng=random.Random(2))
    assert len(tournament.rounds) == 2


def test_auto_generation_skipped_when_too_few_players():
    tournament = _tournament(4)
    tournament.start_tournament(rng=random.Random(1))
    tournament.set_player_active(tournament.players[0].id, False)
    _play_round(tournament)
    assert len(tournament.rounds) == 1
    assert tournament.rounds[0].completed


def test_lifecycle_errors_return_false():
    tournament = _tournament(4, auto_generate_rounds=False)
    tournament.start_tournament(rng=random.Random(1))
    match = tournament.current_round.matches[0]
    assert tournament.complete_match(0, match.id)
    assert not tournament.complete_match(0, match.id)
    assert not tournament.update_score(0, match.id, 1, 1)
    assert not tournament.save_edited_match(0, match.id)
    assert tournament.start_editing_match(0, match.id)
    assert tournament.cancel_editing_match(0, match.id)


def test_listeners_receive_old_and_new_state():
    tournament = _tournament(4)
    seen = []
    unsubscribe = tournament.subscribe(lambda old, new: seen.append((old, new)))
    tournament.start_tournament(rng=random.Random(1))
    assert len(seen) == 1
    old, new = seen[0]
    assert old.rounds == () and len(new.rounds) == 1
    assert new is tournament.state

    unsubscribe()
    tournament.update_score(0, tournament.current_round.matches[0].id, 1, 1)
    assert len(seen) == 1


def test_failed_transition_does_not_notify():
    tournament = _tournament(4, auto_generate_rounds=False)
    tournament.start_tournament(rng=random.Random(1))
    match_id = tournament.current_round.matches[0].id
    tournament.complete_match(0, match_id)
    seen = []
    tournament.subscribe(lambda old, new: seen.append(new))
    before = tournament.state
    assert not tournament.complete_match(0, match_id)
    assert seen == []
    assert tournament.state is before


def test_remove_player_only_before_start():
    tournament = _tournament(5)
    first = tournament.players[0]
    assert tournament.remove_player(first.id)
    assert len(tournament.players) == 4
    with pytest.raises(PlayerNotFoundException):
        tournament.remove_player(first.id)

    tournament.start_tournament(rng=random.Random(1))
    assert not tournament.remove_player(tournament.players[0].id)
    assert len(tournament.players) == 4


def test_toggle_player_active():
    tournament = _tournament(4)
    player_id = tournament.players[0].id
    tournament.toggle_player_active(player_id)
    assert not tournament.get_player(player_id).active
    tournament.toggle_player_active(player_id)
    assert tournament.get_player(player_id).active


def test_settings_locked_after_start():
    tournament = _tournament(4)
    assert tournament.update_settings(points_to_win=21)
    assert tournament.settings.points_to_win == 21
    with pytest.raises(InvalidConfigurationException):
        tournament.update_settings(points_to_win=1)
    tournament.start_tournament(rng=random.Random(1))
    assert not tournament.update_settings(points_to_win=11)
    assert tournament.settings.points_to_win == 21


def test_delete_match_and_round():
    tournament = _tournament(8, auto_generate_rounds=False)
    tournament.start_tournament(rng=random.Random(3))
    first, second = tournament.current_round.matches
    tournament.update_score(0, first.id, 1, 1)
    tournament.complete_match(0, first.id)
    assert tournament.delete_match(0, first.id)
    assert [m.id for m in tournament.current_round.matches] == [second.id]
    assert all(p.matches_played == 0 for p in tournament.players)

    assert tournament.delete_round(0)
    assert tournament.rounds == ()


def test_leaderboard_after_round():
    tournament = _tournament(4)
    tournament.start_tournament(rng=random.Random(1))
    _play_round(tournament)
    rows = tournament.get_leaderboard()
    assert [row.rank for row in rows] == [1, 2, 3, 4]
    assert rows[0].player.points == 7
    assert rows[-1].player.points == 3
    assert tournament.get_leaderboard(mode="total")[0].player.points == 7


def test_finals_flow():
    tournament = _tournament(4, points_to_win=7)
    tournament.start_tournament(rng=random.Random(1))
    assert not tournament.update_finals_score(1, 1)
    _play_round(tournament)

    assert tournament.initiate_finals()
    assert not tournament.initiate_finals()
    assert not tournament.generate_next_round()
    for _ in range(7):
        assert tournament.update_finals_score(1, 1)
    assert not tournament.update_finals_score(1, 1)
    assert tournament.complete_finals_match()
    assert tournament.finals_match.completed
    assert tournament.finals_match.winner == 1


def test_finals_need_four_ranked_players():
    tournament = _tournament(4)
    tournament.start_tournament(rng=random.Random(1))
    with pytest.raises(InsufficientPlayersException):
        tournament.initiate_finals()


def test_reset_tournament():
    tournament = _tournament(4)
    tournament.start_tournament(rng=random.Random(1))
    _play_round(tournament)
    tournament.reset_tournament()

    assert tournament.rounds == ()
    assert not tournament.tournament_started
    assert not tournament.state.partnership_history
    for player in tournament.players:
        assert player.matches_played == 0
        assert player.elo_rating == player.initial_elo


def test_snapshot_round_trip_through_json():
    tournament = _tournament(6)
    tournament.start_tournament(rng=random.Random(1))
    _play_round(tournament)
    match = tournament.current_round.matches[0]
    tournament.update_score(tournament.current_round.id, match.id, 2, 1)

    data = json.loads(json.dumps(tournament.to_dict()))
    restored = Tournament.from_dict(data)
    assert restored.state == tournament.state


def test_snapshot_version_mismatch_rejected():
    data = _tournament(4).to_dict()
    data["version"] = 1
    with pytest.raises(SnapshotVersionException):
        Tournament.from_dict(data)
