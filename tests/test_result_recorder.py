from dataclasses import replace
from datetime import datetime

import pytest

from indianopairing.controllers.tournament import (
    cancel_edit,
    complete_match,
    delete_match,
    delete_round,
    reverse_match,
    save_edit,
    start_editing,
    update_score,
)
from indianopairing.exceptions import (
    InvalidMatchStateException,
    MatchNotFoundException,
    RoundNotFoundException,
)
from indianopairing.models.player import Player
from indianopairing.models.tournament import (
    Match,
    Pair,
    Round,
    SittingOut,
    TournamentSettings,
    TournamentState,
)

NOW = datetime(2025, 6, 1, 19, 0)


def _state(ratings_enabled=True):
    """Five players, one round: A & B vs C & D with E sitting out."""
    a, b, c, d, e = (Player(id=x, name=x.upper()) for x in "abcde")
    match = Match(
        id="r0-m0",
        pair1=Pair(id="pair-1", players=(a, b), avg_skill=1500.0),
        pair2=Pair(id="pair-2", players=(c, d), avg_skill=1500.0),
        start_time=NOW,
    )
    round_data = Round(id=0, matches=(match,), sitting_out=SittingOut.of([e]))
    return TournamentState(
        players=(a, b, c, d, e),
        rounds=(round_data,),
        tournament_started=True,
        settings=TournamentSettings(ratings_enabled=ratings_enabled),
    )


def _score(state, score1, score2):
    for _ in range(score1):
        state = update_score(state, 0, "r0-m0", 1, 1)
    for _ in range(score2):
        state = update_score(state, 0, "r0-m0", 2, 1)
    return state


def _stats(state):
    return {p.id: (p.points, p.matches_played, p.wins, p.losses) for p in state.players}


def test_completing_first_match_of_five_player_round():
    state = complete_match(_score(_state(), 7, 3), 0, "r0-m0", now=NOW)
    players = state.players_by_id

    assert players["a"].points == 7 and players["b"].points == 7
    assert players["c"].points == 3 and players["d"].points == 3
    assert all(players[x].matches_played == 1 for x in "abcd")
    assert players["a"].wins == 1 and players["c"].losses == 1
    assert players["e"].matches_played == 0
    assert players["e"].sit_out_count == 1

    round_data = state.get_round(0)
    assert round_data.completed
    assert round_data.sit_outs_recorded
    assert round_data.matches[0].end_time == NOW

    assert state.partnership_history.count("a", "b") == 1
    assert state.partnership_history.count("c", "d") == 1
    assert state.partnership_history.count("a", "c") == 0
    for x in "ab":
        for y in "cd":
            assert state.opposition_history.count(x, y) == 1
            assert state.opposition_history.count(y, x) == 1


def test_round_not_completed_until_match_is():
    state = _score(_state(), 7, 3)
    assert not state.get_round(0).completed


def test_completion_updates_ratings_once():
    state = complete_match(_score(_state(), 7, 3), 0, "r0-m0", now=NOW)
    players = state.players_by_id
    assert players["a"].elo_rating == 1516
    assert players["d"].elo_rating == 1484

    match = state.get_round(0).matches[0]
    assert match.rated
    assert match.pair_ratings == (1500.0, 1500.0)
    assert match.weighted_points1 == pytest.approx(7.0)
    assert match.weighted_points2 == pytest.approx(3.0)


def test_ratings_disabled_leaves_elo_alone():
    state = complete_match(_score(_state(ratings_enabled=False), 7, 3), 0, "r0-m0")
    assert all(p.elo_rating == 1500 for p in state.players)
    match = state.get_round(0).matches[0]
    assert not match.rated
    assert match.weighted_points1 is None


def test_tie_counts_neither_win_nor_loss_and_is_not_rated():
    state = complete_match(_score(_state(), 5, 5), 0, "r0-m0")
    a = state.get_player("a")
    assert (a.points, a.matches_played, a.wins, a.losses) == (5, 1, 0, 0)
    assert a.elo_rating == 1500
    assert not state.get_round(0).matches[0].rated


def test_complete_then_reverse_restores_stats_and_history():
    before = _score(_state(), 7, 3)
    completed = complete_match(before, 0, "r0-m0")
    reversed_state = reverse_match(completed, 0, "r0-m0")

    assert _stats(reversed_state) == _stats(before)
    assert reversed_state.partnership_history.to_dict() == {}
    assert reversed_state.opposition_history.to_dict() == {}
    assert not reversed_state.get_round(0).completed
    # ratings and sit-outs are kept
    assert reversed_state.get_player("a").elo_rating == 1516
    assert reversed_state.get_player("e").sit_out_count == 1


def test_previous_snapshot_is_never_modified():
    before = _score(_state(), 7, 3)
    before_dict = before.to_dict()
    complete_match(before, 0, "r0-m0")
    assert before.to_dict() == before_dict


def test_update_score_clamps_and_rotates_server():
    state = update_score(_state(), 0, "r0-m0", 1, -1)
    match = state.get_round(0).matches[0]
    assert match.score1 == 0
    assert match.current_server == "pair1-p1"

    state = update_score(state, 0, "r0-m0", 2, 1)
    match = state.get_round(0).matches[0]
    assert match.score2 == 1
    assert match.current_server == "pair2-p1"


def test_completed_match_rejects_score_and_second_completion():
    state = complete_match(_score(_state(), 7, 3), 0, "r0-m0")
    with pytest.raises(InvalidMatchStateException):
        update_score(state, 0, "r0-m0", 1, 1)
    with pytest.raises(InvalidMatchStateException):
        complete_match(state, 0, "r0-m0")


def test_unknown_ids_raise():
    state = _state()
    with pytest.raises(RoundNotFoundException):
        complete_match(state, 5, "r0-m0")
    with pytest.raises(MatchNotFoundException):
        complete_match(state, 0, "r0-m9")


def test_edit_and_save_with_corrected_score():
    state = complete_match(_score(_state(), 7, 3), 0, "r0-m0")
    state = start_editing(state, 0, "r0-m0")
    match = state.get_round(0).matches[0]
    assert match.editing and not match.completed
    assert match.pre_edit_scores == (7, 3)

    state = update_score(state, 0, "r0-m0", 1, -1)
    state = update_score(state, 0, "r0-m0", 1, -1)
    state = _score(state, 0, 4)
    state = save_edit(state, 0, "r0-m0")

    a, c = state.get_player("a"), state.get_player("c")
    assert (a.points, a.matches_played, a.wins, a.losses) == (5, 1, 0, 1)
    assert (c.points, c.wins) == (7, 1)
    # rated on first completion only
    assert a.elo_rating == 1516
    match = state.get_round(0).matches[0]
    assert not match.editing
    assert match.weighted_points1 == pytest.approx(5.0)
    assert match.weighted_points2 == pytest.approx(7.0)
    assert state.get_player("e").sit_out_count == 1
    assert state.partnership_history.count("a", "b") == 1


def test_cancel_edit_is_a_no_op():
    completed = complete_match(_score(_state(), 7, 3), 0, "r0-m0", now=NOW)
    editing = start_editing(completed, 0, "r0-m0")
    editing = update_score(editing, 0, "r0-m0", 2, 1)
    cancelled = cancel_edit(editing, 0, "r0-m0")

    assert _stats(cancelled) == _stats(completed)
    assert cancelled.partnership_history == completed.partnership_history
    assert cancelled.opposition_history == completed.opposition_history
    match = cancelled.get_round(0).matches[0]
    assert (match.score1, match.score2) == (7, 3)
    assert match.completed


def test_edit_requires_completed_and_save_requires_editing():
    state = _state()
    with pytest.raises(InvalidMatchStateException):
        start_editing(state, 0, "r0-m0")
    with pytest.raises(InvalidMatchStateException):
        save_edit(state, 0, "r0-m0")
    with pytest.raises(InvalidMatchStateException):
        cancel_edit(state, 0, "r0-m0")


def test_delete_completed_match_reverses_it():
    before = _score(_state(), 7, 3)
    state = delete_match(complete_match(before, 0, "r0-m0"), 0, "r0-m0")
    assert _stats(state) == _stats(before)
    round_data = state.get_round(0)
    assert round_data.matches == ()
    assert not round_data.completed
    assert not state.opposition_history


def test_delete_round_reverses_completed_matches():
    before = _state()
    state = complete_match(_score(before, 7, 3), 0, "r0-m0")
    state = delete_round(state, 0)
    assert state.rounds == ()
    assert _stats(state) == _stats(before)
    assert not state.partnership_history


def test_sit_outs_recorded_once_per_round():
    state = complete_match(_score(_state(), 7, 3), 0, "r0-m0")
    state = start_editing(state, 0, "r0-m0")
    state = save_edit(state, 0, "r0-m0")
    assert state.get_player("e").sit_out_count == 1


def test_round_with_pending_matches_records_no_sit_outs():
    state = _state()
    round_data = state.get_round(0)
    extra = replace(round_data.matches[0], id="r0-m1")
    state = state.with_round(replace(round_data, matches=round_data.matches + (extra,)))
    state = complete_match(_score(state, 7, 3), 0, "r0-m0")
    assert not state.get_round(0).completed
    assert state.get_player("e").sit_out_count == 0


def test_deleting_last_pending_match_records_sit_outs():
    state = _state()
    round_data = state.get_round(0)
    extra = replace(round_data.matches[0], id="r0-m1")
    state = state.with_round(replace(round_data, matches=round_data.matches + (extra,)))
    state = complete_match(_score(state, 7, 3), 0, "r0-m0")

    state = delete_match(state, 0, "r0-m1")
    round_data = state.get_round(0)
    assert round_data.completed
    assert round_data.sit_outs_recorded
    assert state.get_player("e").sit_out_count == 1

    state = delete_match(state, 0, "r0-m0")
    assert state.get_player("e").sit_out_count == 1
