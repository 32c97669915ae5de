"""Pairs, matches and the finals match."""

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

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from dateutil.parser import isoparse

from indianopairing.constants import FINALS_MATCH_ID, FIRST_SERVER, SERVER_ROTATION
from indianopairing.models.player import Player
from indianopairing.type_hints import ServerSlot, Team


# ========== Scoring helpers ==========


def check_match_winner(score1: int, score2: int, points_to_win: int) -> Optional[int]:
    """Return the winning side (1 or 2) once it reached ``points_to_win``.

    The first side to reach the target while ahead wins, so 7-6 to 7 is a
    win for side 1 and 6-6 to 7 is still undecided.
    """
    if score1 >= points_to_win and score1 > score2:
        return 1
    if score2 >= points_to_win and score2 > score1:
        return 2
    return None


def get_next_server(current_server: Optional[ServerSlot]) -> ServerSlot:
    """Next server in the rotation pair1-p1, pair2-p1, pair1-p2, pair2-p2."""
    if current_server is None:
        return FIRST_SERVER
    index = SERVER_ROTATION.index(current_server)
    return SERVER_ROTATION[(index + 1) % len(SERVER_ROTATION)]


def format_duration(
    start_time: Optional[datetime],
    end_time: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> str:
    """Format elapsed match time as ``m:ss``; ``--:--`` when never started."""
    if start_time is None:
        return "--:--"
    end = end_time or now or datetime.now(start_time.tzinfo)
    if end < start_time:
        return "0:00"
    minutes, seconds = divmod(int((end - start_time).total_seconds()), 60)
    return f"{minutes}:{seconds:02d}"


def _time_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _time_from_str(value: Optional[str]) -> Optional[datetime]:
    return isoparse(value) if value else None


def _clamped(score: int, delta: int) -> int:
    return max(0, score + delta)


# ========== Pair ==========


@dataclass(frozen=True)
class Pair:
    """Two players teamed up for one round.

    Attributes
    ----------
    id : str
        Pair identifier, unique within a round.
    players : tuple of Player
        The two team mates, as they were when the round was generated.
    avg_skill : float
        Mean of both players' skill values.
    name : str or None
        Optional display name (e.g. ``"Alice & Dave"`` in the finals).
    """

    id: str
    players: Tuple[Player, Player]
    avg_skill: float = 0.0
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.players) != 2:
            raise ValueError("A pair needs exactly two players")
        if self.players[0].id == self.players[1].id:
            raise ValueError(f"A pair needs two distinct players: {self.players[0].id}")

    @property
    def player_ids(self) -> Tuple[str, str]:
        return self.players[0].id, self.players[1].id

    @property
    def display_name(self) -> str:
        return self.name or " & ".join(p.name for p in self.players)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "players": [p.to_dict() for p in self.players],
            "avg_skill": self.avg_skill,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pair":
        p1, p2 = (Player.from_dict(p) for p in data["players"])
        return cls(
            id=data["id"],
            players=(p1, p2),
            avg_skill=data.get("avg_skill", 0.0),
            name=data.get("name"),
        )


# ========== Match ==========


@dataclass(frozen=True)
class Match:
    """A doubles match between two pairs.

    Lifecycle: pending (0-0, ``completed=False``) -> completed -> editing
    (reopened, ``editing=True``) -> completed again, or deleted.

    Attributes
    ----------
    id : str
        ``r{round}-m{index}``.
    pair1, pair2 : Pair
        The two sides.
    score1, score2 : int
        Current points of each side, never negative.
    completed : bool
        Whether the result counts towards player stats.
    editing : bool
        Set while a completed match has been reopened for correction.
    start_time, end_time : datetime or None
        When the match was created and when it was last completed.
    current_server : str or None
        Who serves the next point.
    weighted_points1, weighted_points2 : float or None
        Raw score times the rating-based point multiplier (display only).
    pair_ratings : tuple of float or None
        Pair ratings captured the first time the match was rated.
    rated : bool
        Whether the match already fed the Elo ratings.
    pre_edit_scores : tuple of int or None
        Scores at the moment the match was reopened, restored on cancel.
    """

    id: str
    pair1: Pair
    pair2: Pair
    score1: int = 0
    score2: int = 0
    completed: bool = False
    editing: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    current_server: Optional[ServerSlot] = FIRST_SERVER
    weighted_points1: Optional[float] = None
    weighted_points2: Optional[float] = None
    pair_ratings: Optional[Tuple[float, float]] = None
    rated: bool = False
    pre_edit_scores: Optional[Tuple[int, int]] = None

    @property
    def status(self) -> str:
        if self.completed:
            return "completed"
        if self.editing:
            return "editing"
        return "pending"

    @property
    def player_ids(self) -> Tuple[str, str, str, str]:
        return self.pair1.player_ids + self.pair2.player_ids

    @property
    def winner(self) -> Optional[int]:
        """Side with the strictly higher score, None on a tie."""
        if self.score1 > self.score2:
            return 1
        if self.score2 > self.score1:
            return 2
        return None

    def side_of(self, player_id: str) -> Optional[int]:
        if player_id in self.pair1.player_ids:
            return 1
        if player_id in self.pair2.player_ids:
            return 2
        return None

    def with_score_delta(self, team: Team, delta: int) -> "Match":
        """Return a copy with one side's score moved by ``delta``.

        Scores are clamped at zero and the serve rotates after every
        point won (``delta == +1``).
        """
        score1 = _clamped(self.score1, delta) if team == 1 else self.score1
        score2 = _clamped(self.score2, delta) if team == 2 else self.score2
        server = get_next_server(self.current_server) if delta == 1 else self.current_server
        return replace(self, score1=score1, score2=score2, current_server=server)

    def duration(self, now: Optional[datetime] = None) -> str:
        return format_duration(self.start_time, self.end_time, now)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "pair1": self.pair1.to_dict(),
            "pair2": self.pair2.to_dict(),
            "score1": self.score1,
            "score2": self.score2,
            "completed": self.completed,
            "editing": self.editing,
            "start_time": _time_to_str(self.start_time),
            "end_time": _time_to_str(self.end_time),
            "current_server": self.current_server,
            "weighted_points1": self.weighted_points1,
            "weighted_points2": self.weighted_points2,
            "pair_ratings": list(self.pair_ratings) if self.pair_ratings else None,
            "rated": self.rated,
            "pre_edit_scores": (
                list(self.pre_edit_scores) if self.pre_edit_scores else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        pair_ratings = data.get("pair_ratings")
        pre_edit = data.get("pre_edit_scores")
        return cls(
            id=data["id"],
            pair1=Pair.from_dict(data["pair1"]),
            pair2=Pair.from_dict(data["pair2"]),
            score1=data.get("score1", 0),
            score2=data.get("score2", 0),
            completed=data.get("completed", False),
            editing=data.get("editing", False),
            start_time=_time_from_str(data.get("start_time")),
            end_time=_time_from_str(data.get("end_time")),
            current_server=data.get("current_server"),
            weighted_points1=data.get("weighted_points1"),
            weighted_points2=data.get("weighted_points2"),
            pair_ratings=tuple(pair_ratings) if pair_ratings else None,
            rated=data.get("rated", False),
            pre_edit_scores=tuple(pre_edit) if pre_edit else None,
        )


# ========== Finals ==========


@dataclass(frozen=True)
class FinalsMatch:
    """The single deciding match between the top four players.

    Seed 1 plays with seed 4 against seed 2 with seed 3. Scoring and serve
    rotation are the same as for :class:`Match`; the match records its own
    ``winner`` once a side reaches the target score.
    """

    pair1: Pair
    pair2: Pair
    id: str = FINALS_MATCH_ID
    score1: int = 0
    score2: int = 0
    winner: Optional[int] = None
    completed: bool = False
    current_server: Optional[ServerSlot] = FIRST_SERVER

    def with_score_delta(self, team: Team, delta: int, points_to_win: int) -> "FinalsMatch":
        score1 = _clamped(self.score1, delta) if team == 1 else self.score1
        score2 = _clamped(self.score2, delta) if team == 2 else self.score2
        server = get_next_server(self.current_server) if delta == 1 else self.current_server
        return replace(
            self,
            score1=score1,
            score2=score2,
            current_server=server,
            winner=check_match_winner(score1, score2, points_to_win),
        )

    @property
    def winning_pair(self) -> Optional[Pair]:
        if self.winner == 1:
            return self.pair1
        if self.winner == 2:
            return self.pair2
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pair1": self.pair1.to_dict(),
            "pair2": self.pair2.to_dict(),
            "score1": self.score1,
            "score2": self.score2,
            "winner": self.winner,
            "completed": self.completed,
            "current_server": self.current_server,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinalsMatch":
        return cls(
            id=data.get("id", FINALS_MATCH_ID),
            pair1=Pair.from_dict(data["pair1"]),
            pair2=Pair.from_dict(data["pair2"]),
            score1=data.get("score1", 0),
            score2=data.get("score2", 0),
            winner=data.get("winner"),
            completed=data.get("completed", False),
            current_server=data.get("current_server"),
        )
