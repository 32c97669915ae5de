"""Type hints used in Indiano Pairing."""

from typing import Callable, Dict, List, Literal, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from indianopairing.models.player import Player

# Who serves next inside a match
ServerSlot = Literal["pair1-p1", "pair1-p2", "pair2-p1", "pair2-p2"]

# Which side of a match (1 = pair1, 2 = pair2)
Team = Literal[1, 2]

LeaderboardMode = Literal["ppg", "total", "elo"]
SkillMetric = Literal["elo", "ppg"]

# List of players
Players = List["Player"]
# player id -> other player id -> count
HistoryMapping = Mapping[str, Mapping[str, int]]
# player id -> new rating
RatingChanges = Dict[str, int]
# A skill strategy maps a player to a comparable number
SkillFunction = Callable[["Player"], float]

#  LocalWords:  ppg elo
