"""Symmetric player-to-player counters (partnerships and oppositions)."""

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

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Tuple


@dataclass(frozen=True)
class PairHistory:
    """
    Counts how often two players have shared a court in a given role.

    The same type is used for partnership history (played together) and
    opposition history (played against each other). It is an immutable
    value: :meth:`add` and :meth:`remove` return a new history and leave
    ``self`` untouched, so a caller holding an older snapshot never sees it
    change. Inner mappings of untouched players are shared between versions.

    Attributes
    ----------
    counts : mapping of str to mapping of str to int
        ``counts[a][b]`` is the number of times ``a`` and ``b`` met. Always
        symmetric and never holds zero or negative counts.
    """

    counts: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    def count(self, player1_id: str, player2_id: str) -> int:
        """Return how often the two players have met (0 if never)."""
        return self.counts.get(player1_id, {}).get(player2_id, 0)

    def partners_of(self, player_id: str) -> Mapping[str, int]:
        """Read-only view of one player's counters."""
        return MappingProxyType(dict(self.counts.get(player_id, {})))

    def add(self, pairs: Iterable[Tuple[str, str]]) -> "PairHistory":
        """Return a new history with every ``(a, b)`` counter raised by one."""
        return self._apply(pairs, 1)

    def remove(self, pairs: Iterable[Tuple[str, str]]) -> "PairHistory":
        """Return a new history with every ``(a, b)`` counter lowered by one.

        Counters are floored at zero and zero entries are dropped.
        """
        return self._apply(pairs, -1)

    def _apply(self, pairs: Iterable[Tuple[str, str]], delta: int) -> "PairHistory":
        new_counts: Dict[str, Dict[str, int]] = dict(self.counts)  # type: ignore[arg-type]
        copied = set()

        def bump(a: str, b: str) -> None:
            if a not in copied:
                new_counts[a] = dict(new_counts.get(a, {}))
                copied.add(a)
            value = max(0, new_counts[a].get(b, 0) + delta)
            if value:
                new_counts[a][b] = value
            else:
                new_counts[a].pop(b, None)

        for a, b in pairs:
            if a == b:
                raise ValueError(f"A player cannot be paired with themself: {a}")
            bump(a, b)
            bump(b, a)

        for player_id in copied:
            if not new_counts[player_id]:
                del new_counts[player_id]
        return PairHistory(counts=new_counts)

    def is_symmetric(self) -> bool:
        """Check that ``count(a, b) == count(b, a)`` for every stored pair."""
        return all(
            self.count(b, a) == n
            for a, others in self.counts.items()
            for b, n in others.items()
        )

    def __iter__(self) -> Iterator[Tuple[str, str, int]]:
        for a, others in self.counts.items():
            for b, n in others.items():
                yield a, b, n

    def __bool__(self) -> bool:
        return bool(self.counts)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Serialize history to a plain nested dictionary."""
        return {a: dict(others) for a, others in self.counts.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PairHistory":
        """Deserialize history from a nested dictionary, dropping zero counts."""
        counts: Dict[str, Dict[str, int]] = {}
        for a, others in data.items():
            inner = {str(b): int(n) for b, n in others.items() if int(n) > 0}
            if inner:
                counts[str(a)] = inner
        return cls(counts=counts)
