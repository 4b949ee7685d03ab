"""Bijection between dense match ids and participant pairs."""

# Court Scheduler
# Copyright (C) 2025  Court Scheduler developers
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

from typing import Iterable, List, Tuple

from courtscheduler.constants import PARTICIPANT_PREFIX
from courtscheduler.exceptions import (
    IndexOutOfRangeException,
    InvalidConfigurationException,
    InvalidMatchException,
)
from courtscheduler.type_hints import Match, MatchId


class MatchIndex:
    """Immutable lookup tables between match ids and canonical pairs.

    Ids are assigned by walking the lower triangle of the N x N
    participant matrix row by row, so ``(1, 0)`` is id 1, ``(2, 0)`` is
    id 2, ``(2, 1)`` is id 3 and so on. A canonical pair stores the larger
    participant first.

    Instances hold no mutable state after construction and can be shared
    between threads and scheduling attempts.
    """

    def __init__(self, num_participants: int):
        if num_participants < 2:
            raise InvalidConfigurationException(
                f"A match index needs at least two participants: {num_participants}"
            )
        self.num_participants = num_participants

        pairs: List[Match] = []
        ids = [[0] * num_participants for _ in range(num_participants)]
        for row in range(num_participants):
            for col in range(row):
                pairs.append((row, col))
                ids[row][col] = len(pairs)
                ids[col][row] = len(pairs)

        self._pairs: Tuple[Match, ...] = tuple(pairs)
        self._ids: Tuple[Tuple[int, ...], ...] = tuple(tuple(row) for row in ids)

    @property
    def total_matches(self) -> int:
        return len(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    @staticmethod
    def normalize(a: int, b: int) -> Match:
        """Canonical form of a pair: larger participant first."""
        return (a, b) if a > b else (b, a)

    def _check_participant(self, participant: int) -> None:
        if participant < 0 or participant >= self.num_participants:
            raise IndexOutOfRangeException(
                f"Participant must be between 0 and {self.num_participants - 1}: "
                f"{participant}"
            )

    def pair_to_id(self, a: int, b: int) -> MatchId:
        """Return the match id of the unordered pair ``(a, b)``.

        Raises:
            IndexOutOfRangeException: If a participant is outside the roster
            InvalidMatchException: If ``a == b``
        """
        self._check_participant(a)
        self._check_participant(b)
        if a == b:
            raise InvalidMatchException(f"Participant {a} cannot play itself")
        return self._ids[a][b]

    def id_to_pair(self, match_id: MatchId) -> Match:
        """Return the canonical pair for ``match_id``.

        Raises:
            IndexOutOfRangeException: If the id is outside ``[1, total_matches]``
        """
        if match_id < 1 or match_id > len(self._pairs):
            raise IndexOutOfRangeException(
                f"Match id must be between 1 and {len(self._pairs)}: {match_id}"
            )
        return self._pairs[match_id - 1]

    def all_ids(self) -> range:
        return range(1, len(self._pairs) + 1)

    def all_pairs(self) -> Tuple[Match, ...]:
        """Canonical pairs in id order (position ``i`` holds id ``i + 1``)."""
        return self._pairs

    def pairs_for(self, match_ids: Iterable[MatchId]) -> List[int]:
        """Flatten the pairs of ``match_ids`` into one participant list."""
        flat: List[int] = []
        for match_id in match_ids:
            flat.extend(self.id_to_pair(match_id))
        return flat

    def label(self, match_id: MatchId) -> str:
        """Human readable form of a match, e.g. ``"T1 vs T4"`` (1-based)."""
        high, low = self.id_to_pair(match_id)
        return f"{PARTICIPANT_PREFIX}{low + 1} vs {PARTICIPANT_PREFIX}{high + 1}"
