"""Season and week conflict tracking for scheduling attempts."""

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

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from courtscheduler.exceptions import ConflictViolationException
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.type_hints import MatchId, PairingPair


def _popcount(mask: int) -> int:
    return bin(mask).count("1")


@dataclass(frozen=True)
class TrackerState:
    """Immutable snapshot of a :class:`ConflictTracker`.

    Attributes
    ----------
    played : tuple of int
        Per participant bitset of opponents already met this season.
    busy : int
        Bitset of participants committed in the current week.
    season_games : tuple of int
        Matches committed per participant this season.
    week_games : tuple of int
        Matches committed per participant this week.
    week_slots : tuple of (int, int)
        ``(slot, match id)`` entries committed this week, by slot.
    current_week : int
        Zero-based index of the week being filled.
    total_scheduled : int
        Matches committed across the season.
    version : int
        Mutation counter at the time of the snapshot.
    """

    played: Tuple[int, ...]
    busy: int
    season_games: Tuple[int, ...]
    week_games: Tuple[int, ...]
    week_slots: Tuple[Tuple[int, MatchId], ...]
    current_week: int
    total_scheduled: int
    version: int


class ConflictTracker:
    """Mutable per-attempt record of who has met whom and who is busy.

    Season adjacency is one bitset per participant, week usage a single
    bitset, so every conflict query is a handful of shifts. Blocked pairs
    (for example court baselines) behave like pairs that have already
    played but never count as games.
    """

    def __init__(
        self,
        match_index: MatchIndex,
        blocked_pairs: Optional[Iterable[PairingPair]] = None,
    ):
        self.match_index = match_index
        size = match_index.num_participants
        self.num_participants = size

        blocked = [0] * size
        for a, b in blocked_pairs or ():
            match_index.pair_to_id(a, b)  # range and self-pair checks
            blocked[a] |= 1 << b
            blocked[b] |= 1 << a
        self._blocked: Tuple[int, ...] = tuple(blocked)

        self._played: List[int] = [0] * size
        self._busy = 0
        self._season_games: List[int] = [0] * size
        self._week_games: List[int] = [0] * size
        self._week_slots: Dict[int, MatchId] = {}
        self.current_week = 0
        self.total_scheduled = 0
        self.version = 0

    # ----- queries -----

    def is_busy(self, participant: int) -> bool:
        return bool((self._busy >> participant) & 1)

    def has_played(self, a: int, b: int) -> bool:
        """True if ``a`` and ``b`` met this season or the pair is blocked."""
        return bool(((self._played[a] | self._blocked[a]) >> b) & 1)

    def is_blocked(self, a: int, b: int) -> bool:
        return bool((self._blocked[a] >> b) & 1)

    def has_conflict(self, a: int, b: int) -> bool:
        """True if either side is busy this week or the pair is used up."""
        if (self._busy >> a) & 1 or (self._busy >> b) & 1:
            return True
        return bool(((self._played[a] | self._blocked[a]) >> b) & 1)

    def available_matches(self) -> List[MatchId]:
        """All match ids with no conflict, in ascending id order."""
        busy = self._busy
        played = self._played
        blocked = self._blocked
        available = []
        for match_id, (a, b) in enumerate(self.match_index.all_pairs(), start=1):
            if (busy >> a) & 1 or (busy >> b) & 1:
                continue
            if ((played[a] | blocked[a]) >> b) & 1:
                continue
            available.append(match_id)
        return available

    def count_available_opponents(self, participant: int) -> int:
        """Participants ``participant`` may still meet this season."""
        used = self._played[participant] | self._blocked[participant]
        return self.num_participants - 1 - _popcount(used)

    def season_games(self, participant: int) -> int:
        return self._season_games[participant]

    def week_games(self, participant: int) -> int:
        return self._week_games[participant]

    def max_season_games(self) -> int:
        return max(self._season_games)

    def week_slots(self) -> Dict[int, MatchId]:
        """Slots filled this week, mapped to their match ids."""
        return dict(self._week_slots)

    # ----- mutation -----

    def commit(self, a: int, b: int, slot: Optional[int] = None) -> MatchId:
        """Record a match between ``a`` and ``b`` and return its id.

        Args:
            a: First participant
            b: Second participant
            slot: Week slot the match fills, if the caller tracks slots

        Raises:
            ConflictViolationException: If the pair conflicts with the
                current state or the slot is already filled this week
        """
        match_id = self.match_index.pair_to_id(a, b)
        if self.has_conflict(a, b):
            raise ConflictViolationException(
                f"Cannot commit {self.match_index.label(match_id)}: "
                f"already played or busy this week"
            )
        if slot is not None:
            if slot < 0:
                raise ConflictViolationException(f"Slot must be non-negative: {slot}")
            if slot in self._week_slots:
                raise ConflictViolationException(
                    f"Slot {slot} already holds "
                    f"{self.match_index.label(self._week_slots[slot])}"
                )
            self._week_slots[slot] = match_id
        self._busy |= (1 << a) | (1 << b)
        self._played[a] |= 1 << b
        self._played[b] |= 1 << a
        self._season_games[a] += 1
        self._season_games[b] += 1
        self._week_games[a] += 1
        self._week_games[b] += 1
        self.total_scheduled += 1
        self.version += 1
        return match_id

    def commit_match(self, match_id: MatchId, slot: Optional[int] = None) -> MatchId:
        a, b = self.match_index.id_to_pair(match_id)
        return self.commit(a, b, slot)

    def start_new_week(self) -> None:
        """Clear the week usage; season history is untouched."""
        self._busy = 0
        self._week_games = [0] * self.num_participants
        self._week_slots = {}
        self.current_week += 1
        self.version += 1

    # ----- snapshots -----

    def snapshot(self) -> TrackerState:
        return TrackerState(
            played=tuple(self._played),
            busy=self._busy,
            season_games=tuple(self._season_games),
            week_games=tuple(self._week_games),
            week_slots=tuple(sorted(self._week_slots.items())),
            current_week=self.current_week,
            total_scheduled=self.total_scheduled,
            version=self.version,
        )

    def restore(self, state: TrackerState) -> None:
        """Overwrite all mutable state with ``state``."""
        self._played = list(state.played)
        self._busy = state.busy
        self._season_games = list(state.season_games)
        self._week_games = list(state.week_games)
        self._week_slots = dict(state.week_slots)
        self.current_week = state.current_week
        self.total_scheduled = state.total_scheduled
        self.version = state.version
