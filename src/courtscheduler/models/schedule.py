"""Schedule data model."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.type_hints import Match, MatchId, WeekSchedule


@dataclass
class Schedule:
    """Ordered weeks of assigned match ids.

    Attributes
    ----------
    num_participants : int
        Roster size the match ids refer to.
    matches_per_week : int
        Slots per week fixed by the court structure.
    weeks : list of list of int
        One list of match ids per week, one id per slot.
    """

    num_participants: int
    matches_per_week: int
    weeks: List[WeekSchedule] = field(default_factory=list)

    def add_week(self, match_ids: Sequence[MatchId]) -> None:
        self.weeks.append(list(match_ids))

    @property
    def num_weeks(self) -> int:
        return len(self.weeks)

    @property
    def total_matches(self) -> int:
        return sum(len(week) for week in self.weeks)

    def iter_match_ids(self) -> Iterator[MatchId]:
        for week in self.weeks:
            yield from week

    def week_pairs(self, week: int, match_index: MatchIndex) -> List[Match]:
        """Canonical participant pairs of week ``week`` (0-based)."""
        return [match_index.id_to_pair(match_id) for match_id in self.weeks[week]]

    def copy(self) -> "Schedule":
        return Schedule(
            num_participants=self.num_participants,
            matches_per_week=self.matches_per_week,
            weeks=[list(week) for week in self.weeks],
        )

    def to_dict(self, match_index: Optional[MatchIndex] = None) -> Dict[str, Any]:
        """Serialize schedule to dictionary.

        With a match index the readable pair of every slot is included as well.
        """
        data: Dict[str, Any] = {
            "num_participants": self.num_participants,
            "matches_per_week": self.matches_per_week,
            "weeks": [list(week) for week in self.weeks],
        }
        if match_index is not None:
            data["pairs"] = [
                [list(match_index.id_to_pair(match_id)) for match_id in week]
                for week in self.weeks
            ]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schedule":
        """Deserialize schedule from dictionary."""
        return cls(
            num_participants=int(data["num_participants"]),
            matches_per_week=int(data["matches_per_week"]),
            weeks=[[int(m) for m in week] for week in data.get("weeks", [])],
        )
