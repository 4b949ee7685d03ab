"""Season configuration models."""

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
from typing import Any, Dict, FrozenSet, List, Sequence, Tuple

from courtscheduler.constants import (
    REFERENCE_COURT_GROUPS,
    REFERENCE_COURT_NAMES,
    REFERENCE_NUM_PARTICIPANTS,
    REFERENCE_NUM_WEEKS,
)
from courtscheduler.exceptions import InvalidConfigurationException
from courtscheduler.type_hints import PairingPair
from courtscheduler.utils.validation import (
    validate_court_group_strict,
    validate_participant_count_strict,
    validate_positive_integer_strict,
)


def consecutive_pairs(members: Sequence[int]) -> Tuple[PairingPair, ...]:
    """Pairs formed by consecutive elements: (m0, m1), (m2, m3), ...

    Each pair is normalized to ``(min, max)``.
    """
    return tuple(
        (min(members[i], members[i + 1]), max(members[i], members[i + 1]))
        for i in range(0, len(members) - 1, 2)
    )


@dataclass(frozen=True)
class CourtGroup:
    """A court and the ordered participant slots it hosts each week.

    Attributes
    ----------
    members : tuple of int
        Ordered, even-sized participant ids. The order defines the
        forbidden baseline pairing (consecutive pairs).
    name : str
        Display name of the court.
    """

    members: Tuple[int, ...]
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def matches_per_week(self) -> int:
        """Number of matches this court contributes to every week."""
        return len(self.members) // 2

    def baseline_pairs(self) -> Tuple[PairingPair, ...]:
        """The forbidden baseline partition of this court."""
        return consecutive_pairs(self.members)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "members": list(self.members)}

    @classmethod
    def from_dict(cls, data: Any) -> "CourtGroup":
        # A bare list is accepted as an unnamed court
        if isinstance(data, (list, tuple)):
            return cls(members=tuple(data))
        return cls(members=tuple(data["members"]), name=data.get("name", ""))


def _reference_courts() -> List[CourtGroup]:
    return [
        CourtGroup(members=members, name=name)
        for members, name in zip(REFERENCE_COURT_GROUPS, REFERENCE_COURT_NAMES)
    ]


def default_court_groups(num_participants: int) -> List[CourtGroup]:
    """Courts of four consecutive participants covering the roster.

    The reference roster gets the named reference courts. A roster of two
    gets a single court of two; otherwise a leftover pair stays off court.
    """
    if num_participants == REFERENCE_NUM_PARTICIPANTS:
        return _reference_courts()
    if num_participants < 4:
        return [CourtGroup(members=tuple(range(num_participants)))]
    return [
        CourtGroup(members=tuple(range(start, start + 4)))
        for start in range(0, num_participants - num_participants % 4, 4)
    ]


@dataclass
class SeasonConfig:
    """Season configuration settings.

    Attributes
    ----------
    num_participants : int
        Roster size N, even. Participants are ``0 .. N-1``.
    num_weeks : int
        Number of weeks to schedule.
    court_groups : list of CourtGroup
        Courts played every week, in slot order.
    allow_overlap : bool
        Whether a participant id may appear in more than one court group.
    exclude_baseline_pairs : bool
        Whether the consecutive-pair baseline of every court is blocked
        for the whole season.
    """

    num_participants: int = REFERENCE_NUM_PARTICIPANTS
    num_weeks: int = REFERENCE_NUM_WEEKS
    court_groups: List[CourtGroup] = field(default_factory=_reference_courts)
    allow_overlap: bool = False
    exclude_baseline_pairs: bool = True

    def __post_init__(self):
        self.num_participants = validate_participant_count_strict(
            self.num_participants
        )
        self.num_weeks = validate_positive_integer_strict(
            self.num_weeks, "Number of weeks"
        )

        if not self.court_groups:
            raise InvalidConfigurationException(
                "At least one court group is required"
            )

        groups = []
        for index, group in enumerate(self.court_groups):
            if not isinstance(group, CourtGroup):
                group = CourtGroup(members=tuple(group))
            members = validate_court_group_strict(group.members, self.num_participants)
            name = group.name or f"Court {index + 1}"
            groups.append(CourtGroup(members=members, name=name))
        self.court_groups = groups

        if not self.allow_overlap:
            seen = set()
            for group in self.court_groups:
                repeated = seen.intersection(group.members)
                if repeated:
                    raise InvalidConfigurationException(
                        f"Participants {sorted(repeated)} appear in more than one "
                        f"court group; set allow_overlap to permit this"
                    )
                seen.update(group.members)

        needed = sum(group.size for group in self.court_groups)
        if needed > self.num_participants:
            raise InvalidConfigurationException(
                f"Courts need {needed} participants per week but the roster "
                f"only has {self.num_participants}"
            )

    @classmethod
    def reference(cls) -> "SeasonConfig":
        """The 16 team, four court, seven week reference season."""
        return cls()

    @property
    def matches_per_week(self) -> int:
        return sum(group.matches_per_week for group in self.court_groups)

    @property
    def target_matches(self) -> int:
        """Matches a complete schedule must contain."""
        return self.matches_per_week * self.num_weeks

    @property
    def total_possible_matches(self) -> int:
        return self.num_participants * (self.num_participants - 1) // 2

    def forbidden_pairs(self) -> FrozenSet[PairingPair]:
        """Pairs that may never be scheduled in this season."""
        if not self.exclude_baseline_pairs:
            return frozenset()
        pairs = set()
        for group in self.court_groups:
            pairs.update(group.baseline_pairs())
        return frozenset(pairs)

    def court_for_slot(self, slot: int) -> CourtGroup:
        """Return the court group owning week slot ``slot`` (0-based)."""
        if slot < 0:
            raise IndexError(f"Slot must be non-negative: {slot}")
        for group in self.court_groups:
            if slot < group.matches_per_week:
                return group
            slot -= group.matches_per_week
        raise IndexError("Slot beyond the configured matches per week")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "num_participants": self.num_participants,
            "num_weeks": self.num_weeks,
            "court_groups": [group.to_dict() for group in self.court_groups],
            "allow_overlap": self.allow_overlap,
            "exclude_baseline_pairs": self.exclude_baseline_pairs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeasonConfig":
        """Deserialize configuration from dictionary."""
        groups = data.get("court_groups")
        return cls(
            num_participants=data.get("num_participants", REFERENCE_NUM_PARTICIPANTS),
            num_weeks=data.get("num_weeks", REFERENCE_NUM_WEEKS),
            court_groups=(
                [CourtGroup.from_dict(g) for g in groups]
                if groups is not None
                else _reference_courts()
            ),
            allow_overlap=data.get("allow_overlap", False),
            exclude_baseline_pairs=data.get("exclude_baseline_pairs", True),
        )
