"""Schedule validation.

Recomputes everything from the schedule itself: season adjacency for
repeated matches, per week participant usage for double bookings, and the
match totals against the configured target. The tracker a scheduler used
is never consulted, so a validated schedule is checked independently of
the search that produced it.
"""

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
from enum import Enum
from typing import Dict, List, Optional

from courtscheduler.exceptions import PairingException
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.utils import setup_logger

logger = setup_logger(__name__)


class ViolationKind(Enum):
    """Kinds of schedule violations."""

    REPEATED_MATCH = "REPEATED_MATCH"
    DOUBLE_BOOKED = "DOUBLE_BOOKED"
    INCOMPLETE_WEEK = "INCOMPLETE_WEEK"
    WEEK_COUNT = "WEEK_COUNT"
    BASELINE_PAIRING = "BASELINE_PAIRING"
    UNKNOWN_MATCH = "UNKNOWN_MATCH"


@dataclass
class Violation:
    """A single problem found in a schedule."""

    kind: ViolationKind
    description: str
    week: Optional[int] = None
    details: Dict[str, object] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.week is None:
            return f"{self.kind.value}: {self.description}"
        return f"{self.kind.value} (week {self.week + 1}): {self.description}"


@dataclass
class ValidationReport:
    """Outcome of validating one schedule."""

    violations: List[Violation]
    total_matches: int
    target_matches: int
    summary: str

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def by_kind(self, kind: ViolationKind) -> List[Violation]:
        return [v for v in self.violations if v.kind == kind]


class ScheduleValidator:
    """Checks a schedule against the season it was built for."""

    def __init__(
        self, config: SeasonConfig, match_index: Optional[MatchIndex] = None
    ):
        self.config = config
        self.match_index = match_index or MatchIndex(config.num_participants)

    def check_known_matches(self, schedule: Schedule) -> List[Violation]:
        """Every slot must hold a valid match id for this roster."""
        violations = []
        for week, match_ids in enumerate(schedule.weeks):
            for match_id in match_ids:
                try:
                    self.match_index.id_to_pair(match_id)
                except PairingException:
                    violations.append(
                        Violation(
                            kind=ViolationKind.UNKNOWN_MATCH,
                            description=f"Match id {match_id} is out of range",
                            week=week,
                            details={"match_id": match_id},
                        )
                    )
        return violations

    def check_no_repeats(self, schedule: Schedule) -> List[Violation]:
        """No match id may appear twice in the season."""
        violations = []
        first_seen: Dict[int, int] = {}
        for week, match_ids in enumerate(schedule.weeks):
            for match_id in match_ids:
                if not self._is_known(match_id):
                    continue
                if match_id in first_seen:
                    violations.append(
                        Violation(
                            kind=ViolationKind.REPEATED_MATCH,
                            description=(
                                f"{self.match_index.label(match_id)} already "
                                f"played in week {first_seen[match_id] + 1}"
                            ),
                            week=week,
                            details={"match_id": match_id},
                        )
                    )
                else:
                    first_seen[match_id] = week
        return violations

    def check_no_double_booking(self, schedule: Schedule) -> List[Violation]:
        """No participant may play twice in the same week."""
        violations = []
        for week, match_ids in enumerate(schedule.weeks):
            seen = set()
            for match_id in match_ids:
                if not self._is_known(match_id):
                    continue
                for participant in self.match_index.id_to_pair(match_id):
                    if participant in seen:
                        violations.append(
                            Violation(
                                kind=ViolationKind.DOUBLE_BOOKED,
                                description=(
                                    f"Participant {participant + 1} plays more "
                                    f"than once"
                                ),
                                week=week,
                                details={"participant": participant},
                            )
                        )
                    seen.add(participant)
        return violations

    def check_totals(self, schedule: Schedule) -> List[Violation]:
        """Week count and slots per week must match the configuration."""
        violations = []
        if schedule.num_weeks != self.config.num_weeks:
            violations.append(
                Violation(
                    kind=ViolationKind.WEEK_COUNT,
                    description=(
                        f"Expected {self.config.num_weeks} weeks, "
                        f"found {schedule.num_weeks}"
                    ),
                    details={
                        "expected": self.config.num_weeks,
                        "actual": schedule.num_weeks,
                    },
                )
            )
        for week, match_ids in enumerate(schedule.weeks):
            if len(match_ids) != self.config.matches_per_week:
                violations.append(
                    Violation(
                        kind=ViolationKind.INCOMPLETE_WEEK,
                        description=(
                            f"Expected {self.config.matches_per_week} matches, "
                            f"found {len(match_ids)}"
                        ),
                        week=week,
                        details={
                            "expected": self.config.matches_per_week,
                            "actual": len(match_ids),
                        },
                    )
                )
        return violations

    def check_baseline_pairs(self, schedule: Schedule) -> List[Violation]:
        """Forbidden court baseline pairs must never be scheduled."""
        forbidden = self.config.forbidden_pairs()
        if not forbidden:
            return []
        violations = []
        for week, match_ids in enumerate(schedule.weeks):
            for match_id in match_ids:
                if not self._is_known(match_id):
                    continue
                high, low = self.match_index.id_to_pair(match_id)
                if (low, high) in forbidden:
                    violations.append(
                        Violation(
                            kind=ViolationKind.BASELINE_PAIRING,
                            description=(
                                f"{self.match_index.label(match_id)} is a "
                                f"court baseline pair"
                            ),
                            week=week,
                            details={"match_id": match_id},
                        )
                    )
        return violations

    def _is_known(self, match_id: int) -> bool:
        return 1 <= match_id <= self.match_index.total_matches

    def validate(self, schedule: Schedule) -> ValidationReport:
        """Run every check; ``schedule`` is not modified."""
        if schedule.num_participants != self.config.num_participants:
            logger.warning(
                "Schedule built for %s participants, validating against %s",
                schedule.num_participants,
                self.config.num_participants,
            )

        violations: List[Violation] = []
        violations.extend(self.check_known_matches(schedule))
        violations.extend(self.check_no_repeats(schedule))
        violations.extend(self.check_no_double_booking(schedule))
        violations.extend(self.check_totals(schedule))
        violations.extend(self.check_baseline_pairs(schedule))

        total = schedule.total_matches
        target = self.config.target_matches
        if violations:
            summary = (
                f"{len(violations)} violation(s) found; "
                f"{total}/{target} matches scheduled"
            )
        else:
            summary = f"Schedule valid: {total}/{target} matches, no conflicts"

        logger.debug("Validation complete: %s", summary)
        return ValidationReport(
            violations=violations,
            total_matches=total,
            target_matches=target,
            summary=summary,
        )


def check_season_feasibility(config: SeasonConfig) -> Optional[Violation]:
    """Check that enough distinct pairs exist for the requested season.

    With ``N`` participants there are ``N * (N - 1) / 2`` distinct pairs, of
    which the forbidden baseline pairs are unusable. If the target needs
    more matches than remain, repeats are unavoidable.

    Returns:
        A violation describing the shortfall, or None if the counts allow
        a schedule. None does not prove that a schedule exists.
    """
    usable = config.total_possible_matches - len(config.forbidden_pairs())
    needed = config.target_matches
    if needed > usable:
        return Violation(
            kind=ViolationKind.REPEATED_MATCH,
            description=(
                f"{config.num_weeks} weeks of {config.matches_per_week} "
                f"matches need {needed} distinct pairs, but only {usable} "
                f"are available"
            ),
            details={"needed": needed, "available": usable},
        )

    # With a full roster on court every week, each participant needs one
    # new opponent per week
    if 2 * config.matches_per_week == config.num_participants:
        blocked = [0] * config.num_participants
        for a, b in config.forbidden_pairs():
            blocked[a] += 1
            blocked[b] += 1
        opponents = config.num_participants - 1 - max(blocked)
        if config.num_weeks > opponents:
            return Violation(
                kind=ViolationKind.REPEATED_MATCH,
                description=(
                    f"Every participant plays {config.num_weeks} weeks but "
                    f"some have only {opponents} eligible opponents"
                ),
                details={"needed": config.num_weeks, "available": opponents},
            )
    return None


def create_schedule_validator(
    config: SeasonConfig, match_index: Optional[MatchIndex] = None
) -> ScheduleValidator:
    """Create and configure a schedule validator instance."""
    return ScheduleValidator(config, match_index)


def validate_schedule(schedule: Schedule, config: SeasonConfig) -> List[Violation]:
    """Quick validation returning the list of violations (empty if valid)."""
    return create_schedule_validator(config).validate(schedule).violations
