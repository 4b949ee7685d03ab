"""Randomized construct-and-retry scheduler.

Each week is built court by court. For a court of ``k`` slots the
scheduler draws ``k / 2`` random, mutually disjoint, still legal matches
(rejection sampling), then re-pairs the drawn participants using the
court's enumerated pairings until one re-pairing is conflict free. A court
that cannot be completed throws the whole week away; a week that keeps
failing escalates to a season restart with a fresh tracker.
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

import threading
from dataclasses import dataclass
from typing import List, Optional

from courtscheduler.constants import (
    DEFAULT_MAX_DRAW_ATTEMPTS,
    DEFAULT_MAX_SEASON_RESTARTS,
    DEFAULT_MAX_WEEK_RESTARTS,
    STRATEGY_RANDOMIZED,
)
from courtscheduler.exceptions import SchedulingFailureException
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.enumerator import PairingEnumerator, rearrange
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.base import BaseScheduler
from courtscheduler.scheduling.conflict_tracker import ConflictTracker
from courtscheduler.type_hints import Match, WeekSchedule
from courtscheduler.utils import setup_logger

logger = setup_logger(__name__)


class _DrawCeilingReached(Exception):
    """Rejection sampling for one court exceeded its attempt ceiling."""


@dataclass
class RetryLimits:
    """Ceilings that keep the randomized search from spinning forever.

    They bound effort only; any feasible season is reachable with large
    enough values.
    """

    max_draw_attempts: int = DEFAULT_MAX_DRAW_ATTEMPTS
    max_week_restarts: int = DEFAULT_MAX_WEEK_RESTARTS
    max_season_restarts: int = DEFAULT_MAX_SEASON_RESTARTS


class RandomizedScheduler(BaseScheduler):
    """Rejection-sampling constructor with week and season restarts."""

    name = STRATEGY_RANDOMIZED

    def __init__(
        self,
        config: SeasonConfig,
        limits: Optional[RetryLimits] = None,
        seed: Optional[int] = None,
        match_index: Optional[MatchIndex] = None,
    ):
        super().__init__(config, seed=seed, match_index=match_index)
        self.limits = limits or RetryLimits()
        self.enumerators: List[PairingEnumerator] = []
        for group in config.court_groups:
            # The baseline is blocked in the tracker, so the drawn order
            # stays a candidate
            self.enumerators.append(PairingEnumerator(group.members, forbidden=()))

    def _generate(self, cancel_event: Optional[threading.Event]) -> Schedule:
        for season_attempt in range(self.limits.max_season_restarts + 1):
            if season_attempt:
                self.stats.season_restarts += 1
                logger.debug("Restarting season (attempt %s)", season_attempt + 1)

            self.tracker = self.new_tracker()
            schedule = self.new_schedule()
            if self._build_season(self.tracker, schedule, cancel_event):
                return schedule

        logger.warning(
            "Randomized scheduler gave up after %s season restarts",
            self.stats.season_restarts,
        )
        raise SchedulingFailureException(
            f"No complete schedule after {self.stats.season_restarts} season restarts",
            stats=self.stats,
        )

    def _build_season(
        self,
        tracker: ConflictTracker,
        schedule: Schedule,
        cancel_event: Optional[threading.Event],
    ) -> bool:
        self.stats.weeks_completed = 0
        for week in range(self.config.num_weeks):
            self.check_cancelled(cancel_event, week)
            week_matches = self._build_week(tracker)
            if week_matches is None:
                logger.debug("Week %s could not be completed", week + 1)
                return False
            schedule.add_week(week_matches)
            tracker.start_new_week()
            self.stats.weeks_completed = week + 1
            logger.debug("Week %s complete", week + 1)
        return True

    def _build_week(self, tracker: ConflictTracker) -> Optional[WeekSchedule]:
        """Fill every slot of one week, or return None to restart the season."""
        week_start = tracker.snapshot()

        for restart in range(self.limits.max_week_restarts + 1):
            if restart:
                self.stats.week_restarts += 1
                tracker.restore(week_start)

            week_matches: WeekSchedule = []
            for group, enumerator in zip(self.config.court_groups, self.enumerators):
                try:
                    drawn = self._draw_group(tracker, group.matches_per_week)
                except _DrawCeilingReached:
                    self.stats.draw_failures += 1
                    tracker.restore(week_start)
                    return None

                fitted = None
                if drawn is not None:
                    fitted = self._fit_pairing(tracker, enumerator, drawn)
                if fitted is None:
                    break
                for a, b in fitted:
                    week_matches.append(tracker.commit(a, b, len(week_matches)))
            else:
                return week_matches

        tracker.restore(week_start)
        return None

    def _draw_group(
        self, tracker: ConflictTracker, needed: int
    ) -> Optional[List[Match]]:
        """Draw ``needed`` disjoint, legal random matches for one court.

        Returns None when no legal match is left among the free
        participants, which only a different week can fix.

        Raises:
            _DrawCeilingReached: If the rejection-sampling ceiling is hit
        """
        match_index = self.match_index
        total = match_index.total_matches
        picked: List[Match] = []
        used = 0
        attempts = 0

        while len(picked) < needed:
            if not self._has_candidate(tracker, used):
                return None
            while True:
                attempts += 1
                self.stats.attempts += 1
                if attempts > self.limits.max_draw_attempts:
                    raise _DrawCeilingReached()

                a, b = match_index.id_to_pair(self.random.randint(1, total))
                if tracker.has_conflict(a, b):
                    continue
                if (used >> a) & 1 or (used >> b) & 1:
                    continue
                break
            picked.append((a, b))
            used |= (1 << a) | (1 << b)

        return picked

    def _has_candidate(self, tracker: ConflictTracker, used: int) -> bool:
        for match_id in tracker.available_matches():
            a, b = self.match_index.id_to_pair(match_id)
            if not (used >> a) & 1 and not (used >> b) & 1:
                return True
        return False

    def _fit_pairing(
        self,
        tracker: ConflictTracker,
        enumerator: PairingEnumerator,
        drawn: List[Match],
    ) -> Optional[List[Match]]:
        """First enumerated re-pairing of the drawn participants that fits."""
        sequence = [p for pair in drawn for p in pair]
        for pattern in enumerator.patterns:
            arranged = rearrange(sequence, pattern)
            pairs = list(zip(arranged[0::2], arranged[1::2]))
            if not any(tracker.has_conflict(a, b) for a, b in pairs):
                return pairs
        return None
