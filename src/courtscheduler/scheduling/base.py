"""Shared pieces of the scheduling strategies."""

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

import random
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from courtscheduler.exceptions import SchedulingCancelledException
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.conflict_tracker import ConflictTracker
from courtscheduler.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class SchedulerStats:
    """Counters collected during one scheduler run."""

    attempts: int = 0
    backtracks: int = 0
    week_restarts: int = 0
    season_restarts: int = 0
    draw_failures: int = 0
    intelligent_choices: int = 0
    weeks_completed: int = 0
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BaseScheduler(ABC):
    """Common state for a strategy that turns a season into a schedule.

    The match index is built once per scheduler and only read afterwards.
    Each run gets a fresh :class:`ConflictTracker` and :class:`Schedule`.
    Randomness comes from a private ``random.Random`` so concurrent
    schedulers never share generator state.
    """

    name = "base"

    def __init__(
        self,
        config: SeasonConfig,
        seed: Optional[int] = None,
        match_index: Optional[MatchIndex] = None,
    ):
        self.config = config
        self.match_index = match_index or MatchIndex(config.num_participants)
        self.random = random.Random(seed) if seed is not None else random.Random()
        self.stats = SchedulerStats()
        self.tracker: Optional[ConflictTracker] = None

    def new_tracker(self) -> ConflictTracker:
        return ConflictTracker(self.match_index, self.config.forbidden_pairs())

    def new_schedule(self) -> Schedule:
        return Schedule(
            num_participants=self.config.num_participants,
            matches_per_week=self.config.matches_per_week,
        )

    def check_cancelled(
        self, cancel_event: Optional[threading.Event], week: int
    ) -> None:
        """Abort between weeks when ``cancel_event`` is set."""
        if cancel_event is not None and cancel_event.is_set():
            logger.info("%s scheduler cancelled before week %s", self.name, week + 1)
            raise SchedulingCancelledException(
                f"Scheduling cancelled before week {week + 1}", stats=self.stats
            )

    def generate(self, cancel_event: Optional[threading.Event] = None) -> Schedule:
        """Build a complete schedule for the configured season.

        Raises:
            SchedulingFailureException: If the search ceilings are exhausted
        """
        self.stats = SchedulerStats()
        start = time.perf_counter()
        logger.info(
            "Starting %s scheduling: %s participants, %s weeks, %s matches/week",
            self.name,
            self.config.num_participants,
            self.config.num_weeks,
            self.config.matches_per_week,
        )
        try:
            schedule = self._generate(cancel_event)
        finally:
            self.stats.elapsed_seconds = time.perf_counter() - start
        logger.info(
            "%s scheduling finished in %.3fs (%s attempts, %s backtracks)",
            self.name,
            self.stats.elapsed_seconds,
            self.stats.attempts,
            self.stats.backtracks,
        )
        return schedule

    @abstractmethod
    def _generate(self, cancel_event: Optional[threading.Event]) -> Schedule:
        """Strategy specific search."""
