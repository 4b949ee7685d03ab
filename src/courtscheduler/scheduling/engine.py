"""Scheduling entry point.

Picks a strategy, runs it with a fresh tracker until it succeeds or the
retry budget is spent, and validates the result.
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
from typing import Any, Dict, Optional, Union

from courtscheduler.constants import (
    DEFAULT_GENERATE_ATTEMPTS,
    DEFAULT_STRATEGY,
    STRATEGIES,
    STRATEGY_CSP,
    STRATEGY_FORWARD_CHECKING,
    STRATEGY_RANDOMIZED,
)
from courtscheduler.exceptions import (
    InvalidConfigurationException,
    SchedulingCancelledException,
    SchedulingFailureException,
)
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.base import BaseScheduler, SchedulerStats
from courtscheduler.scheduling.csp import (
    ConstraintScheduler,
    ForwardCheckingScheduler,
    SearchLimits,
)
from courtscheduler.scheduling.randomized import RandomizedScheduler, RetryLimits
from courtscheduler.utils import setup_logger
from courtscheduler.validation.schedule_validator import (
    ValidationReport,
    create_schedule_validator,
)

logger = setup_logger(__name__)

Limits = Union[RetryLimits, SearchLimits]


@dataclass
class ScheduleResult:
    """A validated schedule together with how it was obtained."""

    schedule: Schedule
    report: ValidationReport
    stats: SchedulerStats
    strategy: str
    attempts: int = 1

    @property
    def is_valid(self) -> bool:
        return self.report.is_valid

    def to_dict(self, match_index: Optional[MatchIndex] = None) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "attempts": self.attempts,
            "schedule": self.schedule.to_dict(match_index),
            "stats": self.stats.to_dict(),
            "valid": self.report.is_valid,
            "summary": self.report.summary,
        }


def create_scheduler(
    config: SeasonConfig,
    strategy: str = DEFAULT_STRATEGY,
    seed: Optional[int] = None,
    limits: Optional[Limits] = None,
    match_index: Optional[MatchIndex] = None,
) -> BaseScheduler:
    """Create a scheduler for ``strategy``.

    Args:
        config: Season to schedule
        strategy: One of ``randomized``, ``csp`` or ``forward_checking``
        seed: Seed for the scheduler's private random generator
        limits: ``RetryLimits`` for the randomized strategy,
            ``SearchLimits`` for the others
        match_index: Shared index, built from ``config`` if omitted

    Raises:
        InvalidConfigurationException: On an unknown strategy or limits of
            the wrong kind
    """
    if strategy not in STRATEGIES:
        raise InvalidConfigurationException(
            f"Unknown strategy '{strategy}'. Choose from: {', '.join(STRATEGIES)}"
        )

    if strategy == STRATEGY_RANDOMIZED:
        if limits is not None and not isinstance(limits, RetryLimits):
            raise InvalidConfigurationException(
                "The randomized strategy takes RetryLimits"
            )
        return RandomizedScheduler(
            config, limits=limits, seed=seed, match_index=match_index
        )

    if limits is not None and not isinstance(limits, SearchLimits):
        raise InvalidConfigurationException(
            f"The {strategy} strategy takes SearchLimits"
        )
    if strategy == STRATEGY_FORWARD_CHECKING:
        return ForwardCheckingScheduler(
            config, limits=limits, seed=seed, match_index=match_index
        )
    return ConstraintScheduler(
        config, limits=limits, seed=seed, match_index=match_index
    )


def generate_schedule(
    config: SeasonConfig,
    strategy: str = STRATEGY_CSP,
    seed: Optional[int] = None,
    limits: Optional[Limits] = None,
    max_attempts: int = DEFAULT_GENERATE_ATTEMPTS,
    cancel_event: Optional[threading.Event] = None,
) -> ScheduleResult:
    """Build and validate a schedule for ``config``.

    A failed run is retried with a fresh tracker (and, when seeded, the
    next seed) up to ``max_attempts`` times.

    Raises:
        SchedulingFailureException: If every attempt fails
        SchedulingCancelledException: If ``cancel_event`` is set
    """
    if max_attempts < 1:
        raise InvalidConfigurationException(
            f"max_attempts must be at least 1: {max_attempts}"
        )

    match_index = MatchIndex(config.num_participants)
    validator = create_schedule_validator(config, match_index)
    last_error: Optional[SchedulingFailureException] = None

    for attempt in range(max_attempts):
        attempt_seed = seed + attempt if seed is not None else None
        scheduler = create_scheduler(
            config, strategy, seed=attempt_seed, limits=limits, match_index=match_index
        )
        try:
            schedule = scheduler.generate(cancel_event)
        except SchedulingCancelledException:
            raise
        except SchedulingFailureException as e:
            logger.warning(
                "Attempt %s/%s with %s failed: %s",
                attempt + 1,
                max_attempts,
                strategy,
                e,
            )
            last_error = e
            continue

        report = validator.validate(schedule)
        if not report.is_valid:
            # A scheduler bug rather than a hard season; do not retry
            logger.error("Generated schedule failed validation: %s", report.summary)
        return ScheduleResult(
            schedule=schedule,
            report=report,
            stats=scheduler.stats,
            strategy=strategy,
            attempts=attempt + 1,
        )

    raise SchedulingFailureException(
        f"No schedule found with {strategy} after {max_attempts} attempt(s)",
        stats=last_error.stats if last_error else None,
    )
