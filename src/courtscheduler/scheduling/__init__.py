"""Scheduling strategies.

- Randomized construct-and-retry with week and season restarts
- Greedy constraint scheduling with snapshot backtracking
- Forward checking over whole weeks
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

from courtscheduler.scheduling.base import BaseScheduler, SchedulerStats
from courtscheduler.scheduling.conflict_tracker import ConflictTracker, TrackerState
from courtscheduler.scheduling.csp import (
    ConstraintScheduler,
    ForwardCheckingScheduler,
    SearchLimits,
)
from courtscheduler.scheduling.engine import (
    ScheduleResult,
    create_scheduler,
    generate_schedule,
)
from courtscheduler.scheduling.randomized import RandomizedScheduler, RetryLimits

__all__ = [
    "BaseScheduler",
    "ConflictTracker",
    "ConstraintScheduler",
    "ForwardCheckingScheduler",
    "RandomizedScheduler",
    "RetryLimits",
    "ScheduleResult",
    "SchedulerStats",
    "SearchLimits",
    "TrackerState",
    "create_scheduler",
    "generate_schedule",
]
