"""Court Scheduler.

Builds multi-week schedules in which every participant meets each
opponent at most once and plays at most once per week, with a fixed set
of courts filled every week.
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

from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.scheduling.engine import ScheduleResult, generate_schedule

__version__ = "0.1.0"

__all__ = [
    "CourtGroup",
    "Schedule",
    "ScheduleResult",
    "SeasonConfig",
    "generate_schedule",
]
