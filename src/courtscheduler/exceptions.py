"""Exceptions for use in Court Scheduler"""

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


# ========== Base Application Exception ==========


class CourtSchedulerException(Exception):
    """Base exception for all Court Scheduler errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(CourtSchedulerException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when a season configuration is invalid (odd group, bad roster, ...)."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(CourtSchedulerException):
    """Base exception for match index and pairing errors."""

    pass


class IndexOutOfRangeException(PairingException):
    """Raised when a match id, participant id or rearrange order is out of bounds."""

    pass


class InvalidMatchException(PairingException):
    """Raised when a match would pair a participant with itself."""

    pass


# ========== Scheduling Exceptions ==========


class SchedulingException(CourtSchedulerException):
    """Base exception for scheduling errors."""

    pass


class ConflictViolationException(SchedulingException):
    """Raised when committing a match that conflicts with the current state.

    Callers are expected to check ``has_conflict`` first, so this signals a
    programming error rather than a normal search outcome.
    """

    pass


class SchedulingFailureException(SchedulingException):
    """Raised when a scheduler exhausts its attempt or backtrack ceilings.

    This is an expected outcome for hard configurations. The statistics of
    the failed run are attached so callers can decide whether to retry.
    """

    def __init__(self, message: str, stats=None):
        super().__init__(message)
        self.stats = stats


class SchedulingCancelledException(SchedulingFailureException):
    """Raised when a run is cancelled at a week boundary."""

    pass


# ========== File/Resource Exceptions ==========


class ScheduleFileException(CourtSchedulerException):
    """Raised when a schedule or configuration file cannot be loaded or saved."""

    pass
