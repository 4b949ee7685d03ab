"""Shared utilities for Court Scheduler."""

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

import logging
import sys

PACKAGE_LOGGER_NAME = "courtscheduler"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)
    return package_logger


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger that reports through the package handler.

    The package logger gets exactly one stream handler no matter how many
    modules call this, so messages are never printed twice.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Configured logger instance
    """
    _configure_package_logger()
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the level of the package logger (e.g. ``logging.DEBUG``)."""
    _configure_package_logger().setLevel(level)


__all__ = ["setup_logger", "set_log_level", "PACKAGE_LOGGER_NAME"]
