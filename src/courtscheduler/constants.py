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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Reference season: 16 teams on four courts of four for seven weeks
REFERENCE_NUM_PARTICIPANTS = 16
REFERENCE_NUM_WEEKS = 7
REFERENCE_COURT_GROUPS = (
    (0, 1, 2, 3),
    (4, 5, 6, 7),
    (8, 9, 10, 11),
    (12, 13, 14, 15),
)
REFERENCE_COURT_NAMES = ("Main A", "Main B", "Main C", "Main D")

# Display prefix for participants (T1, T2, ...)
PARTICIPANT_PREFIX = "T"

# Scheduling strategies
STRATEGY_RANDOMIZED = "randomized"
STRATEGY_CSP = "csp"
STRATEGY_FORWARD_CHECKING = "forward_checking"
STRATEGIES = (STRATEGY_RANDOMIZED, STRATEGY_CSP, STRATEGY_FORWARD_CHECKING)
DEFAULT_STRATEGY = STRATEGY_CSP

# Randomized constructive scheduler ceilings
DEFAULT_MAX_DRAW_ATTEMPTS = 50_000  # rejection-sampling draws per court group
DEFAULT_MAX_WEEK_RESTARTS = 2_000  # whole-week restarts before a season restart
DEFAULT_MAX_SEASON_RESTARTS = 200

# Constraint scheduler ceilings
DEFAULT_MAX_ATTEMPTS = 1_000_000
DEFAULT_MAX_BACKTRACKS_PER_WEEK = 10_000
DEFAULT_STACK_DEPTH = 100
DEFAULT_MAX_RECURSION_DEPTH = 1_000

# Fresh-tracker retries performed by generate_schedule
DEFAULT_GENERATE_ATTEMPTS = 5

# Match scoring weights (most-constrained first, then load balancing)
SCORE_CONSTRAINT_WEIGHT = 100.0
SCORE_SEASON_BALANCE_WEIGHT = 10.0
SCORE_WEEK_BALANCE_WEIGHT = 5.0
SCORE_TIE_BREAK = 0.1
