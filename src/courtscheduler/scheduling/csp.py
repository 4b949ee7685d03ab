"""Constraint satisfaction schedulers.

:class:`ConstraintScheduler` fills each week greedily with the best scoring
legal match and backtracks through saved tracker snapshots when it runs
dry. :class:`ForwardCheckingScheduler` builds a whole week as a set by
depth-first search before committing it and chains weeks recursively,
undoing a week when the weeks after it cannot be completed.
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
from collections import deque
from dataclasses import dataclass
from typing import Deque, FrozenSet, Iterator, List, Optional, Sequence

from courtscheduler.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKTRACKS_PER_WEEK,
    DEFAULT_MAX_RECURSION_DEPTH,
    DEFAULT_STACK_DEPTH,
    SCORE_CONSTRAINT_WEIGHT,
    SCORE_SEASON_BALANCE_WEIGHT,
    SCORE_TIE_BREAK,
    SCORE_WEEK_BALANCE_WEIGHT,
    STRATEGY_CSP,
    STRATEGY_FORWARD_CHECKING,
)
from courtscheduler.exceptions import (
    ConflictViolationException,
    SchedulingFailureException,
)
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.base import BaseScheduler
from courtscheduler.scheduling.conflict_tracker import ConflictTracker, TrackerState
from courtscheduler.type_hints import MatchId, WeekSchedule
from courtscheduler.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class SearchLimits:
    """Ceilings for the constraint schedulers."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_backtracks_per_week: int = DEFAULT_MAX_BACKTRACKS_PER_WEEK
    stack_depth: int = DEFAULT_STACK_DEPTH
    max_recursion_depth: int = DEFAULT_MAX_RECURSION_DEPTH


@dataclass
class _Frame:
    """A decision that can be undone: the state before ``choice`` was made."""

    state: TrackerState
    week_length: int
    excluded: FrozenSet[MatchId]
    choice: MatchId


class _SearchExhausted(Exception):
    """Raised inside the search when a ceiling is reached."""


class ConstraintScheduler(BaseScheduler):
    """Greedy most-constrained-first scheduling with chronological backtracking.

    Within a week every commit pushes a snapshot of the tracker. When no
    legal match is left before the week is full, the latest snapshot is
    popped and restored and the match chosen from it is excluded at that
    level, so the week is searched depth first. The stack keeps at most
    ``stack_depth`` frames and silently drops the oldest beyond that.
    When the stack runs dry the week starts over from its first slot,
    until the per-week backtrack ceiling is reached.
    """

    name = STRATEGY_CSP

    def __init__(
        self,
        config: SeasonConfig,
        limits: Optional[SearchLimits] = None,
        seed: Optional[int] = None,
        match_index: Optional[MatchIndex] = None,
    ):
        super().__init__(config, seed=seed, match_index=match_index)
        self.limits = limits or SearchLimits()

    # ----- heuristic -----

    def score_match(self, tracker: ConflictTracker, a: int, b: int) -> float:
        """Score a legal match; higher is better.

        1. Most constrained variable: participants with few opponents left.
        2. Season balance: participants with fewer games so far.
        3. Week balance: participants with fewer games this week.
        4. A small random tie breaker.
        """
        remaining = tracker.count_available_opponents(
            a
        ) + tracker.count_available_opponents(b)
        score = SCORE_CONSTRAINT_WEIGHT / (remaining + 1)

        season_games = tracker.season_games(a) + tracker.season_games(b)
        score += (
            tracker.max_season_games() * 2 - season_games
        ) * SCORE_SEASON_BALANCE_WEIGHT

        week_games = tracker.week_games(a) + tracker.week_games(b)
        score += (2 - week_games) * SCORE_WEEK_BALANCE_WEIGHT

        score += self.random.random() * SCORE_TIE_BREAK
        return score

    def select_best_match(
        self, tracker: ConflictTracker, available: Sequence[MatchId]
    ) -> Optional[MatchId]:
        """Return the highest scoring candidate, or None if there is none."""
        best_match = None
        best_score = float("-inf")
        for match_id in available:
            a, b = self.match_index.id_to_pair(match_id)
            score = self.score_match(tracker, a, b)
            if score > best_score:
                best_score = score
                best_match = match_id
        return best_match

    # ----- search -----

    def _count_attempt(self) -> None:
        self.stats.attempts += 1
        if self.stats.attempts > self.limits.max_attempts:
            raise _SearchExhausted(
                f"Attempt ceiling of {self.limits.max_attempts} reached"
            )

    def _generate(self, cancel_event: Optional[threading.Event]) -> Schedule:
        self.tracker = tracker = self.new_tracker()
        schedule = self.new_schedule()

        for week in range(self.config.num_weeks):
            self.check_cancelled(cancel_event, week)
            try:
                week_matches = self._schedule_week(tracker)
            except _SearchExhausted as e:
                logger.warning("Week %s: %s", week + 1, e)
                raise SchedulingFailureException(str(e), stats=self.stats) from e

            if week_matches is None:
                logger.warning(
                    "Week %s could not be completed after %s backtracks",
                    week + 1,
                    self.stats.backtracks,
                )
                raise SchedulingFailureException(
                    f"Week {week + 1} could not be completed", stats=self.stats
                )

            schedule.add_week(week_matches)
            tracker.start_new_week()
            self.stats.weeks_completed = week + 1
            logger.debug("Week %s complete", week + 1)

        return schedule

    def _schedule_week(self, tracker: ConflictTracker) -> Optional[WeekSchedule]:
        target = self.config.matches_per_week
        week_matches: WeekSchedule = []
        stack: Deque[_Frame] = deque(maxlen=self.limits.stack_depth)
        excluded: FrozenSet[MatchId] = frozenset()
        week_backtracks = 0
        week_start = tracker.snapshot()

        while len(week_matches) < target:
            self._count_attempt()
            if week_backtracks >= self.limits.max_backtracks_per_week:
                tracker.restore(week_start)
                return None

            available = [m for m in tracker.available_matches() if m not in excluded]
            best = self.select_best_match(tracker, available)

            if best is None:
                if not stack:
                    # Search space below the retained frames is spent
                    tracker.restore(week_start)
                    del week_matches[:]
                    excluded = frozenset()
                    week_backtracks += 1
                    self.stats.week_restarts += 1
                    continue
                frame = stack.pop()
                tracker.restore(frame.state)
                del week_matches[frame.week_length :]
                excluded = frame.excluded | {frame.choice}
                week_backtracks += 1
                self.stats.backtracks += 1
                continue

            state = tracker.snapshot()
            try:
                tracker.commit_match(best, len(week_matches))
            except ConflictViolationException:
                logger.debug("Commit of match %s rejected, restoring", best)
                tracker.restore(state)
                excluded = excluded | {best}
                week_backtracks += 1
                self.stats.backtracks += 1
                continue

            stack.append(_Frame(state, len(week_matches), excluded, best))
            week_matches.append(best)
            excluded = frozenset()
            self.stats.intelligent_choices += 1

        return week_matches


class ForwardCheckingScheduler(ConstraintScheduler):
    """Depth-first week construction with recursive week chaining.

    A week is assembled as a set of mutually compatible matches before any
    of them touches the tracker. Candidates are tried most constrained
    first, and a branch is pruned as soon as the free participants cannot
    supply the matches still needed. If a later week fails, the tracker is
    restored to the snapshot taken before the earlier week and its next
    candidate set is tried.
    """

    name = STRATEGY_FORWARD_CHECKING

    def _generate(self, cancel_event: Optional[threading.Event]) -> Schedule:
        self.tracker = tracker = self.new_tracker()
        schedule = self.new_schedule()
        try:
            found = self._schedule_from_week(tracker, schedule, 0, cancel_event)
        except _SearchExhausted as e:
            logger.warning("Forward checking stopped: %s", e)
            raise SchedulingFailureException(str(e), stats=self.stats) from e

        if not found:
            raise SchedulingFailureException(
                "Forward checking exhausted every candidate week", stats=self.stats
            )
        return schedule

    def _schedule_from_week(
        self,
        tracker: ConflictTracker,
        schedule: Schedule,
        week: int,
        cancel_event: Optional[threading.Event],
    ) -> bool:
        if week >= self.config.num_weeks:
            return True
        self.check_cancelled(cancel_event, week)

        state = tracker.snapshot()
        for candidate in self._week_candidates(tracker, [], 0, frozenset(), 0):
            for slot, match_id in enumerate(candidate):
                tracker.commit_match(match_id, slot)
            tracker.start_new_week()
            schedule.add_week(candidate)
            self.stats.weeks_completed = max(self.stats.weeks_completed, week + 1)

            if self._schedule_from_week(tracker, schedule, week + 1, cancel_event):
                return True

            logger.debug("Undoing week %s", week + 1)
            schedule.weeks.pop()
            tracker.restore(state)
            self.stats.backtracks += 1

        return False

    def _week_candidates(
        self,
        tracker: ConflictTracker,
        chosen: List[MatchId],
        used: int,
        excluded: FrozenSet[MatchId],
        depth: int,
    ) -> Iterator[WeekSchedule]:
        """Yield every full week reachable from ``chosen``, best first."""
        target = self.config.matches_per_week
        if len(chosen) >= target:
            yield list(chosen)
            return
        if depth > self.limits.max_recursion_depth:
            raise _SearchExhausted(
                f"Recursion depth ceiling of "
                f"{self.limits.max_recursion_depth} reached"
            )
        self._count_attempt()

        available = []
        covered = 0
        for match_id in tracker.available_matches():
            if match_id in excluded:
                continue
            a, b = self.match_index.id_to_pair(match_id)
            if (used >> a) & 1 or (used >> b) & 1:
                continue
            available.append(match_id)
            covered |= (1 << a) | (1 << b)

        # Forward check: enough distinct free participants left to finish
        still_needed = target - len(chosen)
        free = bin(covered).count("1")
        if len(available) < still_needed or free < 2 * still_needed:
            return

        available.sort(key=lambda m: self._constrainedness(tracker, m))
        skipped = set(excluded)
        for match_id in available:
            a, b = self.match_index.id_to_pair(match_id)
            chosen.append(match_id)
            self.stats.intelligent_choices += 1
            yield from self._week_candidates(
                tracker,
                chosen,
                used | (1 << a) | (1 << b),
                frozenset(skipped),
                depth + 1,
            )
            chosen.pop()
            # Sets containing this match were all explored above
            skipped.add(match_id)

    def _constrainedness(self, tracker: ConflictTracker, match_id: MatchId) -> int:
        a, b = self.match_index.id_to_pair(match_id)
        return tracker.count_available_opponents(
            a
        ) + tracker.count_available_opponents(b)
