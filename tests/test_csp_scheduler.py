import pytest

from courtscheduler.exceptions import SchedulingFailureException
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.scheduling.conflict_tracker import ConflictTracker
from courtscheduler.scheduling.csp import (
    ConstraintScheduler,
    ForwardCheckingScheduler,
    SearchLimits,
)
from courtscheduler.validation.schedule_validator import create_schedule_validator

ADMISSIBLE_WEEKS = [
    {(2, 0), (3, 1)},
    {(3, 0), (2, 1)},
]


def _single_court(weeks):
    return SeasonConfig(
        num_participants=4,
        num_weeks=weeks,
        court_groups=[CourtGroup((0, 1, 2, 3))],
    )


def _assert_reference_schedule(scheduler):
    config = SeasonConfig.reference()
    schedule = scheduler.generate()

    assert schedule.num_weeks == 7
    assert schedule.total_matches == 56
    assert len(set(schedule.iter_match_ids())) == 56
    for week in range(schedule.num_weeks):
        participants = [
            p for pair in schedule.week_pairs(week, scheduler.match_index) for p in pair
        ]
        assert len(participants) == len(set(participants)) == 16

    report = create_schedule_validator(config).validate(schedule)
    assert report.is_valid, report.summary


@pytest.mark.parametrize("seed", [1, 42])
def test_constraint_scheduler_builds_reference_season(seed):
    _assert_reference_schedule(ConstraintScheduler(SeasonConfig.reference(), seed=seed))


def test_forward_checking_builds_reference_season():
    _assert_reference_schedule(
        ForwardCheckingScheduler(SeasonConfig.reference(), seed=7)
    )


@pytest.mark.parametrize(
    "scheduler_class", [ConstraintScheduler, ForwardCheckingScheduler]
)
def test_single_court_week(scheduler_class):
    scheduler = scheduler_class(_single_court(1), seed=3)
    schedule = scheduler.generate()

    assert set(schedule.week_pairs(0, scheduler.match_index)) in ADMISSIBLE_WEEKS


@pytest.mark.parametrize(
    "scheduler_class", [ConstraintScheduler, ForwardCheckingScheduler]
)
def test_single_court_cannot_fill_three_weeks(scheduler_class):
    scheduler = scheduler_class(_single_court(3), seed=3)

    with pytest.raises(SchedulingFailureException):
        scheduler.generate()


def test_dead_week_restarts_until_backtrack_ceiling():
    scheduler = ConstraintScheduler(
        _single_court(3), limits=SearchLimits(max_backtracks_per_week=5), seed=3
    )

    with pytest.raises(SchedulingFailureException) as excinfo:
        scheduler.generate()

    stats = excinfo.value.stats
    assert stats.weeks_completed == 2
    assert stats.week_restarts == 5


def test_attempt_ceiling_reports_failure():
    scheduler = ConstraintScheduler(
        SeasonConfig.reference(), limits=SearchLimits(max_attempts=3), seed=1
    )

    with pytest.raises(SchedulingFailureException) as excinfo:
        scheduler.generate()
    assert excinfo.value.stats.attempts > 3


def test_forward_checking_depth_ceiling_reports_failure():
    scheduler = ForwardCheckingScheduler(
        SeasonConfig.reference(), limits=SearchLimits(max_recursion_depth=2), seed=1
    )

    with pytest.raises(SchedulingFailureException):
        scheduler.generate()


def test_select_best_match():
    config = _single_court(1)
    scheduler = ConstraintScheduler(config, seed=1)
    tracker = ConflictTracker(scheduler.match_index, config.forbidden_pairs())

    assert scheduler.select_best_match(tracker, []) is None
    available = tracker.available_matches()
    assert scheduler.select_best_match(tracker, available) in available


def test_balance_outweighs_constrainedness():
    config = SeasonConfig(
        num_participants=6,
        num_weeks=1,
        court_groups=[CourtGroup((0, 1, 2, 3, 4, 5))],
        exclude_baseline_pairs=False,
    )
    scheduler = ConstraintScheduler(config, seed=1)
    tracker = ConflictTracker(scheduler.match_index)
    tracker.commit(0, 1)
    tracker.start_new_week()

    # (3, 4) has not played yet; (0, 2) includes a participant with a game
    assert scheduler.score_match(tracker, 3, 4) > scheduler.score_match(tracker, 0, 2)
