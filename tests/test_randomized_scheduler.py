import threading

import pytest

from courtscheduler.exceptions import (
    SchedulingCancelledException,
    SchedulingFailureException,
)
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.scheduling.engine import generate_schedule
from courtscheduler.scheduling.randomized import RandomizedScheduler, RetryLimits
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


def test_single_court_week_uses_a_non_baseline_pairing():
    scheduler = RandomizedScheduler(_single_court(1), seed=1)
    schedule = scheduler.generate()

    pairs = set(schedule.week_pairs(0, scheduler.match_index))
    assert pairs in ADMISSIBLE_WEEKS


def test_two_courts_three_weeks_validate():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=3,
        court_groups=[CourtGroup((0, 1, 2, 3)), CourtGroup((4, 5, 6, 7))],
    )
    scheduler = RandomizedScheduler(config, seed=11)
    schedule = scheduler.generate()

    report = create_schedule_validator(config).validate(schedule)
    assert report.is_valid, report.summary
    assert schedule.total_matches == 12
    assert scheduler.stats.weeks_completed == 3


def test_same_seed_gives_same_schedule():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=2,
        court_groups=[CourtGroup((0, 1, 2, 3)), CourtGroup((4, 5, 6, 7))],
    )
    first = RandomizedScheduler(config, seed=3).generate()
    second = RandomizedScheduler(config, seed=3).generate()
    assert first.weeks == second.weeks


def test_impossible_season_fails_with_stats():
    limits = RetryLimits(
        max_draw_attempts=50, max_week_restarts=3, max_season_restarts=2
    )
    scheduler = RandomizedScheduler(_single_court(3), limits=limits, seed=4)

    with pytest.raises(SchedulingFailureException) as excinfo:
        scheduler.generate()

    assert excinfo.value.stats is not None
    assert excinfo.value.stats.season_restarts == 2
    assert excinfo.value.stats.weeks_completed < 3


def test_single_court_fills_both_admissible_weeks():
    scheduler = RandomizedScheduler(_single_court(2), seed=1)
    schedule = scheduler.generate()

    first = set(schedule.week_pairs(0, scheduler.match_index))
    second = set(schedule.week_pairs(1, scheduler.match_index))
    assert first in ADMISSIBLE_WEEKS
    assert second in ADMISSIBLE_WEEKS
    assert first != second


def test_eight_teams_six_weeks_exhaust_every_opponent():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=6,
        court_groups=[CourtGroup((0, 1, 2, 3)), CourtGroup((4, 5, 6, 7))],
    )
    result = generate_schedule(config, strategy="randomized", seed=1)

    assert result.is_valid, result.report.summary
    assert result.schedule.total_matches == 24


def test_reference_season():
    config = SeasonConfig.reference()
    scheduler = RandomizedScheduler(config, seed=7)
    schedule = scheduler.generate()

    report = create_schedule_validator(config).validate(schedule)
    assert report.is_valid, report.summary
    assert schedule.num_weeks == 7
    assert schedule.total_matches == 56


def test_courts_of_two_draw_from_the_whole_roster():
    config = SeasonConfig(
        num_participants=4,
        num_weeks=1,
        court_groups=[CourtGroup((0, 1)), CourtGroup((2, 3))],
    )
    scheduler = RandomizedScheduler(config, seed=2)
    schedule = scheduler.generate()

    assert set(schedule.week_pairs(0, scheduler.match_index)) in ADMISSIBLE_WEEKS
    assert create_schedule_validator(config).validate(schedule).is_valid


def test_cancelled_before_first_week():
    cancel = threading.Event()
    cancel.set()
    scheduler = RandomizedScheduler(_single_court(1), seed=5)

    with pytest.raises(SchedulingCancelledException):
        scheduler.generate(cancel_event=cancel)
