import pytest

from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.validation.schedule_validator import (
    ViolationKind,
    check_season_feasibility,
    create_schedule_validator,
    validate_schedule,
)


def _config(weeks=1):
    return SeasonConfig(
        num_participants=4,
        num_weeks=weeks,
        court_groups=[CourtGroup((0, 1, 2, 3))],
    )


def _schedule(*weeks):
    return Schedule(
        num_participants=4, matches_per_week=2, weeks=[list(w) for w in weeks]
    )


def test_valid_schedule_has_no_violations():
    # (2, 0) and (3, 1)
    report = create_schedule_validator(_config()).validate(_schedule([2, 5]))

    assert report.is_valid
    assert report.total_matches == report.target_matches == 2
    assert validate_schedule(_schedule([2, 5]), _config()) == []


@pytest.mark.parametrize(
    "weeks, num_weeks, kind, count",
    [
        (([2, 5], [2, 5]), 2, ViolationKind.REPEATED_MATCH, 2),
        (([2, 3],), 1, ViolationKind.DOUBLE_BOOKED, 1),
        (([2],), 1, ViolationKind.INCOMPLETE_WEEK, 1),
        (([2, 5],), 2, ViolationKind.WEEK_COUNT, 1),
        (([1, 6],), 1, ViolationKind.BASELINE_PAIRING, 2),
        (([2, 99],), 1, ViolationKind.UNKNOWN_MATCH, 1),
    ],
)
def test_violations_are_reported(weeks, num_weeks, kind, count):
    report = create_schedule_validator(_config(num_weeks)).validate(_schedule(*weeks))

    assert not report.is_valid
    assert len(report.by_kind(kind)) == count


def test_baseline_pairs_allowed_when_kept():
    config = SeasonConfig(
        num_participants=4,
        num_weeks=1,
        court_groups=[CourtGroup((0, 1, 2, 3))],
        exclude_baseline_pairs=False,
    )
    assert validate_schedule(_schedule([1, 6]), config) == []


def test_validation_does_not_modify_the_schedule():
    schedule = _schedule([2, 5], [2, 5])
    before = schedule.copy()

    create_schedule_validator(_config(2)).validate(schedule)

    assert schedule == before


def test_season_feasibility():
    assert check_season_feasibility(SeasonConfig.reference()) is None
    assert check_season_feasibility(_config(2)) is None

    shortfall = check_season_feasibility(_config(3))
    assert shortfall is not None
    assert shortfall.details == {"needed": 6, "available": 4}


def test_overlapping_baselines_run_out_of_opponents():
    config = SeasonConfig(
        num_participants=6,
        num_weeks=4,
        court_groups=[CourtGroup((0, 1, 2, 3)), CourtGroup((0, 4))],
        allow_overlap=True,
    )
    shortfall = check_season_feasibility(config)

    assert shortfall is not None
    assert shortfall.details == {"needed": 4, "available": 3}
