import threading

import pytest

from courtscheduler.exceptions import (
    InvalidConfigurationException,
    SchedulingCancelledException,
    SchedulingFailureException,
)
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.scheduling.csp import ForwardCheckingScheduler, SearchLimits
from courtscheduler.scheduling.engine import create_scheduler, generate_schedule
from courtscheduler.scheduling.randomized import RandomizedScheduler, RetryLimits


def test_generate_reference_season():
    result = generate_schedule(SeasonConfig.reference(), strategy="csp", seed=1)

    assert result.is_valid
    assert result.strategy == "csp"
    assert result.attempts == 1
    assert result.schedule.total_matches == 56
    assert result.stats.weeks_completed == 7

    data = result.to_dict()
    assert data["valid"] is True
    assert len(data["schedule"]["weeks"]) == 7


def test_create_scheduler_picks_strategy():
    config = SeasonConfig.reference()

    assert isinstance(create_scheduler(config, "randomized"), RandomizedScheduler)
    assert isinstance(
        create_scheduler(config, "forward_checking"), ForwardCheckingScheduler
    )


def test_create_scheduler_rejects_bad_input():
    config = SeasonConfig.reference()

    with pytest.raises(InvalidConfigurationException):
        create_scheduler(config, "genetic")
    with pytest.raises(InvalidConfigurationException):
        create_scheduler(config, "randomized", limits=SearchLimits())
    with pytest.raises(InvalidConfigurationException):
        create_scheduler(config, "csp", limits=RetryLimits())


def test_generate_gives_up_after_max_attempts():
    config = SeasonConfig(
        num_participants=4,
        num_weeks=3,
        court_groups=[CourtGroup((0, 1, 2, 3))],
    )
    with pytest.raises(SchedulingFailureException) as excinfo:
        generate_schedule(config, strategy="csp", seed=1, max_attempts=2)
    assert excinfo.value.stats is not None


def test_cancellation_is_not_retried():
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(SchedulingCancelledException):
        generate_schedule(SeasonConfig.reference(), cancel_event=cancel)
