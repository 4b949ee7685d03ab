from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import CourtGroup, SeasonConfig
from courtscheduler.pairing.enumerator import PairingEnumerator
from courtscheduler.utils.print import (
    format_duration,
    format_opponent_matrix,
    format_pairings,
    format_schedule_table,
)


def _config():
    return SeasonConfig(
        num_participants=4,
        num_weeks=1,
        court_groups=[CourtGroup((0, 1, 2, 3), name="Main A")],
    )


def test_format_duration():
    assert format_duration(0) == "00:00:00.000"
    assert format_duration(62.345) == "00:01:02.345"
    assert format_duration(3600) == "01:00:00.000"


def test_schedule_table_lists_courts_and_matches():
    schedule = Schedule(num_participants=4, matches_per_week=2, weeks=[[2, 5]])
    table = format_schedule_table(schedule, _config())

    lines = table.splitlines()
    assert lines[0].split() == ["Week", "Main", "A", "1", "Main", "A", "2"]
    assert "T1-T3" in lines[2] and "T2-T4" in lines[2]


def test_opponent_matrix_marks_weeks_and_baseline():
    schedule = Schedule(num_participants=4, matches_per_week=2, weeks=[[2, 5]])
    matrix = format_opponent_matrix(schedule, _config())

    rows = matrix.splitlines()
    assert len(rows) == 5
    assert rows[1].startswith("T1")
    assert "X" in rows[1]
    assert "1" in rows[1].split()[1:]


def test_pairings_listing():
    text = format_pairings(PairingEnumerator([0, 1, 2, 3]))

    assert "2 pairings (3 before exclusions)" in text
    assert "T1-T3, T2-T4" in text
