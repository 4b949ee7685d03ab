import pytest

from courtscheduler.exceptions import ConflictViolationException
from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.scheduling.conflict_tracker import ConflictTracker


def _tracker(num_participants=4, blocked=((0, 1), (2, 3))):
    return ConflictTracker(MatchIndex(num_participants), blocked)


def test_blocked_pairs_are_never_available():
    tracker = _tracker()

    assert tracker.available_matches() == [2, 3, 4, 5]
    assert tracker.is_blocked(1, 0)
    assert tracker.has_played(0, 1)
    assert tracker.season_games(0) == 0


def test_commit_marks_both_participants_busy():
    tracker = _tracker()

    match_id = tracker.commit(0, 2)

    assert match_id == 2
    assert tracker.is_busy(0) and tracker.is_busy(2)
    assert tracker.has_conflict(0, 3)
    assert tracker.available_matches() == [5]
    assert tracker.week_games(2) == 1
    assert tracker.total_scheduled == 1

    with pytest.raises(ConflictViolationException):
        tracker.commit(2, 0)


def test_new_week_keeps_season_history():
    tracker = _tracker()
    tracker.commit(0, 2)
    tracker.commit_match(5)

    tracker.start_new_week()

    assert tracker.current_week == 1
    assert not tracker.is_busy(0)
    assert tracker.has_played(2, 0)
    assert tracker.week_games(0) == 0
    assert tracker.season_games(0) == 1
    assert tracker.available_matches() == [3, 4]
    assert tracker.count_available_opponents(0) == 1


def test_snapshot_then_restore_is_a_no_op():
    tracker = _tracker(8, blocked=())
    tracker.commit(0, 1)
    before = tracker.available_matches()

    tracker.restore(tracker.snapshot())

    assert tracker.available_matches() == before


def test_restore_undoes_later_commits():
    tracker = _tracker(8, blocked=())
    tracker.commit(0, 1)
    state = tracker.snapshot()
    before = tracker.available_matches()

    tracker.commit(2, 3)
    tracker.start_new_week()
    tracker.commit(0, 4)
    assert tracker.version > state.version

    tracker.restore(state)

    assert tracker.available_matches() == before
    assert tracker.version == state.version
    assert tracker.current_week == 0
    assert not tracker.has_played(2, 3)
    assert tracker.max_season_games() == 1


def test_commit_records_week_slot():
    tracker = _tracker()

    match_id = tracker.commit(0, 2, slot=0)

    assert tracker.week_slots() == {0: match_id}
    with pytest.raises(ConflictViolationException):
        tracker.commit(1, 3, slot=0)
    assert not tracker.is_busy(1)

    tracker.commit_match(5, slot=1)
    assert tracker.week_slots() == {0: 2, 1: 5}


def test_slots_clear_on_new_week_and_follow_restore():
    tracker = _tracker(8, blocked=())
    tracker.commit(0, 1, slot=0)
    state = tracker.snapshot()
    tracker.commit(2, 3, slot=1)

    tracker.restore(state)
    assert tracker.week_slots() == {0: 1}

    tracker.start_new_week()
    assert tracker.week_slots() == {}
