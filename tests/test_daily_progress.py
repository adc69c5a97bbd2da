"""Tests for Check-in and Counter progress entries."""

import pytest

from habitline.templates import HabitKind
from habitline.timeline import progress
from habitline.timeline.progress import DailyProgressEntry, DailyProgressTracker, clamp


@pytest.fixture
def tracker(reading, meditate, water):
    t = DailyProgressTracker()
    for template in (reading, meditate, water):
        t.initialize(template)
    return t


class TestInitialize:
    def test_timed_templates_get_no_entry(self, reading):
        assert progress.initialize({}, reading) == {}

    def test_check_in_starts_incomplete(self, meditate):
        entry = progress.initialize({}, meditate)["h_med"]
        assert entry == DailyProgressEntry(template_id="h_med", kind=HabitKind.CHECK_IN, completed=False)
        assert not entry.is_done

    def test_counter_starts_at_zero_with_goal(self, water):
        entry = progress.initialize({}, water)["h_water"]
        assert (entry.count, entry.goal_count) == (0, 5)
        assert not entry.is_done

    def test_reinitialize_keeps_progress(self, water):
        entries = progress.update_counter(progress.initialize({}, water), "h_water", 3)
        assert progress.initialize(entries, water)["h_water"].count == 3

    def test_input_map_is_not_mutated(self, meditate):
        entries = {}
        progress.initialize(entries, meditate)
        assert entries == {}


class TestCheckIn:
    def test_toggle_round_trip(self, tracker):
        assert tracker.toggle_check_in("h_med").completed is True
        assert tracker.get("h_med").is_done
        assert tracker.toggle_check_in("h_med").completed is False

    def test_toggle_counter_is_noop(self, tracker):
        before = tracker.get("h_water")
        tracker.toggle_check_in("h_water")
        assert tracker.get("h_water") == before

    def test_toggle_missing_is_noop(self, tracker):
        before = tracker.entries
        assert tracker.toggle_check_in("h_ghost") is None
        assert tracker.entries == before


class TestCounter:
    @pytest.mark.parametrize("requested,expected", [(-3, 0), (0, 0), (2, 2), (5, 5), (99, 5)])
    def test_requested_count_saturates(self, tracker, requested, expected):
        assert tracker.update_counter("h_water", requested).count == expected

    def test_done_at_goal(self, tracker):
        assert not tracker.update_counter("h_water", 4).is_done
        assert tracker.update_counter("h_water", 5).is_done

    def test_increment_and_decrement(self, tracker):
        tracker.increment("h_water")
        tracker.increment("h_water")
        assert tracker.get("h_water").count == 2
        tracker.decrement("h_water")
        assert tracker.get("h_water").count == 1

    def test_decrement_at_zero_stays_zero(self, tracker):
        assert tracker.decrement("h_water").count == 0

    def test_increment_at_goal_stays_at_goal(self, tracker):
        tracker.update_counter("h_water", 5)
        assert tracker.increment("h_water").count == 5

    def test_counter_on_check_in_is_noop(self, tracker):
        before = tracker.get("h_med")
        tracker.update_counter("h_med", 3)
        assert tracker.get("h_med") == before

    def test_missing_entry(self, tracker):
        assert tracker.update_counter("h_ghost", 3) is None
        assert tracker.increment("h_ghost") is None
        assert tracker.decrement("h_ghost") is None

    def test_goal_is_snapshotted(self, tracker):
        # A later template edit does not retroactively change today's goal
        assert tracker.get("h_water").goal_count == 5


def test_clamp():
    assert clamp(-1, 0, 5) == 0
    assert clamp(3, 0, 5) == 3
    assert clamp(8, 0, 5) == 5


def test_records_round_trip(tracker):
    tracker.toggle_check_in("h_med")
    tracker.update_counter("h_water", 4)
    records = tracker.to_records()
    assert {"template_id": "h_med", "kind": "Check-in", "completed": True} in records
    assert {"template_id": "h_water", "kind": "Counter", "count": 4, "goal_count": 5} in records
    assert DailyProgressTracker.from_records(records).entries == tracker.entries


class TestEntryFromRecord:
    def test_timed_kind_is_rejected(self):
        with pytest.raises(ValueError, match="no progress entry"):
            DailyProgressEntry.from_record({"template_id": "h_read", "kind": "Timed"})

    @pytest.mark.parametrize("goal", ["five", None, 2.5, True])
    def test_goal_must_be_an_integer(self, goal):
        with pytest.raises(ValueError, match="goal_count must be an integer"):
            DailyProgressEntry.from_record({"template_id": "h", "kind": "Counter", "count": 1, "goal_count": goal})

    def test_goal_must_be_positive(self):
        with pytest.raises(ValueError, match="goal_count must be positive"):
            DailyProgressEntry.from_record({"template_id": "h", "kind": "Counter", "count": 0, "goal_count": 0})

    def test_count_must_be_an_integer(self):
        with pytest.raises(ValueError, match="count must be an integer"):
            DailyProgressEntry.from_record({"template_id": "h", "kind": "Counter", "count": "2", "goal_count": 5})

    def test_missing_count_defaults_to_zero(self):
        entry = DailyProgressEntry.from_record({"template_id": "h", "kind": "Counter", "goal_count": 5})
        assert entry.count == 0
