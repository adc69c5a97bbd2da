"""Tests for placement, displacement, move, removal and completion on the timeline."""

import pytest

from habitline.templates import HabitCategory, HabitKind, HabitTemplate
from habitline.timeline import engine
from habitline.timeline.commands import NewPlacement, apply_command
from habitline.timeline.engine import (
    ScheduledOccurrence,
    SchedulingEngine,
    chronological,
    format_hour,
)
from habitline.timeline.grid import TimelineGrid, TimelineGridConfig


def _occ(occ_id: str, start: float, minutes: int, completed: bool = False) -> ScheduledOccurrence:
    return ScheduledOccurrence(
        id=occ_id,
        template_id=f"h_{occ_id}",
        name=occ_id,
        category=HabitCategory.MIND,
        duration_minutes=minutes,
        start_hour=start,
        completed=completed,
    )


def _intervals(occurrences):
    return sorted((o.id, o.start_hour, o.end_hour) for o in occurrences)


def _timed(minutes: int) -> HabitTemplate:
    return HabitTemplate(
        id=f"h_{minutes}", name=f"{minutes} min", category=HabitCategory.MIND, kind=HabitKind.TIMED,
        duration_minutes=minutes,
    )


class TestPlace:
    def test_place_into_empty_day(self, reading):
        result = engine.place((), reading, 9.0, "occ_1")
        assert len(result) == 1
        occ = result[0]
        assert occ.id == "occ_1"
        assert occ.template_id == "h_read"
        assert occ.start_hour == 9.0
        assert occ.end_hour == 9.5
        assert occ.completed is False

    def test_place_snapshots_template_fields(self, reading):
        occ = engine.place((), reading, 9.0, "occ_1")[0]
        assert occ.name == "Reading"
        assert occ.category is HabitCategory.MIND
        assert occ.duration_minutes == 30

    def test_displaces_exactly_the_overlapping_occurrence(self, reading):
        existing = (_occ("a", 9.25, 45), _occ("b", 11.0, 60), _occ("c", 7.0, 60))
        result = engine.place(existing, reading, 9.0, "new")
        assert {o.id for o in result} == {"b", "c", "new"}

    def test_untouched_occurrences_are_identical(self, reading):
        keep = _occ("b", 11.0, 60, completed=True)
        result = engine.place((_occ("a", 9.25, 45), keep), reading, 9.0, "new")
        assert engine.find(result, "b") is keep

    def test_adjacent_slots_do_not_conflict(self, reading):
        before = _occ("before", 8.5, 30)   # [8.5, 9.0)
        after = _occ("after", 9.5, 30)     # [9.5, 10.0)
        result = engine.place((before, after), reading, 9.0, "new")
        assert {o.id for o in result} == {"before", "after", "new"}

    def test_new_occurrence_can_displace_several(self, budgeting):
        existing = (_occ("a", 9.0, 15), _occ("b", 9.25, 15), _occ("c", 9.75, 30), _occ("d", 10.0, 30))
        result = engine.place(existing, budgeting, 9.0, "new")
        assert {o.id for o in result} == {"d", "new"}

    def test_contained_occurrence_is_displaced(self, budgeting):
        result = engine.place((_occ("inner", 9.25, 15),), budgeting, 9.0, "new")
        assert [o.id for o in result] == ["new"]

    def test_non_timed_template_is_noop(self, meditate, water):
        existing = (_occ("a", 9.0, 30),)
        assert engine.place(existing, meditate, 9.0, "x") == existing
        assert engine.place(existing, water, 9.0, "x") == existing

    def test_out_of_window_hours_are_accepted(self, reading):
        result = engine.place((), reading, 3.0, "early")
        assert result[0].start_hour == 3.0

    def test_generates_id_when_not_given(self, reading):
        occ = engine.place((), reading, 9.0)[0]
        assert occ.id.startswith("occ_")
        assert occ.id != reading.id

    def test_same_template_placed_twice_non_overlapping(self, reading):
        result = engine.place((), reading, 9.0, "first")
        result = engine.place(result, reading, 14.0, "second")
        assert {o.template_id for o in result} == {"h_read"}
        assert len(result) == 2

    def test_input_tuple_is_not_mutated(self, reading):
        existing = (_occ("a", 9.0, 30),)
        engine.place(existing, reading, 9.0, "new")
        assert existing == (_occ("a", 9.0, 30),)


class TestMove:
    def test_move_into_free_slot(self):
        result = engine.move((_occ("a", 8.0, 30), _occ("b", 12.0, 30)), "a", 10.0)
        assert _intervals(result) == [("a", 10.0, 10.5), ("b", 12.0, 12.5)]

    def test_move_overlapping_own_previous_slot(self, reading):
        occurrences = engine.place((), reading, 8.0, "occ_1")
        result = engine.move(occurrences, "occ_1", 8.1)
        assert len(result) == 1
        assert result[0].id == "occ_1"
        assert result[0].start_hour == 8.1
        assert result[0].end_hour == pytest.approx(8.6)

    def test_move_displaces_others(self):
        existing = (_occ("a", 8.0, 30), _occ("b", 10.0, 60), _occ("c", 13.0, 30))
        result = engine.move(existing, "a", 10.5)
        assert {o.id for o in result} == {"a", "c"}

    def test_move_preserves_completion_and_snapshot(self):
        done = _occ("a", 8.0, 45, completed=True)
        moved = engine.find(engine.move((done,), "a", 15.0), "a")
        assert moved.completed is True
        assert moved.duration_minutes == 45
        assert moved.template_id == done.template_id
        assert moved.name == done.name

    def test_move_missing_occurrence_is_noop(self):
        existing = (_occ("a", 8.0, 30),)
        assert engine.move(existing, "ghost", 8.0) == existing


class TestRemoveAndToggle:
    def test_remove(self):
        result = engine.remove((_occ("a", 8.0, 30), _occ("b", 9.0, 30)), "a")
        assert [o.id for o in result] == ["b"]

    def test_remove_missing_is_noop(self):
        existing = (_occ("a", 8.0, 30),)
        assert engine.remove(existing, "ghost") == existing

    def test_remove_twice_is_noop(self):
        once = engine.remove((_occ("a", 8.0, 30),), "a")
        assert engine.remove(once, "a") == ()

    def test_toggle_flips_only_target(self):
        result = engine.toggle_completion((_occ("a", 8.0, 30), _occ("b", 9.0, 30)), "a")
        assert engine.find(result, "a").completed is True
        assert engine.find(result, "b").completed is False
        result = engine.toggle_completion(result, "a")
        assert engine.find(result, "a").completed is False

    def test_toggle_missing_is_noop(self):
        existing = (_occ("a", 8.0, 30),)
        assert engine.toggle_completion(existing, "ghost") == existing


class TestOrderingAndFormatting:
    def test_chronological_sorts_by_start(self):
        ordered = chronological((_occ("late", 20.0, 30), _occ("early", 6.5, 30), _occ("mid", 12.0, 30)))
        assert [o.id for o in ordered] == ["early", "mid", "late"]

    def test_chronological_ties_keep_insertion_order(self):
        ordered = chronological((_occ("x", 9.0, 0), _occ("y", 9.0, 0)))
        assert [o.id for o in ordered] == ["x", "y"]

    @pytest.mark.parametrize(
        "hour,label",
        [
            (9.5, "09:30"),
            (7.0, "07:00"),
            (0.25, "00:15"),
            (23.75, "23:45"),
            (8.1, "08:06"),
            (9.9999, "10:00"),
        ],
    )
    def test_format_hour(self, hour, label):
        assert format_hour(hour) == label

    def test_record_round_trip(self):
        occ = _occ("a", 9.25, 45, completed=True)
        record = occ.to_record()
        assert record["category"] == "Mind"
        assert all(isinstance(v, (str, int, float, bool)) for v in record.values())
        assert ScheduledOccurrence.from_record(record) == occ


class TestSchedulingEngine:
    def test_stateful_flow(self, reading, workout, id_factory):
        eng = SchedulingEngine(id_factory=id_factory)
        eng.place(reading, 9.0)
        eng.place(workout, 9.25)  # displaces reading
        assert [o.id for o in eng.occurrences] == ["occ_2"]

        eng.place(reading, 7.0)
        eng.move("occ_3", 18.0)
        eng.toggle_completion("occ_3")
        assert [(o.id, o.start_hour, o.completed) for o in eng.chronological()] == [
            ("occ_2", 9.25, False),
            ("occ_3", 18.0, True),
        ]

        eng.remove("occ_2")
        assert [o.id for o in eng.occurrences] == ["occ_3"]

    def test_non_timed_place_consumes_no_id(self, meditate, reading, id_factory):
        eng = SchedulingEngine(id_factory=id_factory)
        eng.place(meditate, 9.0)
        eng.place(reading, 9.0)
        assert [o.id for o in eng.occurrences] == ["occ_1"]

    def test_timed_template_without_duration_is_noop(self, id_factory):
        # Bypass validation to simulate an untrusted collaborator record
        broken = object.__new__(HabitTemplate)
        for field, value in dict(
            id="h_x", name="x", category=HabitCategory.MIND, kind=HabitKind.TIMED,
            duration_minutes=None, goal_count=None, rules="",
        ).items():
            object.__setattr__(broken, field, value)
        eng = SchedulingEngine(id_factory=id_factory)
        assert eng.place(broken, 9.0) == ()

    def test_records_round_trip(self, reading, id_factory):
        eng = SchedulingEngine(id_factory=id_factory)
        eng.place(reading, 9.0)
        clone = SchedulingEngine.from_records(eng.to_records())
        assert clone.occurrences == eng.occurrences


class TestAdjacentSlotsOnCoarseGrids:
    """Back-to-back drops on any snap grid keep both occurrences."""

    @pytest.mark.parametrize("snap", [10, 20, 30])
    def test_every_adjacent_pair_coexists(self, snap):
        grid = TimelineGrid(TimelineGridConfig(snap_interval_minutes=snap))
        block = HabitTemplate(
            id="h_block", name="Block", category=HabitCategory.MIND, kind=HabitKind.TIMED, duration_minutes=snap
        )
        templates = {block.id: block}
        slots = int((grid.config.end_hour - grid.config.start_hour) * 60 // snap)
        for k in range(slots - 1):
            first = grid.config.start_hour + k * snap / 60
            second = grid.config.start_hour + (k + 1) * snap / 60
            occs = apply_command((), NewPlacement("h_block", grid.time_to_offset(first)), grid, templates, lambda: "a")
            occs = apply_command(occs, NewPlacement("h_block", grid.time_to_offset(second)), grid, templates, lambda: "b")
            assert {o.id for o in occs} == {"a", "b"}, f"slot {k} on a {snap}-minute grid"

    def test_twenty_minute_neighbours(self):
        grid = TimelineGrid(TimelineGridConfig(snap_interval_minutes=20))
        first = engine.place((), _timed(20), grid.position_to_time(grid.time_to_offset(8.0)), "a")
        both = engine.place(first, _timed(20), grid.position_to_time(grid.time_to_offset(8 + 20 / 60)), "b")
        assert [o.end_minute for o in chronological(both)] == [500, 520]
        assert {o.id for o in both} == {"a", "b"}

    def test_minutes_are_rounded_from_hours(self):
        occ = _occ("a", 8 + 20 / 60, 20)
        assert (occ.start_minute, occ.end_minute) == (500, 520)
