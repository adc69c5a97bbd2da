"""
Daily Progress Tracker - per-habit state for Check-in and Counter habits.

Enforces invariants:
- Only Check-in and Counter templates have an entry
- 0 <= count <= goal_count for every Counter entry; out-of-range requests
  saturate instead of failing

Entries snapshot the template's kind and goal at initialization. Operations on
a missing entry, or on an entry of the wrong kind, are silent no-ops.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from habitline.templates import TRACKED_KINDS, HabitKind, HabitTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyProgressEntry:
    template_id: str
    kind: HabitKind
    completed: bool = False
    count: int = 0
    goal_count: int | None = None

    @property
    def is_done(self) -> bool:
        if self.kind is HabitKind.CHECK_IN:
            return self.completed
        if self.kind is HabitKind.COUNTER:
            return self.goal_count is not None and self.count >= self.goal_count
        return False

    def to_record(self) -> dict:
        record = {"template_id": self.template_id, "kind": self.kind.value}
        if self.kind is HabitKind.CHECK_IN:
            record["completed"] = self.completed
        else:
            record["count"] = self.count
            record["goal_count"] = self.goal_count
        return record

    @classmethod
    def from_record(cls, record: dict) -> "DailyProgressEntry":
        """
        Rebuild an entry from to_record() output.

        Raises:
            ValueError: If the kind is not tracked or a counter field is not an integer
        """
        kind = HabitKind(record["kind"])
        if kind not in TRACKED_KINDS:
            raise ValueError(f"{kind.value} habits have no progress entry: {record['template_id']}")
        if kind is HabitKind.CHECK_IN:
            return cls(template_id=record["template_id"], kind=kind, completed=bool(record.get("completed")))

        count = _whole_number(record.get("count", 0), "count")
        goal_count = _whole_number(record.get("goal_count"), "goal_count")
        if goal_count <= 0:
            raise ValueError(f"goal_count must be positive, got {goal_count}")
        return cls(template_id=record["template_id"], kind=kind, count=count, goal_count=goal_count)


ProgressMap = Mapping[str, DailyProgressEntry]


def _whole_number(value, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")
    return value


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def initialize(entries: ProgressMap, template: HabitTemplate) -> dict[str, DailyProgressEntry]:
    """Create the empty entry for a Check-in/Counter template; Timed gets none."""
    updated = dict(entries)
    if not template.is_tracked:
        return updated
    if template.id in updated:
        # Keep today's progress if the collaborator re-announces a template
        return updated

    if template.kind is HabitKind.CHECK_IN:
        updated[template.id] = DailyProgressEntry(template_id=template.id, kind=HabitKind.CHECK_IN)
    else:
        updated[template.id] = DailyProgressEntry(
            template_id=template.id,
            kind=HabitKind.COUNTER,
            count=0,
            goal_count=template.goal_count,
        )
    return updated


def toggle_check_in(entries: ProgressMap, template_id: str) -> dict[str, DailyProgressEntry]:
    updated = dict(entries)
    entry = updated.get(template_id)
    if entry is None or entry.kind is not HabitKind.CHECK_IN:
        logger.debug(f"toggle_check_in ignored: no Check-in entry for {template_id}")
        return updated
    updated[template_id] = replace(entry, completed=not entry.completed)
    return updated


def update_counter(
    entries: ProgressMap, template_id: str, requested_count: int
) -> dict[str, DailyProgressEntry]:
    """Set a counter to requested_count, saturating at 0 and goal_count."""
    updated = dict(entries)
    entry = updated.get(template_id)
    if entry is None or entry.kind is not HabitKind.COUNTER or entry.goal_count is None:
        logger.debug(f"update_counter ignored: no Counter entry with a goal for {template_id}")
        return updated
    updated[template_id] = replace(entry, count=clamp(int(requested_count), 0, entry.goal_count))
    return updated


class DailyProgressTracker:
    """Owns the template_id -> DailyProgressEntry map for one day."""

    def __init__(self, entries: Iterable[DailyProgressEntry] = ()):
        self._entries: dict[str, DailyProgressEntry] = {e.template_id: e for e in entries}

    @property
    def entries(self) -> dict[str, DailyProgressEntry]:
        return dict(self._entries)

    def get(self, template_id: str) -> DailyProgressEntry | None:
        return self._entries.get(template_id)

    def initialize(self, template: HabitTemplate) -> DailyProgressEntry | None:
        self._entries = initialize(self._entries, template)
        return self._entries.get(template.id)

    def toggle_check_in(self, template_id: str) -> DailyProgressEntry | None:
        self._entries = toggle_check_in(self._entries, template_id)
        return self._entries.get(template_id)

    def update_counter(self, template_id: str, requested_count: int) -> DailyProgressEntry | None:
        self._entries = update_counter(self._entries, template_id, requested_count)
        return self._entries.get(template_id)

    def increment(self, template_id: str) -> DailyProgressEntry | None:
        entry = self._entries.get(template_id)
        if entry is None:
            return None
        return self.update_counter(template_id, entry.count + 1)

    def decrement(self, template_id: str) -> DailyProgressEntry | None:
        entry = self._entries.get(template_id)
        if entry is None:
            return None
        return self.update_counter(template_id, entry.count - 1)

    def to_records(self) -> list[dict]:
        return [e.to_record() for e in self._entries.values()]

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "DailyProgressTracker":
        return cls(DailyProgressEntry.from_record(r) for r in records)
