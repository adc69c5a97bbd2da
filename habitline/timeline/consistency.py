"""
Consistency Aggregator - completion ratio for the day.

Read-only reducers over the engine's occurrences and the tracker's entries.
Owns no state.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from habitline.templates import HabitCategory, HabitKind
from habitline.timeline.engine import ScheduledOccurrence
from habitline.timeline.grid import round_half_up
from habitline.timeline.progress import DailyProgressEntry


@dataclass(frozen=True)
class ConsistencyReport:
    completed: int
    total: int
    percentage: int

    def to_record(self) -> dict:
        return {"completed": self.completed, "total": self.total, "percentage": self.percentage}


def aggregate(
    occurrences: Iterable[ScheduledOccurrence],
    entries: Iterable[DailyProgressEntry],
) -> ConsistencyReport:
    """
    Count trackable units and how many are done.

    Units are every scheduled occurrence plus every Check-in/Counter entry.
    A Counter is done once count reaches goal_count. An empty day is 0%.
    """
    occurrences = list(occurrences)
    tracked = [e for e in entries if e.kind in (HabitKind.CHECK_IN, HabitKind.COUNTER)]

    total = len(occurrences) + len(tracked)
    completed = sum(1 for o in occurrences if o.completed) + sum(1 for e in tracked if e.is_done)

    percentage = 0 if total == 0 else round_half_up(100 * completed / total)
    return ConsistencyReport(completed=completed, total=total, percentage=percentage)


def minutes_by_category(occurrences: Iterable[ScheduledOccurrence]) -> dict[HabitCategory, int]:
    """Minutes of completed occurrences per category, enum order, zeros omitted."""
    totals = dict.fromkeys(HabitCategory, 0)
    for occ in occurrences:
        if occ.completed:
            totals[occ.category] += occ.duration_minutes
    return {category: minutes for category, minutes in totals.items() if minutes > 0}
