"""
Timeline Module

The day timeline: habit occurrences, daily trackers, and what reads them.

Objects:
- ScheduledOccurrence (a Timed habit placed at a start hour)
- DailyProgressEntry (Check-in flag or bounded Counter)
- ClassBlock (fixed class slot, display only)

Invariants:
- Occurrences never overlap; a new or moved occurrence displaces conflicts
- A moved occurrence never conflicts with its own previous slot
- 0 <= count <= goal_count for every Counter
- Missing ids and wrong-kind requests are no-ops, never errors
"""

from .agenda import Assignment, DayAgenda, build_day_agenda, render_brief
from .classes import ClassBlock, Subject, SubjectSlot, class_blocks_for_day
from .commands import MovePlacement, NewPlacement, PlacementCommand, apply_command, command_from_record
from .consistency import ConsistencyReport, aggregate, minutes_by_category
from .engine import ScheduledOccurrence, SchedulingEngine, chronological, format_hour
from .grid import TimelineGrid, TimelineGridConfig
from .progress import DailyProgressEntry, DailyProgressTracker
from .session import DaySession

__all__ = [
    "Assignment",
    "ClassBlock",
    "ConsistencyReport",
    "DailyProgressEntry",
    "DailyProgressTracker",
    "DayAgenda",
    "DaySession",
    "MovePlacement",
    "NewPlacement",
    "PlacementCommand",
    "ScheduledOccurrence",
    "SchedulingEngine",
    "Subject",
    "SubjectSlot",
    "TimelineGrid",
    "TimelineGridConfig",
    "aggregate",
    "apply_command",
    "build_day_agenda",
    "chronological",
    "class_blocks_for_day",
    "command_from_record",
    "format_hour",
    "minutes_by_category",
    "render_brief",
]
