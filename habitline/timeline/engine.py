"""
Scheduling Engine - timed habit occurrences for one day.

Enforces invariants:
- No two occurrences overlap on [start, start + duration), compared in whole
  minutes of the day
- Overlap is resolved by displacement: the placed or moved occurrence wins,
  every conflicting occurrence is removed
- A moved occurrence is never displaced by its own previous slot

The transitions are pure functions over a tuple of occurrences and return a
new tuple. SchedulingEngine is the stateful owner used by DaySession.
Missing occurrences and non-Timed templates are silent no-ops.
"""

import logging
import math
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from habitline.templates import HabitCategory, HabitKind, HabitTemplate
from habitline.timeline.grid import round_half_up

logger = logging.getLogger(__name__)

Occurrences = tuple["ScheduledOccurrence", ...]


@dataclass(frozen=True)
class ScheduledOccurrence:
    id: str
    template_id: str
    name: str
    category: HabitCategory
    duration_minutes: int
    start_hour: float
    completed: bool = False

    @property
    def end_hour(self) -> float:
        return self.start_hour + self.duration_minutes / 60

    @property
    def start_minute(self) -> int:
        return round_half_up(self.start_hour * 60)

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    def overlaps(self, other: "ScheduledOccurrence") -> bool:
        """Half-open overlap in minutes: touching intervals do not conflict."""
        return self.start_minute < other.end_minute and other.start_minute < self.end_minute

    @property
    def start_label(self) -> str:
        return format_hour(self.start_hour)

    @property
    def end_label(self) -> str:
        return format_hour(self.end_hour)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "template_id": self.template_id,
            "name": self.name,
            "category": self.category.value,
            "duration_minutes": self.duration_minutes,
            "start_hour": self.start_hour,
            "completed": self.completed,
        }

    @classmethod
    def from_record(cls, record: dict) -> "ScheduledOccurrence":
        return cls(
            id=record["id"],
            template_id=record["template_id"],
            name=record["name"],
            category=HabitCategory(record["category"]),
            duration_minutes=int(record["duration_minutes"]),
            start_hour=float(record["start_hour"]),
            completed=bool(record.get("completed", False)),
        )


def new_occurrence_id() -> str:
    return f"occ_{uuid.uuid4().hex[:12]}"


def format_hour(hour: float) -> str:
    """Fractional hour -> zero-padded 24h 'HH:MM' (9.5 -> '09:30')."""
    whole = math.floor(hour)
    minutes = round_half_up((hour - whole) * 60)
    if minutes == 60:
        whole, minutes = whole + 1, 0
    return f"{whole:02d}:{minutes:02d}"


def find(occurrences: Iterable[ScheduledOccurrence], occurrence_id: str) -> ScheduledOccurrence | None:
    for occ in occurrences:
        if occ.id == occurrence_id:
            return occ
    return None


def chronological(occurrences: Iterable[ScheduledOccurrence]) -> list[ScheduledOccurrence]:
    """Sort by start hour; ties keep insertion order."""
    return sorted(occurrences, key=lambda o: o.start_hour)


def _displace(
    occurrences: Iterable[ScheduledOccurrence],
    candidate: ScheduledOccurrence,
    exclude_id: str | None = None,
) -> tuple[list[ScheduledOccurrence], list[ScheduledOccurrence]]:
    """Split into (kept, displaced) against the candidate's slot."""
    kept, displaced = [], []
    for occ in occurrences:
        if occ.id == exclude_id:
            continue
        if occ.overlaps(candidate):
            displaced.append(occ)
        else:
            kept.append(occ)
    return kept, displaced


def place(
    occurrences: Occurrences,
    template: HabitTemplate,
    start_hour: float,
    occurrence_id: str | None = None,
) -> Occurrences:
    """
    Place a Timed template at start_hour, evicting anything it overlaps.

    Returns:
        New occurrence tuple; unchanged if the template isn't Timed.
    """
    if template.kind is not HabitKind.TIMED or not template.duration_minutes:
        logger.debug(f"place ignored: template {template.id} is not a Timed habit")
        return tuple(occurrences)

    new = ScheduledOccurrence(
        id=occurrence_id or new_occurrence_id(),
        template_id=template.id,
        name=template.name,
        category=template.category,
        duration_minutes=template.duration_minutes,
        start_hour=start_hour,
    )
    kept, displaced = _displace(occurrences, new)
    if displaced:
        logger.info(
            f"Placing {new.name} at {new.start_label} displaced "
            f"{', '.join(o.id for o in displaced)}"
        )
    return (*kept, new)


def move(occurrences: Occurrences, occurrence_id: str, new_start_hour: float) -> Occurrences:
    """
    Move an occurrence to new_start_hour, keeping duration and completion.

    Other occurrences overlapping the new slot are evicted; the occurrence's
    own previous slot never counts as a conflict.
    """
    current = find(occurrences, occurrence_id)
    if current is None:
        logger.debug(f"move ignored: occurrence {occurrence_id} not found")
        return tuple(occurrences)

    moved = replace(current, start_hour=new_start_hour)
    kept, displaced = _displace(occurrences, moved, exclude_id=occurrence_id)
    if displaced:
        logger.info(
            f"Moving {moved.name} to {moved.start_label} displaced "
            f"{', '.join(o.id for o in displaced)}"
        )
    return (*kept, moved)


def remove(occurrences: Occurrences, occurrence_id: str) -> Occurrences:
    remaining = tuple(o for o in occurrences if o.id != occurrence_id)
    if len(remaining) == len(occurrences):
        logger.debug(f"remove ignored: occurrence {occurrence_id} not found")
    return remaining


def toggle_completion(occurrences: Occurrences, occurrence_id: str) -> Occurrences:
    return tuple(
        replace(o, completed=not o.completed) if o.id == occurrence_id else o
        for o in occurrences
    )


class SchedulingEngine:
    """
    Owns today's occurrence set.

    Every mutation replaces the whole tuple, so a reader holding the previous
    `occurrences` value never sees a partial update. Not thread-safe on its
    own; DaySession serializes access.
    """

    def __init__(
        self,
        occurrences: Iterable[ScheduledOccurrence] = (),
        id_factory: Callable[[], str] = new_occurrence_id,
    ):
        self._occurrences: Occurrences = tuple(occurrences)
        self._id_factory = id_factory

    @property
    def occurrences(self) -> Occurrences:
        return self._occurrences

    def get(self, occurrence_id: str) -> ScheduledOccurrence | None:
        return find(self._occurrences, occurrence_id)

    def place(self, template: HabitTemplate, start_hour: float) -> Occurrences:
        occurrence_id = self._id_factory() if template.kind is HabitKind.TIMED else None
        self._occurrences = place(self._occurrences, template, start_hour, occurrence_id)
        return self._occurrences

    def move(self, occurrence_id: str, new_start_hour: float) -> Occurrences:
        self._occurrences = move(self._occurrences, occurrence_id, new_start_hour)
        return self._occurrences

    def remove(self, occurrence_id: str) -> Occurrences:
        self._occurrences = remove(self._occurrences, occurrence_id)
        return self._occurrences

    def toggle_completion(self, occurrence_id: str) -> Occurrences:
        self._occurrences = toggle_completion(self._occurrences, occurrence_id)
        return self._occurrences

    def commit(self, occurrences: Iterable[ScheduledOccurrence]) -> Occurrences:
        """Swap in a set produced by one of the pure transitions above."""
        self._occurrences = tuple(occurrences)
        return self._occurrences

    def chronological(self) -> list[ScheduledOccurrence]:
        return chronological(self._occurrences)

    def to_records(self) -> list[dict]:
        return [o.to_record() for o in self._occurrences]

    @classmethod
    def from_records(cls, records: Iterable[dict], **kwargs) -> "SchedulingEngine":
        return cls((ScheduledOccurrence.from_record(r) for r in records), **kwargs)
