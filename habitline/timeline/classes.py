"""
Class schedule - fixed weekly class slots shown on the day timeline.

Subjects come from the academic collaborator as plain records. Class blocks are
display-only: they never displace habit occurrences and are never displaced.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from habitline.timeline.engine import format_hour

logger = logging.getLogger(__name__)


def parse_clock(value: str) -> float:
    """'HH:MM' -> fractional hour ('09:30' -> 9.5)."""
    parsed = datetime.strptime(value, "%H:%M")
    return parsed.hour + parsed.minute / 60


def weekday_index(day: date) -> int:
    """Sunday-based weekday (0 = Sunday ... 6 = Saturday)."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class SubjectSlot:
    id: str
    day: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    color: str
    schedule: tuple[SubjectSlot, ...] = ()

    @classmethod
    def from_record(cls, record: dict) -> "Subject":
        return cls(
            id=record["id"],
            name=record["name"],
            color=record.get("color", ""),
            schedule=tuple(
                SubjectSlot(
                    id=s["id"],
                    day=int(s["day"]),
                    start_time=s["start_time"],
                    end_time=s["end_time"],
                )
                for s in record.get("schedule", [])
            ),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "schedule": [
                {"id": s.id, "day": s.day, "start_time": s.start_time, "end_time": s.end_time}
                for s in self.schedule
            ],
        }


@dataclass(frozen=True)
class ClassBlock:
    slot_id: str
    subject_id: str
    subject_name: str
    color: str
    start_hour: float
    end_hour: float

    @property
    def duration_minutes(self) -> int:
        return round((self.end_hour - self.start_hour) * 60)

    def to_record(self) -> dict:
        return {
            "slot_id": self.slot_id,
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "color": self.color,
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "start": format_hour(self.start_hour),
            "end": format_hour(self.end_hour),
        }


def class_blocks_for_day(subjects: Iterable[Subject], day: date) -> list[ClassBlock]:
    """Class blocks for the weekday of `day`, sorted by start."""
    weekday = weekday_index(day)
    blocks = []
    for subject in subjects:
        for slot in subject.schedule:
            if slot.day != weekday:
                continue
            try:
                start = parse_clock(slot.start_time)
                end = parse_clock(slot.end_time)
            except ValueError:
                logger.warning(f"Skipping class slot {slot.id} with invalid time format")
                continue
            if end <= start:
                logger.warning(f"Skipping class slot {slot.id}: end before start")
                continue
            blocks.append(
                ClassBlock(
                    slot_id=slot.id,
                    subject_id=subject.id,
                    subject_name=subject.name,
                    color=subject.color,
                    start_hour=start,
                    end_hour=end,
                )
            )
    return sorted(blocks, key=lambda b: b.start_hour)
