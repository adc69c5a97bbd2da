"""
Day Agenda - chronological view of one day.

Combines:
- Scheduled habit occurrences (sorted at read time)
- Fixed class blocks for the day's weekday
- Academic deadlines due today and tomorrow

Also renders a short text brief ('markdown' or 'plain').
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from habitline.categories import style_for
from habitline.timeline.classes import ClassBlock, Subject, class_blocks_for_day
from habitline.timeline.engine import ScheduledOccurrence, chronological, format_hour

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assignment:
    id: str
    subject_id: str
    title: str
    due_date: date
    completed: bool = False

    @classmethod
    def from_record(cls, record: dict) -> "Assignment":
        due = record["due_date"]
        if isinstance(due, str):
            due = date.fromisoformat(due[:10])
        return cls(
            id=record["id"],
            subject_id=record["subject_id"],
            title=record["title"],
            due_date=due,
            completed=bool(record.get("completed", False)),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "title": self.title,
            "due_date": self.due_date.isoformat(),
            "completed": self.completed,
        }


@dataclass(frozen=True)
class AgendaItem:
    time: str
    occurrence: ScheduledOccurrence

    def to_record(self) -> dict:
        record = self.occurrence.to_record()
        record["time"] = self.time
        record["end"] = format_hour(self.occurrence.end_hour)
        record["color"] = style_for(self.occurrence.category).hex
        return record


@dataclass
class DayAgenda:
    day: date
    items: list[AgendaItem] = field(default_factory=list)
    classes: list[ClassBlock] = field(default_factory=list)
    due_today: list[Assignment] = field(default_factory=list)
    due_tomorrow: list[Assignment] = field(default_factory=list)
    subject_names: dict[str, str] = field(default_factory=dict)

    def subject_name(self, subject_id: str) -> str:
        return self.subject_names.get(subject_id, "Unknown")

    @property
    def pending_today(self) -> list[Assignment]:
        return [a for a in self.due_today if not a.completed]

    def to_record(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "items": [i.to_record() for i in self.items],
            "classes": [c.to_record() for c in self.classes],
            "due_today": [
                {**a.to_record(), "subject_name": self.subject_name(a.subject_id)}
                for a in self.due_today
            ],
            "due_tomorrow": [
                {**a.to_record(), "subject_name": self.subject_name(a.subject_id)}
                for a in self.due_tomorrow
            ],
        }


def build_day_agenda(
    occurrences: Iterable[ScheduledOccurrence],
    day: date,
    subjects: Iterable[Subject] = (),
    assignments: Iterable[Assignment] = (),
) -> DayAgenda:
    """
    Assemble the agenda for `day`.

    The occurrence set is day-agnostic; the caller decides which day it
    belongs to. Subjects and assignments are filtered by `day` here.
    """
    subjects = list(subjects)
    assignments = list(assignments)
    tomorrow = day + timedelta(days=1)

    return DayAgenda(
        day=day,
        items=[AgendaItem(time=format_hour(o.start_hour), occurrence=o) for o in chronological(occurrences)],
        classes=class_blocks_for_day(subjects, day),
        due_today=[a for a in assignments if a.due_date == day],
        due_tomorrow=[a for a in assignments if a.due_date == tomorrow],
        subject_names={s.id: s.name for s in subjects},
    )


def render_brief(agenda: DayAgenda, format: str = "markdown") -> str:
    """
    Render the agenda as a short brief.

    Args:
        agenda: Output of build_day_agenda
        format: 'markdown' or 'plain'
    """
    if format not in ("markdown", "plain"):
        raise ValueError(f"Unknown brief format: {format}")
    md = format == "markdown"

    def heading(text: str) -> str:
        return f"*{text}*" if md else text.upper()

    lines = [heading(f"{agenda.day.strftime('%A')}'s Agenda"), ""]

    # Habits and classes share one chronological list
    rows = [(i.occurrence.start_hour, i.time, i.occurrence.name, i.occurrence.completed) for i in agenda.items]
    rows += [(c.start_hour, format_hour(c.start_hour), f"Class: {c.subject_name}", None) for c in agenda.classes]
    rows.sort(key=lambda r: r[0])

    if rows:
        for _, time_label, title, completed in rows:
            mark = "" if completed is None else (" [x]" if completed else " [ ]")
            lines.append(f"• {time_label}{mark} {title}")
    else:
        lines.append("No habits scheduled for today.")
    lines.append("")

    pending = agenda.pending_today
    if pending:
        lines.append(heading(f"Due Today ({len(pending)})"))
        for a in pending:
            lines.append(f"• {a.title} ({agenda.subject_name(a.subject_id)})")
        lines.append("")

    if agenda.due_tomorrow:
        lines.append(heading(f"Due Tomorrow ({len(agenda.due_tomorrow)})"))
        for a in agenda.due_tomorrow:
            lines.append(f"• {a.title} ({agenda.subject_name(a.subject_id)})")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
