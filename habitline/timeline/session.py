"""
Day Session - the single writer for one day's timeline state.

Holds the template registry, the SchedulingEngine and the DailyProgressTracker
behind one re-entrant lock. Every mutation is a read-modify-write over the
whole state and is serialized here; the engine and tracker have no locking of
their own.

Academic records (subjects, assignments) are supplied by the collaborator and
only read for the agenda.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import date

from habitline import config
from habitline.contracts import invariants
from habitline.templates import HabitCategory, HabitKind, HabitTemplate, create_template
from habitline.timeline.agenda import Assignment, DayAgenda, build_day_agenda, render_brief
from habitline.timeline.classes import Subject
from habitline.timeline.commands import PlacementCommand, apply_command
from habitline.timeline.consistency import ConsistencyReport, aggregate, minutes_by_category
from habitline.timeline.engine import (
    Occurrences,
    ScheduledOccurrence,
    SchedulingEngine,
    new_occurrence_id,
)
from habitline.timeline.grid import TimelineGrid
from habitline.timeline.progress import DailyProgressEntry, DailyProgressTracker

logger = logging.getLogger(__name__)


class DaySession:
    """
    One day of habits: templates, scheduled occurrences, daily progress.

    The session is day-agnostic; which calendar day it represents is up to the
    caller (see agenda()). There is no rollover: progress stays until the
    caller builds a fresh session.
    """

    def __init__(
        self,
        grid: TimelineGrid | None = None,
        templates: Iterable[HabitTemplate] = (),
        occurrences: Iterable[ScheduledOccurrence] = (),
        entries: Iterable[DailyProgressEntry] = (),
        id_factory: Callable[[], str] = new_occurrence_id,
        strict: bool | None = None,
    ):
        self.grid = grid or TimelineGrid()
        self._lock = threading.RLock()
        self._templates: dict[str, HabitTemplate] = {}
        self._id_factory = id_factory
        self.engine = SchedulingEngine(occurrences, id_factory=id_factory)
        self.tracker = DailyProgressTracker(entries)
        self.strict = config.STRICT_INVARIANTS if strict is None else strict
        self._subjects: list[Subject] = []
        self._assignments: list[Assignment] = []

        for template in templates:
            self.add_template(template)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    @property
    def templates(self) -> dict[str, HabitTemplate]:
        with self._lock:
            return dict(self._templates)

    def get_template(self, template_id: str) -> HabitTemplate | None:
        with self._lock:
            return self._templates.get(template_id)

    def add_template(self, template: HabitTemplate) -> HabitTemplate:
        """Register a template; Check-in/Counter templates get a progress entry."""
        with self._lock:
            replaced = template.id in self._templates
            self._templates[template.id] = template
            self.tracker.initialize(template)
            action = "Updated" if replaced else "Added"
            logger.info(f"{action} habit {template.id} ({template.kind.value}): {template.name}")
            return template

    def create_habit(
        self,
        name: str,
        category: HabitCategory | str,
        kind: HabitKind | str,
        duration_minutes: int | None = None,
        goal_count: int | None = None,
        rules: str = "",
    ) -> HabitTemplate:
        """
        Validate and register a new template.

        Raises:
            TemplateValidationError: If the definition is malformed
        """
        template = create_template(
            name=name,
            category=category,
            kind=kind,
            duration_minutes=duration_minutes,
            goal_count=goal_count,
            rules=rules,
        )
        return self.add_template(template)

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    @property
    def occurrences(self) -> Occurrences:
        with self._lock:
            return self.engine.occurrences

    def chronological(self) -> list[ScheduledOccurrence]:
        with self._lock:
            return self.engine.chronological()

    def place(self, template_id: str, start_hour: float) -> Occurrences:
        with self._lock:
            template = self._templates.get(template_id)
            if template is None:
                logger.debug(f"place ignored: unknown template {template_id}")
                return self.engine.occurrences
            result = self.engine.place(template, start_hour)
            self._after_mutation("place")
            return result

    def handle(self, command: PlacementCommand) -> Occurrences:
        """Apply a drop command (new placement or move) at its snapped hour."""
        with self._lock:
            result = self.engine.commit(
                apply_command(
                    self.engine.occurrences,
                    command,
                    self.grid,
                    self._templates,
                    id_factory=self._id_factory,
                )
            )
            self._after_mutation(type(command).__name__)
            return result

    def move(self, occurrence_id: str, new_start_hour: float) -> Occurrences:
        with self._lock:
            result = self.engine.move(occurrence_id, new_start_hour)
            self._after_mutation("move")
            return result

    def remove(self, occurrence_id: str) -> Occurrences:
        with self._lock:
            result = self.engine.remove(occurrence_id)
            self._after_mutation("remove")
            return result

    def toggle_completion(self, occurrence_id: str) -> Occurrences:
        with self._lock:
            result = self.engine.toggle_completion(occurrence_id)
            self._after_mutation("toggle_completion")
            return result

    # ------------------------------------------------------------------
    # Daily progress
    # ------------------------------------------------------------------

    @property
    def progress(self) -> dict[str, DailyProgressEntry]:
        with self._lock:
            return self.tracker.entries

    def toggle_check_in(self, template_id: str) -> DailyProgressEntry | None:
        with self._lock:
            entry = self.tracker.toggle_check_in(template_id)
            self._after_mutation("toggle_check_in")
            return entry

    def update_counter(self, template_id: str, requested_count: int) -> DailyProgressEntry | None:
        with self._lock:
            entry = self.tracker.update_counter(template_id, requested_count)
            self._after_mutation("update_counter")
            return entry

    def increment(self, template_id: str) -> DailyProgressEntry | None:
        with self._lock:
            entry = self.tracker.increment(template_id)
            self._after_mutation("increment")
            return entry

    def decrement(self, template_id: str) -> DailyProgressEntry | None:
        with self._lock:
            entry = self.tracker.decrement(template_id)
            self._after_mutation("decrement")
            return entry

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def consistency(self) -> ConsistencyReport:
        with self._lock:
            return aggregate(self.engine.occurrences, self.tracker.entries.values())

    def category_minutes(self) -> dict[HabitCategory, int]:
        with self._lock:
            return minutes_by_category(self.engine.occurrences)

    def set_academics(self, subjects: Iterable[Subject] = (), assignments: Iterable[Assignment] = ()) -> None:
        with self._lock:
            self._subjects = list(subjects)
            self._assignments = list(assignments)
            logger.info(
                f"Academic context set: {len(self._subjects)} subjects, "
                f"{len(self._assignments)} assignments"
            )

    def agenda(self, day: date | None = None) -> DayAgenda:
        with self._lock:
            return build_day_agenda(
                self.engine.occurrences,
                day or date.today(),
                subjects=self._subjects,
                assignments=self._assignments,
            )

    def brief(self, day: date | None = None, format: str = "markdown") -> str:
        return render_brief(self.agenda(day), format)

    # ------------------------------------------------------------------
    # Plain-record snapshot
    # ------------------------------------------------------------------

    def to_record(self) -> dict:
        with self._lock:
            return {
                "templates": [t.to_record() for t in self._templates.values()],
                "occurrences": self.engine.to_records(),
                "progress": self.tracker.to_records(),
            }

    @classmethod
    def from_record(cls, record: dict, **kwargs) -> "DaySession":
        """
        Rebuild a session from to_record() output.

        Raises:
            TemplateValidationError: If a template record is malformed
            ValueError: If a progress record is malformed or has no matching
                Check-in/Counter template
            InvariantViolation: If the occurrences overlap (strict mode)
        """
        templates = [HabitTemplate.from_record(r) for r in record.get("templates", [])]
        entries = [DailyProgressEntry.from_record(r) for r in record.get("progress", [])]

        kinds = {t.id: t.kind for t in templates}
        for entry in entries:
            if kinds.get(entry.template_id) is not entry.kind:
                raise ValueError(f"Progress for {entry.template_id} has no matching {entry.kind.value} template")

        session = cls(
            templates=templates,
            occurrences=[ScheduledOccurrence.from_record(r) for r in record.get("occurrences", [])],
            entries=entries,
            **kwargs,
        )
        session._after_mutation("load")
        return session

    def replace_state(self, other: "DaySession") -> None:
        """Adopt another session's templates, occurrences and progress."""
        with self._lock:
            self._templates = other.templates
            self.engine.commit(other.occurrences)
            self.tracker = DailyProgressTracker(other.progress.values())
            self._after_mutation("replace_state")
            logger.info(
                f"Loaded state: {len(self._templates)} habits, "
                f"{len(self.engine.occurrences)} occurrences"
            )

    def _after_mutation(self, operation: str) -> None:
        if self.strict:
            invariants.enforce_invariants_strict(self.engine.occurrences, self.tracker.entries.values())
        logger.debug(
            f"{operation}: {len(self.engine.occurrences)} occurrences, "
            f"{len(self.tracker.entries)} progress entries"
        )
