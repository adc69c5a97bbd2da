"""
Habit templates - reusable habit definitions.

A template is immutable once created. Kind-specific parameters:
- Timed:    duration_minutes (positive int, required)
- Check-in: no parameters
- Counter:  goal_count (positive int, required)

Well-formedness is checked here, at construction time, so the scheduling
engine and the progress tracker can trust whatever template they receive.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class TemplateValidationError(ValueError):
    """Raised when a habit template is malformed."""

    pass


class HabitKind(str, Enum):
    TIMED = "Timed"
    CHECK_IN = "Check-in"
    COUNTER = "Counter"


class HabitCategory(str, Enum):
    MIND = "Mind"
    BODY = "Body"
    HEALTH = "Health"
    SPIRITUALITY = "Spirituality"
    FINANCES = "Finances"
    SOCIAL = "Social"
    LEISURE = "Leisure"


TRACKED_KINDS = (HabitKind.CHECK_IN, HabitKind.COUNTER)


def _positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise TemplateValidationError(f"{field_name} must be a positive integer, got {value!r}")
    return value


def _coerce_enum(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise TemplateValidationError(
            f"{field_name} must be one of: {allowed}; got {value!r}"
        ) from None


@dataclass(frozen=True)
class HabitTemplate:
    id: str
    name: str
    category: HabitCategory
    kind: HabitKind
    duration_minutes: int | None = None
    goal_count: int | None = None
    rules: str = ""

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise TemplateValidationError("id must be a non-empty string")
        if not isinstance(self.name, str) or not self.name.strip():
            raise TemplateValidationError("name must be a non-empty string")

        # Frozen dataclass: normalize enum fields through object.__setattr__
        object.__setattr__(self, "category", _coerce_enum(HabitCategory, self.category, "category"))
        object.__setattr__(self, "kind", _coerce_enum(HabitKind, self.kind, "kind"))

        if self.kind is HabitKind.TIMED:
            _positive_int(self.duration_minutes, "duration_minutes")
            if self.goal_count is not None:
                raise TemplateValidationError("goal_count is only valid for Counter habits")
        elif self.kind is HabitKind.COUNTER:
            _positive_int(self.goal_count, "goal_count")
            if self.duration_minutes is not None:
                raise TemplateValidationError("duration_minutes is only valid for Timed habits")
        else:
            if self.duration_minutes is not None or self.goal_count is not None:
                raise TemplateValidationError("Check-in habits take no duration or goal")

        if self.rules is None:
            object.__setattr__(self, "rules", "")

    @property
    def is_timed(self) -> bool:
        return self.kind is HabitKind.TIMED

    @property
    def is_tracked(self) -> bool:
        """Check-in and Counter habits carry a daily progress entry."""
        return self.kind in TRACKED_KINDS

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "kind": self.kind.value,
            "duration_minutes": self.duration_minutes,
            "goal_count": self.goal_count,
            "rules": self.rules,
        }

    @classmethod
    def from_record(cls, record: dict) -> "HabitTemplate":
        try:
            return cls(
                id=record["id"],
                name=record["name"],
                category=record["category"],
                kind=record["kind"],
                duration_minutes=record.get("duration_minutes"),
                goal_count=record.get("goal_count"),
                rules=record.get("rules") or "",
            )
        except KeyError as e:
            raise TemplateValidationError(f"template record missing field: {e.args[0]}") from None


def new_template_id() -> str:
    return f"h_{uuid.uuid4().hex[:12]}"


def create_template(
    name: str,
    category: HabitCategory | str,
    kind: HabitKind | str,
    duration_minutes: int | None = None,
    goal_count: int | None = None,
    rules: str = "",
    template_id: str | None = None,
) -> HabitTemplate:
    """
    Build a validated template with a fresh id.

    Raises:
        TemplateValidationError: If the kind-specific parameters don't match the kind.
    """
    template = HabitTemplate(
        id=template_id or new_template_id(),
        name=name.strip() if isinstance(name, str) else name,
        category=category,
        kind=kind,
        duration_minutes=duration_minutes,
        goal_count=goal_count,
        rules=rules,
    )
    logger.debug(f"Created template {template.id} ({template.kind.value}): {template.name}")
    return template
