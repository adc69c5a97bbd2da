"""
Shared Pydantic request/response models for the timeline API.

These models give FastAPI the type information it needs to generate accurate
OpenAPI schemas and to reject malformed payloads with 422.

Usage:
    from api.response_models import TimelineResponse

    @router.get("/timeline", response_model=TimelineResponse)
    def timeline(): ...
"""

from typing import Any

from pydantic import BaseModel, Field

from habitline.templates import HabitCategory, HabitKind

# ==== Habits ====


class HabitCreate(BaseModel):
    """New habit template. Kind-specific fields are checked by the template layer."""

    name: str = Field(min_length=1, description="Display name")
    category: HabitCategory
    kind: HabitKind
    duration_minutes: int | None = Field(default=None, description="Required for Timed habits")
    goal_count: int | None = Field(default=None, description="Required for Counter habits")
    rules: str = ""


class HabitOut(BaseModel):
    id: str
    name: str
    category: HabitCategory
    kind: HabitKind
    duration_minutes: int | None = None
    goal_count: int | None = None
    rules: str = ""
    color: str = Field(description="Category hex color")


class HabitListResponse(BaseModel):
    items: list[HabitOut] = Field(default_factory=list)
    total: int


# ==== Timeline ====


class OccurrenceOut(BaseModel):
    id: str
    template_id: str
    name: str
    category: HabitCategory
    duration_minutes: int
    start_hour: float
    completed: bool
    start: str = Field(description="HH:MM")
    end: str = Field(description="HH:MM")
    offset: float = Field(description="Pixel offset from the top of the visible window")
    height: float = Field(description="Pixel height")


class TimelineResponse(BaseModel):
    """Occurrences in chronological order plus the grid geometry."""

    grid: dict[str, float]
    hours: list[int]
    occurrences: list[OccurrenceOut] = Field(default_factory=list)
    total: int


class DropRequest(BaseModel):
    """
    Drag payload: a template from the palette, or an occurrence already on the timeline.

    Exactly one of template_id / occurrence_id; command_from_record enforces it.
    """

    template_id: str | None = None
    occurrence_id: str | None = None
    offset: float


class PlaceRequest(BaseModel):
    template_id: str
    start_hour: float


class MoveRequest(BaseModel):
    start_hour: float


# ==== Daily progress ====


class ProgressEntryOut(BaseModel):
    template_id: str
    kind: HabitKind
    completed: bool | None = None
    count: int | None = None
    goal_count: int | None = None
    done: bool


class ProgressResponse(BaseModel):
    items: list[ProgressEntryOut] = Field(default_factory=list)
    total: int


class CounterRequest(BaseModel):
    count: int = Field(description="Requested count; clamped to [0, goal_count]")


# ==== Stats ====


class ConsistencyResponse(BaseModel):
    completed: int
    total: int
    percentage: int


class CategoryMinutes(BaseModel):
    category: HabitCategory
    minutes: int
    color: str


class CategoryMinutesResponse(BaseModel):
    items: list[CategoryMinutes] = Field(default_factory=list)
    total_minutes: int


# ==== Academics / agenda ====


class SubjectSlotIn(BaseModel):
    id: str
    day: int = Field(ge=0, le=6, description="0 = Sunday")
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")


class SubjectIn(BaseModel):
    id: str
    name: str
    color: str = ""
    schedule: list[SubjectSlotIn] = Field(default_factory=list)


class AssignmentIn(BaseModel):
    id: str
    subject_id: str
    title: str
    due_date: str = Field(description="ISO date (YYYY-MM-DD)")
    completed: bool = False


class AcademicsRequest(BaseModel):
    subjects: list[SubjectIn] = Field(default_factory=list)
    assignments: list[AssignmentIn] = Field(default_factory=list)


class AgendaResponse(BaseModel):
    date: str
    items: list[dict[str, Any]] = Field(default_factory=list)
    classes: list[dict[str, Any]] = Field(default_factory=list)
    due_today: list[dict[str, Any]] = Field(default_factory=list)
    due_tomorrow: list[dict[str, Any]] = Field(default_factory=list)
    brief: str | None = None


# ==== State snapshot ====


class StateRecord(BaseModel):
    """Plain-record snapshot for an external persistence collaborator."""

    templates: list[dict[str, Any]] = Field(default_factory=list)
    occurrences: list[dict[str, Any]] = Field(default_factory=list)
    progress: list[dict[str, Any]] = Field(default_factory=list)
