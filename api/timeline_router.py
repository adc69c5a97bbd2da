"""
Timeline API Router

Exposes one DaySession over REST:
  - Habit templates (create/list)
  - Timeline drops, moves, removals, completion
  - Daily trackers (check-in, counter)
  - Consistency and per-category stats
  - Day agenda and plain-record state snapshot

Unknown ids answer 200 with the unchanged state; stale drag targets are
normal UI races, not client errors.

Usage in server.py:
    from api.timeline_router import timeline_router
    app.include_router(timeline_router, prefix="/api")
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from api.response_models import (
    AcademicsRequest,
    AgendaResponse,
    CategoryMinutes,
    CategoryMinutesResponse,
    ConsistencyResponse,
    CounterRequest,
    DropRequest,
    HabitCreate,
    HabitListResponse,
    HabitOut,
    MoveRequest,
    PlaceRequest,
    ProgressEntryOut,
    ProgressResponse,
    StateRecord,
    TimelineResponse,
)
from habitline.categories import style_for
from habitline.config import load_timeline_config
from habitline.contracts import InvariantViolation
from habitline.templates import HabitTemplate, TemplateValidationError
from habitline.timeline import (
    Assignment,
    DaySession,
    ScheduledOccurrence,
    Subject,
    TimelineGrid,
    command_from_record,
    render_brief,
)
from habitline.timeline.progress import DailyProgressEntry

logger = logging.getLogger(__name__)

timeline_router = APIRouter(tags=["Timeline"])

_session: DaySession | None = None


def get_session() -> DaySession:
    """Process-wide session, built on first use from the timeline config."""
    global _session
    if _session is None:
        _session = DaySession(grid=TimelineGrid(load_timeline_config()))
    return _session


# =============================================================================
# SERIALIZERS
# =============================================================================


def _habit_out(template: HabitTemplate) -> HabitOut:
    return HabitOut(**template.to_record(), color=style_for(template.category).hex)


def _occurrence_out(occ: ScheduledOccurrence, grid: TimelineGrid) -> dict:
    return {
        **occ.to_record(),
        "start": occ.start_label,
        "end": occ.end_label,
        "offset": grid.time_to_offset(occ.start_hour),
        "height": grid.duration_to_height(occ.duration_minutes),
    }


def _timeline(session: DaySession) -> TimelineResponse:
    occurrences = session.chronological()
    return TimelineResponse(
        grid=session.grid.config.to_record(),
        hours=session.grid.visible_hours(),
        occurrences=[_occurrence_out(o, session.grid) for o in occurrences],
        total=len(occurrences),
    )


def _entry_out(entry: DailyProgressEntry) -> ProgressEntryOut:
    return ProgressEntryOut(**entry.to_record(), done=entry.is_done)


def _progress(session: DaySession) -> ProgressResponse:
    entries = list(session.progress.values())
    return ProgressResponse(items=[_entry_out(e) for e in entries], total=len(entries))


# =============================================================================
# HABITS
# =============================================================================


@timeline_router.get("/habits", response_model=HabitListResponse)
def list_habits(session: DaySession = Depends(get_session)):
    templates = list(session.templates.values())
    return HabitListResponse(items=[_habit_out(t) for t in templates], total=len(templates))


@timeline_router.post("/habits", response_model=HabitOut, status_code=201)
def create_habit(body: HabitCreate, session: DaySession = Depends(get_session)):
    try:
        template = session.create_habit(**body.model_dump())
    except TemplateValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _habit_out(template)


# =============================================================================
# TIMELINE
# =============================================================================


@timeline_router.get("/timeline", response_model=TimelineResponse)
def get_timeline(session: DaySession = Depends(get_session)):
    return _timeline(session)


@timeline_router.post("/timeline/drop", response_model=TimelineResponse)
def drop(body: DropRequest, session: DaySession = Depends(get_session)):
    """Snap a drag offset and place (template_id) or move (occurrence_id)."""
    try:
        command = command_from_record(body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    session.handle(command)
    return _timeline(session)


@timeline_router.post("/timeline/place", response_model=TimelineResponse)
def place(body: PlaceRequest, session: DaySession = Depends(get_session)):
    session.place(body.template_id, body.start_hour)
    return _timeline(session)


@timeline_router.post("/timeline/{occurrence_id}/move", response_model=TimelineResponse)
def move(occurrence_id: str, body: MoveRequest, session: DaySession = Depends(get_session)):
    session.move(occurrence_id, body.start_hour)
    return _timeline(session)


@timeline_router.post("/timeline/{occurrence_id}/toggle", response_model=TimelineResponse)
def toggle_occurrence(occurrence_id: str, session: DaySession = Depends(get_session)):
    session.toggle_completion(occurrence_id)
    return _timeline(session)


@timeline_router.delete("/timeline/{occurrence_id}", response_model=TimelineResponse)
def remove(occurrence_id: str, session: DaySession = Depends(get_session)):
    session.remove(occurrence_id)
    return _timeline(session)


# =============================================================================
# DAILY PROGRESS
# =============================================================================


@timeline_router.get("/progress", response_model=ProgressResponse)
def get_progress(session: DaySession = Depends(get_session)):
    return _progress(session)


@timeline_router.post("/progress/{template_id}/toggle", response_model=ProgressResponse)
def toggle_check_in(template_id: str, session: DaySession = Depends(get_session)):
    session.toggle_check_in(template_id)
    return _progress(session)


@timeline_router.post("/progress/{template_id}/counter", response_model=ProgressResponse)
def update_counter(template_id: str, body: CounterRequest, session: DaySession = Depends(get_session)):
    session.update_counter(template_id, body.count)
    return _progress(session)


# =============================================================================
# STATS
# =============================================================================


@timeline_router.get("/stats/consistency", response_model=ConsistencyResponse)
def consistency(session: DaySession = Depends(get_session)):
    return ConsistencyResponse(**session.consistency().to_record())


@timeline_router.get("/stats/categories", response_model=CategoryMinutesResponse)
def category_minutes(session: DaySession = Depends(get_session)):
    minutes = session.category_minutes()
    return CategoryMinutesResponse(
        items=[
            CategoryMinutes(category=category, minutes=value, color=style_for(category).hex)
            for category, value in minutes.items()
        ],
        total_minutes=sum(minutes.values()),
    )


# =============================================================================
# AGENDA
# =============================================================================


@timeline_router.put("/academics")
def set_academics(body: AcademicsRequest, session: DaySession = Depends(get_session)):
    """Replace the subject/assignment records the agenda reads."""
    try:
        subjects = [Subject.from_record(s.model_dump()) for s in body.subjects]
        assignments = [Assignment.from_record(a.model_dump()) for a in body.assignments]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    session.set_academics(subjects, assignments)
    return {"success": True, "subjects": len(subjects), "assignments": len(assignments)}


@timeline_router.get("/agenda", response_model=AgendaResponse)
def agenda(
    day: date | None = Query(default=None, alias="date"),
    format: str | None = Query(default=None, pattern="^(markdown|plain)$"),
    session: DaySession = Depends(get_session),
):
    """Chronological agenda for `date` (default today), optionally with a text brief."""
    day_agenda = session.agenda(day)
    record = day_agenda.to_record()
    if format:
        record["brief"] = render_brief(day_agenda, format)
    return AgendaResponse(**record)


# =============================================================================
# STATE SNAPSHOT
# =============================================================================


@timeline_router.get("/state", response_model=StateRecord)
def get_state(session: DaySession = Depends(get_session)):
    return StateRecord(**session.to_record())


@timeline_router.put("/state", response_model=StateRecord)
def put_state(body: StateRecord, session: DaySession = Depends(get_session)):
    """Load a snapshot into the current session, replacing its day state."""
    try:
        loaded = DaySession.from_record(body.model_dump(), grid=session.grid, strict=True)
    except (TemplateValidationError, InvariantViolation, KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid state: {e}") from e
    session.replace_state(loaded)
    return StateRecord(**session.to_record())
