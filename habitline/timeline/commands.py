"""
Placement commands - the two kinds of timeline drop.

- NewPlacement: a template dragged from the palette onto the timeline
- MovePlacement: an existing occurrence dragged to a new slot

Both carry a raw offset; apply_command snaps it through the grid and hands the
hour to the scheduling engine.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from habitline.templates import HabitTemplate
from habitline.timeline import engine
from habitline.timeline.grid import TimelineGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewPlacement:
    template_id: str
    offset: float


@dataclass(frozen=True)
class MovePlacement:
    occurrence_id: str
    offset: float


PlacementCommand = NewPlacement | MovePlacement


def command_from_record(record: dict) -> PlacementCommand:
    """
    Build a command from a drop payload.

    Exactly one of template_id / occurrence_id must be present.

    Raises:
        ValueError: If the payload names neither or both.
    """
    template_id = record.get("template_id")
    occurrence_id = record.get("occurrence_id")
    if bool(template_id) == bool(occurrence_id):
        raise ValueError("drop payload needs exactly one of template_id or occurrence_id")
    offset = float(record["offset"])
    if template_id:
        return NewPlacement(template_id=template_id, offset=offset)
    return MovePlacement(occurrence_id=occurrence_id, offset=offset)


def apply_command(
    occurrences: engine.Occurrences,
    command: PlacementCommand,
    grid: TimelineGrid,
    templates: Mapping[str, HabitTemplate],
    id_factory: Callable[[], str] = engine.new_occurrence_id,
) -> engine.Occurrences:
    """Snap the command's offset and apply it. Unknown ids are no-ops."""
    hour = grid.position_to_time(command.offset)

    if isinstance(command, NewPlacement):
        template = templates.get(command.template_id)
        if template is None:
            logger.debug(f"drop ignored: unknown template {command.template_id}")
            return tuple(occurrences)
        if not template.is_timed:
            return tuple(occurrences)
        return engine.place(occurrences, template, hour, id_factory())

    if isinstance(command, MovePlacement):
        return engine.move(occurrences, command.occurrence_id, hour)

    raise TypeError(f"Unsupported placement command: {type(command).__name__}")
