"""
Timeline Grid - pixel offset <-> snapped hour-of-day.

Pure geometry for the day timeline. The grid only snaps; it never clamps or
rejects. Hours outside [start_hour, end_hour) are returned as computed, and
the engine accepts them.
"""

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class TimelineGridConfig:
    start_hour: float = 6
    end_hour: float = 24
    pixels_per_hour: float = 80
    snap_interval_minutes: int = 15

    def __post_init__(self):
        if self.pixels_per_hour <= 0:
            raise ValueError(f"pixels_per_hour must be positive, got {self.pixels_per_hour}")
        if self.end_hour <= self.start_hour:
            raise ValueError(
                f"end_hour ({self.end_hour}) must be after start_hour ({self.start_hour})"
            )
        snap = self.snap_interval_minutes
        if isinstance(snap, bool) or not isinstance(snap, int) or snap <= 0 or 60 % snap:
            raise ValueError(f"snap_interval_minutes must be a positive divisor of 60, got {snap!r}")

    @property
    def snap_interval_hours(self) -> float:
        return self.snap_interval_minutes / 60

    def to_record(self) -> dict:
        return {
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "pixels_per_hour": self.pixels_per_hour,
            "snap_interval_minutes": self.snap_interval_minutes,
        }


class TimelineGrid:
    """
    Converts between a vertical offset on the timeline and a time of day.

    Offsets are measured from the top of the visible window, which sits at
    start_hour. Times are fractional hours since midnight (9.5 == 09:30).
    """

    def __init__(self, config: TimelineGridConfig | None = None):
        self.config = config or TimelineGridConfig()

    def position_to_time(self, offset: float) -> float:
        """Snap a raw offset to the nearest snap interval, in hours."""
        cfg = self.config
        raw_hour = offset / cfg.pixels_per_hour + cfg.start_hour
        step = cfg.snap_interval_hours
        return round_half_up(raw_hour / step) * step

    def time_to_offset(self, hour: float) -> float:
        return (hour - self.config.start_hour) * self.config.pixels_per_hour

    def duration_to_height(self, duration_minutes: float) -> float:
        return duration_minutes / 60 * self.config.pixels_per_hour

    def visible_hours(self) -> list[int]:
        """Hour lines drawn on the timeline, start_hour through end_hour - 1."""
        return list(range(math.ceil(self.config.start_hour), math.ceil(self.config.end_hour)))

    def contains(self, hour: float) -> bool:
        return self.config.start_hour <= hour < self.config.end_hour

    @property
    def height(self) -> float:
        return (self.config.end_hour - self.config.start_hour) * self.config.pixels_per_hour
