"""
Invariants Module - semantic correctness of a day's state.

The engine and tracker guarantee these by construction. A violation here means
a bug in a transition, never bad user input.
"""

from collections.abc import Iterable

from habitline.templates import HabitKind
from habitline.timeline.engine import ScheduledOccurrence, chronological
from habitline.timeline.progress import DailyProgressEntry


class InvariantViolation(Exception):
    """Raised when a domain invariant is violated."""

    pass


# =============================================================================
# INVARIANT FUNCTIONS
# =============================================================================


def check_no_overlap(occurrences: Iterable[ScheduledOccurrence], entries: Iterable[DailyProgressEntry]) -> None:
    """
    INVARIANT: no two occurrences share a minute of [start, start + duration).

    Raises:
        InvariantViolation: On the first overlapping pair (in start order)
    """
    ordered = chronological(occurrences)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.start_minute < prev.end_minute:
            raise InvariantViolation(
                f"Occurrences overlap: {prev.id} [{prev.start_label}-{prev.end_label}) "
                f"and {nxt.id} [{nxt.start_label}-{nxt.end_label})"
            )


def check_unique_occurrence_ids(
    occurrences: Iterable[ScheduledOccurrence], entries: Iterable[DailyProgressEntry]
) -> None:
    """
    INVARIANT: occurrence ids are unique within the day.

    Raises:
        InvariantViolation: If an id appears twice
    """
    seen = set()
    for occ in occurrences:
        if occ.id in seen:
            raise InvariantViolation(f"Duplicate occurrence id: {occ.id}")
        seen.add(occ.id)


def check_counter_bounds(occurrences: Iterable[ScheduledOccurrence], entries: Iterable[DailyProgressEntry]) -> None:
    """
    INVARIANT: 0 <= count <= goal_count for every Counter entry.

    Raises:
        InvariantViolation: If a counter left its bounds
    """
    for entry in entries:
        if entry.kind is not HabitKind.COUNTER or entry.goal_count is None:
            continue
        if not 0 <= entry.count <= entry.goal_count:
            raise InvariantViolation(
                f"Counter {entry.template_id} out of bounds: {entry.count} / {entry.goal_count}"
            )


ALL_INVARIANTS = [
    check_no_overlap,
    check_unique_occurrence_ids,
    check_counter_bounds,
]


# =============================================================================
# ENFORCEMENT
# =============================================================================


def enforce_invariants(
    occurrences: Iterable[ScheduledOccurrence], entries: Iterable[DailyProgressEntry]
) -> list[str]:
    """
    Run all invariants. Returns list of violations.

    Returns:
        List of violation messages. Empty = pass.
    """
    occurrences = list(occurrences)
    entries = list(entries)
    violations = []

    for invariant in ALL_INVARIANTS:
        try:
            invariant(occurrences, entries)
        except InvariantViolation as e:
            violations.append(f"INVARIANT_VIOLATION: {str(e)}")

    return violations


def enforce_invariants_strict(
    occurrences: Iterable[ScheduledOccurrence], entries: Iterable[DailyProgressEntry]
) -> None:
    """
    Strict enforcement - raises on first violation.

    Raises:
        InvariantViolation: If any invariant fails
    """
    occurrences = list(occurrences)
    entries = list(entries)
    for invariant in ALL_INVARIANTS:
        invariant(occurrences, entries)
