"""
Contracts Module - runtime correctness checks for the day state.

- invariants.py: semantic checks over occurrences and progress entries

Enforced BOTH in tests AND at runtime (DaySession, when STRICT_INVARIANTS).
"""

from .invariants import (
    ALL_INVARIANTS,
    InvariantViolation,
    enforce_invariants,
    enforce_invariants_strict,
)

__all__ = [
    "ALL_INVARIANTS",
    "InvariantViolation",
    "enforce_invariants",
    "enforce_invariants_strict",
]
