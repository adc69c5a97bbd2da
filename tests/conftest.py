"""
Test configuration - ensures repo root is in sys.path + isolation guards.

This allows tests to import from top-level packages (habitline, api).
Every test runs with HABITLINE_HOME pointed at a temp dir so a developer's own
~/.habitline config can never leak into results.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import habitline.*, api.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from habitline.templates import HabitCategory, HabitKind, HabitTemplate  # noqa: E402
from habitline.timeline import DaySession, TimelineGrid, TimelineGridConfig  # noqa: E402

# =============================================================================
# ISOLATION GUARD: never read the developer's real app home
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_app_home(tmp_path, monkeypatch):
    """Point HABITLINE_HOME at a temp dir and drop any explicit config override."""
    home = tmp_path / "habitline_home"
    monkeypatch.setenv("HABITLINE_HOME", str(home))
    monkeypatch.delenv("HABITLINE_TIMELINE_CONFIG", raising=False)
    return home


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def id_factory():
    """Deterministic occurrence ids: occ_1, occ_2, ..."""
    counter = itertools.count(1)
    return lambda: f"occ_{next(counter)}"


@pytest.fixture
def grid():
    return TimelineGrid(TimelineGridConfig(start_hour=6, end_hour=24, pixels_per_hour=80, snap_interval_minutes=15))


@pytest.fixture
def reading():
    return HabitTemplate(id="h_read", name="Reading", category=HabitCategory.MIND, kind=HabitKind.TIMED, duration_minutes=30)


@pytest.fixture
def workout():
    return HabitTemplate(id="h_gym", name="Workout", category=HabitCategory.BODY, kind=HabitKind.TIMED, duration_minutes=45)


@pytest.fixture
def budgeting():
    return HabitTemplate(
        id="h_budget", name="Budget review", category=HabitCategory.FINANCES, kind=HabitKind.TIMED, duration_minutes=60
    )


@pytest.fixture
def meditate():
    return HabitTemplate(id="h_med", name="Meditate", category=HabitCategory.SPIRITUALITY, kind=HabitKind.CHECK_IN)


@pytest.fixture
def water():
    return HabitTemplate(
        id="h_water", name="Glasses of water", category=HabitCategory.HEALTH, kind=HabitKind.COUNTER, goal_count=5
    )


@pytest.fixture
def session(grid, id_factory, reading, workout, budgeting, meditate, water):
    return DaySession(
        grid=grid,
        templates=[reading, workout, budgeting, meditate, water],
        id_factory=id_factory,
        strict=True,
    )
