"""
habitline - habit timeline scheduling and daily progress tracking.

Usage:
    from habitline.timeline import DaySession, NewPlacement

    session = DaySession()
    reading = session.create_habit("Reading", "Mind", "Timed", duration_minutes=30)
    session.handle(NewPlacement(template_id=reading.id, offset=83))
"""

__version__ = "1.0.0"
