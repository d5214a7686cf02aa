"""
First-run example assignments. Due times are relative to now so they always look upcoming.
"""
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from onelook.assignments.models import Assignment, Source, to_minute_iso

# (title, course, source, due offset from now, link)
SEED_ENTRIES = [
    ("HW1: Probability Review", "CIS 519", Source.CANVAS, timedelta(hours=48), "https://canvas.example/hw1"),
    ("PA0: Setup + Git", "CIS 121", Source.GRADESCOPE, timedelta(days=4), "https://gradescope.example/pa0"),
    ("Reading Quiz 1", "ESE 5420", Source.CANVAS, timedelta(hours=36), None),
]


def new_assignment_id() -> str:
    return uuid.uuid4().hex


def seed_assignments(now: Optional[datetime] = None) -> List[Assignment]:
    """Return the example collection with due times computed from now."""
    now = now or datetime.now()
    return [
        Assignment(
            id=new_assignment_id(),
            title=title,
            course=course,
            source=source,
            due_iso=to_minute_iso(now + offset),
            link=link,
        )
        for title, course, source, offset, link in SEED_ENTRIES
    ]
