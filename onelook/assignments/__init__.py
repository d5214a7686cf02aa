from .models import Assignment, Source
from .service import AssignmentBoard

__all__ = ["Assignment", "AssignmentBoard", "Source"]
