"""
Service layer: the in-memory assignment collection and its mutations.
Every mutation writes the full collection back through the store.
"""
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Union

from onelook.assignments import query
from onelook.assignments.models import Assignment, Source, to_minute_iso
from onelook.assignments.seed import new_assignment_id, seed_assignments
from onelook.assignments.stores import AssignmentStore


class AssignmentBoard:
    """Owns the collection for one store. Call load() before anything else."""

    def __init__(
        self,
        store: AssignmentStore,
        now_fn: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.now_fn = now_fn or datetime.now
        self.logger = logger or logging.getLogger(__name__)
        self._items: List[Assignment] = []
        self._lock = threading.RLock()
        self.seeded = False

    @property
    def items(self) -> List[Assignment]:
        """Snapshot of the collection in storage order."""
        with self._lock:
            return list(self._items)

    def load(self) -> List[Assignment]:
        """Load from the store; on first run (nothing stored) seed examples and persist them."""
        with self._lock:
            items = self.store.load()
            self.seeded = not items
            if self.seeded:
                items = seed_assignments(self.now_fn())
                self.store.save(items)
                self.logger.info(f"No stored assignments; seeded {len(items)} example(s)")
            else:
                self.logger.info(f"Loaded {len(items)} assignment(s) from {self.store.backend_type} store")
            self._items = items
            return list(items)

    def get(self, assignment_id: str) -> Optional[Assignment]:
        with self._lock:
            return next((a for a in self._items if a.id == assignment_id), None)

    def _fresh_id(self) -> str:
        taken = {a.id for a in self._items}
        new_id = new_assignment_id()
        while new_id in taken:
            new_id = new_assignment_id()
        return new_id

    def create(
        self,
        title: str,
        course: str,
        source: Union[Source, str],
        due: Union[datetime, str],
        link: Optional[str] = None,
    ) -> Optional[Assignment]:
        """
        Add an assignment and persist. Returns the new record, or None when the input
        is rejected (blank title/course, unknown source, unparseable due); a rejected
        call changes nothing.
        """
        title = (title or "").strip()
        course = (course or "").strip()
        if not title or not course:
            self.logger.info("Rejected assignment: title and course are required")
            return None
        try:
            source = Source.parse(source)
            due_iso = to_minute_iso(due)
        except ValueError as e:
            self.logger.info(f"Rejected assignment {title!r}: {e}")
            return None

        with self._lock:
            item = Assignment(
                id=self._fresh_id(),
                title=title,
                course=course,
                source=source,
                due_iso=due_iso,
                link=(link or "").strip() or None,
            )
            items = self._items + [item]
            self.store.save(items)
            self._items = items
        self.logger.info(f"Created assignment {item.id}: {item.title} ({item.course}) due {item.due_iso}")
        return item

    def remove(self, assignment_id: str) -> bool:
        """Remove by id (no-op if absent) and persist. Returns True if something was removed."""
        with self._lock:
            remaining = [a for a in self._items if a.id != assignment_id]
            removed = len(remaining) != len(self._items)
            self.store.save(remaining)
            self._items = remaining
        if removed:
            self.logger.info(f"Removed assignment {assignment_id}")
        else:
            self.logger.debug(f"Remove: no assignment with id {assignment_id}")
        return removed

    def reset(self) -> List[Assignment]:
        """Drop stored state and load again, which re-seeds the examples."""
        with self._lock:
            self.store.clear()
            self.logger.info(f"Cleared stored assignments under {self.store.key!r}")
            return self.load()

    def view(
        self,
        search_text: str = "",
        source_filter: Union[Source, str, None] = None,
        next7_only: bool = False,
    ) -> List[Assignment]:
        return query.view(self.items, search_text, source_filter, next7_only, now=self.now_fn())

    def days_left(self, item: Assignment) -> int:
        return query.days_left(item.due_iso, now=self.now_fn())
