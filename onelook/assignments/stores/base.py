"""
Base type and interface for assignment stores.
A store owns one named slot of a key-value backend; the whole collection lives in it as a JSON array.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from pydantic import ValidationError

from onelook.assignments.models import Assignment, assignment_from_dict, assignment_to_dict

DEFAULT_KEY = "assignments_v1"


class AssignmentStore(ABC):
    """Abstract store: load/save the full collection from one slot."""

    backend_type = "abstract"

    def __init__(self, key: str = DEFAULT_KEY, logger: Optional[logging.Logger] = None):
        self.key = key or DEFAULT_KEY
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def read_raw(self) -> Optional[str]:
        """Return the raw slot value, or None when nothing is stored."""

    @abstractmethod
    def write_raw(self, value: str) -> None:
        """Overwrite the slot with value."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the slot entirely."""

    def load(self) -> List[Assignment]:
        """Return the stored collection. Missing or corrupt state both come back as []."""
        raw = self.read_raw()
        if not raw:
            self.logger.debug(f"No stored assignments under {self.key!r}")
            return []
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError) as e:
            self.logger.warning(f"Stored assignments under {self.key!r} are not valid JSON, ignoring: {e}")
            return []
        if not isinstance(parsed, list):
            self.logger.warning(
                f"Stored assignments under {self.key!r} must be a list, got {type(parsed).__name__}; ignoring"
            )
            return []
        try:
            items = [assignment_from_dict(row) for row in parsed]
        except ValidationError as e:
            self.logger.warning(f"Stored assignments under {self.key!r} are malformed, ignoring: {e}")
            return []
        if len({item.id for item in items}) != len(items):
            self.logger.warning(f"Stored assignments under {self.key!r} repeat an id, ignoring")
            return []
        self.logger.debug(f"Loaded {len(items)} assignment(s) from {self.key!r}")
        return items

    def save(self, items: Iterable[Assignment]) -> None:
        """Serialize the whole collection and overwrite the slot."""
        rows = [assignment_to_dict(item) for item in items]
        self.write_raw(json.dumps(rows))
        self.logger.debug(f"Saved {len(rows)} assignment(s) to {self.key!r}")
