"""
Assignment record and its helpers.

Due times are local wall-clock values kept as 'YYYY-MM-DDTHH:MM' strings (minute
precision, no timezone) so they round-trip through datetime-local style inputs.
"""
from collections import namedtuple
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from dateutil import parser as dateutil_parser
from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL_SOURCES = "All"


class Source(str, Enum):
    """Portal an assignment was copied from. A label only; nothing is fetched."""

    CANVAS = "Canvas"
    GRADESCOPE = "Gradescope"
    PIAZZA = "Piazza"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Union["Source", str]) -> "Source":
        """Accept a Source or a case-insensitive label."""
        if isinstance(value, cls):
            return value
        label = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == label:
                return member
        raise ValueError(f"Unknown source: {value!r}")

    @classmethod
    def labels(cls):
        return [member.value for member in cls]


def _format_minute(dt: datetime) -> str:
    # Always a four-digit year, also below 1000
    return dt.replace(tzinfo=None).isoformat(timespec="minutes")


def to_minute_iso(value: Union[datetime, str]) -> str:
    """Normalize a due time to 'YYYY-MM-DDTHH:MM'. Zone designators are dropped, not converted."""
    if isinstance(value, datetime):
        return _format_minute(value)
    text = str(value or "").strip()
    if not text:
        raise ValueError("Empty due time")
    try:
        dt = dateutil_parser.isoparse(text)
    except (ValueError, OverflowError):
        try:
            dt = dateutil_parser.parse(text)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Unparseable due time: {value!r}") from e
    return _format_minute(dt)


def parse_due(due_iso: str) -> datetime:
    """Naive datetime for a stored due string."""
    return datetime.fromisoformat(due_iso[:16])


# One assignment. Immutable; created via AssignmentBoard.create or the seed.
Assignment = namedtuple(
    "Assignment",
    [
        "id",       # opaque unique string
        "title",    # non-empty, trimmed
        "course",   # non-empty, trimmed
        "source",   # Source
        "due_iso",  # 'YYYY-MM-DDTHH:MM', local
        "link",     # str or None
    ],
    defaults=(None,),
)


def assignment_to_dict(item: Assignment) -> Dict[str, Any]:
    """Persisted/wire form. link is omitted when absent."""
    row: Dict[str, Any] = {
        "id": item.id,
        "title": item.title,
        "course": item.course,
        "source": Source.parse(item.source).value,
        "dueISO": item.due_iso,
    }
    if item.link:
        row["link"] = item.link
    return row


class StoredAssignment(BaseModel):
    """Validation schema for one persisted record. Anything that fails here counts as corrupt state."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    title: str
    course: str
    source: Source
    due_iso: str = Field(alias="dueISO")
    link: Optional[str] = None

    @field_validator("title", "course")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, value: Any) -> Source:
        return Source.parse(value)

    @field_validator("due_iso")
    @classmethod
    def _minute_precision(cls, value: str) -> str:
        return to_minute_iso(value)

    def to_assignment(self) -> Assignment:
        return Assignment(
            id=self.id,
            title=self.title,
            course=self.course,
            source=self.source,
            due_iso=self.due_iso,
            link=self.link or None,
        )


def assignment_from_dict(row: Dict[str, Any]) -> Assignment:
    """Build an Assignment from its persisted form. Raises pydantic.ValidationError on bad input."""
    return StoredAssignment.model_validate(row).to_assignment()
