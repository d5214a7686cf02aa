"""
HTTP API for assignments. Mounted at /api/.
Request/response shapes are Pydantic models; all logic lives in AssignmentBoard and query.
"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from . import query
from .models import ALL_SOURCES, Assignment, Source


class AssignmentCreateRequest(BaseModel):
    """Raw form input; trimming and validation happen in AssignmentBoard.create."""

    title: str = ""
    course: str = ""
    source: str = Source.CANVAS.value
    due: str = Field(..., description="Local due time, e.g. 2025-01-03T10:00")
    link: Optional[str] = None


class AssignmentResponse(BaseModel):
    id: str
    title: str
    course: str
    source: str
    dueISO: str
    link: Optional[str] = None
    days_left: int
    urgency: str


class AssignmentsResponse(BaseModel):
    assignments: List[AssignmentResponse]


class StatusResponse(BaseModel):
    backend: str
    key: str
    count: int
    seeded: bool


def _to_response(app, item: Assignment) -> AssignmentResponse:
    days = app.board.days_left(item)
    return AssignmentResponse(
        id=item.id,
        title=item.title,
        course=item.course,
        source=Source.parse(item.source).value,
        dueISO=item.due_iso,
        link=item.link,
        days_left=days,
        urgency=query.urgency(days, **app.urgency_thresholds),
    )


def get_router(onelook_app) -> APIRouter:
    """Return router for assignments; mounted with prefix /api."""
    router = APIRouter(tags=["Assignments"])

    @router.get("/sources", response_model=List[str])
    def list_sources() -> List[str]:
        return Source.labels()

    @router.get("/status", response_model=StatusResponse)
    def get_status() -> StatusResponse:
        board = onelook_app.board
        return StatusResponse(
            backend=board.store.backend_type,
            key=board.store.key,
            count=len(board.items),
            seeded=board.seeded,
        )

    @router.get("/assignments", response_model=AssignmentsResponse)
    def list_assignments(
        q: str = "",
        source: str = "All",
        next7: bool = Query(False, description="Only items due within the next 7 days"),
    ) -> AssignmentsResponse:
        """Return the filtered view, sorted by due time."""
        if source.strip().lower() not in ("", ALL_SOURCES.lower()):
            try:
                source = Source.parse(source).value
            except ValueError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        rows = onelook_app.board.view(q, source, next7)
        return AssignmentsResponse(assignments=[_to_response(onelook_app, r) for r in rows])

    @router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
    def get_assignment(assignment_id: str) -> AssignmentResponse:
        item = onelook_app.board.get(assignment_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
        return _to_response(onelook_app, item)

    @router.post("/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
    def create_assignment(body: AssignmentCreateRequest) -> AssignmentResponse:
        item = onelook_app.board.create(body.title, body.course, body.source, body.due, body.link)
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Title and course are required; source and due time must be valid",
            )
        return _to_response(onelook_app, item)

    @router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_assignment(assignment_id: str) -> Response:
        onelook_app.board.remove(assignment_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
