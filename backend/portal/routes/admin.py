"""
Admin API routes - every endpoint except login requires the admin session.

Provides endpoints for:
- Admin login
- Listing all students with their submissions and totals
- Assigning a score to a submission
- Reading and toggling leaderboard visibility
- Downloading any submission's file
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field

from portal.dependencies import get_store, require_admin
from portal.routes.serializers import serialize_student, serialize_submission
from portal.services import auth
from portal.services.files import resolve_download
from portal.services.leaderboard import is_visible, student_overview, toggle
from portal.services.scoring import assign_score
from portal.store import RecordStore

router = APIRouter()


# ── Pydantic schemas ─────────────────────────────────────────

class AdminLoginRequest(BaseModel):
    """Schema for the admin login."""
    email: str
    password: str


class AssignScoreRequest(BaseModel):
    """
    Schema for scoring a submission. ``score`` is validated by the scoring service.

    Accepts ``submissionId`` as well as ``submission_id``.
    """
    model_config = ConfigDict(populate_by_name=True)

    submission_id: str = Field(..., alias="submissionId")
    score: Any = None


# ── Routes ───────────────────────────────────────────────────

@router.post("/admin/login")
def admin_login(request: Request, credentials: AdminLoginRequest):
    """Log in as the admin with the configured credentials."""
    auth.authenticate_admin(request.session, credentials.email, credentials.password)
    return {"success": True, "redirect": "/admin/dashboard"}


@router.get("/admin/students", dependencies=[Depends(require_admin)])
def list_students(store: RecordStore = Depends(get_store)):
    """Every student with submissions (newest first), total score and count."""
    students = []
    for overview in student_overview(store):
        students.append({
            **serialize_student(overview.student),
            "submissions": [serialize_submission(s) for s in overview.aggregate.submissions],
            "total_score": overview.aggregate.total_score,
            "submission_count": overview.aggregate.count
        })
    return students


@router.post("/admin/assign-score", dependencies=[Depends(require_admin)])
def assign_submission_score(request: AssignScoreRequest, store: RecordStore = Depends(get_store)):
    """Set the score of one submission (integer 0-100)."""
    submission = assign_score(store, request.submission_id, request.score)
    return {"success": True, "submission": serialize_submission(submission)}


@router.get("/admin/leaderboard-status", dependencies=[Depends(require_admin)])
def leaderboard_status(store: RecordStore = Depends(get_store)):
    return {"leaderboard_visible": is_visible(store)}


@router.post("/admin/toggle-leaderboard", dependencies=[Depends(require_admin)])
def toggle_leaderboard(store: RecordStore = Depends(get_store)):
    """Flip leaderboard visibility and return the new value."""
    return {"success": True, "leaderboard_visible": toggle(store)}


@router.get("/admin/download/{submission_id}", dependencies=[Depends(require_admin)])
def download_file(submission_id: str, store: RecordStore = Depends(get_store)):
    """Download any submission's file."""
    path, original_name = resolve_download(store, submission_id, auth.AdminPrincipal())
    return FileResponse(path, media_type="application/pdf", filename=original_name)
