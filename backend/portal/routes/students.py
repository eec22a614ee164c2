"""
Student API routes - registration, login/logout, uploads and own files.

Provides endpoints for:
- Registering a new student account
- Student login and logout (session cookie)
- Listing the logged-in student's submissions with their total score
- Uploading a PDF submission
- Downloading one of the student's own files
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from portal import config
from portal.dependencies import get_store, require_student
from portal.logging_config import get_logger, log_with_context
from portal.routes.serializers import serialize_student, serialize_submission
from portal.services import auth
from portal.services.aggregation import aggregate
from portal.services.files import resolve_download, save_upload
from portal.services.students import register_student
from portal.store import RecordStore

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class RegistrationRequest(BaseModel):
    """Schema for a student registration. ``studentClass`` is accepted for ``student_class``."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=2, description="Display name")
    school: str = Field(..., min_length=2, description="School name")
    email: EmailStr = Field(..., description="Login email, stored lower-cased")
    password: str = Field(..., min_length=6, description="Plain password, hashed before storage")
    student_class: str = Field(..., min_length=1, alias="studentClass", description="Class label")
    age: int = Field(..., ge=config.MIN_AGE, le=config.MAX_AGE, description="Age in years")

    @field_validator("name", "school", "student_class", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class LoginRequest(BaseModel):
    """Schema for a student login."""
    email: str
    password: str


# ── Routes ───────────────────────────────────────────────────

@router.post("/register", status_code=201)
def register(request: RegistrationRequest, store: RecordStore = Depends(get_store)):
    """Register a student. A taken email answers 409."""
    student = register_student(
        store,
        name=request.name,
        school=request.school,
        email=str(request.email),
        password=request.password,
        student_class=request.student_class,
        age=request.age,
    )
    return {
        "success": True,
        "message": "Registration successful",
        "student": serialize_student(student),
        "redirect": "/login"
    }


@router.post("/login")
def login(request: Request, credentials: LoginRequest, store: RecordStore = Depends(get_store)):
    """Log a student in and bind them to the session."""
    student = auth.authenticate_student(store, request.session, credentials.email, credentials.password)
    return {
        "success": True,
        "student": serialize_student(student),
        "redirect": "/dashboard"
    }


@router.post("/logout")
def logout(request: Request):
    """Clear the session, whoever is logged in."""
    auth.logout(request.session)
    return {"success": True, "redirect": "/"}


@router.get("/api/student/submissions")
def list_own_submissions(
    student_id: str = Depends(require_student),
    store: RecordStore = Depends(get_store)
):
    """The logged-in student's submissions (newest first) with count and total."""
    summary = aggregate(store, student_id)
    return {
        "submissions": [serialize_submission(s) for s in summary.submissions],
        "total_files": summary.count,
        "total_score": summary.total_score
    }


@router.post("/upload")
def upload(
    pdf: Optional[UploadFile] = File(None),
    student_id: str = Depends(require_student),
    store: RecordStore = Depends(get_store)
):
    """Upload one PDF (multipart field ``pdf``) as a new submission."""
    submission = save_upload(
        store,
        student_id,
        pdf.file if pdf is not None else None,
        pdf.filename if pdf is not None else None,
        pdf.content_type if pdf is not None else None,
    )
    log_with_context(logger, "INFO", "Upload accepted",
                     context={"student_id": student_id, "submission_id": submission.id})
    return {
        "success": True,
        "message": "File uploaded successfully!",
        "submission": serialize_submission(submission)
    }


@router.get("/view-file/{submission_id}")
def view_file(
    submission_id: str,
    student_id: str = Depends(require_student),
    store: RecordStore = Depends(get_store)
):
    """Download one of the logged-in student's own files."""
    path, original_name = resolve_download(store, submission_id, auth.StudentPrincipal(student_id))
    return FileResponse(path, media_type="application/pdf", filename=original_name)
