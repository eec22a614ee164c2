"""
Authorization Gate - principals, login, logout and route guards.

The session holds at most one principal under a single key, as a tagged
value: anonymous, a student (with their id) or the admin. Binding a new
principal replaces whatever was there, so a session is never both a
student and an admin at the same time.

Known weakness: the admin login is a plaintext equality check against the
configured ADMIN_EMAIL / ADMIN_PASSWORD pair. Students are verified against
a bcrypt hash.
"""

from dataclasses import dataclass
from typing import MutableMapping, Union

from portal import config
from portal.errors import Unauthenticated
from portal.logging_config import get_logger, log_with_context
from portal.models.student import Student
from portal.services.students import normalize_email, verify_password
from portal.store import RecordStore

logger = get_logger("auth")

SESSION_KEY = "principal"
STUDENT_LOGIN_PATH = "/login"
ADMIN_LOGIN_PATH = "/admin/login"


@dataclass(frozen=True)
class Anonymous:
    kind = "anonymous"


@dataclass(frozen=True)
class StudentPrincipal:
    student_id: str
    kind = "student"


@dataclass(frozen=True)
class AdminPrincipal:
    kind = "admin"


Principal = Union[Anonymous, StudentPrincipal, AdminPrincipal]


# ── Session state ────────────────────────────────────────────

def current_principal(session: MutableMapping) -> Principal:
    """Read the principal bound to ``session``; anything unrecognised is anonymous."""
    data = session.get(SESSION_KEY)
    if not isinstance(data, dict):
        return Anonymous()
    kind = data.get("kind")
    if kind == StudentPrincipal.kind and data.get("student_id"):
        return StudentPrincipal(student_id=str(data["student_id"]))
    if kind == AdminPrincipal.kind:
        return AdminPrincipal()
    return Anonymous()


def bind_student(session: MutableMapping, student_id: str):
    session[SESSION_KEY] = {"kind": StudentPrincipal.kind, "student_id": student_id}


def bind_admin(session: MutableMapping):
    session[SESSION_KEY] = {"kind": AdminPrincipal.kind}


def logout(session: MutableMapping):
    """Clear every binding, whatever was there."""
    session.clear()


# ── Guards ───────────────────────────────────────────────────

def require_student(session: MutableMapping) -> str:
    principal = current_principal(session)
    if not isinstance(principal, StudentPrincipal):
        raise Unauthenticated("Student login required", login_path=STUDENT_LOGIN_PATH)
    return principal.student_id


def require_admin(session: MutableMapping):
    if not isinstance(current_principal(session), AdminPrincipal):
        raise Unauthenticated("Admin login required", login_path=ADMIN_LOGIN_PATH)


# ── Login ────────────────────────────────────────────────────

def authenticate_student(store: RecordStore, session: MutableMapping,
                         email: str, password: str) -> Student:
    """
    Check a student's credentials and bind them to the session.

    Raises Unauthenticated with the same message whether the email is
    unknown or the password is wrong.
    """
    normalized = normalize_email(email)
    student = store.find_student_by_email(normalized) if normalized else None

    if student is None or not verify_password(password or "", student.password_hash):
        log_with_context(logger, "WARNING", "Student login failed",
                         extra_data={"email": normalized})
        raise Unauthenticated("Invalid credentials", login_path=STUDENT_LOGIN_PATH)

    bind_student(session, student.id)
    log_with_context(logger, "INFO", "Student logged in: {}".format(student.name),
                     context={"student_id": student.id})
    return student


def authenticate_admin(session: MutableMapping, email: str, password: str):
    """Compare against the configured admin pair (plaintext) and bind the admin."""
    if email != config.ADMIN_EMAIL or password != config.ADMIN_PASSWORD:
        log_with_context(logger, "WARNING", "Admin login failed")
        raise Unauthenticated("Invalid admin credentials", login_path=ADMIN_LOGIN_PATH)

    bind_admin(session)
    log_with_context(logger, "INFO", "Admin logged in")


def using_default_admin_credentials() -> bool:
    return config.ADMIN_EMAIL == "admin@climate" and config.ADMIN_PASSWORD == "admin123"
