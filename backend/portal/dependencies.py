"""
FastAPI dependencies shared by the routers: the per-request record store
and the session guards.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portal.database import get_db
from portal.errors import Unauthenticated
from portal.logging_config import get_logger, log_with_context
from portal.services import auth
from portal.store import RecordStore

logger = get_logger("auth")


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_principal(request: Request) -> auth.Principal:
    return auth.current_principal(request.session)


def require_student(request: Request, store: RecordStore = Depends(get_store)) -> str:
    """
    Id of the logged-in student; raises Unauthenticated otherwise.

    A session whose student no longer exists (e.g. after a database reset)
    is cleared and treated as logged out.
    """
    student_id = auth.require_student(request.session)
    if store.find_student_by_id(student_id) is None:
        auth.logout(request.session)
        log_with_context(logger, "WARNING", "Cleared session for unknown student",
                         context={"student_id": student_id})
        raise Unauthenticated("Student login required", login_path=auth.STUDENT_LOGIN_PATH)
    return student_id


def require_admin(request: Request):
    auth.require_admin(request.session)
