"""
File Service - PDF upload acceptance and ownership-checked downloads.

Uploads must be ``application/pdf`` and at most MAX_UPLOAD_BYTES. They are
written to UPLOAD_DIR under a generated name; the original filename is kept
on the Submission for downloads.

Downloads: a student may only fetch their own submissions, the admin may
fetch any. Every refusal (unknown id, someone else's submission, file gone
from disk) is the same NotFound, so a student cannot discover other
students' submission ids.
"""

import os
import random
import time
from typing import BinaryIO, Optional, Tuple

from portal import config
from portal.errors import NotFound, StorageError, ValidationError
from portal.logging_config import get_logger, log_with_context
from portal.models.submission import Submission
from portal.services.auth import AdminPrincipal, Principal, StudentPrincipal
from portal.store import RecordStore

logger = get_logger("files")

PDF_CONTENT_TYPE = "application/pdf"


def generate_file_name() -> str:
    """Stored name: pdf-<epoch millis>-<random>.pdf"""
    return "pdf-{}-{}.pdf".format(int(time.time() * 1000), random.randint(0, 10**9))


def save_upload(store: RecordStore, student_id: str, stream: BinaryIO,
                original_name: Optional[str], content_type: Optional[str],
                upload_dir: str = None) -> Submission:
    """
    Validate and store one uploaded PDF, then record the Submission.

    Raises ValidationError for a missing file, a non-PDF content type, or a
    file over the size ceiling. If the Submission cannot be recorded the
    written file is removed again.
    """
    upload_dir = upload_dir or config.UPLOAD_DIR

    if stream is None or not original_name:
        raise ValidationError("No file uploaded")
    if content_type != PDF_CONTENT_TYPE:
        log_with_context(logger, "WARNING", "Rejected upload with content type {}".format(content_type),
                         context={"student_id": student_id})
        raise ValidationError("Only PDF files are allowed")

    data = stream.read(config.MAX_UPLOAD_BYTES + 1)
    if len(data) > config.MAX_UPLOAD_BYTES:
        log_with_context(logger, "WARNING", "Rejected oversized upload",
                         context={"student_id": student_id},
                         extra_data={"limit_bytes": config.MAX_UPLOAD_BYTES})
        raise ValidationError("File exceeds the {} MB limit".format(config.MAX_UPLOAD_BYTES // (1024 * 1024)))

    file_name = generate_file_name()
    path = os.path.join(upload_dir, file_name)
    try:
        os.makedirs(upload_dir, exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as e:
        log_with_context(logger, "ERROR", "Failed to write upload: {}".format(e),
                         context={"student_id": student_id})
        raise StorageError("Upload failed") from e

    submission = Submission(
        student_id=student_id,
        file_name=file_name,
        original_name=os.path.basename(original_name),
    )
    try:
        store.insert_submission(submission)
    except StorageError:
        os.remove(path)
        raise

    log_with_context(logger, "INFO", "Stored upload {}".format(submission.original_name),
                     context={"student_id": student_id, "submission_id": submission.id},
                     extra_data={"size_bytes": len(data), "file_name": file_name})
    return submission


def resolve_download(store: RecordStore, submission_id: str, principal: Principal,
                     upload_dir: str = None) -> Tuple[str, str]:
    """
    Check access to a submission's file and return ``(path, original_name)``.

    Raises NotFound when the id is unknown, when a student asks for a
    submission that is not theirs, or when the file is missing on disk.
    """
    upload_dir = upload_dir or config.UPLOAD_DIR

    submission = store.find_submission_by_id(submission_id)
    if submission is None:
        raise NotFound("File not found")

    if isinstance(principal, StudentPrincipal):
        if submission.student_id != principal.student_id:
            log_with_context(logger, "WARNING", "Student requested a foreign submission",
                             context={"student_id": principal.student_id, "submission_id": submission_id})
            raise NotFound("File not found")
    elif not isinstance(principal, AdminPrincipal):
        raise NotFound("File not found")

    path = os.path.join(upload_dir, os.path.basename(submission.file_name))
    if not os.path.isfile(path):
        log_with_context(logger, "ERROR", "Stored file missing on disk",
                         context={"submission_id": submission_id},
                         extra_data={"file_name": submission.file_name})
        raise NotFound("File not found on disk")

    return path, submission.original_name
