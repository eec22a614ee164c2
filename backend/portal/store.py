"""
Record Store - the only code that talks to the database.

Wraps a SQLAlchemy session and exposes the small set of keyed operations
the services need for students, submissions and the settings singleton.
Every create/update is committed as its own single-record transaction.

Failures are translated into the portal's error taxonomy:
- unique email violation on insert  -> DuplicateKey
- score update for an unknown id    -> NotFound
- any other SQLAlchemy failure      -> StorageError
"""

from typing import Dict, List, Optional

from sqlalchemy import select, update, not_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.errors import DuplicateKey, NotFound, StorageError
from portal.logging_config import get_logger, log_with_context
from portal.models.setting import Setting, SETTING_KEY
from portal.models.student import Student
from portal.models.submission import Submission

logger = get_logger("db")


class RecordStore:
    """Keyed access to Student, Submission and Setting records."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: Exception):
        self.db.rollback()
        log_with_context(logger, "ERROR", "Storage failure while {}: {}".format(action, exc),
                         extra_data={"error_type": type(exc).__name__})
        raise StorageError("Storage failure while {}".format(action)) from exc

    # ── Students ──────────────────────────────────────────────

    def find_student_by_email(self, email: str) -> Optional[Student]:
        try:
            return self.db.execute(
                select(Student).where(Student.email == email)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail("looking up a student", e)

    def find_student_by_id(self, student_id: str) -> Optional[Student]:
        try:
            return self.db.get(Student, student_id)
        except SQLAlchemyError as e:
            self._fail("looking up a student", e)

    def insert_student(self, student: Student) -> str:
        """
        Persist a new student and return its id.

        No pre-check is made for the email; the unique index decides, so
        the later of two racing writers is the one that fails. Any other
        constraint failure (age check, missing column) is a StorageError.
        """
        email = student.email
        self.db.add(student)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if email is None or self.find_student_by_email(email) is None:
                self._fail("inserting a student", e)
            log_with_context(logger, "WARNING", "Rejected duplicate student email",
                             extra_data={"email": email})
            raise DuplicateKey("Email already registered") from e
        except SQLAlchemyError as e:
            self._fail("inserting a student", e)
        self.db.refresh(student)
        log_with_context(logger, "INFO", "Created student: {}".format(student.name),
                         context={"student_id": student.id})
        return student.id

    def list_all_students(self) -> List[Student]:
        try:
            return list(self.db.execute(
                select(Student).order_by(Student.created_at, Student.id)
            ).scalars())
        except SQLAlchemyError as e:
            self._fail("listing students", e)

    # ── Submissions ───────────────────────────────────────────

    def find_submissions_by_student(self, student_id: str) -> List[Submission]:
        """Submissions owned by one student, most recent first."""
        try:
            return list(self.db.execute(
                select(Submission)
                .where(Submission.student_id == student_id)
                .order_by(Submission.uploaded_at.desc(), Submission.id)
            ).scalars())
        except SQLAlchemyError as e:
            self._fail("listing submissions", e)

    def find_submissions_grouped(self) -> Dict[str, List[Submission]]:
        """
        Every submission in one query, grouped by owning student.

        Each group keeps the most-recent-first order. Students with no
        submissions are absent from the mapping.
        """
        try:
            submissions = self.db.execute(
                select(Submission).order_by(Submission.uploaded_at.desc(), Submission.id)
            ).scalars()
            grouped = {}
            for submission in submissions:
                grouped.setdefault(submission.student_id, []).append(submission)
            return grouped
        except SQLAlchemyError as e:
            self._fail("listing submissions", e)

    def insert_submission(self, submission: Submission) -> str:
        self.db.add(submission)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("inserting a submission", e)
        self.db.refresh(submission)
        log_with_context(logger, "INFO", "Created submission for {}".format(submission.original_name),
                         context={"student_id": submission.student_id, "submission_id": submission.id})
        return submission.id

    def find_submission_by_id(self, submission_id: str) -> Optional[Submission]:
        try:
            return self.db.get(Submission, submission_id)
        except SQLAlchemyError as e:
            self._fail("looking up a submission", e)

    def update_submission_score(self, submission_id: str, score: int) -> Submission:
        submission = self.find_submission_by_id(submission_id)
        if submission is None:
            raise NotFound("Submission not found")
        submission.score = score
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("updating a score", e)
        self.db.refresh(submission)
        return submission

    # ── Settings singleton ────────────────────────────────────

    def get_setting(self) -> Optional[Setting]:
        try:
            return self.db.get(Setting, SETTING_KEY)
        except SQLAlchemyError as e:
            self._fail("reading settings", e)

    def upsert_setting(self, leaderboard_visible: bool) -> Setting:
        """
        Set the leaderboard flag to an explicit value, creating the row if
        it is missing. Same update-then-insert shape as ``toggle_setting``.
        """
        visible = bool(leaderboard_visible)
        try:
            for _ in range(2):
                result = self.db.execute(
                    update(Setting)
                    .where(Setting.key == SETTING_KEY)
                    .values(leaderboard_visible=visible)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    break
                self.db.add(Setting(key=SETTING_KEY, leaderboard_visible=visible))
                try:
                    self.db.flush()
                    break
                except IntegrityError:
                    self.db.rollback()
            self.db.commit()
            setting = self.db.get(Setting, SETTING_KEY)
        except SQLAlchemyError as e:
            self._fail("writing settings", e)
        return setting

    def toggle_setting(self) -> bool:
        """
        Flip the leaderboard flag and return its new value.

        The flip is a single ``UPDATE ... SET visible = NOT visible`` so two
        concurrent toggles cannot read the same old value. When the row does
        not exist yet it is created as visible (the hidden default, flipped);
        if another writer creates it first, the update is retried.
        """
        try:
            for _ in range(2):
                result = self.db.execute(
                    update(Setting)
                    .where(Setting.key == SETTING_KEY)
                    .values(leaderboard_visible=not_(Setting.leaderboard_visible))
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    break
                self.db.add(Setting(key=SETTING_KEY, leaderboard_visible=True))
                try:
                    self.db.flush()
                    break
                except IntegrityError:
                    self.db.rollback()
            visible = self.db.execute(
                select(Setting.leaderboard_visible).where(Setting.key == SETTING_KEY)
            ).scalar_one()
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("toggling the leaderboard", e)
        return bool(visible)
