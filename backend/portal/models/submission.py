"""
Submission model - one uploaded PDF.

A submission references its owner, the stored file, and the original
filename. ``score`` is NULL until an admin assigns one; NULL means
"unscored", which is not the same as a score of 0.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, Integer, DateTime, ForeignKey, Index, String, CheckConstraint
from sqlalchemy.orm import relationship
from portal.database import Base


class Submission(Base):
    """SQLAlchemy model for the submissions table."""
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique submission identifier")
    student_id = Column(String(36), ForeignKey("students.id"), nullable=False,
                        doc="Owning student")
    file_name = Column(Text, nullable=False,
                       doc="Name of the stored file inside the upload directory")
    original_name = Column(Text, nullable=False,
                           doc="Filename as uploaded by the student")
    uploaded_at = Column(DateTime, nullable=False,
                         default=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
                         doc="When the file was uploaded")
    score = Column(Integer, nullable=True,
                   doc="Assigned score 0-100, NULL while unscored")

    student = relationship("Student", back_populates="submissions")

    __table_args__ = (
        Index("ix_submissions_student_id", "student_id"),
        Index("ix_submissions_uploaded_at", "uploaded_at"),
        CheckConstraint("score IS NULL OR (score >= 0 AND score <= 100)",
                        name="ck_submissions_score_range"),
    )

    @property
    def is_scored(self) -> bool:
        return self.score is not None

    def __repr__(self):
        return f"<Submission(id={self.id}, student={self.student_id}, score={self.score})>"
