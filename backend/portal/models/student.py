"""
Student model - a registered participant.

Students are identified by UUID and uniquely by their normalized email.
The password is stored only as a bcrypt hash.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, Integer, DateTime, String, CheckConstraint
from sqlalchemy.orm import relationship
from portal.database import Base


class Student(Base):
    """
    SQLAlchemy model for the students table.

    The unique index on ``email`` is what resolves two concurrent
    registrations for the same address.
    """
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique student identifier")
    email = Column(String(320), nullable=False, unique=True,
                   doc="Lower-cased, trimmed email address")
    name = Column(Text, nullable=False,
                  doc="Display name")
    school = Column(Text, nullable=False,
                    doc="School the student attends")
    student_class = Column(Text, nullable=False,
                           doc="Class label, e.g. '9B'")
    age = Column(Integer, nullable=False,
                 doc="Age in years, 5-25 inclusive")
    password_hash = Column(Text, nullable=False,
                           doc="bcrypt hash of the password")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
                        doc="Timestamp when the student registered")

    # One student has many submissions
    submissions = relationship("Submission", back_populates="student")

    __table_args__ = (
        CheckConstraint("age >= 5 AND age <= 25", name="ck_students_age_range"),
    )

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', email='{self.email}')>"
