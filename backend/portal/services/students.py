"""
Registration Service - creates student records.

Lengths and email syntax are enforced by the request schema in
routes/students.py. This module checks the email and age again for callers
outside the HTTP layer, hashes the password with bcrypt, and lets the
store's unique index settle duplicate emails.
"""

from typing import Optional

import bcrypt

from portal import config
from portal.errors import ValidationError
from portal.logging_config import get_logger, log_with_context
from portal.models.student import Student
from portal.store import RecordStore

logger = get_logger("auth")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Trim and lower-case an email address; empty input gives None."""
    if not email:
        return None
    email = email.strip().lower()
    return email or None


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or a password bcrypt refuses (> 72 bytes)
        return False


def register_student(store: RecordStore, name: str, school: str, email: str,
                     password: str, student_class: str, age: int) -> Student:
    """
    Create a student and return it.

    Raises ValidationError for a blank email or an age outside
    MIN_AGE..MAX_AGE, and DuplicateKey (from the store) when the normalized
    email is already registered.
    """
    normalized = normalize_email(email)
    if normalized is None:
        raise ValidationError("email is required")
    if isinstance(age, bool) or not isinstance(age, int):
        raise ValidationError("age must be an integer")
    if not config.MIN_AGE <= age <= config.MAX_AGE:
        raise ValidationError("age must be between {} and {}".format(config.MIN_AGE, config.MAX_AGE))

    student = Student(
        name=name.strip(),
        school=school.strip(),
        email=normalized,
        student_class=student_class.strip(),
        age=age,
        password_hash=hash_password(password),
    )
    store.insert_student(student)

    log_with_context(logger, "INFO", "Registered student: {}".format(student.name),
                     context={"student_id": student.id},
                     extra_data={"school": student.school, "student_class": student.student_class})
    return student
