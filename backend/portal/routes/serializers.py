"""
Response serializers shared by the routers.

Fields are listed explicitly so that ``password_hash`` can never end up in
a response.
"""

from portal.models.student import Student
from portal.models.submission import Submission


def serialize_student(student: Student) -> dict:
    return {
        "id": str(student.id),
        "name": student.name,
        "email": student.email,
        "school": student.school,
        "student_class": student.student_class,
        "age": student.age,
    }


def serialize_submission(submission: Submission) -> dict:
    return {
        "id": str(submission.id),
        "student_id": str(submission.student_id),
        "file_name": submission.file_name,
        "original_name": submission.original_name,
        "uploaded_at": submission.uploaded_at.isoformat() if submission.uploaded_at else None,
        "score": submission.score,
    }
