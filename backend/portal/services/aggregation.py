"""
Submission Aggregator - per-student submission count and total score.

Totals are always derived from the submission rows on read; nothing is
cached or persisted. An unscored submission contributes 0 to the total
but still counts as a submission.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from portal.models.submission import Submission
from portal.store import RecordStore


@dataclass
class StudentAggregate:
    """Submissions (most recent first) with their count and summed score."""
    submissions: List[Submission] = field(default_factory=list)
    count: int = 0
    total_score: int = 0


def total_score(submissions: Iterable[Submission]) -> int:
    return sum(s.score if s.score is not None else 0 for s in submissions)


def summarize(submissions: Iterable[Submission]) -> StudentAggregate:
    """Aggregate an already-fetched, already-ordered list of submissions."""
    submissions = list(submissions)
    return StudentAggregate(
        submissions=submissions,
        count=len(submissions),
        total_score=total_score(submissions),
    )


def aggregate(store: RecordStore, student_id: str) -> StudentAggregate:
    """Fetch one student's submissions and aggregate them. Read-only."""
    return summarize(store.find_submissions_by_student(student_id))
