"""
Leaderboard Service - ranked totals, visibility flag and admin overview.

Ranking rules:
1. Students without any submission are left out
2. Total score, highest first
3. Ties: earliest first submission first, then student id

Non-admin callers only get a ranking while the leaderboard is visible.
Admin callers always bypass the flag, and so does the admin student
overview.

All submissions are loaded in a single query and grouped per student,
rather than one query per student.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import List

from portal.errors import VisibilityError
from portal.logging_config import get_logger, log_with_context
from portal.models.student import Student
from portal.services.aggregation import StudentAggregate, summarize
from portal.store import RecordStore

logger = get_logger("leaderboard")


@dataclass
class LeaderboardEntry:
    student: Student
    total_score: int
    submission_count: int
    first_submitted_at: datetime


@dataclass
class StudentOverview:
    student: Student
    aggregate: StudentAggregate


def is_visible(store: RecordStore) -> bool:
    """Current visibility; a missing setting row means hidden."""
    setting = store.get_setting()
    return bool(setting.leaderboard_visible) if setting is not None else False


def rank_entries(entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
    return sorted(
        entries,
        key=lambda e: (-e.total_score, e.first_submitted_at, e.student.id)
    )


def build(store: RecordStore, caller_is_admin: bool) -> List[LeaderboardEntry]:
    """
    Build the ranked leaderboard.

    Raises VisibilityError when the leaderboard is hidden and the caller
    is not the admin.
    """
    start_time = time.time()

    if not caller_is_admin and not is_visible(store):
        log_with_context(logger, "INFO", "Leaderboard requested while hidden")
        raise VisibilityError()

    grouped = store.find_submissions_grouped()
    entries = []
    for student in store.list_all_students():
        submissions = grouped.get(student.id)
        if not submissions:
            continue
        summary = summarize(submissions)
        entries.append(LeaderboardEntry(
            student=student,
            total_score=summary.total_score,
            submission_count=summary.count,
            # Groups are newest first
            first_submitted_at=submissions[-1].uploaded_at,
        ))

    ranked = rank_entries(entries)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Leaderboard generated: {} students".format(len(ranked)),
        extra_data={"entries": len(ranked), "admin": caller_is_admin,
                    "duration_ms": round(duration_ms, 2)})
    return ranked


def toggle(store: RecordStore) -> bool:
    """Flip leaderboard visibility and return the new value."""
    visible = store.toggle_setting()
    log_with_context(logger, "INFO",
        "Leaderboard visibility set to {}".format(visible),
        extra_data={"leaderboard_visible": visible})
    return visible


def student_overview(store: RecordStore) -> List[StudentOverview]:
    """
    Every student with their submissions and totals, for the admin view.

    Includes students who never uploaded anything and ignores the
    visibility flag.
    """
    grouped = store.find_submissions_grouped()
    return [
        StudentOverview(student=student, aggregate=summarize(grouped.get(student.id, [])))
        for student in store.list_all_students()
    ]
