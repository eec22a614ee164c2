"""
Scoring Service - admin score assignment for a single submission.

Validation rules:
1. The score must be an integer (booleans and floats are refused)
2. The score must lie in [MIN_SCORE, MAX_SCORE], both ends inclusive
3. The submission must exist

A new score overwrites any earlier one. There is no way to return a
submission to "unscored". Totals are never stored, so nothing else needs
updating after a score changes.
"""

import time

from portal import config
from portal.errors import ValidationError
from portal.logging_config import get_logger, log_with_context
from portal.models.submission import Submission
from portal.store import RecordStore

logger = get_logger("scoring")


def validate_score(score) -> int:
    """Return ``score`` if it is an acceptable score, else raise ValidationError."""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("score must be an integer")
    if score < config.MIN_SCORE or score > config.MAX_SCORE:
        raise ValidationError("out of range")
    return score


def assign_score(store: RecordStore, submission_id: str, score) -> Submission:
    """
    Validate ``score`` and store it on the submission.

    Args:
        store: Record store for the current request
        submission_id: Submission to score
        score: Candidate score, as received from the caller

    Returns:
        The updated Submission

    Raises:
        ValidationError: score is not an integer in range
        NotFound: no submission has that id
    """
    start_time = time.time()

    try:
        score = validate_score(score)
    except ValidationError:
        log_with_context(logger, "WARNING", "Rejected score {!r}".format(score),
                         context={"submission_id": submission_id})
        raise

    submission = store.update_submission_score(submission_id, score)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Score assigned: {}".format(score),
        context={
            "submission_id": str(submission.id),
            "student_id": str(submission.student_id)
        },
        extra_data={"duration_ms": round(duration_ms, 2), "score": score})

    return submission
