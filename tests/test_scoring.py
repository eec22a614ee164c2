# tests/test_scoring.py

import uuid

import pytest

from portal.errors import NotFound, ValidationError
from portal.services.aggregation import aggregate
from portal.services.scoring import assign_score, validate_score


@pytest.mark.parametrize("score", [-1, 101])
def test_out_of_range_rejected(store, make_student, add_submission, score):
    submission = add_submission(make_student())

    with pytest.raises(ValidationError, match="out of range"):
        assign_score(store, submission.id, score)

    assert store.find_submission_by_id(submission.id).score is None


@pytest.mark.parametrize("score", [0, 100])
def test_boundaries_accepted(store, make_student, add_submission, score):
    submission = add_submission(make_student())

    updated = assign_score(store, submission.id, score)

    assert updated.score == score
    assert store.find_submission_by_id(submission.id).score == score


@pytest.mark.parametrize("score", [50.5, "50", None, True])
def test_non_integer_rejected(score):
    with pytest.raises(ValidationError):
        validate_score(score)


def test_unknown_submission(store):
    with pytest.raises(NotFound):
        assign_score(store, str(uuid.uuid4()), 50)


def test_rescoring_overwrites(store, make_student, add_submission):
    student = make_student()
    submission = add_submission(student)

    assign_score(store, submission.id, 30)
    assign_score(store, submission.id, 80)

    assert store.find_submission_by_id(submission.id).score == 80
    assert aggregate(store, student.id).total_score == 80


def test_zero_is_a_score_not_unscored(store, make_student, add_submission):
    submission = add_submission(make_student())

    updated = assign_score(store, submission.id, 0)

    assert updated.score == 0
    assert updated.is_scored
