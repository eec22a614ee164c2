# tests/test_aggregation.py

import random

from portal.services.aggregation import aggregate, summarize, total_score


def test_student_without_submissions(store, make_student):
    student = make_student()

    summary = aggregate(store, student.id)

    assert summary.count == 0
    assert summary.total_score == 0
    assert summary.submissions == []


def test_two_scored_submissions(store, make_student, add_submission):
    student = make_student()
    add_submission(student, score=40)
    add_submission(student, score=60, minutes=5)

    summary = aggregate(store, student.id)

    assert summary.count == 2
    assert summary.total_score == 100


def test_unscored_counts_but_adds_nothing(store, make_student, add_submission):
    student = make_student()
    add_submission(student, score=None)
    add_submission(student, score=0, minutes=1)
    add_submission(student, score=35, minutes=2)

    summary = aggregate(store, student.id)

    assert summary.count == 3
    assert summary.total_score == 35


def test_submissions_most_recent_first(store, make_student, add_submission):
    student = make_student()
    oldest = add_submission(student, minutes=0)
    newest = add_submission(student, minutes=30)
    middle = add_submission(student, minutes=10)

    summary = aggregate(store, student.id)

    assert [s.id for s in summary.submissions] == [newest.id, middle.id, oldest.id]


def test_only_own_submissions_are_aggregated(store, make_student, add_submission):
    asha = make_student()
    ben = make_student(name="Ben Okafor")
    add_submission(asha, score=70)
    add_submission(ben, score=20)

    assert aggregate(store, asha.id).total_score == 70
    assert aggregate(store, ben.id).total_score == 20


def test_total_matches_reference_sum(store, make_student, add_submission):
    rng = random.Random(2026)
    student = make_student()
    scores = [rng.choice([None, rng.randint(0, 100)]) for _ in range(25)]
    for minutes, score in enumerate(scores):
        add_submission(student, score=score, minutes=minutes, write_file=False)

    expected = 0
    for score in scores:
        if score is not None:
            expected += score

    summary = aggregate(store, student.id)
    assert summary.count == len(scores)
    assert summary.total_score == expected


def test_summarize_empty():
    summary = summarize([])
    assert (summary.count, summary.total_score, summary.submissions) == (0, 0, [])
    assert total_score([]) == 0
