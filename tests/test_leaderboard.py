# tests/test_leaderboard.py

import pytest

from portal.errors import VisibilityError
from portal.services.leaderboard import build, is_visible, student_overview, toggle


def test_hidden_by_default(store):
    assert store.get_setting() is None
    assert is_visible(store) is False


def test_hidden_leaderboard_refuses_non_admin(store, make_student, add_submission):
    add_submission(make_student(), score=10)

    with pytest.raises(VisibilityError):
        build(store, caller_is_admin=False)


def test_admin_bypasses_hidden_flag(store, make_student, add_submission):
    student = make_student()
    add_submission(student, score=10)

    entries = build(store, caller_is_admin=True)

    assert [e.student.id for e in entries] == [student.id]


def test_toggle_from_absent_makes_visible(store):
    assert toggle(store) is True
    assert is_visible(store) is True
    assert store.get_setting().leaderboard_visible is True


def test_double_toggle_restores_value(store):
    original = is_visible(store)
    toggle(store)
    toggle(store)
    assert is_visible(store) == original

    toggle(store)
    visible = is_visible(store)
    toggle(store)
    toggle(store)
    assert is_visible(store) == visible


def test_toggle_keeps_a_single_row(store, db):
    from portal.models.setting import Setting

    for _ in range(3):
        toggle(store)

    assert db.query(Setting).count() == 1


def test_upsert_setting_creates_then_updates(store, db):
    from portal.models.setting import Setting

    setting = store.upsert_setting(True)
    assert setting.leaderboard_visible is True
    assert is_visible(store) is True

    setting = store.upsert_setting(False)
    assert setting.leaderboard_visible is False
    assert is_visible(store) is False
    assert db.query(Setting).count() == 1


def test_upsert_setting_then_toggle(store):
    store.upsert_setting(True)
    store.upsert_setting(True)

    assert toggle(store) is False
    assert build(store, caller_is_admin=True) == []
    with pytest.raises(VisibilityError):
        build(store, caller_is_admin=False)


def test_absent_setting_then_toggle_allows_non_admin(store):
    with pytest.raises(VisibilityError):
        build(store, caller_is_admin=False)

    toggle(store)

    assert build(store, caller_is_admin=False) == []


def test_scenario_top_student_and_silent_student(store, make_student, add_submission):
    asha = make_student()
    ben = make_student(name="Ben Okafor")
    add_submission(asha, score=40)
    add_submission(asha, score=60, minutes=1)
    toggle(store)

    entries = build(store, caller_is_admin=False)

    assert len(entries) == 1
    assert entries[0].student.id == asha.id
    assert entries[0].total_score == 100
    assert entries[0].submission_count == 2
    assert ben.id not in [e.student.id for e in entries]


def test_excludes_students_without_submissions(store, make_student, add_submission):
    students = [make_student() for _ in range(4)]
    add_submission(students[1], score=5)
    add_submission(students[3])
    toggle(store)

    entries = build(store, caller_is_admin=False)

    assert {e.student.id for e in entries} == {students[1].id, students[3].id}
    assert all(e.submission_count > 0 for e in entries)


def test_sorted_descending(store, make_student, add_submission):
    for scores in ([10, 20], [90], [None], [50, 50, 1], [0]):
        student = make_student()
        for minutes, score in enumerate(scores):
            add_submission(student, score=score, minutes=minutes, write_file=False)
    toggle(store)

    totals = [e.total_score for e in build(store, caller_is_admin=False)]

    assert totals == [101, 90, 30, 0, 0]
    for higher, lower in zip(totals, totals[1:]):
        assert higher >= lower


def test_ties_go_to_earliest_first_submission(store, make_student, add_submission):
    late = make_student(name="Late Starter")
    early = make_student(name="Early Bird")
    add_submission(late, score=50, minutes=60)
    add_submission(early, score=20, minutes=5)
    add_submission(early, score=30, minutes=120)

    entries = build(store, caller_is_admin=True)

    assert [e.student.id for e in entries] == [early.id, late.id]


def test_overview_lists_every_student(store, make_student, add_submission):
    asha = make_student()
    ben = make_student(name="Ben Okafor")
    add_submission(asha, score=45)

    overview = {o.student.id: o.aggregate for o in student_overview(store)}

    assert overview[asha.id].total_score == 45
    assert overview[asha.id].count == 1
    assert overview[ben.id].count == 0
    assert overview[ben.id].total_score == 0
