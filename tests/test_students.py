# tests/test_students.py

import pytest

from portal.errors import DuplicateKey, StorageError, ValidationError
from portal.models.student import Student
from portal.services.students import hash_password, normalize_email, register_student, verify_password


def test_normalize_email():
    assert normalize_email("  Asha.Verma@GreenSchool.ORG ") == "asha.verma@greenschool.org"
    assert normalize_email("") is None
    assert normalize_email(None) is None
    assert normalize_email("   ") is None


def test_registration_stores_hash_not_password(store, make_student):
    student = make_student(email="asha@greenschool.org", password="sunflower")

    stored = store.find_student_by_email("asha@greenschool.org")
    assert stored.id == student.id
    assert stored.password_hash != "sunflower"
    assert verify_password("sunflower", stored.password_hash)
    assert not verify_password("sunflowers", stored.password_hash)


def test_registration_normalizes_email(store, make_student):
    student = make_student(email="  Asha@GreenSchool.org")

    assert student.email == "asha@greenschool.org"
    assert store.find_student_by_id(student.id).email == "asha@greenschool.org"


def test_duplicate_normalized_email(store, make_student):
    outcomes = []
    for email in ["asha@greenschool.org", "ASHA@greenschool.org "]:
        try:
            make_student(email=email)
            outcomes.append("ok")
        except DuplicateKey:
            outcomes.append("duplicate")

    assert outcomes == ["ok", "duplicate"]
    assert len(store.list_all_students()) == 1


def test_store_usable_after_duplicate(store, make_student):
    make_student(email="asha@greenschool.org")
    with pytest.raises(DuplicateKey):
        make_student(email="asha@greenschool.org")

    make_student(email="ben@greenschool.org")
    assert len(store.list_all_students()) == 2


def test_verify_password_with_bad_hash():
    assert not verify_password("sunflower", "not-a-bcrypt-hash")


def register(store, **overrides):
    fields = {
        "name": "Asha Verma",
        "school": "Green Valley School",
        "email": "asha@greenschool.org",
        "password": "sunflower",
        "student_class": "9B",
        "age": 14,
    }
    fields.update(overrides)
    return register_student(store, **fields)


@pytest.mark.parametrize("age", [4, 26, 30])
def test_registration_rejects_age_out_of_range(store, age):
    with pytest.raises(ValidationError) as excinfo:
        register(store, age=age)

    assert not isinstance(excinfo.value, DuplicateKey)
    assert store.list_all_students() == []


@pytest.mark.parametrize("age", [5, 25])
def test_registration_accepts_age_bounds(store, age):
    assert register(store, age=age).age == age


@pytest.mark.parametrize("age", ["14", 14.0, True, None])
def test_registration_rejects_non_integer_age(store, age):
    with pytest.raises(ValidationError):
        register(store, age=age)


@pytest.mark.parametrize("email", ["", "   ", None])
def test_registration_rejects_blank_email(store, email):
    with pytest.raises(ValidationError):
        register(store, email=email)


def test_store_reports_check_failure_as_storage_error(store):
    student = Student(
        name="Asha Verma",
        school="Green Valley School",
        email="asha@greenschool.org",
        student_class="9B",
        age=30,
        password_hash=hash_password("sunflower"),
    )

    with pytest.raises(StorageError):
        store.insert_student(student)
    assert store.list_all_students() == []


def test_store_reports_missing_email_as_storage_error(store):
    student = Student(
        name="Asha Verma",
        school="Green Valley School",
        email=None,
        student_class="9B",
        age=14,
        password_hash=hash_password("sunflower"),
    )

    with pytest.raises(StorageError):
        store.insert_student(student)
