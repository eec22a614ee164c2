"""
Pytest configuration and fixtures.

The database URL and bcrypt cost are set before any ``portal`` import so
the engine binds to a throwaway SQLite file. Every test gets fresh tables
and its own upload directory.
"""
import os
import tempfile
from datetime import datetime, timedelta

_db_dir = tempfile.mkdtemp(prefix="portal-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_db_dir, "portal.db")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from portal import config  # noqa: E402
from portal.database import SessionLocal, create_tables, drop_tables  # noqa: E402
from portal.models.submission import Submission  # noqa: E402
from portal.services.students import register_student  # noqa: E402
from portal.store import RecordStore  # noqa: E402

BASE_TIME = datetime(2026, 3, 1, 9, 0, 0)
PASSWORD = "greenplanet"


@pytest.fixture(autouse=True)
def fresh_database():
    drop_tables()
    create_tables()
    yield


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(config, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def make_student(store):
    """Register a student through the registration service."""
    counter = {"n": 0}

    def _make(email=None, name="Asha Verma", password=PASSWORD):
        counter["n"] += 1
        return register_student(
            store,
            name=name,
            school="Green Valley School",
            email=email or "student{}@greenschool.org".format(counter["n"]),
            password=password,
            student_class="9B",
            age=14,
        )

    return _make


@pytest.fixture
def add_submission(store, upload_dir):
    """Insert a submission directly, writing a placeholder file to disk."""
    counter = {"n": 0}

    def _add(student, score=None, minutes=0, write_file=True):
        counter["n"] += 1
        file_name = "pdf-test-{}.pdf".format(counter["n"])
        if write_file:
            (upload_dir / file_name).write_bytes(b"%PDF-1.4 test")
        submission = Submission(
            student_id=student.id,
            file_name=file_name,
            original_name="essay-{}.pdf".format(counter["n"]),
            uploaded_at=BASE_TIME + timedelta(minutes=minutes),
            score=score,
        )
        store.insert_submission(submission)
        return submission

    return _add


@pytest.fixture
def app():
    from portal.main import app as portal_app
    return portal_app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(app):
    with TestClient(app) as test_client:
        response = test_client.post("/admin/login", json={
            "email": config.ADMIN_EMAIL, "password": config.ADMIN_PASSWORD
        })
        assert response.status_code == 200
        yield test_client
