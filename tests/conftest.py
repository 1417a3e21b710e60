# tests/conftest.py

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from alumni_portal.schemas.user import Viewer
from alumni_portal.services.session_classifier import coerce_sessions


# A fixed "now" keeps every classification deterministic
NOW = datetime(2025, 6, 10, 10, 30)


def make_session(session_id="s1", **fields):
    """Raw session record shaped like the portal backend's JSON."""
    record = {
        "_id": session_id,
        "title": f"Session {session_id}",
        "description": "Talk",
        "date": "2025-06-10T00:00:00.000Z",
        "time": "09:00",
        "venue": "Seminar Hall",
        "status": "upcoming",
        "manuallyCompleted": False,
        "targetAudience": ["all"],
        "targetDepartments": ["ALL"],
    }
    record.update(fields)
    return record


class FakePortalClient:
    """In-memory stand-in for PortalClient used by service and route tests."""

    def __init__(self, sessions=None, records=None):
        self.sessions = sessions or []
        self.records = records or {}
        self.fetch_all_sessions = AsyncMock(side_effect=self._fetch)
        self.submit_attendance_response = AsyncMock(return_value={"status": "success"})
        self.get_student_attendance = AsyncMock(side_effect=self._attendance)
        self.submit_feedback = AsyncMock(return_value={"status": "success"})
        self.update_session_status = AsyncMock(return_value={"status": "success"})
        self.delete_session = AsyncMock(return_value={"status": "success"})
        self.get_attendance_stats = AsyncMock()
        self.get_profile = AsyncMock()
        self.update_feedback_link = AsyncMock(return_value={"status": "success"})
        self.create_session = AsyncMock(return_value={"status": "success"})
        self.get_pending_sessions = AsyncMock(return_value=[])
        self.get_session_requests = AsyncMock(return_value=[])
        self.approve_session_request = AsyncMock(return_value={"status": "success"})
        self.reject_session_request = AsyncMock(return_value={"status": "success"})

    async def _fetch(self):
        return coerce_sessions(self.sessions)

    async def _attendance(self, session_id):
        return self.records.get(session_id)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def student():
    return Viewer(_id="u1", fullName="Asha", role="student", yearOfStudy="E-2", department="CSE")


@pytest.fixture
def admin():
    return Viewer(_id="a1", fullName="Admin", role="admin")


@pytest.fixture
def alumni():
    return Viewer(_id="al1", fullName="Ravi", role="alumni", department="ECE")


@pytest.fixture
def fake_client():
    return FakePortalClient()


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def client_factory():
    return FakePortalClient
