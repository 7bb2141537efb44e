import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.auth import get_current_user, get_optional_user


TEST_USER = {"user_id": "user-1", "email": "junior@example.com", "roles": ["junior"]}
MENTOR_USER = {"user_id": "mentor-1", "email": "mentor@example.com", "roles": ["mentor"]}
ADMIN_USER = {"user_id": "admin-1", "email": "admin@example.com", "roles": ["admin"]}


@pytest.fixture
def general_resources():
    """General Resources rows as returned by ResourceService."""
    return [
        {"id": "r1", "company_id": None, "title": "Percentages", "folder_path": "Aptitude",
         "resource_type": "pdf", "round_type": "aptitude", "download_count": 3},
        {"id": "r2", "company_id": None, "title": "MCQ set 1", "folder_path": "Aptitude/MCQ",
         "resource_type": "pdf", "round_type": "aptitude", "download_count": 1},
        {"id": "r3", "company_id": None, "title": "Placement handbook", "folder_path": None,
         "resource_type": "doc", "round_type": "general", "download_count": 0},
        {"id": "r4", "company_id": None, "title": "Slide tips",
         "folder_path": "Communication Skills/Presentation",
         "resource_type": "video", "round_type": "hr", "download_count": None},
        {"id": "r5", "company_id": None, "title": "MCQ set 2", "folder_path": "Aptitude/MCQ",
         "resource_type": "link", "round_type": "aptitude", "download_count": 7},
    ]


@pytest.fixture
def client():
    """Test client with no dependency overrides."""
    yield TestClient(app)
    app.dependency_overrides.clear()


def _client_as(user):
    app.dependency_overrides[get_current_user] = lambda: dict(user)
    app.dependency_overrides[get_optional_user] = lambda: dict(user)
    return TestClient(app)


@pytest.fixture
def auth_client():
    """Test client where every request is made by TEST_USER (a junior)."""
    yield _client_as(TEST_USER)
    app.dependency_overrides.clear()


@pytest.fixture
def mentor_client():
    yield _client_as(MENTOR_USER)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client():
    yield _client_as(ADMIN_USER)
    app.dependency_overrides.clear()
