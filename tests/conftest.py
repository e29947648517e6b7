import pytest
from fastapi.testclient import TestClient

from labofap.app.main import app
from labofap.app.services.auth_service import login_user, register_user

ADMIN_EMAIL = "admin@labofap.fr"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture(autouse=True)
def _isolated_db(tmp_path, monkeypatch):
    """Every test gets its own SQLite file and the same bootstrap admin."""
    monkeypatch.setenv("LABOFAP_DB_PATH", str(tmp_path / "labofap.db"))
    monkeypatch.setenv("LABOFAP_ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("LABOFAP_ADMIN_PASSWORD", ADMIN_PASSWORD)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    # entering the context runs the startup hook (schema + admin seed)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    token, _ = login_user(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client):
    register_user("user@labofap.fr", "user-secret")
    token, _ = login_user("user@labofap.fr", "user-secret")
    return {"Authorization": f"Bearer {token}"}
