import logging
from urllib.parse import quote

import pytest

from labofap.app.services.user_service import Authority, get_user_service
from labofap.app.main import app


class RecordingUserService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def register_authority(self, name):
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return Authority(name=name)

    def get_authority(self, name):
        return None

    def list_authorities(self):
        return []


def _post(client, headers, body, content_type="text/plain"):
    return client.post(
        "/api/authorities",
        content=body,
        headers={**headers, "Content-Type": content_type},
    )


def test_create_authority_example(client, admin_headers):
    resp = _post(client, admin_headers, "ROLE_MANAGER")

    assert resp.status_code == 201
    assert resp.headers["Location"] == "/api/authorities/ROLE_MANAGER"
    assert resp.headers["X-labofapApp-alert"] == "authorities.created"
    assert resp.headers["X-labofapApp-params"] == "ROLE_MANAGER"
    assert resp.json() == {"name": "ROLE_MANAGER"}


@pytest.mark.parametrize("name", ["ROLE_AUDITOR", "ops", "ROLE_A-1.b", "ROLE/X", "ROLE TEAM LEAD"])
def test_created_authority_is_readable_at_location(client, admin_headers, name):
    resp = _post(client, admin_headers, name)
    assert resp.status_code == 201
    assert resp.headers["Location"] == f"/api/authorities/{quote(name, safe='')}"
    assert resp.json()["name"] == name

    fetched = client.get(resp.headers["Location"], headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json() == {"name": name}


def test_json_string_body_is_unwrapped(client, admin_headers):
    resp = client.post("/api/authorities", json="ROLE_JSON", headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json() == {"name": "ROLE_JSON"}


@pytest.mark.parametrize(
    "body, content_type",
    [
        ("", "text/plain"),
        ("   ", "text/plain"),
        ("null", "application/json"),
        ('""', "application/json"),
    ],
)
def test_empty_or_null_name_is_rejected(client, admin_headers, body, content_type):
    service = RecordingUserService()
    app.dependency_overrides[get_user_service] = lambda: service

    resp = _post(client, admin_headers, body, content_type)

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["errorKey"] == "idexists"
    assert detail["entityName"] == "Authority"
    assert detail["title"] == "A new Authority cannot be null or empty"
    assert resp.headers["X-labofapApp-error"] == "error.idexists"
    assert service.calls == []



def test_invalid_utf8_name_is_rejected(client, admin_headers):
    service = RecordingUserService()
    app.dependency_overrides[get_user_service] = lambda: service

    resp = _post(client, admin_headers, b"ROLE_\xff\xfe")

    assert resp.status_code == 400
    assert resp.json()["detail"]["errorKey"] == "invalidencoding"
    assert resp.headers["X-labofapApp-error"] == "error.invalidencoding"
    assert service.calls == []

@pytest.mark.parametrize("body", ["ROLE_MANAGER", ""])
def test_non_admin_is_forbidden(client, user_headers, body):
    service = RecordingUserService()
    app.dependency_overrides[get_user_service] = lambda: service

    resp = _post(client, user_headers, body)

    assert resp.status_code == 403
    assert service.calls == []


def test_anonymous_is_unauthorized(client):
    resp = _post(client, {}, "ROLE_MANAGER")
    assert resp.status_code == 401


def test_name_is_trimmed_before_delegation(client, admin_headers):
    service = RecordingUserService()
    app.dependency_overrides[get_user_service] = lambda: service

    resp = _post(client, admin_headers, "  ROLE_TRIM\n")

    assert resp.status_code == 201
    assert service.calls == ["ROLE_TRIM"]
    assert resp.headers["Location"] == "/api/authorities/ROLE_TRIM"


def test_duplicate_name_surfaces_collaborator_error(client, admin_headers):
    assert _post(client, admin_headers, "ROLE_DUP").status_code == 201

    resp = _post(client, admin_headers, "ROLE_DUP")

    assert resp.status_code == 400
    assert resp.json()["detail"]["errorKey"] == "authorityexists"


def test_collaborator_failure_is_not_swallowed(client, admin_headers):
    service = RecordingUserService(error=RuntimeError("storage down"))
    app.dependency_overrides[get_user_service] = lambda: service

    with pytest.raises(RuntimeError, match="storage down"):
        _post(client, admin_headers, "ROLE_BROKEN")
    assert service.calls == ["ROLE_BROKEN"]


def test_list_authorities_includes_builtins(client, admin_headers):
    _post(client, admin_headers, "ROLE_MANAGER")

    resp = client.get("/api/authorities", headers=admin_headers)

    assert resp.status_code == 200
    assert [a["name"] for a in resp.json()] == ["ROLE_ADMIN", "ROLE_MANAGER", "ROLE_USER"]


def test_unknown_authority_is_404(client, admin_headers):
    resp = client.get("/api/authorities/ROLE_NOPE", headers=admin_headers)
    assert resp.status_code == 404


def test_read_endpoints_require_admin(client, user_headers):
    assert client.get("/api/authorities", headers=user_headers).status_code == 403
    assert client.get("/api/authorities/ROLE_USER", headers=user_headers).status_code == 403


def test_create_logs_requested_name(client, admin_headers, caplog):
    with caplog.at_level(logging.DEBUG, logger="labofap.app.api.authority_routes"):
        _post(client, admin_headers, "ROLE_LOGGED")

    assert "REST request to save Authority : ROLE_LOGGED" in caplog.messages
