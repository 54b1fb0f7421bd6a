"""
API Tests
=========
Routes exercised through TestClient. The database dependency is replaced
and store functions are patched, so no PostgreSQL is needed.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from jose import jwt

from resolve360.config import settings
from resolve360.services.image_storage import ImageStorage
from resolve360.utils.errors import StoreError, StoreErrorKind

from .factories import ADMIN, CONTRACTOR, RESIDENT, make_issue

PNG = b"\x89PNG\r\n\x1a\nfake"


def test_health_check(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


class TestSession:

    def test_first_sign_in_as_admin(self, client):
        created = dict(ADMIN, email="Admin@Insta-Maintain.com")
        with patch("resolve360.queries.user_queries.get_user_by_id", AsyncMock(return_value=None)), \
             patch("resolve360.queries.user_queries.create_user", AsyncMock(return_value=created)) as create:
            resp = client.post("/auth/session", json={
                "uid": "admin-uid",
                "email": "Admin@Insta-Maintain.com",
                "display_name": "Ada Admin",
            })

        assert resp.status_code == 200
        body = resp.json()
        assert body["role"] == "admin"
        assert body["role_label"] == "Administrator"
        assert body["role_changed"] is False
        assert create.await_args.kwargs["role"] == "admin"

        claims = jwt.decode(body["access_token"], settings.secret_key, algorithms=[settings.algorithm])
        assert claims["sub"] == "admin-uid"
        assert claims["role"] == "admin"

    def test_role_downgraded_on_next_sign_in(self, client):
        stored = dict(RESIDENT, role="contractor")
        with patch("resolve360.queries.user_queries.get_user_by_id", AsyncMock(return_value=stored)), \
             patch("resolve360.queries.user_queries.update_user_role", AsyncMock(return_value=RESIDENT)):
            resp = client.post("/auth/session", json={"uid": "resident-uid", "email": "resident@maplecourt.org"})

        assert resp.status_code == 200
        assert resp.json()["role"] == "user"
        assert resp.json()["role_changed"] is True

    def test_bearer_token_round_trip(self, client):
        with patch("resolve360.queries.user_queries.get_user_by_id", AsyncMock(return_value=RESIDENT)):
            token = client.post(
                "/auth/session", json={"uid": "resident-uid", "email": "resident@maplecourt.org"}
            ).json()["access_token"]
            resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 200
        assert resp.json()["email"] == "resident@maplecourt.org"

    def test_bad_token(self, client):
        resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401

    def test_deactivated_user(self, client):
        with patch("resolve360.queries.user_queries.get_user_by_id", AsyncMock(return_value=dict(RESIDENT, is_active=False))):
            token = client.post(
                "/auth/session", json={"uid": "resident-uid", "email": "resident@maplecourt.org"}
            ).json()["access_token"]
            resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403


class TestCategories:

    def test_list(self, client):
        resp = client.get("/categories/")
        assert resp.status_code == 200
        names = [c["name"] for c in resp.json()]
        assert names == ["Plumbing", "Electrical", "Civil", "Common Area Maintenance/Housekeeping", "HVAC"]

    def test_detail_with_slash_in_name(self, client):
        resp = client.get("/categories/Common Area Maintenance/Housekeeping")
        assert resp.status_code == 200
        assert resp.json()["priority"] == "low"
        assert "maintenance1@resolve360.com" in resp.json()["contractors"]

    def test_unknown_category(self, client):
        assert client.get("/categories/Roofing").status_code == 404

    def test_preview(self, client):
        resp = client.post("/categories/classify", json={"description": "broken light switch and exposed wire near outlet"})
        assert resp.status_code == 200
        assert resp.json()["category"] == "Electrical"
        assert resp.json()["priority"] == "critical"


class TestResidentIssues:

    @pytest.fixture
    def local_storage(self, tmp_path):
        with patch("resolve360.routes.issues.image_storage", ImageStorage("", "", str(tmp_path))):
            yield

    def test_report_issue(self, client, login, local_storage):
        login(RESIDENT)

        def create(conn, **fields):
            return make_issue(**{k: v for k, v in fields.items() if k != "status"})

        with patch("resolve360.queries.issue_queries.create_issue", AsyncMock(side_effect=create)):
            resp = client.post(
                "/issues/",
                files={"image": ("leak.png", PNG, "image/png")},
                data={"description": "water leaking from the pipe under the sink", "status": "Resolved"},
            )

        assert resp.status_code == 201
        body = resp.json()
        assert body["category"] == "Plumbing"
        assert body["priority"] == "high"
        assert body["status"] == "Open"
        assert body["assigned_contractor"] in ("plumber1@resolve360.com", "plumber2@resolve360.com")
        assert body["upload_success"] is False

    def test_report_requires_resident(self, client, login, local_storage):
        login(CONTRACTOR)
        resp = client.post("/issues/", files={"image": ("leak.png", PNG, "image/png")})
        assert resp.status_code == 403

    def test_report_rejects_non_image(self, client, login, local_storage):
        login(RESIDENT)
        resp = client.post("/issues/", files={"image": ("notes.txt", b"hello", "text/plain")})
        assert resp.status_code == 400

    def test_report_validation_failure(self, client, login, local_storage):
        login(RESIDENT)
        failure = StoreError(StoreErrorKind.VALIDATION, "category is required", operation="submit issue")
        with patch("resolve360.queries.issue_queries.create_issue", AsyncMock(side_effect=failure)):
            resp = client.post("/issues/", files={"image": ("leak.png", PNG, "image/png")})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Failed to submit issue: category is required"

    @pytest.fixture
    def opened(self, monkeypatch):
        """Connections opened by the retried listing, one per attempt."""
        connections = []

        @asynccontextmanager
        async def fake_connection():
            conn = MagicMock(name=f"conn-{len(connections)}")
            connections.append(conn)
            yield conn

        monkeypatch.setattr("resolve360.routes.issues.db_connection", fake_connection)
        monkeypatch.setattr(settings, "retry_base_delay", 0)
        return connections

    def test_my_issues_retries_transient_errors(self, client, login, opened):
        login(RESIDENT)
        transient = StoreError(StoreErrorKind.TRANSIENT, "permission denied", operation="load issues")
        fetch = AsyncMock(side_effect=[transient, [make_issue()]])
        with patch("resolve360.queries.issue_queries.get_user_issues", fetch):
            resp = client.get("/issues/mine")
        assert resp.status_code == 200
        assert len(resp.json()) == 1
        assert fetch.await_count == 2

    def test_each_attempt_gets_a_fresh_connection(self, client, login, opened):
        login(RESIDENT)
        transient = StoreError(StoreErrorKind.TRANSIENT, "connection was closed", operation="load issues")
        fetch = AsyncMock(side_effect=[transient, transient, []])
        with patch("resolve360.queries.issue_queries.get_user_issues", fetch):
            client.get("/issues/mine")
        used = [c.args[0] for c in fetch.await_args_list]
        assert used == opened
        assert len(set(map(id, used))) == 3

    def test_my_issues_gives_up_quietly(self, client, login, opened, caplog):
        login(RESIDENT)
        transient = StoreError(StoreErrorKind.TRANSIENT, "index not ready", operation="load issues")
        fetch = AsyncMock(side_effect=transient)
        with patch("resolve360.queries.issue_queries.get_user_issues", fetch):
            resp = client.get("/issues/mine")
        assert resp.status_code == 200
        assert resp.json() == []
        assert fetch.await_count == settings.retry_limit + 1
        assert any(
            r.levelno == logging.WARNING and "Giving up" in r.getMessage() for r in caplog.records
        )

    def test_my_issues_surfaces_other_errors(self, client, login, opened):
        login(RESIDENT)
        fatal = StoreError(StoreErrorKind.FATAL, "relation does not exist", operation="load issues")
        fetch = AsyncMock(side_effect=fatal)
        with patch("resolve360.queries.issue_queries.get_user_issues", fetch):
            resp = client.get("/issues/mine")
        assert resp.status_code == 500
        assert fetch.await_count == 1

    def test_cannot_read_someone_elses_issue(self, client, login):
        login(dict(RESIDENT, user_id="other-uid"))
        issue = make_issue()
        with patch("resolve360.queries.issue_queries.get_issue_by_id", AsyncMock(return_value=issue)):
            resp = client.get(f"/issues/{issue['issue_id']}")
        assert resp.status_code == 403


class TestContractorIssues:

    def test_assigned_issues(self, client, login):
        login(CONTRACTOR)
        fetch = AsyncMock(return_value=[make_issue()])
        with patch("resolve360.queries.issue_queries.get_contractor_issues", fetch):
            resp = client.get("/contractor/issues", params={"status": "Open"})
        assert resp.status_code == 200
        assert fetch.await_args.args[1:] == ("plumber1@resolve360.com", "Open")

    def test_resolve_assigned_issue(self, client, login):
        login(CONTRACTOR)
        issue = make_issue()
        update = AsyncMock(return_value=dict(issue, status="Resolved"))
        with patch("resolve360.queries.issue_queries.get_issue_by_id", AsyncMock(return_value=issue)), \
             patch("resolve360.queries.issue_queries.update_issue", update):
            resp = client.put(f"/contractor/issues/{issue['issue_id']}/status", json={"status": "Resolved"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "Resolved"
        assert update.await_args.args[2] == {"status": "Resolved"}

    def test_cannot_touch_unassigned_issue(self, client, login):
        login(CONTRACTOR)
        issue = make_issue(assigned_contractor="plumber2@resolve360.com")
        update = AsyncMock()
        with patch("resolve360.queries.issue_queries.get_issue_by_id", AsyncMock(return_value=issue)), \
             patch("resolve360.queries.issue_queries.update_issue", update):
            resp = client.put(f"/contractor/issues/{issue['issue_id']}/status", json={"status": "Resolved"})
        assert resp.status_code == 403
        update.assert_not_awaited()

    def test_residents_are_kept_out(self, client, login):
        login(RESIDENT)
        assert client.get("/contractor/issues").status_code == 403


class TestAdmin:

    def test_issues_by_status(self, client, login):
        login(ADMIN)
        by_status = AsyncMock(return_value=[make_issue(status="Assigned")])
        with patch("resolve360.queries.issue_queries.get_issues_by_status", by_status):
            resp = client.get("/admin/issues", params={"status": "Assigned"})
        assert resp.status_code == 200
        assert by_status.await_args.args[1] == "Assigned"

    def test_reopen_resolved_issue(self, client, login):
        login(ADMIN)
        issue = make_issue(status="Resolved", assigned_contractor="hvac1@resolve360.com")
        with patch("resolve360.queries.issue_queries.get_issue_by_id", AsyncMock(return_value=issue)), \
             patch("resolve360.queries.issue_queries.update_issue", AsyncMock(return_value=dict(issue, status="Open"))):
            resp = client.put(f"/admin/issues/{issue['issue_id']}/status", json={"status": "Open"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "Open"

    def test_missing_issue(self, client, login):
        login(ADMIN)
        with patch("resolve360.queries.issue_queries.get_issue_by_id", AsyncMock(return_value=None)):
            resp = client.put(f"/admin/issues/{uuid.uuid4()}/status", json={"status": "Open"})
        assert resp.status_code == 404

    def test_classification_correction(self, client, login):
        login(ADMIN)
        issue = make_issue()

        def update(conn, issue_id, fields):
            return dict(issue, **fields)

        with patch("resolve360.queries.issue_queries.update_issue", AsyncMock(side_effect=update)):
            resp = client.put(
                f"/admin/issues/{issue['issue_id']}/classification",
                json={"category": "Electrical"},
            )
        assert resp.status_code == 200
        body = resp.json()
        assert body["category"] == "Electrical"
        assert body["priority"] == "critical"
        assert body["assigned_contractor"] in ("electrician1@resolve360.com", "electrician2@resolve360.com")

    def test_classification_correction_missing_issue(self, client, login):
        login(ADMIN)
        issue_id = uuid.uuid4()
        missing = StoreError(StoreErrorKind.NOT_FOUND, f"issue {issue_id} does not exist", operation="update issue")
        with patch("resolve360.queries.issue_queries.update_issue", AsyncMock(side_effect=missing)):
            resp = client.put(f"/admin/issues/{issue_id}/classification", json={"category": "HVAC"})
        assert resp.status_code == 404
        assert resp.json()["kind"] == "not_found"
        assert resp.json()["detail"] == f"Failed to update issue: issue {issue_id} does not exist"

    def test_classification_correction_unknown_category(self, client, login):
        login(ADMIN)
        resp = client.put(f"/admin/issues/{uuid.uuid4()}/classification", json={"category": "Roofing"})
        assert resp.status_code == 400

    def test_statistics(self, client, login):
        login(ADMIN)
        stats = {
            "total": 1, "open": 1, "assigned": 0, "resolved": 0,
            "by_category": {"Plumbing": 1},
            "by_priority": {"critical": 0, "high": 1, "medium": 0, "low": 0},
        }
        with patch("resolve360.queries.issue_queries.get_issue_statistics", AsyncMock(return_value=stats)):
            resp = client.get("/admin/statistics")
        assert resp.status_code == 200
        assert resp.json() == stats

    def test_users_by_role(self, client, login):
        login(ADMIN)
        by_role = AsyncMock(return_value=[CONTRACTOR])
        with patch("resolve360.queries.user_queries.get_users_by_role", by_role):
            resp = client.get("/admin/users", params={"role": "contractor"})
        assert resp.status_code == 200
        assert resp.json()[0]["email"] == "plumber1@resolve360.com"

    def test_deactivate_unknown_user(self, client, login):
        login(ADMIN)
        missing = StoreError(StoreErrorKind.NOT_FOUND, "user ghost-uid does not exist", operation="update user")
        with patch("resolve360.queries.user_queries.set_user_active", AsyncMock(side_effect=missing)):
            resp = client.put("/admin/users/ghost-uid/active", json={"is_active": False})
        assert resp.status_code == 404

    def test_cannot_deactivate_self(self, client, login):
        login(ADMIN)
        resp = client.put("/admin/users/admin-uid/active", json={"is_active": False})
        assert resp.status_code == 400

    def test_contractors_are_kept_out(self, client, login):
        login(CONTRACTOR)
        assert client.get("/admin/issues").status_code == 403
