"""Tests for list view and dashboard API endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from accessdesk.api.client import ApiError
from accessdesk.core.config import Settings
from accessdesk.web.app import create_app


@pytest.fixture
def api(make_api, clients, projects, issues):
    return make_api(clients=clients, projects=projects, issues=issues)


@pytest.fixture
def client(api):
    return TestClient(create_app(settings=Settings(), api_client=api))


class TestViewsAPI:
    def test_clients_default_order(self, client):
        resp = client.get("/api/views/clients")
        assert resp.status_code == 200
        body = resp.json()
        assert [c["id"] for c in body["items"]] == ["c2", "c1"]
        assert body["state"]["sort_key"] == "created_at"
        assert body["state"]["sort_direction"] == "desc"
        assert body["items"][0]["clientType"] == "p15r"
        assert body["error"] is None

    def test_search_filter_sort(self, client):
        resp = client.get(
            "/api/views/projects",
            params={"search": "a", "filter": ["status:active", "status:planning"], "sort": "name"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [p["id"] for p in body["items"]] == ["p1", "p2"]
        assert body["state"]["active_filters"] == {"status": ["active", "planning"]}

    def test_project_client_filter(self, client):
        resp = client.get("/api/views/projects", params={"filter": "client_id:c2"})
        assert [p["id"] for p in resp.json()["items"]] == ["p2"]

    def test_issue_duplicate_filter(self, client):
        resp = client.get("/api/views/issues", params={"filter": "is_duplicate:false", "sort": "severity"})
        assert [i["id"] for i in resp.json()["items"]] == ["i1", "i2"]

    def test_combined_recent(self, client):
        resp = client.get("/api/views/combined", params={"sort": "recent"})
        body = resp.json()
        assert body["state"]["sort_direction"] == "desc"
        ids = [item["data"]["id"] for item in body["items"]]
        assert ids == ["p3", "c2", "p1", "c1", "p2"]
        assert body["items"][0]["kind"] == "project"

    def test_combined_kind(self, client):
        resp = client.get("/api/views/combined", params={"kind": "clients"})
        assert {item["kind"] for item in resp.json()["items"]} == {"client"}

    def test_invalid_filter_value(self, client):
        resp = client.get("/api/views/clients", params={"filter": "status:done"})
        assert resp.status_code == 400

    def test_malformed_filter(self, client):
        assert client.get("/api/views/clients", params={"filter": "status"}).status_code == 400

    def test_unknown_sort(self, client):
        assert client.get("/api/views/clients", params={"sort": "colour"}).status_code == 400

    def test_unknown_view(self, client):
        assert client.get("/api/views/invoices").status_code == 404

    def test_unknown_combined_kind(self, client):
        assert client.get("/api/views/combined", params={"kind": "issues"}).status_code == 400

    def test_fetch_failure_returns_empty(self, client, api):
        api.fail_with = ApiError("Server unavailable", status_code=503)
        resp = client.get("/api/views/clients")
        assert resp.status_code == 200
        body = resp.json()
        assert body["items"] == []
        assert body["error"] == "Failed to load clients: Server unavailable"

    @pytest.mark.parametrize(
        "name, selection, label",
        [
            ("projects", "client_id:c2", "projects"),
            ("issues", "project_id:p1", "issues"),
        ],
    )
    def test_fetch_failure_with_dynamic_filter(self, client, api, name, selection, label):
        api.fail_with = ApiError("Server unavailable", status_code=503)
        resp = client.get(f"/api/views/{name}", params={"filter": selection})
        assert resp.status_code == 200
        body = resp.json()
        assert body["items"] == []
        assert body["error"] == f"Failed to load {label}: Server unavailable"

    def test_fetch_failure_still_rejects_malformed_filter(self, client, api):
        api.fail_with = ApiError("Server unavailable", status_code=503)
        assert client.get("/api/views/projects", params={"filter": "client_id"}).status_code == 400


class TestDashboardAPI:
    def test_summary(self, client):
        resp = client.get("/api/dashboard/summary")
        assert resp.status_code == 200
        body = resp.json()
        assert body["portfolio"]["total_clients"] == 2
        assert body["portfolio"]["average_progress"] == 50
        assert body["issues"]["total"] == 3
        assert [p["project_id"] for p in body["projects"]] == ["p1", "p2", "p3"]

    def test_summary_backend_down(self, client, api):
        api.fail_with = ApiError("Server unavailable", status_code=503)
        assert client.get("/api/dashboard/summary").status_code == 502
