"""Tests for the dashboard REST client."""

from __future__ import annotations

import json

import httpx
import pytest

from accessdesk.api.client import ApiError, RestClient
from accessdesk.core.config import ApiConfig
from accessdesk.core.types import ClientType
from accessdesk.listing.view import ClientListView


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

BASE = "http://test/api"


def _client(**overrides) -> RestClient:
    config = {"base_url": BASE, "timeout_seconds": 5}
    config.update(overrides)
    return RestClient(ApiConfig(**config))


class TestListing:
    @pytest.mark.asyncio
    async def test_list_clients_from_page(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients?limit=100",
            method="GET",
            json={
                "success": True,
                "data": {
                    "items": [
                        {"id": "c1", "name": "Jane", "company": "Acme", "clientType": "p15r",
                         "createdAt": "2024-01-10T09:00:00Z", "unknownKey": 1},
                    ],
                    "total": 1,
                    "page": 1,
                    "limit": 100,
                },
            },
        )
        client = _client()
        try:
            clients = await client.list_clients()
            assert len(clients) == 1
            assert clients[0].company == "Acme"
            assert clients[0].client_type == ClientType.P15R
            assert clients[0].created_at.year == 2024
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_list_projects_from_bare_list(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/projects?limit=100",
            method="GET",
            json={"success": True, "data": [{"id": "p1", "clientId": "c1", "name": "Beta Launch"}]},
        )
        client = _client()
        try:
            projects = await client.list_projects()
            assert projects[0].client_id == "c1"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_list_issues_with_params(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/issues?limit=100&project_id=p1",
            method="GET",
            json={"success": True, "data": [{"id": "i1", "projectId": "p1", "severity": "2_high",
                                               "project": {"id": "p1", "name": "Beta"}}]},
        )
        client = _client()
        try:
            issues = await client.list_issues(project_id="p1")
            assert issues[0].project.name == "Beta"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_malformed_record(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients?limit=100",
            method="GET",
            json={"success": True, "data": [{"name": "no id"}]},
        )
        client = _client()
        try:
            with pytest.raises(ApiError, match="Malformed Client"):
                await client.list_clients()
        finally:
            await client.close()


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_posts_payload(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients",
            method="POST",
            status_code=201,
            json={"success": True, "data": {"id": "c9", "name": "Jane"}},
        )
        client = _client(api_key="secret")
        try:
            data = await client.create("/clients", {"name": "Jane"})
            assert data == {"id": "c9", "name": "Jane"}

            request = httpx_mock.get_request()
            assert json.loads(request.content) == {"name": "Jane"}
            assert request.headers["Authorization"] == "Bearer secret"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_update_and_get(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/projects/p1",
            method="PUT",
            json={"success": True, "data": {"id": "p1", "name": "Renamed"}},
        )
        httpx_mock.add_response(
            url=f"{BASE}/projects/p1",
            method="GET",
            json={"success": True, "data": {"id": "p1", "name": "Renamed"}},
        )
        client = _client()
        try:
            assert (await client.update("/projects", "p1", {"name": "Renamed"}))["name"] == "Renamed"
            assert (await client.get("/projects", "p1"))["id"] == "p1"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_delete_without_data(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients/c1",
            method="DELETE",
            json={"success": True, "message": "Client deleted"},
        )
        client = _client()
        try:
            assert await client.delete("/clients", "c1") is None
        finally:
            await client.close()


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_status_uses_envelope_message(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients",
            method="POST",
            status_code=409,
            json={"success": False, "error": "Email already exists"},
        )
        client = _client()
        try:
            with pytest.raises(ApiError) as exc_info:
                await client.create("/clients", {"email": "a@b.co"})
            assert exc_info.value.status_code == 409
            assert exc_info.value.message == "Email already exists"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_error_status_without_body(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients/c1",
            method="GET",
            status_code=500,
            text="boom",
        )
        client = _client()
        try:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/clients", "c1")
            assert exc_info.value.status_code == 500
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_success_false_on_200(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients/c1",
            method="GET",
            json={"success": False, "error": "Not allowed"},
        )
        client = _client()
        try:
            with pytest.raises(ApiError, match="Not allowed"):
                await client.get("/clients", "c1")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_missing_data(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients/c1",
            method="GET",
            json={"success": True},
        )
        client = _client()
        try:
            with pytest.raises(ApiError, match="no data"):
                await client.get("/clients", "c1")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))
        client = _client()
        try:
            with pytest.raises(ApiError, match="Could not reach the server"):
                await client.list_all("/clients")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_structured_error_body_is_malformed(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients?limit=100",
            method="GET",
            status_code=500,
            json={"success": False, "error": {"code": "DB", "message": "boom"}},
        )
        client = _client()
        try:
            with pytest.raises(ApiError, match="Malformed response") as exc_info:
                await client.list_clients()
            assert exc_info.value.status_code == 500
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_structured_error_body_gives_empty_list_view(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/clients?limit=100",
            method="GET",
            status_code=500,
            json={"success": False, "error": {"code": "DB", "message": "boom"}},
        )
        client = _client()
        try:
            view = ClientListView(client)
            assert await view.load() is True
            assert view.items == []
            assert view.error.startswith("Failed to load clients: Malformed response")
        finally:
            await client.close()
