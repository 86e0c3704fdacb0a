"""Async client for the dashboard REST backend."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from accessdesk.api.models import ApiEnvelope, Page
from accessdesk.core.config import ApiConfig
from accessdesk.entities.models import AccessibilityIssue, Client, Project

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiError(Exception):
    """The backend rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RestClient:
    """Talks to the ``/clients``, ``/projects`` and ``/issues`` endpoints.

    Every response is unwrapped from its ``{success, data, error}`` envelope.
    Non-2xx statuses, ``success: false`` bodies and transport failures all
    raise :class:`ApiError`. Requests are not retried.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ApiConfig()
        headers: dict[str, str] = {}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            headers=headers,
            transport=transport,
        )

    # -- generic CRUD --------------------------------------------------------

    async def list_all(self, resource: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """GET a collection. ``data`` may be a bare list or a page object."""
        data = await self._request("GET", resource, params=params)
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and "items" in data:
            return Page.model_validate(data).items
        raise ApiError(f"Unexpected list payload from {resource}")

    async def get(self, resource: str, entity_id: str) -> dict[str, Any]:
        return await self._request("GET", f"{resource}/{entity_id}")

    async def create(self, resource: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", resource, json=payload)

    async def update(
        self, resource: str, entity_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PUT", f"{resource}/{entity_id}", json=payload)

    async def delete(self, resource: str, entity_id: str) -> None:
        await self._request("DELETE", f"{resource}/{entity_id}", require_data=False)

    # -- typed helpers -------------------------------------------------------

    async def list_clients(self, **params: Any) -> list[Client]:
        return self._parse(Client, await self.list_all("/clients", self._page_params(params)))

    async def list_projects(self, **params: Any) -> list[Project]:
        return self._parse(Project, await self.list_all("/projects", self._page_params(params)))

    async def list_issues(self, **params: Any) -> list[AccessibilityIssue]:
        return self._parse(
            AccessibilityIssue, await self.list_all("/issues", self._page_params(params))
        )

    async def close(self) -> None:
        await self._http.aclose()

    # -- internals -----------------------------------------------------------

    def _page_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"limit": self.config.page_limit, **params}

    @staticmethod
    def _parse(model: type[ModelT], items: list[dict[str, Any]]) -> list[ModelT]:
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as exc:
            raise ApiError(f"Malformed {model.__name__} record: {exc}") from exc

    async def _request(
        self,
        method: str,
        url: str,
        *,
        require_data: bool = True,
        **kwargs: Any,
    ) -> Any:
        try:
            resp = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        envelope = None
        if isinstance(body, dict):
            try:
                envelope = ApiEnvelope.model_validate(body)
            except ValidationError as exc:
                logger.warning("%s %s returned %d with a malformed body: %s",
                               method, url, resp.status_code, exc)
                raise ApiError(
                    f"Malformed response from {url}", status_code=resp.status_code
                ) from exc

        if not resp.is_success:
            message = (envelope.error if envelope else None) or resp.reason_phrase
            logger.warning("%s %s returned %d: %s", method, url, resp.status_code, message)
            raise ApiError(message or f"HTTP {resp.status_code}", status_code=resp.status_code)

        if envelope is None:
            raise ApiError(f"Malformed response from {url}", status_code=resp.status_code)
        if not envelope.success:
            logger.warning("%s %s rejected: %s", method, url, envelope.error)
            raise ApiError(envelope.error or "Request failed", status_code=resp.status_code)
        if require_data and "data" not in body:
            raise ApiError(f"Response from {url} has no data", status_code=resp.status_code)
        return envelope.data
