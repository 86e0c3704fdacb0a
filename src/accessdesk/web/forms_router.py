"""FastAPI router for wizard form sessions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from accessdesk.forms.models import FormError, FormErrorKind, NavigationResult
from accessdesk.forms.shell import FormShell

router = APIRouter()

_SUBMIT_ERROR_STATUS = {
    FormErrorKind.STEP_GATING: 409,
    FormErrorKind.FIELD_VALIDATION: 422,
    FormErrorKind.SUBMISSION: 502,
}


# --- Request models ---


class StartSessionRequest(BaseModel):
    initial: dict[str, Any] = Field(default_factory=dict)


class FieldUpdateRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


# --- Helpers ---


def _get_shell(request: Request, session_id: str, *, open_only: bool = False) -> FormShell:
    shell = request.app.state.form_store.get(session_id)
    if shell is None:
        raise HTTPException(status_code=404, detail=f"Form session {session_id!r} not found")
    if open_only and shell.closed:
        raise HTTPException(status_code=409, detail=f"Form session {session_id!r} is closed")
    return shell


def _error_detail(error: FormError | None) -> dict[str, Any]:
    if error is None:
        return {}
    return error.model_dump(mode="json")


def _navigation_response(shell: FormShell, result: NavigationResult) -> dict[str, Any]:
    if not result.ok:
        raise HTTPException(status_code=409, detail=_error_detail(result.error))
    return shell.snapshot()


# --- Wizard definitions ---


@router.get("/api/forms")
async def list_forms(request: Request) -> list[dict[str, Any]]:
    registry = request.app.state.registry
    return [
        {
            "id": defn.id,
            "title": defn.title,
            "description": defn.description,
            "resource": defn.resource,
            "steps": len(defn.steps),
        }
        for defn in registry.definitions.values()
    ]


# --- Sessions ---


@router.post("/api/forms/{wizard_id}/sessions", status_code=201)
async def start_session(
    wizard_id: str, request: Request, body: StartSessionRequest | None = None
) -> dict[str, Any]:
    registry = request.app.state.registry
    try:
        definition = registry.get(wizard_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        shell = FormShell(
            definition,
            request.app.state.api_client,
            validation_engine=request.app.state.validation_engine,
            initial=body.initial if body else None,
        )
    except KeyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    request.app.state.form_store.save(shell)
    return shell.snapshot()


@router.get("/api/forms/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> dict[str, Any]:
    return _get_shell(request, session_id).snapshot()


@router.delete("/api/forms/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, request: Request) -> Response:
    _get_shell(request, session_id)
    request.app.state.form_store.remove(session_id)
    return Response(status_code=204)


@router.patch("/api/forms/sessions/{session_id}/fields")
async def update_fields(
    session_id: str, body: FieldUpdateRequest, request: Request
) -> dict[str, Any]:
    shell = _get_shell(request, session_id, open_only=True)
    try:
        shell.update(body.values)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return shell.snapshot()


# --- Navigation ---


@router.post("/api/forms/sessions/{session_id}/steps/{index}")
async def go_to_step(session_id: str, index: int, request: Request) -> dict[str, Any]:
    shell = _get_shell(request, session_id, open_only=True)
    try:
        result = shell.go_to_step(index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _navigation_response(shell, result)


@router.post("/api/forms/sessions/{session_id}/next")
async def next_step(session_id: str, request: Request) -> dict[str, Any]:
    shell = _get_shell(request, session_id, open_only=True)
    return _navigation_response(shell, shell.next())


@router.post("/api/forms/sessions/{session_id}/previous")
async def previous_step(session_id: str, request: Request) -> dict[str, Any]:
    shell = _get_shell(request, session_id, open_only=True)
    return _navigation_response(shell, shell.previous())


# --- Submission ---


@router.post("/api/forms/sessions/{session_id}/submit", status_code=201)
async def submit_session(session_id: str, request: Request) -> dict[str, Any]:
    shell = _get_shell(request, session_id, open_only=True)
    result = await shell.submit()
    if not result.ok:
        kind = result.error.kind if result.error else FormErrorKind.SUBMISSION
        raise HTTPException(
            status_code=_SUBMIT_ERROR_STATUS[kind],
            detail=_error_detail(result.error),
        )
    return {"data": result.data, "session": shell.snapshot()}
