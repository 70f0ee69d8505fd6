"""/sessions routes: the module-selection dialog over JSON.

open -> list rows -> details -> toggle* -> commit (OK) | discard (Cancel)
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from modsel.errors import validate_error_type
from modsel.modules import ModuleEntry, SelectionSession
from modsel_app.api.session_store import SessionStore

router = APIRouter(prefix="/sessions")


class ToggleRequest(BaseModel):  # noqa: D401
    module_id: str


def _row(entry: ModuleEntry) -> dict:
    return {
        "id": entry.id,
        "display_name": entry.display_name,
        "description": entry.description,
        "active": entry.active,
        "toggleable": entry.toggleable,
    }


def _sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def _session(request: Request, session_id: str) -> SelectionSession:
    session = _sessions(request).get(session_id)
    if session is None:
        raise HTTPException(
            status_code=404, detail=validate_error_type("session-not-found")
        )
    return session


@router.post("")
def open_session(request: Request):  # noqa: D401
    session = SelectionSession(
        request.app.state.catalog, request.app.state.config_store
    )
    _sessions(request).add(session)
    return {
        "session_id": session.session_id,
        "modules": [_row(e) for e in session.entries()],
    }


@router.get("/{session_id}")
def list_rows(session_id: str, request: Request):  # noqa: D401
    session = _session(request, session_id)
    added, removed = session.changes()
    return {
        "session_id": session_id,
        "modules": [_row(e) for e in session.entries()],
        "pending": {"added": added, "removed": removed},
    }


@router.get("/{session_id}/modules/{module_id}")
def module_details(session_id: str, module_id: str, request: Request):
    session = _session(request, session_id)
    entry = session.entry(module_id)
    info = session.catalog.lookup(module_id)
    if entry is None or info is None:
        raise HTTPException(
            status_code=404, detail=validate_error_type("module-not-found")
        )
    payload = _row(entry)
    payload["dependencies"] = list(info.dependencies)
    payload["required_by"] = session.catalog.dependents(module_id)
    payload["action"] = (
        None
        if not entry.toggleable
        else ("deactivate" if entry.active else "activate")
    )
    return payload


@router.post("/{session_id}/toggle")
def toggle(session_id: str, body: ToggleRequest, request: Request):
    session = _session(request, session_id)
    changed = session.toggle(body.module_id)
    return {
        "module_id": body.module_id,
        "active": session.is_active(body.module_id),
        "changed": changed,
        "modules": [_row(e) for e in session.entries()],
    }


@router.post("/{session_id}/commit")
def commit(session_id: str, request: Request):  # noqa: D401
    session = _session(request, session_id)
    added, removed = session.changes()
    ok = session.commit()
    _sessions(request).remove(session_id)
    return {
        "ok": ok,
        "added": added,
        "removed": removed,
        "active": sorted(request.app.state.config_store.list_mods()),
    }


@router.post("/{session_id}/discard")
def discard(session_id: str, request: Request):  # noqa: D401
    session = _session(request, session_id)
    ok = session.discard()
    _sessions(request).remove(session_id)
    return {"ok": ok}
