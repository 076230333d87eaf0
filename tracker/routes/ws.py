"""
WebSocket endpoint for the strain tracker client.

Each connection owns one session: it signs in, subscribes to the private and
community feeds, and receives a fresh derived view whenever a feed snapshot
arrives or the client changes its view state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from tracker.context import AppContext
from tracker.models.strain import StrainInput, StrainUpdate
from tracker.models.view import DataScope, StrainFilters
from tracker.services.admin import list_community_submissions
from tracker.services.feeds import StrainFeeds
from tracker.services.gateway import StrainGateway
from tracker.services.legality import legality_status
from tracker.services.session import SessionManager
from tracker.services.views import dashboard_view, format_strain_details, history_view

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])

_SCOPES: set[str] = {"mine", "community"}


@dataclass
class ViewState:
    """Client-selected inputs to view derivation."""

    scope: DataScope = "mine"
    filters: StrainFilters = field(default_factory=StrainFilters)
    search: str = ""


async def _send(websocket: WebSocket, payload: dict[str, Any]) -> None:
    await websocket.send_text(json.dumps(payload))


async def _send_error(websocket: WebSocket, msg_type: str, error: str) -> None:
    await _send(websocket, {"type": f"{msg_type}.error", "error": error})


def _describe(e: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())


def _session_payload(session: SessionManager) -> dict[str, Any]:
    return {
        "type": "session",
        "identity": session.identity,
        "display_name": session.display_name,
        "is_admin": session.is_admin,
        "authenticated": session.authenticated,
    }


def _view_payload(feeds: StrainFeeds, state: ViewState) -> dict[str, Any]:
    dashboard = dashboard_view(feeds.user_strains, feeds.community_strains, state.search)
    history = history_view(feeds.user_strains, feeds.community_strains, state.scope, state.filters, state.search)
    return {
        "type": "view",
        "dashboard": dashboard.model_dump(mode="json", by_alias=True),
        "history": history.model_dump(mode="json", by_alias=True),
    }


def _find_strain(feeds: StrainFeeds, strain_id: str):
    for strain in [*feeds.user_strains, *feeds.community_strains]:
        if strain.id == strain_id:
            return strain
    return None


@router.websocket("/ws/strains")
async def strains_websocket(websocket: WebSocket, token: str | None = None) -> None:
    """
    Stream derived strain views to the client over WebSocket.

    Protocol:
      Client → Server:  {"type": "strain.create", "strain": {...}}
                        {"type": "strain.update", "id": "...", "strain": {...}}
                        {"type": "strain.delete", "id": "..."}
                        {"type": "strain.details", "id": "..."}
                        {"type": "view.scope", "scope": "mine" | "community"}
                        {"type": "view.filters", "filters": {...}}
                        {"type": "view.search", "query": "..."}
                        {"type": "legality.check", "state": "..."}
                        {"type": "admin.submissions"}
      Server → Client:  session | view | strain.created | strain.updated |
                        strain.deleted | strain.details | legality |
                        admin.submissions | <type>.error

    Write acknowledgements only confirm the backend accepted the write; the
    resulting change arrives later in a view message.
    """
    await websocket.accept()
    context: AppContext = websocket.app.state.context

    session = SessionManager(context.auth, admin_prefix=context.settings.ADMIN_ID_PREFIX)
    feeds = StrainFeeds(context.store, context.app_id)
    gateway = StrainGateway(context.store, session, context.app_id)
    state = ViewState()

    async def announce(identity: str | None) -> None:
        await _send(websocket, _session_payload(session))

    async def push_view() -> None:
        await _send(websocket, _view_payload(feeds, state))

    # Session message goes out before the feeds start delivering views.
    session.add_listener(announce)
    session.add_listener(feeds.attach)
    feeds.add_listener(push_view)

    try:
        await session.start(token or context.settings.INITIAL_AUTH_TOKEN or None)
        logger.info("ws: session ready for %s", session.display_name)

        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("ws: malformed message from client: %r", raw[:200])
                continue
            if not isinstance(msg, dict):
                continue

            msg_type = msg.get("type")

            # ── writes ───────────────────────────────────────────────
            if msg_type == "strain.create":
                try:
                    strain = StrainInput.model_validate(msg.get("strain") or {})
                except ValidationError as e:
                    await _send_error(websocket, msg_type, _describe(e))
                    continue
                doc_id = await gateway.create(strain)
                if doc_id:
                    await _send(websocket, {"type": "strain.created", "id": doc_id})
                continue

            if msg_type == "strain.update":
                doc_id = msg.get("id")
                if not doc_id or not isinstance(doc_id, str):
                    await _send_error(websocket, msg_type, "id is required")
                    continue
                try:
                    changes = StrainUpdate.model_validate(msg.get("strain") or {})
                except ValidationError as e:
                    await _send_error(websocket, msg_type, _describe(e))
                    continue
                if await gateway.update(doc_id, changes):
                    await _send(websocket, {"type": "strain.updated", "id": doc_id})
                continue

            if msg_type == "strain.delete":
                doc_id = msg.get("id")
                if not doc_id or not isinstance(doc_id, str):
                    await _send_error(websocket, msg_type, "id is required")
                    continue
                if await gateway.delete(doc_id):
                    await _send(websocket, {"type": "strain.deleted", "id": doc_id})
                continue

            # ── reads ────────────────────────────────────────────────
            if msg_type == "strain.details":
                found = _find_strain(feeds, str(msg.get("id")))
                if found is None:
                    await _send_error(websocket, msg_type, f"Strain '{msg.get('id')}' not found")
                    continue
                await _send(
                    websocket,
                    {"type": "strain.details", "id": found.id, "text": format_strain_details(found)},
                )
                continue

            if msg_type == "legality.check":
                us_state = msg.get("state") or ""
                await _send(
                    websocket,
                    {"type": "legality", "state": us_state, "status": legality_status(us_state)},
                )
                continue

            if msg_type == "admin.submissions":
                submissions = await list_community_submissions(context.store, session, context.app_id)
                await _send(websocket, {"type": "admin.submissions", "submissions": submissions})
                continue

            # ── view state ───────────────────────────────────────────
            if msg_type == "view.scope":
                scope = msg.get("scope")
                if scope not in _SCOPES:
                    await _send_error(websocket, msg_type, "scope must be 'mine' or 'community'")
                    continue
                state.scope = scope
                await push_view()
                continue

            if msg_type == "view.filters":
                try:
                    state.filters = StrainFilters.model_validate(msg.get("filters") or {})
                except ValidationError as e:
                    await _send_error(websocket, msg_type, _describe(e))
                    continue
                await push_view()
                continue

            if msg_type == "view.search":
                state.search = str(msg.get("query") or "")
                await push_view()
                continue

            await _send(websocket, {"type": "error", "error": f"Unknown message type: {msg_type}"})

    except WebSocketDisconnect:
        logger.info("ws: client disconnected (%s)", session.display_name)
    finally:
        await feeds.detach()
