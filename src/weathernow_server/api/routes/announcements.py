"""
Announcement API Routes

Endpoints:
- GET    /messages?since=ID  - Records with id > since (kiosk polling)
- POST   /announce           - Create announcement (Admin)
- DELETE /messages/{id}      - Dismiss one (Admin, idempotent)
- DELETE /messages           - Clear all (Admin)
- GET    /verify             - Check admin password (Admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter

from weathernow_server.api.routes.announcements_schemas import (
    AnnounceRequest,
    AnnouncementResponse,
    OkResponse,
)
from weathernow_server.services.admin_gate import require_admin
from weathernow_server.services.api_rate_limiter import route_limit
from weathernow_server.services.message_store import AnnouncementDraft, MessageStore
from weathernow_server.utils.config import Settings


def get_message_store(request: Request) -> MessageStore:
    """FastAPI dependency returning the application's MessageStore."""
    return request.app.state.message_store


def _parse_cursor(since: str | None) -> int:
    """Cursor from the query string; absent or invalid means 0."""
    if not since:
        return 0
    try:
        return int(since.strip())
    except ValueError:
        return 0


async def list_messages(
    request: Request,
    since: str | None = None,
    store: MessageStore = Depends(get_message_store),
):
    """List announcements newer than the ``since`` cursor."""
    cursor = _parse_cursor(since)
    return [m.to_dict() for m in store.list_since(cursor)]


async def create_announcement(
    request: Request,
    body: AnnounceRequest,
    store: MessageStore = Depends(get_message_store),
):
    """Create a new announcement for all kiosks."""
    text = body.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="text is required")

    record = store.append(
        AnnouncementDraft(
            text=text,
            title=body.title.strip(),
            type=body.type,
            display=body.display,
            duration=body.duration,
            tts=body.tts,
        )
    )
    return record.to_dict()


async def delete_message(
    message_id: int,
    request: Request,
    store: MessageStore = Depends(get_message_store),
):
    """Dismiss one announcement. Unknown ids succeed as well."""
    store.delete(message_id)
    return OkResponse()


async def clear_messages(
    request: Request,
    store: MessageStore = Depends(get_message_store),
):
    """Remove every announcement."""
    store.clear()
    return OkResponse()


async def verify_admin(request: Request):
    """Lets the admin panel check a password before using it."""
    return OkResponse()


def build_router(limiter: Limiter, app_settings: Settings) -> APIRouter:
    """
    Assemble the announcement routes for one application.

    Rate limits are bound here, per app, from ``app_settings``.
    """
    poll_limit = route_limit(limiter, app_settings.api_rate_limit_poll)
    admin_limit = route_limit(limiter, app_settings.api_rate_limit_admin)
    admin_only = [Depends(require_admin)]

    router = APIRouter()
    router.add_api_route(
        "/messages",
        poll_limit(list_messages),
        methods=["GET"],
        response_model=list[AnnouncementResponse],
    )
    router.add_api_route(
        "/announce",
        admin_limit(create_announcement),
        methods=["POST"],
        response_model=AnnouncementResponse,
        status_code=201,
        dependencies=admin_only,
    )
    router.add_api_route(
        "/messages/{message_id}",
        admin_limit(delete_message),
        methods=["DELETE"],
        response_model=OkResponse,
        dependencies=admin_only,
    )
    router.add_api_route(
        "/messages",
        admin_limit(clear_messages),
        methods=["DELETE"],
        response_model=OkResponse,
        dependencies=admin_only,
    )
    router.add_api_route(
        "/verify",
        admin_limit(verify_admin),
        methods=["GET"],
        response_model=OkResponse,
        dependencies=admin_only,
    )
    return router
