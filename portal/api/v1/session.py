"""
Session endpoints - single active session per user

POST /api/session drives register/check/update/delete.
GET /api/session/status answers the browser's poll, focus and route-change checks.
WS /api/session/ws pushes session_replaced as soon as another login takes over.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.database import SessionLocal, get_db
from portal.core.dependencies import (
    clear_session_cookie,
    client_ip,
    session_cookie,
    set_session_cookie,
    user_agent,
)
from portal.core.exceptions import BadRequestError, NotFoundError
from portal.core.session_events import EVT_SESSION_REPLACED, session_events
from portal.schemas.session import SessionRequest
from portal.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter()

# Close code sent when the session is no longer the active one
WS_CLOSE_SESSION_ENDED = 4401

SESSION_ACTIONS = ("register", "check", "update", "delete")


@router.post("")
async def session_action(
    body: SessionRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Session management.

    Actions:
        register: replace the user's session with a new one and set the cookie
        check: whether sessionId (or the cookie) is the user's active session
        update: refresh last_active of the session
        delete: remove the user's session and clear the cookie
    """
    service = SessionService(db)
    session_id = body.sessionId or session_cookie(request)

    if not body.email:
        # Cookie-only check, as done by the route guard
        if body.action == "check" and session_id:
            return {"success": True, "active": service.find_by_session_id(session_id) is not None}
        raise BadRequestError("Email is required")

    user = service.get_user_by_email(body.email)
    if not user:
        raise NotFoundError("User not found")

    if body.action not in SESSION_ACTIONS:
        raise BadRequestError("Invalid action")

    if body.action == "register":
        new_session_id = service.register(
            user.id,
            browser_id=body.browser_id,
            user_agent=user_agent(request),
            ip_address=client_ip(request),
        )
        set_session_cookie(response, new_session_id)
        return {"success": True, "sessionId": new_session_id}

    if body.action == "delete":
        service.delete(user.id)
        clear_session_cookie(response)
        return {"success": True}

    if not session_id:
        raise BadRequestError("Session ID is required")

    if body.action == "check":
        return {"success": True, "active": service.is_active(user.id, session_id)}

    return {"success": service.touch(user.id, session_id)}


@router.get("/status")
async def session_status(request: Request, db: Session = Depends(get_db)):
    """Whether the cookie's session is still the active one"""
    session_id = session_cookie(request)
    active = bool(session_id) and SessionService(db).find_by_session_id(session_id) is not None
    return {"active": active, "pollIntervalSeconds": settings.SESSION_POLL_INTERVAL}


def _session_owner(session_id: str) -> Optional[int]:
    db = SessionLocal()
    try:
        row = SessionService(db).find_by_session_id(session_id)
        return row.user_id if row is not None else None
    finally:
        db.close()


def _still_active(user_id: int, session_id: str) -> bool:
    db = SessionLocal()
    try:
        return SessionService(db).is_active(user_id, session_id)
    finally:
        db.close()


async def watch_session(websocket: WebSocket, user_id: int, session_id: str, queue: asyncio.Queue) -> None:
    """
    Wait for the session to end and tell the browser.

    Returns after sending the ending event and closing with
    WS_CLOSE_SESSION_ENDED, or when the client goes away. No database
    session is held while waiting.
    """
    receiver = asyncio.create_task(websocket.receive_text())
    try:
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait(
                {getter, receiver},
                timeout=settings.SESSION_POLL_INTERVAL,
                return_when=asyncio.FIRST_COMPLETED,
            )

            if getter in done:
                event = getter.result()
                if event.session_id != session_id:
                    await websocket.send_json(event.to_dict())
                    await websocket.close(code=WS_CLOSE_SESSION_ENDED)
                    return
            else:
                getter.cancel()

            if receiver in done:
                if receiver.exception() is not None:
                    return
                # Client messages are keep-alives
                receiver = asyncio.create_task(websocket.receive_text())
                continue

            if getter in done:
                continue

            if not _still_active(user_id, session_id):
                await websocket.send_json({"type": EVT_SESSION_REPLACED, "sessionId": None})
                await websocket.close(code=WS_CLOSE_SESSION_ENDED)
                return
    finally:
        receiver.cancel()


@router.websocket("/ws")
async def session_channel(websocket: WebSocket, sessionId: Optional[str] = None):
    """
    Realtime session invalidation channel.

    Answers {"type": "connected"} once subscribed, then pushes
    {"type": "session_replaced"} (or "session_deleted") and closes once the
    connected session stops being the active one. Event delivery is backed
    by a database re-check every SESSION_POLL_INTERVAL seconds.
    """
    await websocket.accept()
    session_id = sessionId or websocket.cookies.get(settings.SESSION_COOKIE_NAME)

    user_id = _session_owner(session_id) if session_id else None
    if user_id is None:
        await websocket.send_json({"type": "session_invalid"})
        await websocket.close(code=WS_CLOSE_SESSION_ENDED)
        return

    queue = session_events.subscribe(user_id)
    logger.debug(f"Session channel opened for user {user_id}")
    try:
        await websocket.send_json({"type": "connected", "sessionId": session_id})
        await watch_session(websocket, user_id, session_id, queue)
    except WebSocketDisconnect:
        pass
    finally:
        session_events.unsubscribe(user_id, queue)
        logger.debug(f"Session channel closed for user {user_id}")
