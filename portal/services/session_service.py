"""
Session Service - single active session per client user

Registering a session deletes every existing row of the user and inserts a
fresh one, so the most recent login wins. Browsers holding an older
session id see it rejected on their next check and are pushed a
session_replaced event when they listen on the realtime channel.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.session_events import (
    EVT_SESSION_DELETED,
    EVT_SESSION_REPLACED,
    SessionEvent,
    session_events,
)
from portal.models.active_session import ActiveSession
from portal.models.client import ClientUser

logger = logging.getLogger(__name__)

DEFAULT_BROWSER_ID = "default-browser"


class SessionService:
    """Create, verify, touch and delete the active session of a user"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[ClientUser]:
        return self.db.query(ClientUser).filter(ClientUser.registered_email == email).first()

    def current_session(self, user_id: int) -> Optional[ActiveSession]:
        return self.db.query(ActiveSession).filter(
            ActiveSession.user_id == user_id
        ).order_by(ActiveSession.created_at.desc(), ActiveSession.id.desc()).first()

    def find_by_session_id(self, session_id: str) -> Optional[ActiveSession]:
        return self.db.query(ActiveSession).filter(ActiveSession.session_id == session_id).first()

    def _replace(self, user_id: int, browser_id: str, user_agent: str, ip_address: str) -> str:
        session_id = str(uuid.uuid4())
        now = datetime.utcnow()
        self.db.query(ActiveSession).filter(ActiveSession.user_id == user_id).delete(
            synchronize_session=False
        )
        self.db.add(ActiveSession(
            user_id=user_id,
            session_id=session_id,
            browser_id=browser_id,
            created_at=now,
            last_active=now,
            user_agent=user_agent,
            ip_address=ip_address,
        ))
        self.db.commit()
        return session_id

    def register(
        self,
        user_id: int,
        browser_id: Optional[str] = None,
        user_agent: str = "",
        ip_address: str = "",
    ) -> str:
        """
        Make a new session the only active one for the user.

        A concurrent login can collide on the unique constraint; the
        replacement is retried once and the later write wins.

        Returns:
            The new session id
        """
        browser_id = browser_id or DEFAULT_BROWSER_ID
        try:
            session_id = self._replace(user_id, browser_id, user_agent, ip_address)
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Session registration race for user {user_id}, retrying")
            session_id = self._replace(user_id, browser_id, user_agent, ip_address)

        logger.info(f"Registered session for user {user_id} (browser {browser_id})")
        session_events.publish(SessionEvent(EVT_SESSION_REPLACED, user_id, session_id))
        return session_id

    def is_active(self, user_id: int, session_id: Optional[str]) -> bool:
        """True if the user's current session is the given one"""
        if not session_id:
            return False
        session = self.current_session(user_id)
        active = session is not None and session.session_id == session_id
        logger.debug(
            f"Session check for user {user_id}: requested={session_id} "
            f"current={session.session_id if session else None} active={active}"
        )
        return active

    def touch(self, user_id: int, session_id: str) -> bool:
        """Refresh last_active of a matching session. Returns False if none matched."""
        updated = self.db.query(ActiveSession).filter(
            ActiveSession.user_id == user_id,
            ActiveSession.session_id == session_id,
        ).update({ActiveSession.last_active: datetime.utcnow()}, synchronize_session=False)
        self.db.commit()
        return updated > 0

    def delete(self, user_id: int) -> int:
        """Remove every session of the user"""
        deleted = self.db.query(ActiveSession).filter(ActiveSession.user_id == user_id).delete(
            synchronize_session=False
        )
        self.db.commit()
        if deleted:
            logger.info(f"Deleted {deleted} session(s) for user {user_id}")
            session_events.publish(SessionEvent(EVT_SESSION_DELETED, user_id))
        return deleted
