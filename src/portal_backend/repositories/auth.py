import logging
from datetime import timedelta
from typing import Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..interface.tokens import generate_session_token
from ..model.auth import AuthSession
from ..model.base import utcnow

logger = logging.getLogger(__name__)


class AuthSessionRepository(BaseRepository[AuthSession]):
    """Issues, resolves and revokes session tokens."""

    def __init__(self, db: Session):
        super().__init__(db, AuthSession)

    def issue(self, user_id: str, ttl_hours: int) -> AuthSession:
        session = AuthSession(
            user_id=user_id,
            token=generate_session_token(),
            expires_at=utcnow() + timedelta(hours=ttl_hours)
        )
        return self.create(session)

    def find_active_user_id(self, token: str) -> Optional[str]:
        """User id behind a token that is neither logged out nor expired."""
        return (
            self.db.query(AuthSession.user_id)
            .filter(
                AuthSession.token == token,
                AuthSession.logout_time.is_(None),
                AuthSession.expires_at > utcnow()
            )
            .scalar()
        )

    def revoke(self, token: str) -> int:
        revoked = (
            self.db.query(AuthSession)
            .filter(AuthSession.token == token, AuthSession.logout_time.is_(None))
            .update({AuthSession.logout_time: utcnow()}, synchronize_session=False)
        )
        self.commit()
        return revoked
