"""Session management models."""

from datetime import datetime
from uuid import UUID

from deltaiota.core.db import MongoModel


class Session(MongoModel):
    """API key session for a user.

    The key is a bearer credential presented alongside the owner's username.
    Indexed on key (unique) and user_id.
    """

    user_id: UUID
    key: str
    expires_at: datetime

    def is_expired(self, at: datetime) -> bool:
        return at >= self.expires_at
