import secrets
from datetime import datetime
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from deltaiota.core.core import Service
from deltaiota.core.db import is_read_only_error
from deltaiota.core.modules.session.models import Session
from deltaiota.errors import NotFoundError, ReadOnlyError


class SessionService(Service):
    """Service for managing API key sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique index for key (for authentication lookups)
        await self._collection.create_index([("key", 1)], unique=True)
        # Single index for user_id (for cascading deletes)
        await self._collection.create_index([("user_id", 1)])

    async def create_session(self, user_id: UUID, expires_at: datetime) -> Session:
        session = Session(user_id=user_id, key=secrets.token_urlsafe(32), expires_at=expires_at)
        await self._collection.insert_one(session.to_mongo())
        return session

    async def get_session_by_key(self, key: str) -> Session:
        doc = await self._collection.find_one({"key": key})
        if doc is None:
            raise NotFoundError("session not found")
        return Session.model_validate(doc)

    async def update_session(self, session: Session) -> None:
        """Persist the session's expiration.

        Raises:
            ReadOnlyError: If the database is not accepting writes
        """
        try:
            await self._collection.update_one({"_id": session.id}, {"$set": {"expires_at": session.expires_at}})
        except PyMongoError as exc:
            if is_read_only_error(exc):
                raise ReadOnlyError(str(exc)) from exc
            raise

    async def delete_session(self, session: Session) -> None:
        await self._collection.delete_one({"_id": session.id})

    async def delete_sessions_by_user(self, user_id: UUID) -> None:
        await self._collection.delete_many({"user_id": user_id})
