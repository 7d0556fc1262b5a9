from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from deltaiota.core.core import Service
from deltaiota.core.modules.notification.models import Notification


class NotificationService(Service):
    """Service for per-user notifications."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notifications")

    async def on_start(self) -> None:
        await self._collection.create_index([("user_id", 1)])

    async def get_notifications_by_user(self, user_id: UUID) -> list[Notification]:
        """Get a user's notifications, oldest first."""
        cursor = self._collection.find({"user_id": user_id}).sort("timestamp", 1)
        return await Notification.list_cursor(cursor)

    async def create_notification(self, user_id: UUID, text: str, uri: str = "") -> Notification:
        notification = Notification(user_id=user_id, text=text, uri=uri)
        await self._collection.insert_one(notification.to_mongo())
        return notification

    async def delete_notifications_by_user(self, user_id: UUID) -> None:
        await self._collection.delete_many({"user_id": user_id})
