from datetime import datetime
from uuid import UUID

from pydantic import Field

from deltaiota.core.db import MongoModel
from deltaiota.utils import now


class Notification(MongoModel):
    """Message addressed to a single user, optionally linking to a resource."""

    user_id: UUID
    timestamp: datetime = Field(default_factory=now)
    read: bool = False
    text: str = ""
    uri: str = ""
