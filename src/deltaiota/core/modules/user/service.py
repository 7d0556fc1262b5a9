import asyncio
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from deltaiota.core.core import Service
from deltaiota.core.modules.user.models import User, UserInput
from deltaiota.core.modules.user.passwords import hash_password
from deltaiota.core.modules.user.validators import validate_user_input
from deltaiota.errors import ConflictError, NotFoundError
from deltaiota.utils import random_string

logger = structlog.get_logger(__name__)

ROOT_USERNAME = "root"
ROOT_PASSWORD_LENGTH = 12


class UserService(Service):
    """Manages user accounts. Every lookup goes to the database."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def get_user(self, user_id: UUID) -> User:
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError("user not found")
        return User.model_validate(doc)

    async def get_user_by_username(self, username: str) -> User:
        doc = await self._collection.find_one({"username": username})
        if doc is None:
            raise NotFoundError(f"User '{username}' not found")
        return User.model_validate(doc)

    async def get_all_users(self) -> list[User]:
        return await User.list_cursor(self._collection.find())

    async def has_username(self, username: str) -> bool:
        return await self._collection.find_one({"username": username}) is not None

    async def create_user(self, data: UserInput) -> User:
        """Validate input and store a new user with a hashed password."""
        validate_user_input(data)
        if await self.has_username(data.username):
            raise ConflictError("user already exists")

        user = User(
            username=data.username,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            password_hash=await self._hash(data.password),
        )
        await self._insert(user)
        return user

    async def update_user(self, user_id: UUID, data: UserInput) -> User:
        """Replace all writable fields of an existing user, including the password."""
        user = await self.get_user(user_id)
        validate_user_input(data)

        updated = user.model_copy(
            update={
                "username": data.username,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "email": data.email,
                "phone": data.phone,
                "password_hash": await self._hash(data.password),
            }
        )
        fields = updated.to_mongo()
        del fields["_id"]
        try:
            await self._collection.update_one({"_id": user_id}, {"$set": fields})
        except DuplicateKeyError as exc:
            raise ConflictError("user already exists") from exc
        return updated

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user and everything that references it."""
        user = await self.get_user(user_id)

        # Dependents first, so no session or notification outlives its user
        await self.core.services.session.delete_sessions_by_user(user.id)
        await self.core.services.notification.delete_notifications_by_user(user.id)
        await self._collection.delete_one({"_id": user.id})
        logger.info("user_deleted", user_id=str(user.id), username=user.username)

    async def ensure_root_user_exists(self) -> None:
        """Create the root account when the database holds no users at all."""
        if await self._collection.count_documents({}) > 0:
            return

        password = self.core.config.root_password or random_string(ROOT_PASSWORD_LENGTH)
        root = User(username=ROOT_USERNAME, password_hash=await self._hash(password))
        await self._insert(root)
        if self.core.config.root_password:
            logger.info("root_user_created", username=ROOT_USERNAME)
        else:
            logger.warning("root_user_created", username=ROOT_USERNAME, password=password)

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.core.config.bcrypt_rounds)

    async def _insert(self, user: User) -> None:
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as exc:
            raise ConflictError("user already exists") from exc

    async def on_start(self) -> None:
        """Initialize indexes and the root account."""
        await self._collection.create_index([("username", 1)], unique=True)
        await self.ensure_root_user_exists()
        logger.debug("user_service_started")
