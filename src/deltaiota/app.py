from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo import AsyncMongoClient

from deltaiota.config import Config
from deltaiota.core.core import Core
from deltaiota.core.modules.auth.authenticators import build_authenticators
from deltaiota.core.modules.auth.models import AuthOutcome, AuthScheme, AuthSuccess
from deltaiota.core.modules.notification.models import Notification
from deltaiota.core.modules.session.models import Session
from deltaiota.core.modules.status.models import ServerStatus
from deltaiota.core.modules.user.models import UserInput, UserView
from deltaiota.errors import AuthenticationError, ValidationError
from deltaiota.utils import now


class App:
    """Facade for all application operations, used by the web layer once a request is authenticated."""

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, mongo_client)
        self._authenticators = build_authenticators(self._core)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def authenticate(self, scheme: AuthScheme, authorization: str | None) -> AuthOutcome:
        """Resolve an Authorization header with the given scheme."""
        return await self._authenticators[scheme].authenticate(authorization)

    # === Sessions ===
    async def create_session(self, auth: AuthSuccess) -> Session:
        """Issue a new API key for a password-authenticated user."""
        expires_at = now() + self._core.config.session_duration
        return await self._core.services.session.create_session(auth.user.id, expires_at)

    def get_session(self, auth: AuthSuccess) -> Session:
        """Get the key-authenticated session, already refreshed by authentication."""
        return self._require_session(auth)

    async def delete_session(self, auth: AuthSuccess) -> None:
        """Log out: delete the session used for this request."""
        await self._core.services.session.delete_session(self._require_session(auth))

    # === Users ===
    async def get_all_users(self) -> list[UserView]:
        users = await self._core.services.user.get_all_users()
        return [UserView.from_domain(user) for user in users]

    async def get_user(self, user_id: str) -> UserView:
        user = await self._core.services.user.get_user(self._parse_user_id(user_id))
        return UserView.from_domain(user)

    async def create_user(self, data: UserInput) -> UserView:
        user = await self._core.services.user.create_user(data)
        return UserView.from_domain(user)

    async def update_user(self, user_id: str, data: UserInput) -> UserView:
        user = await self._core.services.user.update_user(self._parse_user_id(user_id), data)
        return UserView.from_domain(user)

    async def delete_user(self, user_id: str) -> None:
        """Delete a user together with its sessions and notifications."""
        await self._core.services.user.delete_user(self._parse_user_id(user_id))

    # === Notifications ===
    async def get_notifications(self, auth: AuthSuccess) -> list[Notification]:
        """Get notifications addressed to the authenticated user."""
        return await self._core.services.notification.get_notifications_by_user(auth.user.id)

    # === Status ===
    def get_status(self) -> ServerStatus:
        return ServerStatus.collect()

    # === Private helpers ===
    @staticmethod
    def _parse_user_id(user_id: str) -> UUID:
        try:
            return UUID(user_id)
        except ValueError as exc:
            raise ValidationError("invalid user ID") from exc

    @staticmethod
    def _require_session(auth: AuthSuccess) -> Session:
        if auth.session is None:
            raise AuthenticationError
        return auth.session
