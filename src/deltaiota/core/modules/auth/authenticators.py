"""Authenticators resolve a Basic credential pair to a user (and, for keys, a session).

They never raise for expected failures and never touch the HTTP response:
each call returns exactly one AuthOutcome for the web layer to render.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import ClassVar

import structlog

from deltaiota.core.core import Core
from deltaiota.core.modules.auth.credentials import parse_basic_credentials
from deltaiota.core.modules.auth.models import (
    AuthClientError,
    AuthError,
    AuthErrorKind,
    AuthOutcome,
    AuthScheme,
    AuthServerError,
    AuthSuccess,
    BasicCredentials,
)
from deltaiota.core.modules.session.models import Session
from deltaiota.core.modules.user.models import User
from deltaiota.core.modules.user.passwords import PasswordMismatchError, check_password
from deltaiota.errors import NotFoundError, ReadOnlyError
from deltaiota.utils import now

logger = structlog.get_logger(__name__)


class Authenticator(ABC):
    scheme: ClassVar[AuthScheme]
    no_secret: ClassVar[AuthErrorKind]

    def __init__(self, core: Core) -> None:
        self._core = core

    async def authenticate(self, authorization: str | None) -> AuthOutcome:
        """Authenticate the raw value of an Authorization header."""
        try:
            credentials = parse_basic_credentials(authorization)
            # Blank credentials are refused before any database access
            if not credentials.username:
                raise AuthError(AuthErrorKind.NO_USERNAME)
            if not credentials.secret:
                raise AuthError(self.no_secret)
            user, session = await self._verify(credentials)
        except AuthError as exc:
            return AuthClientError(exc)
        except Exception as exc:  # noqa: BLE001 - store and hashing failures become server errors
            return AuthServerError(exc)
        return AuthSuccess(user=user, session=session)

    async def _lookup_user(self, username: str) -> User:
        try:
            return await self._core.services.user.get_user_by_username(username)
        except NotFoundError as exc:
            raise AuthError(AuthErrorKind.INVALID_USERNAME) from exc

    @abstractmethod
    async def _verify(self, credentials: BasicCredentials) -> tuple[User, Session | None]:
        """Check non-blank credentials against the store, raising AuthError on refusal."""


class PasswordAuthenticator(Authenticator):
    """username:password against the stored bcrypt hash. Issues no session."""

    scheme = AuthScheme.PASSWORD
    no_secret = AuthErrorKind.NO_PASSWORD

    async def _verify(self, credentials: BasicCredentials) -> tuple[User, Session | None]:
        user = await self._lookup_user(credentials.username)
        try:
            await asyncio.to_thread(check_password, user.password_hash, credentials.secret)
        except PasswordMismatchError as exc:
            raise AuthError(AuthErrorKind.INVALID_PASSWORD) from exc
        return user, None


class BasicAuthenticator(PasswordAuthenticator):
    """Legacy username:password check for the old session-creation endpoint."""

    scheme = AuthScheme.BASIC


class KeyAuthenticator(Authenticator):
    """username:key against stored sessions, with sliding expiration."""

    scheme = AuthScheme.KEY
    no_secret = AuthErrorKind.NO_KEY

    async def _verify(self, credentials: BasicCredentials) -> tuple[User, Session | None]:
        sessions = self._core.services.session
        user = await self._lookup_user(credentials.username)

        try:
            session = await sessions.get_session_by_key(credentials.secret)
        except NotFoundError as exc:
            raise AuthError(AuthErrorKind.INVALID_KEY) from exc

        # Someone else's key reads exactly like an unknown key
        if session.user_id != user.id:
            raise AuthError(AuthErrorKind.INVALID_KEY)

        current = now()
        if session.is_expired(current):
            await sessions.delete_session(session)
            raise AuthError(AuthErrorKind.EXPIRED_KEY)

        session = session.model_copy(update={"expires_at": current + self._core.config.session_duration})
        try:
            await sessions.update_session(session)
        except ReadOnlyError as exc:
            logger.warning("session_refresh_skipped", session_id=str(session.id), reason=str(exc))
        return user, session


AUTHENTICATORS: tuple[type[Authenticator], ...] = (PasswordAuthenticator, KeyAuthenticator, BasicAuthenticator)


def build_authenticators(core: Core) -> dict[AuthScheme, Authenticator]:
    return {authenticator.scheme: authenticator(core) for authenticator in AUTHENTICATORS}
