"""Client library for the Delta Iota HTTP API.

Usage::

    client = Client("http://localhost:1898")
    client.authenticate_password("alice", "secret")
    users = client.users.list()
"""

from types import TracebackType
from typing import Any, Self
from uuid import UUID

import httpx
from pydantic import BaseModel

from deltaiota.core.modules.notification.models import Notification
from deltaiota.core.modules.session.models import Session
from deltaiota.core.modules.status.models import ServerStatus
from deltaiota.core.modules.user.models import UserInput, UserView

API_VERSION = "v0"
USER_AGENT = "deltaiota-client"


class APIError(Exception):
    """Error envelope returned by the server."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class Client:
    """Synchronous client; any ``httpx.Client`` (including a test client) may be injected."""

    def __init__(self, base_url: str, http_client: httpx.Client | None = None) -> None:
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client()
        self._prefix = f"{base_url.rstrip('/')}/api/{API_VERSION}"
        self.session: Session | None = None
        self._credentials: tuple[str, str] | None = None

        self.sessions = SessionsService(self)
        self.users = UsersService(self)
        self.notifications = NotificationsService(self)
        self.status = StatusService(self)

    def authenticate_password(self, username: str, password: str) -> Session:
        """Create a session with a password and keep it for later requests."""
        session = self.sessions.create(username, password)
        self._credentials = (username, session.key)
        self.session = session
        return session

    def authenticate_session(self, username: str, key: str) -> Session:
        """Adopt an existing API key, checking it with the server."""
        previous = self._credentials
        self._credentials = (username, key)
        try:
            session = self.sessions.get()
        except (APIError, httpx.HTTPError):
            self._credentials = previous
            raise
        self.session = session
        return session

    def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def request(
        self,
        method: str,
        endpoint: str,
        body: BaseModel | None = None,
        auth: tuple[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body, or None when there is none."""
        if auth is None:
            auth = self._credentials

        response = self._http.request(
            method,
            f"{self._prefix}/{endpoint}",
            content=body.model_dump_json() if body is not None else None,
            auth=httpx.BasicAuth(*auth) if auth is not None else None,
            headers={"Accept": "application/json", "Content-Type": "application/json", "User-Agent": USER_AGENT},
        )
        self._check_response(response)
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _check_response(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            error = response.json()["error"]
        except (ValueError, KeyError, TypeError) as exc:
            raise APIError(response.status_code, response.reason_phrase) from exc
        raise APIError(error["code"], error["message"])


class SessionsService:
    def __init__(self, client: Client) -> None:
        self._client = client

    def create(self, username: str, password: str) -> Session:
        data = self._client.request("POST", "sessions", auth=(username, password))
        return Session.model_validate(data["session"])

    def get(self) -> Session:
        data = self._client.request("GET", "sessions")
        return Session.model_validate(data["session"])

    def delete(self) -> None:
        self._client.request("DELETE", "sessions")


class UsersService:
    def __init__(self, client: Client) -> None:
        self._client = client

    def list(self) -> list[UserView]:
        data = self._client.request("GET", "users")
        return [UserView.model_validate(item) for item in data["users"]]

    def get(self, user_id: UUID | str) -> UserView:
        data = self._client.request("GET", f"users/{user_id}")
        return UserView.model_validate(data["users"][0])

    def create(self, user: UserInput) -> UserView:
        data = self._client.request("POST", "users", body=user)
        return UserView.model_validate(data["users"][0])

    def update(self, user_id: UUID | str, user: UserInput) -> UserView:
        data = self._client.request("PUT", f"users/{user_id}", body=user)
        return UserView.model_validate(data["users"][0])

    def delete(self, user_id: UUID | str) -> None:
        self._client.request("DELETE", f"users/{user_id}")


class NotificationsService:
    def __init__(self, client: Client) -> None:
        self._client = client

    def list(self) -> list[Notification]:
        data = self._client.request("GET", "notifications")
        return [Notification.model_validate(item) for item in data["notifications"]]


class StatusService:
    def __init__(self, client: Client) -> None:
        self._client = client

    def get(self) -> ServerStatus:
        data = self._client.request("GET", "status")
        return ServerStatus.model_validate(data["status"])
