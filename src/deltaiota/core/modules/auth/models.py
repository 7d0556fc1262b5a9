"""Authentication outcomes and the client-facing failure vocabulary."""

from dataclasses import dataclass
from enum import StrEnum

from deltaiota.core.modules.session.models import Session
from deltaiota.core.modules.user.models import User
from deltaiota.errors import AuthenticationError


class AuthScheme(StrEnum):
    """How the secret half of a Basic credential pair is interpreted."""

    PASSWORD = "password"  # username:password, general password login
    KEY = "key"  # username:api-key, every resource endpoint
    BASIC = "basic"  # username:password, legacy session-creation endpoint


class AuthErrorKind(StrEnum):
    """Every reason a client can be refused. Values are the exact messages clients see."""

    NO_AUTHORIZATION_HEADER = "no HTTP Authorization header"
    NO_AUTHORIZATION_TYPE = "no HTTP Authorization type"
    NOT_BASIC_AUTHORIZATION = "not HTTP Basic Authorization type"
    INVALID_BASE64 = "invalid base64 HTTP Basic Authorization header"
    INVALID_CREDENTIAL_PAIR = "invalid credential pair in HTTP Basic Authorization header"
    NO_USERNAME = "no username provided"
    NO_PASSWORD = "no password provided"
    NO_KEY = "no API key provided"
    INVALID_USERNAME = "invalid username"
    INVALID_PASSWORD = "invalid password"
    INVALID_KEY = "invalid API key"
    EXPIRED_KEY = "expired API key"


class AuthError(AuthenticationError):
    """Client authentication failure with a known reason."""

    def __init__(self, kind: AuthErrorKind) -> None:
        self.kind = kind
        super().__init__(kind.value)


@dataclass(frozen=True, slots=True)
class BasicCredentials:
    username: str
    secret: str


@dataclass(frozen=True, slots=True)
class AuthSuccess:
    """Authenticated principal, handed to the protected handler."""

    user: User
    session: Session | None = None


@dataclass(frozen=True, slots=True)
class AuthClientError:
    """Bad or missing credentials. Shown to the caller as 401."""

    error: Exception

    @property
    def message(self) -> str:
        if isinstance(self.error, AuthError):
            return str(self.error)
        return "not authorized"


@dataclass(frozen=True, slots=True)
class AuthServerError:
    """Infrastructure failure while authenticating. Logged, never shown to the caller."""

    cause: Exception


AuthOutcome = AuthSuccess | AuthClientError | AuthServerError
