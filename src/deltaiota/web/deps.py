from collections.abc import Awaitable, Callable
from typing import Annotated, assert_never, cast

import pydantic
import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError

from deltaiota.app import App
from deltaiota.core.modules.auth.models import AuthClientError, AuthScheme, AuthServerError, AuthSuccess
from deltaiota.core.modules.user.models import UserInput
from deltaiota.errors import AuthenticationError

logger = structlog.get_logger(__name__)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


AppDep = Annotated[App, Depends(get_app)]


def require_auth(scheme: AuthScheme) -> Callable[[Request, App], Awaitable[AuthSuccess]]:
    """Build a dependency that authenticates the request's Basic credentials with one scheme.

    The resolved principal is returned to FastAPI and injected into the handler
    as a parameter, so it lives exactly as long as the request.
    """

    async def authenticate(request: Request, app: AppDep) -> AuthSuccess:
        outcome = await app.authenticate(scheme, request.headers.get("Authorization"))
        match outcome:
            case AuthSuccess():
                return outcome
            case AuthClientError():
                raise AuthenticationError(outcome.message)
            case AuthServerError(cause=cause):
                logger.error(
                    "authentication_server_error",
                    scheme=scheme.value,
                    method=request.method,
                    path=request.url.path,
                    client=request.client.host if request.client else None,
                    exc_info=cause,
                )
                raise HTTPException(status_code=500)
            case _:
                assert_never(outcome)

    return authenticate


PasswordAuthDep = Annotated[AuthSuccess, Depends(require_auth(AuthScheme.PASSWORD))]
KeyAuthDep = Annotated[AuthSuccess, Depends(require_auth(AuthScheme.KEY))]
BasicAuthDep = Annotated[AuthSuccess, Depends(require_auth(AuthScheme.BASIC))]


async def read_user_input(request: Request, _: KeyAuthDep) -> UserInput:
    """Decode the user body only once the caller is authenticated.

    A declared body parameter would be parsed before any dependency runs, so
    unauthenticated callers would see body errors instead of 401.
    """
    try:
        return UserInput.model_validate_json(await request.body())
    except pydantic.ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


UserInputDep = Annotated[UserInput, Depends(read_user_input)]
