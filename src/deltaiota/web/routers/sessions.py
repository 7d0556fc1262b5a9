from fastapi import APIRouter
from pydantic import BaseModel, Field

from deltaiota.core.modules.session.models import Session
from deltaiota.web.deps import AppDep, BasicAuthDep, KeyAuthDep, PasswordAuthDep
from deltaiota.web.openapi import ErrorResponse

router = APIRouter(tags=["sessions"])


class SessionResponse(BaseModel):
    """Session wrapper."""

    session: Session = Field(..., description="API key session; send its key as the Basic password")


@router.post(
    "/sessions",
    summary="Create session",
    description="Authenticate with username and password (HTTP Basic) to receive an API key.",
    operation_id="createSession",
    responses={
        200: {"description": "Session created"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def create_session(app: AppDep, auth: PasswordAuthDep) -> SessionResponse:
    return SessionResponse(session=await app.create_session(auth))


@router.post(
    "/login",
    summary="Create session (legacy)",
    description="Legacy endpoint for clients that still log in here; behaves like POST /sessions.",
    operation_id="login",
    responses={
        200: {"description": "Session created"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(app: AppDep, auth: BasicAuthDep) -> SessionResponse:
    return SessionResponse(session=await app.create_session(auth))


@router.api_route(
    "/sessions",
    methods=["GET", "HEAD"],
    summary="Get current session",
    description="Return the session used to authenticate this request, with its refreshed expiration.",
    operation_id="getSession",
    responses={
        200: {"description": "Current session"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_session(app: AppDep, auth: KeyAuthDep) -> SessionResponse:
    return SessionResponse(session=app.get_session(auth))


@router.delete(
    "/sessions",
    summary="Delete current session",
    description="Log out by deleting the session used to authenticate this request.",
    operation_id="deleteSession",
    status_code=204,
    responses={
        204: {"description": "Session deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def delete_session(app: AppDep, auth: KeyAuthDep) -> None:
    await app.delete_session(auth)
