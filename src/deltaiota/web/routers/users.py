from fastapi import APIRouter
from pydantic import BaseModel, Field

from deltaiota.core.modules.user.models import UserInput, UserView
from deltaiota.web.deps import AppDep, KeyAuthDep, UserInputDep
from deltaiota.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])

# The body is read by UserInputDep after authentication, so its schema is declared here
USER_INPUT_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": UserInput.model_json_schema()}},
    }
}


class UsersResponse(BaseModel):
    """User list wrapper; single-user endpoints return a list of one."""

    users: list[UserView] = Field(..., description="Users")


@router.api_route(
    "/users",
    methods=["GET", "HEAD"],
    summary="List all users",
    description="Get all users in the system.",
    operation_id="listUsers",
    responses={
        200: {"description": "List of all users"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_users(app: AppDep, _: KeyAuthDep) -> UsersResponse:
    return UsersResponse(users=await app.get_all_users())


@router.post(
    "/users",
    summary="Create new user",
    description="Create a new user account.",
    operation_id="createUser",
    openapi_extra=USER_INPUT_BODY,
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        409: {"model": ErrorResponse, "description": "Username already taken"},
    },
)
async def create_user(app: AppDep, data: UserInputDep) -> UsersResponse:
    return UsersResponse(users=[await app.create_user(data)])


@router.api_route(
    "/users/{user_id}",
    methods=["GET", "HEAD"],
    summary="Get user",
    description="Get a single user by ID.",
    operation_id="getUser",
    responses={
        200: {"description": "User"},
        400: {"model": ErrorResponse, "description": "Malformed user ID"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def get_user(user_id: str, app: AppDep, _: KeyAuthDep) -> UsersResponse:
    return UsersResponse(users=[await app.get_user(user_id)])


@router.put(
    "/users/{user_id}",
    summary="Replace user",
    description="Replace every writable field of a user, including the password.",
    operation_id="updateUser",
    openapi_extra=USER_INPUT_BODY,
    responses={
        200: {"description": "User updated"},
        400: {"model": ErrorResponse, "description": "Malformed user ID or invalid fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Username already taken"},
    },
)
async def update_user(user_id: str, app: AppDep, data: UserInputDep) -> UsersResponse:
    return UsersResponse(users=[await app.update_user(user_id, data)])


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Delete a user account along with its sessions and notifications.",
    operation_id="deleteUser",
    status_code=204,
    responses={
        204: {"description": "User deleted successfully"},
        400: {"model": ErrorResponse, "description": "Malformed user ID"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def delete_user(user_id: str, app: AppDep, _: KeyAuthDep) -> None:
    await app.delete_user(user_id)
