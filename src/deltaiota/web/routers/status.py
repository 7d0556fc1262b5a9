from fastapi import APIRouter
from pydantic import BaseModel, Field

from deltaiota.core.modules.status.models import ServerStatus
from deltaiota.web.deps import AppDep, KeyAuthDep
from deltaiota.web.openapi import ErrorResponse

router = APIRouter(tags=["status"])


class StatusResponse(BaseModel):
    status: ServerStatus = Field(..., description="Server process information")


@router.api_route(
    "/status",
    methods=["GET", "HEAD"],
    summary="Server status",
    description="Report basic information about the running server process.",
    operation_id="getStatus",
    responses={
        200: {"description": "Server status"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_status(app: AppDep, _: KeyAuthDep) -> StatusResponse:
    return StatusResponse(status=app.get_status())
