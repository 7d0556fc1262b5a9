from fastapi import APIRouter
from pydantic import BaseModel, Field

from deltaiota.core.modules.notification.models import Notification
from deltaiota.web.deps import AppDep, KeyAuthDep
from deltaiota.web.openapi import ErrorResponse

router = APIRouter(tags=["notifications"])


class NotificationsResponse(BaseModel):
    notifications: list[Notification] = Field(..., description="Notifications for the current user, oldest first")


@router.api_route(
    "/notifications",
    methods=["GET", "HEAD"],
    summary="List notifications",
    description="Get all notifications addressed to the authenticated user.",
    operation_id="listNotifications",
    responses={
        200: {"description": "Notifications"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_notifications(app: AppDep, auth: KeyAuthDep) -> NotificationsResponse:
    return NotificationsResponse(notifications=await app.get_notifications(auth))
