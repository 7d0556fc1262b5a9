from deltaiota.web.routers.notifications import router as notifications_router
from deltaiota.web.routers.sessions import router as sessions_router
from deltaiota.web.routers.status import router as status_router
from deltaiota.web.routers.users import router as users_router

__all__ = [
    "notifications_router",
    "sessions_router",
    "status_router",
    "users_router",
]
