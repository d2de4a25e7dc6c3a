from ministry.web.routers.admin import router as admin_router
from ministry.web.routers.auth import router as auth_router
from ministry.web.routers.password import router as password_router
from ministry.web.routers.profile import router as profile_router

__all__ = [
    "admin_router",
    "auth_router",
    "password_router",
    "profile_router",
]
