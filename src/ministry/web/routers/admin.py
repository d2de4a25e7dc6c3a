from typing import Any
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.core.modules.audit.models import AuditLogView
from ministry.core.modules.user.models import AdminUserView
from ministry.core.pagination import PaginationResult
from ministry.web.deps import AppDep, ClientInfoDep, SessionIdDep
from ministry.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(prefix="/admin", tags=["admin"])

_ADMIN_ERRORS: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Admin access required"},
}


class CreateUserRequest(BaseModel):
    """Request to create a new user. Without a password the user sets one through a reset."""

    email: str | None = Field(None, description="Email address")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    role: str | None = Field(None, description="student, instructor or admin")
    username: str | None = Field(None, description="Optional username")
    password: str | None = Field(None, description="Optional initial password")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateRoleRequest(BaseModel):
    role: str | None = Field(None, description="student, instructor or admin")


@router.get(
    "/users",
    summary="List all users",
    description="Get all users, newest first.",
    operation_id="listUsers",
    responses={200: {"description": "List of all users"}, **_ADMIN_ERRORS},
)
async def list_users(app: AppDep, session_id: SessionIdDep) -> list[AdminUserView]:
    return await app.get_all_users(session_id)


@router.post(
    "/users",
    summary="Create new user",
    description="Create a user account and send a welcome email.",
    operation_id="createUser",
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request or duplicate email/username"},
        **_ADMIN_ERRORS,
    },
)
async def create_user(
    data: CreateUserRequest, app: AppDep, session_id: SessionIdDep, client: ClientInfoDep
) -> AdminUserView:
    return await app.create_user(
        session_id, data.email, data.first_name, data.last_name, data.role, data.username, data.password, client=client
    )


@router.put(
    "/users/{user_id}/role",
    summary="Change user role",
    description="Change a user's role. Takes effect on the user's next request.",
    operation_id="updateUserRole",
    responses={
        200: {"description": "Role updated"},
        400: {"model": ErrorResponse, "description": "Invalid role"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **_ADMIN_ERRORS,
    },
)
async def update_user_role(
    user_id: UUID, data: UpdateRoleRequest, app: AppDep, session_id: SessionIdDep, client: ClientInfoDep
) -> AdminUserView:
    return await app.update_user_role(session_id, user_id, data.role, client=client)


@router.delete(
    "/users/{user_id}",
    summary="Deactivate user",
    description="Deactivate a user account, or delete it permanently with `permanent=true`. Ends the user's sessions.",
    operation_id="deactivateUser",
    responses={
        200: {"description": "User deactivated or deleted"},
        400: {"model": ErrorResponse, "description": "Cannot deactivate yourself"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **_ADMIN_ERRORS,
    },
)
async def deactivate_user(
    user_id: UUID,
    app: AppDep,
    session_id: SessionIdDep,
    client: ClientInfoDep,
    permanent: bool = Query(False, description="Delete instead of deactivating"),
) -> MessageResponse:
    await app.deactivate_user(session_id, user_id, permanent=permanent, client=client)
    return MessageResponse(message="User deleted successfully" if permanent else "User deactivated successfully")


@router.get(
    "/audit-logs",
    summary="List audit logs",
    description="Get administrative actions, newest first.",
    operation_id="listAuditLogs",
    responses={200: {"description": "Paginated audit logs"}, **_ADMIN_ERRORS},
)
async def list_audit_logs(
    app: AppDep,
    session_id: SessionIdDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> PaginationResult[AuditLogView]:
    return await app.get_audit_logs(session_id, limit, offset)
