from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.core.modules.user.models import UserView
from ministry.web.deps import AppDep, SessionIdDep
from ministry.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class UpdateProfileRequest(BaseModel):
    """Profile update. Missing or empty values clear the field."""

    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    phone_number: str | None = Field(None, description="Phone number")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@router.get(
    "/user",
    summary="Get current user",
    description="Get the profile of the currently authenticated user.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_current_user(app: AppDep, session_id: SessionIdDep) -> UserView:
    return await app.get_current_user(session_id)


@router.put(
    "/user/profile",
    summary="Update profile",
    description="Update name and phone number of the currently authenticated user.",
    operation_id="updateProfile",
    responses={
        200: {"description": "Updated profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def update_profile(request: UpdateProfileRequest, app: AppDep, session_id: SessionIdDep) -> UserView:
    return await app.update_profile(session_id, request.first_name, request.last_name, request.phone_number)
