from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.web.deps import AppDep
from ministry.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(tags=["password"])


class ForgotPasswordRequest(BaseModel):
    email: str | None = Field(None, description="Account email")


class ResetPasswordRequest(BaseModel):
    token: str | None = Field(None, description="Reset token from the email link")
    new_password: str | None = Field(None, description="New password, at least 6 characters")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@router.post(
    "/forgot-password",
    summary="Request password reset",
    description="Email a reset link. The response is the same whether or not the email is registered.",
    operation_id="forgotPassword",
    responses={
        200: {"description": "Request accepted"},
        400: {"model": ErrorResponse, "description": "Email missing"},
    },
)
async def forgot_password(request: ForgotPasswordRequest, app: AppDep) -> MessageResponse:
    return MessageResponse(message=await app.request_password_reset(request.email))


@router.post(
    "/reset-password",
    summary="Reset password",
    description="Set a new password using a reset token. Does not log the user in.",
    operation_id="resetPassword",
    responses={
        200: {"description": "Password changed"},
        400: {"model": ErrorResponse, "description": "Invalid or expired token, or password too short"},
    },
)
async def reset_password(request: ResetPasswordRequest, app: AppDep) -> MessageResponse:
    return MessageResponse(message=await app.reset_password(request.token, request.new_password))
