from fastapi import APIRouter, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.config import Config
from ministry.core.modules.session.models import SessionId
from ministry.core.modules.user.models import UserView
from ministry.web.deps import AppDep, ConfigDep, OptionalSessionIdDep
from ministry.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    """Self-service registration request."""

    email: str | None = Field(None, description="Email address (unique)")
    username: str | None = Field(None, description="Username (unique)")
    password: str | None = Field(None, description="Password")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    phone_number: str | None = Field(None, description="Phone number")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    """Authentication request."""

    login: str | None = Field(None, description="Email or username")
    password: str | None = Field(None, description="Password for authentication")


def set_session_cookie(response: Response, config: Config, session_id: SessionId) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=session_id,
        httponly=True,
        samesite="lax",
        secure=config.session_cookie_secure,
        max_age=config.session_max_age,  # fixed window, matches the server-side expiry
    )


@router.post(
    "/register",
    summary="Register a new account",
    description="Create a student account and log it in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created and session started"},
        400: {"model": ErrorResponse, "description": "Missing fields or email/username already taken"},
    },
)
async def register(data: RegisterRequest, app: AppDep, config: ConfigDep, response: Response) -> UserView:
    session_id, user = await app.register(
        data.email, data.username, data.password, data.first_name, data.last_name, data.phone_number
    )
    set_session_cookie(response, config, session_id)
    return user


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email or username and password. Starts a cookie session.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing login or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or deactivated account"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> UserView:
    """Authenticate user and create session."""
    session_id, user = await app.login(login_data.login, login_data.password)
    set_session_cookie(response, config, session_id)
    return user


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate the current session. Succeeds even without a session.",
    operation_id="logout",
    responses={200: {"description": "Successfully logged out"}},
)
async def logout(app: AppDep, config: ConfigDep, session_id: OptionalSessionIdDep, response: Response) -> MessageResponse:
    await app.logout(session_id)
    response.delete_cookie(config.session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/logout",
    summary="End session and redirect",
    description="Invalidate the current session and redirect to the sign-in page.",
    operation_id="logoutRedirect",
    status_code=303,
    response_class=RedirectResponse,
    responses={303: {"description": "Redirect to the sign-in page"}},
)
async def logout_redirect(app: AppDep, config: ConfigDep, session_id: OptionalSessionIdDep) -> RedirectResponse:
    await app.logout(session_id)
    response = RedirectResponse("/auth", status_code=303)
    response.delete_cookie(config.session_cookie_name)
    return response
