from typing import Annotated, cast

from fastapi import Depends, Request

from ministry.app import App
from ministry.config import Config
from ministry.core.modules.audit.models import ClientInfo
from ministry.core.modules.session.models import SessionId
from ministry.errors import AuthenticationError


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_optional_session_id(request: Request) -> SessionId | None:
    """Read the session cookie without validating it."""
    value = request.cookies.get(request.app.state.config.session_cookie_name)
    return SessionId(value) if value else None


async def get_session_id(
    app: Annotated[App, Depends(get_app)],
    session_id: Annotated[SessionId | None, Depends(get_optional_session_id)],
) -> SessionId:
    """Get and validate the session id from the session cookie."""
    if session_id and await app.is_session_valid(session_id):
        return session_id
    raise AuthenticationError


async def get_client_info(request: Request) -> ClientInfo:
    host = request.client.host if request.client else None
    return ClientInfo(ip_address=host, user_agent=request.headers.get("user-agent"))


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
SessionIdDep = Annotated[SessionId, Depends(get_session_id)]
OptionalSessionIdDep = Annotated[SessionId | None, Depends(get_optional_session_id)]
ClientInfoDep = Annotated[ClientInfo, Depends(get_client_info)]
