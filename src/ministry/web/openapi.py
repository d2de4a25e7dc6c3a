from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from ministry.config import Config

# Endpoints reachable without a session
PUBLIC_ENDPOINTS = {
    ("POST", "/api/register"),
    ("POST", "/api/login"),
    ("POST", "/api/logout"),
    ("GET", "/api/logout"),
    ("POST", "/api/forgot-password"),
    ("POST", "/api/reset-password"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI, config: Config) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Ministry LMS API",
            version="0.1.0",
            summary="Accounts, sessions and password reset for the ministry learning platform",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": config.session_cookie_name,
                "description": "Opaque session id set by login or registration",
            },
        }

        # Apply security globally, then clear it for public endpoints
        openapi_schema["security"] = [{"SessionCookie": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")
    field: str | None = Field(None, description="Conflicting field for duplicate_identity errors")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid email/username or password", "type": "invalid_credentials"},
                {"message": "Email already exists", "type": "duplicate_identity", "field": "email"},
                {"message": "Admin access required", "type": "access_denied"},
            ]
        }
    }


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Human-readable result")
