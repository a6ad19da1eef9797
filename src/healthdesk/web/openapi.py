from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Endpoints that work without a session
PUBLIC_ENDPOINTS = {
    ("POST", "/register"),
    ("POST", "/login"),
    ("GET", "/logout"),
    ("GET", "/session"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI, cookie_name: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="HealthDesk API",
            version="0.1.0",
            summary="Accounts, sessions and profiles for the HealthDesk web app",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_name,
                "description": "Opaque session token set by /register and /login",
            },
        }
        openapi_schema["security"] = [{"SessionCookie": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class CamelModel(BaseModel):
    """Request/response body using the camelCase keys the frontend sends and expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Not authenticated", "type": "not_authenticated"},
                {"message": "User 'alice' already exists", "type": "conflict"},
                {"message": "Password is required", "type": "validation_error"},
            ]
        }
    }
