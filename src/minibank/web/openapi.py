from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Endpoints that do not need a session cookie
PUBLIC_ENDPOINTS = {
    ("POST", "/api/signup"),
    ("POST", "/api/login"),
    ("POST", "/api/logout"),
}


def set_custom_openapi(app: FastAPI, cookie_name: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="MiniBank API",
            version="0.1.0",
            summary="Demo banking backend: authentication, balance and recent transactions",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_name,
                "description": "Signed session token set by /api/login",
            },
        }

        # Apply security globally, then remove it from public endpoints
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

    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Invalid email or password", "type": "invalid_credentials"},
                {"error": "Email already exists", "type": "duplicate_identity"},
                {"error": "Unauthorized", "type": "unauthorized"},
            ]
        }
    }


class SuccessResponse(BaseModel):
    """Acknowledgement for operations without a payload."""

    success: bool = Field(True, description="Always true")
    message: str = Field(..., description="Human-readable status message")
