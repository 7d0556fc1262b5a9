from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Delta Iota API",
            version="0.0.1",
            summary="Chapter website backend: users, sessions and notifications",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BasicKey": {
                "type": "http",
                "scheme": "basic",
                "description": "HTTP Basic with username and API key (most endpoints)",
            },
            "BasicPassword": {
                "type": "http",
                "scheme": "basic",
                "description": "HTTP Basic with username and password (session creation)",
            },
        }

        # Key authentication everywhere unless overridden below
        openapi_schema["security"] = [{"BasicKey": []}]

        password_endpoints = {("POST", "/api/v0/sessions"), ("POST", "/api/v0/login")}
        public_endpoints = {("GET", "/health")}

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in password_endpoints:
                    operation["security"] = [{"BasicPassword": []}]
                elif (method.upper(), path) in public_endpoints:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorDetail(BaseModel):
    code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: ErrorDetail

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": {"code": 401, "message": "invalid password"}},
                {"error": {"code": 404, "message": "user not found"}},
                {"error": {"code": 500, "message": "internal server error"}},
            ]
        }
    }
