"""form_request() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_form_request.exceptions import (
    DecodeError,
    FormRequestError,
    FormRequestInternalError,
    ValidationError,
)
from fastapi_form_request.form_request import FormRequest
from fastapi_form_request.openapi import collect_openapi_metadata
from fastapi_form_request.pipeline import ValidationPipeline

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=FormRequest)


def form_request(
    model: type[F], *, pipeline: ValidationPipeline | None = None
) -> Callable[..., Awaitable[F]]:
    """Return a FastAPI-compatible dependency that decodes and validates ``model``."""
    pipe = pipeline or ValidationPipeline()
    metadata = collect_openapi_metadata(model)

    async def dependency(request: Request) -> F:
        target = model.model_construct()
        try:
            return await pipe.validate(target, request)
        except FormRequestError as exc:
            raise HTTPException(
                status_code=exc.status_code, detail=_http_detail(exc)
            ) from exc
        except Exception as exc:
            logger.error(
                "Unexpected error while validating %s", model.__name__, exc_info=True
            )
            wrapped = FormRequestInternalError("Internal form request error", cause=exc)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

    # Attach metadata for OpenAPI enrichment
    dependency._form_request_openapi = metadata  # type: ignore[attr-defined]
    dependency._form_request_model = model  # type: ignore[attr-defined]

    return dependency


def _http_detail(exc: FormRequestError) -> Any:
    if isinstance(exc, ValidationError):
        return [violation.to_dict() for violation in exc.violations]
    if isinstance(exc, DecodeError) and exc.errors:
        return [
            {**error, "loc": ["body", *error.get("loc", ())]} for error in exc.errors
        ]
    return exc.detail


def enrich_openapi(app: Any) -> None:
    """Enrich FastAPI app's OpenAPI schema with form request metadata.

    Call this after all routes are registered to inject request bodies,
    error responses, and nested model schemas from form request dependencies.
    """
    from fastapi import FastAPI
    from fastapi.routing import APIRoute

    if not isinstance(app, FastAPI):
        return

    all_schemas: dict[str, Any] = {}
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        metadata = _find_form_request_metadata(route)
        if not metadata:
            continue

        route.openapi_extra = route.openapi_extra or {}
        route.openapi_extra["requestBody"] = metadata["requestBody"]

        existing = route.responses or {}
        for code, description in metadata["responses"].items():
            existing.setdefault(int(code), {"description": description})
        route.responses = existing

        all_schemas.update(metadata.get("schemas", {}))

    if all_schemas:
        _register_schemas(app, all_schemas)


def _find_form_request_metadata(route: Any) -> dict[str, Any] | None:
    """Find form request metadata attached to route dependencies."""
    for dep in route.dependant.dependencies:
        call = dep.call
        if hasattr(call, "_form_request_openapi"):
            result: dict[str, Any] = call._form_request_openapi
            return result
    return None


def _register_schemas(app: Any, schemas: dict[str, Any]) -> None:
    """Register nested model schemas under components/schemas."""
    original_schema = app.openapi

    def custom_openapi() -> dict[str, Any]:
        schema: dict[str, Any] = original_schema()
        components = schema.setdefault("components", {})
        registered = components.setdefault("schemas", {})
        for name, definition in schemas.items():
            registered.setdefault(name, definition)
        return schema

    app.openapi = custom_openapi
