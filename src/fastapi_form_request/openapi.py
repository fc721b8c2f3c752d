"""OpenAPI schema enrichment — request body metadata for form request models."""

from __future__ import annotations

from typing import Any

from fastapi_form_request.form_request import FormRequest

REF_TEMPLATE = "#/components/schemas/{model}"


def collect_openapi_metadata(model: type[FormRequest]) -> dict[str, Any]:
    """Build requestBody, error responses and nested schemas for ``model``."""
    schema = model.model_json_schema(ref_template=REF_TEMPLATE)
    defs: dict[str, Any] = schema.pop("$defs", {})

    result: dict[str, Any] = {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema}},
        },
        "responses": {
            "400": "Malformed request body",
            "422": "Request validation failed",
        },
    }
    if defs:
        result["schemas"] = defs
    return result
