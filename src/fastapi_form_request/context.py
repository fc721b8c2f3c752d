"""PipelineContext — per-invocation state handed to pipeline hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from fastapi_form_request.form_request import FormRequest


@dataclass
class PipelineContext:
    """Lightweight per-invocation container observed by pipeline hooks."""

    request: Request
    target: FormRequest | Any
    state: dict[str, Any] = field(default_factory=dict)
