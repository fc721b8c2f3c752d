"""Pipeline settings loaded from ``FORM_REQUEST_*`` environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Runtime knobs for ValidationPipeline.

    ``max_body_bytes`` of None leaves body size to the transport.
    ``allow_empty_body`` decodes an empty body as ``{}`` instead of failing.
    """

    model_config = SettingsConfigDict(env_prefix="FORM_REQUEST_", extra="ignore")

    debug: bool = False
    max_body_bytes: int | None = Field(default=None, gt=0)
    allow_empty_body: bool = False
