"""FastAPI Form Request - decode and validate request bodies in one pipeline."""

from fastapi_form_request._types import QueryValue, RuleSet, Validator
from fastapi_form_request.config import PipelineSettings
from fastapi_form_request.context import PipelineContext
from fastapi_form_request.dependency import enrich_openapi, form_request
from fastapi_form_request.exceptions import (
    BodyReadError,
    DecodeError,
    FormRequestError,
    FormRequestInternalError,
    HookError,
    InvalidTargetError,
    PrepareError,
    ValidationError,
)
from fastapi_form_request.form_request import FormRequest, RequestState
from fastapi_form_request.hooks import (
    AfterPipeline,
    AfterStage,
    BeforePipeline,
    PipelineHook,
)
from fastapi_form_request.pipeline import Stage, ValidationPipeline, validate
from fastapi_form_request.query import infer_query, infer_value, parse_bool
from fastapi_form_request.rules import (
    Check,
    FieldViolation,
    Max,
    MaxLength,
    Min,
    MinLength,
    OneOf,
    Pattern,
    Required,
    Rule,
    validate_rules,
)
from fastapi_form_request.trace import PipelineTrace, StageTrace

__all__ = [
    "AfterPipeline",
    "AfterStage",
    "BeforePipeline",
    "BodyReadError",
    "Check",
    "DecodeError",
    "FieldViolation",
    "FormRequest",
    "FormRequestError",
    "FormRequestInternalError",
    "HookError",
    "InvalidTargetError",
    "Max",
    "MaxLength",
    "Min",
    "MinLength",
    "OneOf",
    "Pattern",
    "PipelineContext",
    "PipelineHook",
    "PipelineSettings",
    "PipelineTrace",
    "PrepareError",
    "QueryValue",
    "RequestState",
    "Required",
    "Rule",
    "RuleSet",
    "Stage",
    "StageTrace",
    "ValidationError",
    "ValidationPipeline",
    "Validator",
    "enrich_openapi",
    "form_request",
    "infer_query",
    "infer_value",
    "parse_bool",
    "validate",
    "validate_rules",
]
