"""ValidationPipeline — the decode, prepare, hook, validate, merge sequence."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from starlette.requests import ClientDisconnect, Request

from fastapi_form_request._types import Validator
from fastapi_form_request.config import PipelineSettings
from fastapi_form_request.context import PipelineContext
from fastapi_form_request.exceptions import (
    BodyReadError,
    DecodeError,
    FormRequestError,
    HookError,
    InvalidTargetError,
    PrepareError,
    ValidationError,
)
from fastapi_form_request.form_request import FormRequest
from fastapi_form_request.hooks import PipelineHook
from fastapi_form_request.query import infer_query
from fastapi_form_request.rules import validate_rules
from fastapi_form_request.trace import PipelineTrace, StageTrace

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=FormRequest)


class Stage(Enum):
    """Pipeline stages, defining strict execution order."""

    TYPE_CHECK = "type_check"
    BODY_READ = "body_read"
    DECODE = "decode"
    PREPARE = "prepare"
    HOOK = "hook"
    RULE_VALIDATE = "rule_validate"
    QUERY_MERGE = "query_merge"

    @property
    def order(self) -> int:
        _ORDER = {
            "type_check": 1,
            "body_read": 2,
            "decode": 3,
            "prepare": 4,
            "hook": 5,
            "rule_validate": 6,
            "query_merge": 7,
        }
        return _ORDER[self.value]


class ValidationPipeline:
    """Runs a FormRequest through every stage, stopping at the first failure."""

    def __init__(
        self,
        validator: Validator | None = None,
        *,
        hooks: Iterable[PipelineHook] = (),
        settings: PipelineSettings | None = None,
        debug: bool | None = None,
    ) -> None:
        self._validator: Validator = validator or validate_rules
        self._hooks: list[PipelineHook] = list(hooks)
        self._settings = settings or PipelineSettings()
        self._debug = self._settings.debug if debug is None else debug

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    def add_hook(self, hook: PipelineHook) -> ValidationPipeline:
        self._hooks.append(hook)
        return self

    async def validate(self, target: F, request: Request) -> F:
        """Decode ``request`` into ``target`` and validate it in place.

        Raises the FormRequestError subclass of the first stage that fails;
        no later stage runs. Returns ``target`` on success.
        """
        ctx = PipelineContext(request=request, target=target)
        trace = PipelineTrace() if self._debug else None
        started = time.perf_counter()

        for hook in self._hooks:
            await hook.on_pipeline_start(ctx)

        try:
            await self._run(ctx, trace, Stage.TYPE_CHECK, self._check_target, target)
            body: bytes = await self._run(
                ctx, trace, Stage.BODY_READ, self._read_body, request
            )
            await self._run(ctx, trace, Stage.DECODE, self._decode, target, body)
            await self._run(ctx, trace, Stage.PREPARE, self._prepare, target)
            await self._run(ctx, trace, Stage.HOOK, self._with_validator, target)
            await self._run(
                ctx, trace, Stage.RULE_VALIDATE, self._validate_rules, target
            )
            await self._run(
                ctx, trace, Stage.QUERY_MERGE, self._merge_query, target, request
            )
        except Exception as exc:
            if trace is not None:
                trace.outcome = "FAILED" if isinstance(exc, FormRequestError) else "ERROR"
                trace.error = exc
            raise
        finally:
            if trace is not None:
                trace.total_duration_ms = (time.perf_counter() - started) * 1000
                ctx.state["trace"] = trace
                request.state.form_request_trace = trace
            for hook in self._hooks:
                await hook.on_pipeline_end(ctx)

        return target

    async def _run(
        self,
        ctx: PipelineContext,
        trace: PipelineTrace | None,
        stage: Stage,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        stage_start = time.perf_counter()
        try:
            result = await func(*args)
        except Exception as exc:
            if trace is not None:
                trace.entries.append(
                    StageTrace(
                        stage=stage,
                        duration_ms=(time.perf_counter() - stage_start) * 1000,
                        outcome="FAILED",
                        reason=getattr(exc, "detail", None) or str(exc),
                    )
                )
            logger.debug("Stage %s failed: %r", stage.value, exc)
            for hook in self._hooks:
                await hook.on_stage(ctx, stage, exc)
            raise

        if trace is not None:
            trace.entries.append(
                StageTrace(
                    stage=stage,
                    duration_ms=(time.perf_counter() - stage_start) * 1000,
                    outcome="OK",
                )
            )
        for hook in self._hooks:
            await hook.on_stage(ctx, stage, None)
        return result

    async def _check_target(self, target: Any) -> None:
        if not isinstance(target, FormRequest):
            raise InvalidTargetError(
                f"Expected a FormRequest instance, got {type(target).__name__}"
            )
        if type(target).model_config.get("frozen"):
            raise InvalidTargetError(
                f"{type(target).__name__} is frozen and cannot be decoded into"
            )

    async def _read_body(self, request: Request) -> bytes:
        limit = self._settings.max_body_bytes
        chunks: list[bytes] = []
        size = 0
        try:
            async for chunk in request.stream():
                size += len(chunk)
                if limit is not None and size > limit:
                    raise BodyReadError(
                        f"Request body exceeds {limit} bytes", status_code=413
                    )
                chunks.append(chunk)
        except (ClientDisconnect, RuntimeError, OSError) as exc:
            raise BodyReadError(cause=exc) from exc
        finally:
            await request.close()
        return b"".join(chunks)

    async def _decode(self, target: FormRequest, body: bytes) -> None:
        if not body and self._settings.allow_empty_body:
            body = b"{}"

        model = type(target)
        try:
            decoded = model.model_validate_json(body)
            # Only keys present in the body; omitted fields keep their values
            for name in decoded.model_fields_set:
                setattr(target, name, getattr(decoded, name))
        except PydanticValidationError as exc:
            raise DecodeError(
                errors=exc.errors(
                    include_url=False, include_context=False, include_input=False
                ),
                cause=exc,
            ) from exc

    async def _prepare(self, target: FormRequest) -> None:
        try:
            await _maybe_await(target.prepare_for_validation())
        except PrepareError:
            raise
        except Exception as exc:
            raise PrepareError(
                str(exc) or "Request preparation failed", cause=exc
            ) from exc

    async def _with_validator(self, target: FormRequest) -> None:
        try:
            await _maybe_await(target.with_validator())
        except HookError:
            raise
        except Exception as exc:
            raise HookError(str(exc) or "Request validator hook failed", cause=exc) from exc

    async def _validate_rules(self, target: FormRequest) -> None:
        violations = self._validator(target, target.rules())
        if violations:
            raise ValidationError(violations)

    async def _merge_query(self, target: FormRequest, request: Request) -> None:
        target.query.update(infer_query(request.query_params))


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


async def validate(target: F, request: Request) -> F:
    """Run ``target`` through a ValidationPipeline built from the environment."""
    return await ValidationPipeline().validate(target, request)
