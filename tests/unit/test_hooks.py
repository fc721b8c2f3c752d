"""Tests for PipelineHook, BeforePipeline, AfterPipeline, AfterStage."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from fastapi_form_request._types import RuleSet
from fastapi_form_request.context import PipelineContext
from fastapi_form_request.exceptions import DecodeError, ValidationError
from fastapi_form_request.form_request import FormRequest
from fastapi_form_request.hooks import (
    AfterPipeline,
    AfterStage,
    BeforePipeline,
    PipelineHook,
)
from fastapi_form_request.pipeline import Stage, ValidationPipeline
from fastapi_form_request.rules import Required


class _Note(FormRequest):
    title: str = ""

    def rules(self) -> RuleSet:
        return {"title": Required()}


class TestPipelineHookBase:
    async def test_default_methods_are_noop(self, make_request: Any) -> None:
        class MinimalHook(PipelineHook):
            pass

        hook = MinimalHook()
        ctx = PipelineContext(request=make_request(), target=_Note())
        await hook.on_pipeline_start(ctx)
        await hook.on_pipeline_end(ctx)
        await hook.on_stage(ctx, Stage.DECODE, None)


class TestBeforePipeline:
    async def test_callback_fires_on_start(self, make_request: Any) -> None:
        callback = AsyncMock()
        pipeline = ValidationPipeline().add_hook(BeforePipeline(callback))
        target = _Note()
        await pipeline.validate(target, make_request('{"title":"t"}'))
        callback.assert_awaited_once()
        ctx = callback.await_args.args[0]
        assert ctx.target is target

    async def test_only_fires_on_start(self, make_request: Any) -> None:
        started: list[bool] = []

        async def on_start(ctx: PipelineContext) -> None:
            started.append(True)

        hook = BeforePipeline(on_start)
        ctx = PipelineContext(request=make_request(), target=_Note())
        await hook.on_pipeline_start(ctx)
        assert len(started) == 1

        # on_pipeline_end and on_stage should be no-ops
        await hook.on_pipeline_end(ctx)
        await hook.on_stage(ctx, Stage.HOOK, None)
        assert len(started) == 1


class TestAfterPipeline:
    async def test_callback_fires_on_end(self, make_request: Any) -> None:
        callback = AsyncMock()
        pipeline = ValidationPipeline(hooks=[AfterPipeline(callback)])
        await pipeline.validate(_Note(), make_request('{"title":"t"}'))
        callback.assert_awaited_once()

    async def test_fires_even_after_failure(self, make_request: Any) -> None:
        callback = AsyncMock()
        pipeline = ValidationPipeline(hooks=[AfterPipeline(callback)])
        with pytest.raises(DecodeError):
            await pipeline.validate(_Note(), make_request("not json"))
        callback.assert_awaited_once()

    async def test_sees_debug_trace(self, make_request: Any) -> None:
        seen: dict[str, Any] = {}

        async def on_end(ctx: PipelineContext) -> None:
            seen["trace"] = ctx.state.get("trace")

        pipeline = ValidationPipeline(hooks=[AfterPipeline(on_end)], debug=True)
        await pipeline.validate(_Note(), make_request('{"title":"t"}'))
        assert seen["trace"] is not None
        assert seen["trace"].outcome == "OK"


class TestAfterStage:
    async def test_fires_after_each_stage(self, make_request: Any) -> None:
        calls: list[tuple[Stage, bool]] = []

        async def on_stage(
            ctx: PipelineContext, stage: Stage, error: Exception | None
        ) -> None:
            calls.append((stage, error is None))

        pipeline = ValidationPipeline().add_hook(AfterStage(on_stage))
        await pipeline.validate(_Note(), make_request('{"title":"t"}'))
        assert [stage for stage, _ in calls] == list(Stage)
        assert all(ok for _, ok in calls)

    async def test_fires_with_error_and_stops(self, make_request: Any) -> None:
        calls: list[tuple[Stage, Exception | None]] = []

        async def on_stage(
            ctx: PipelineContext, stage: Stage, error: Exception | None
        ) -> None:
            calls.append((stage, error))

        pipeline = ValidationPipeline().add_hook(AfterStage(on_stage))
        with pytest.raises(ValidationError) as exc_info:
            await pipeline.validate(_Note(), make_request('{"title":""}'))
        assert [stage for stage, _ in calls] == [
            Stage.TYPE_CHECK,
            Stage.BODY_READ,
            Stage.DECODE,
            Stage.PREPARE,
            Stage.HOOK,
            Stage.RULE_VALIDATE,
        ]
        assert calls[-1][1] is exc_info.value
        assert all(error is None for _, error in calls[:-1])


class TestStageErrors:
    async def test_receives_stage_error_kind(self, make_request: Any) -> None:
        seen: list[tuple[Stage, Exception | None]] = []

        async def on_stage(
            ctx: PipelineContext, stage: Stage, error: Exception | None
        ) -> None:
            seen.append((stage, error))

        pipeline = ValidationPipeline(hooks=[AfterStage(on_stage)])
        with pytest.raises(DecodeError):
            await pipeline.validate(_Note(), make_request("{oops"))
        assert seen[-1][0] is Stage.DECODE
        assert isinstance(seen[-1][1], DecodeError)

    async def test_receives_raw_exception_from_validator(
        self, make_request: Any
    ) -> None:
        seen: list[Exception | None] = []

        async def on_stage(
            ctx: PipelineContext, stage: Stage, error: Exception | None
        ) -> None:
            seen.append(error)

        broken = Mock(side_effect=LookupError("rules table missing"))
        pipeline = ValidationPipeline(broken, hooks=[AfterStage(on_stage)])
        with pytest.raises(LookupError):
            await pipeline.validate(_Note(), make_request('{"title":"t"}'))
        assert type(seen[-1]) is LookupError
        assert len(seen) == Stage.RULE_VALIDATE.order


class TestAddHook:
    def test_add_hook_returns_self(self) -> None:
        pipeline = ValidationPipeline()
        assert pipeline.add_hook(PipelineHook()) is pipeline
