"""PipelineHook base and convenience hook classes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi_form_request.context import PipelineContext

if TYPE_CHECKING:
    from fastapi_form_request.pipeline import Stage


class PipelineHook:
    """Observer of one pipeline invocation. All methods are no-op by default.

    Observers see the target being populated but cannot change the stage
    order or swallow a failure: whatever a stage raised is re-raised after
    every ``on_stage`` call has returned.
    """

    async def on_pipeline_start(self, ctx: PipelineContext) -> None:
        """Called before TYPE_CHECK, so ``ctx.target`` may not be a FormRequest."""

    async def on_pipeline_end(self, ctx: PipelineContext) -> None:
        """Called on every exit path.

        In debug mode ``ctx.state["trace"]`` already holds the finished trace.
        """

    async def on_stage(
        self,
        ctx: PipelineContext,
        stage: Stage,
        error: Exception | None,
    ) -> None:
        """Called after each stage that ran, never for stages skipped by a failure.

        ``error`` is None on success. On failure it is the stage's own
        FormRequestError (DecodeError for DECODE, and so on) or, for a fault
        outside the taxonomy such as a broken validator, the raw exception.
        """


class BeforePipeline(PipelineHook):
    """Convenience hook that only fires on pipeline start."""

    def __init__(self, callback: Callable[[PipelineContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_pipeline_start(self, ctx: PipelineContext) -> None:
        await self._callback(ctx)


class AfterPipeline(PipelineHook):
    """Convenience hook that fires on pipeline end, including after a failure."""

    def __init__(self, callback: Callable[[PipelineContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_pipeline_end(self, ctx: PipelineContext) -> None:
        await self._callback(ctx)


class AfterStage(PipelineHook):
    """Convenience hook that fires after each stage with its stage error or None."""

    def __init__(
        self,
        callback: Callable[
            [PipelineContext, Stage, Exception | None], Awaitable[None]
        ],
    ) -> None:
        self._callback = callback

    async def on_stage(
        self,
        ctx: PipelineContext,
        stage: Stage,
        error: Exception | None,
    ) -> None:
        await self._callback(ctx, stage, error)
