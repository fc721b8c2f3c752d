"""Tests for PipelineContext dataclass."""

from __future__ import annotations

from typing import Any

from fastapi_form_request.context import PipelineContext


class TestPipelineContext:
    def test_construction(self, make_request: Any) -> None:
        request = make_request()
        target = object()
        ctx = PipelineContext(request=request, target=target)
        assert ctx.request is request
        assert ctx.target is target

    def test_default_state_is_empty_dict(self, make_request: Any) -> None:
        ctx = PipelineContext(request=make_request(), target=None)
        assert ctx.state == {}

    def test_state_not_shared_between_instances(self, make_request: Any) -> None:
        ctx1 = PipelineContext(request=make_request(), target=None)
        ctx2 = PipelineContext(request=make_request(), target=None)
        ctx1.state["x"] = 1
        assert "x" not in ctx2.state
