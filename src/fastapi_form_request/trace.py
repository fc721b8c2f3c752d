"""PipelineTrace and StageTrace — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from fastapi_form_request.pipeline import Stage


@dataclass(frozen=True)
class StageTrace:
    """Single stage execution record."""

    stage: Stage
    duration_ms: float
    outcome: Literal["OK", "FAILED"]
    reason: str | None = None


@dataclass
class PipelineTrace:
    """Structured record of a single pipeline invocation."""

    entries: list[StageTrace] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "FAILED", "ERROR"] = "OK"
    error: Exception | None = None

    @property
    def stages(self) -> list[Stage]:
        return [entry.stage for entry in self.entries]
