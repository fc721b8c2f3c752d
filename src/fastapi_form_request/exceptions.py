"""FormRequestError hierarchy, one kind per pipeline stage."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastapi_form_request.rules import FieldViolation


class FormRequestError(Exception):
    """Base for all pipeline stage failures, with HTTP status code and detail."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 400,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.cause = cause


class InvalidTargetError(FormRequestError):
    """Target is not a FormRequest instance (500)."""

    def __init__(self, detail: str = "Expected a FormRequest instance") -> None:
        super().__init__(detail, status_code=500)


class BodyReadError(FormRequestError):
    """Request body could not be read (400, or 413 when too large)."""

    def __init__(
        self,
        detail: str = "Failed to read request body",
        *,
        status_code: int = 400,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(detail, status_code=status_code, cause=cause)


class DecodeError(FormRequestError):
    """Body is malformed or does not match the target's field types (400)."""

    def __init__(
        self,
        detail: str = "Malformed request body",
        *,
        errors: Sequence[dict[str, Any]] = (),
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(detail, status_code=400, cause=cause)
        self.errors = list(errors)


class PrepareError(FormRequestError):
    """prepare_for_validation() failed (422)."""

    def __init__(
        self,
        detail: str = "Request preparation failed",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(detail, status_code=422, cause=cause)


class HookError(FormRequestError):
    """with_validator() failed (422)."""

    def __init__(
        self,
        detail: str = "Request validator hook failed",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(detail, status_code=422, cause=cause)


class ValidationError(FormRequestError):
    """One or more declared rules were violated (422)."""

    def __init__(
        self,
        violations: Sequence[FieldViolation],
        detail: str = "Validation failed",
    ) -> None:
        super().__init__(detail, status_code=422)
        self.violations = list(violations)

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class FormRequestInternalError(Exception):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
