"""FormRequest abstract base model and the RequestState it carries."""

from __future__ import annotations

from abc import abstractmethod

from pydantic import BaseModel, ConfigDict, PrivateAttr

from fastapi_form_request._types import QueryValue, RuleSet


class RequestState(BaseModel):
    """Per-request state shared by every form request.

    ``query`` is a private attribute: it is filled from the query string by
    the pipeline, never from the JSON body, and is left out of
    serialization and of the body schema.
    """

    _query: dict[str, QueryValue] = PrivateAttr(default_factory=dict)

    @property
    def query(self) -> dict[str, QueryValue]:
        return self._query


class FormRequest(RequestState):
    """Base abstraction for a request body that validates itself.

    Subclasses declare their body fields as pydantic fields, return their
    rules from ``rules()``, and may override the two lifecycle hooks.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    @abstractmethod
    def rules(self) -> RuleSet: ...

    def prepare_for_validation(self) -> None:
        """Normalize field values before validation. Raise to abort."""

    def with_validator(self) -> None:
        """Run cross-field or validator setup logic after preparation."""
