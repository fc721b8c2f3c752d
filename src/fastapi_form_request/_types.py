"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fastapi_form_request.rules import FieldViolation, Rule

# Inferred type of a single query parameter value
QueryValue = int | float | bool | str

# Field identifier -> rule(s) consulted by the validator
RuleSet = Mapping[str, "Rule | Sequence[Rule]"]


class Validator(Protocol):
    """Rule-validation engine consulted by the pipeline."""

    def __call__(self, entity: Any, rules: RuleSet) -> Sequence[FieldViolation]: ...
