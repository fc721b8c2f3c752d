"""Rule abstraction, built-in rules, and the default rule validator."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Sequence, Sized
from dataclasses import dataclass
from typing import Any, ClassVar

from fastapi_form_request._types import RuleSet


@dataclass(frozen=True)
class FieldViolation:
    """A single failed rule for one field."""

    field: str
    message: str
    rule: str

    def to_dict(self) -> dict[str, Any]:
        """Render in the shape FastAPI uses for request validation errors."""
        return {
            "loc": ["body", self.field],
            "msg": self.message,
            "type": self.rule,
        }


class Rule(ABC):
    """Base abstraction for a field-level validation constraint."""

    name: ClassVar[str]

    # Rules other than Required treat a missing value as nothing to check
    skip_none: ClassVar[bool] = True

    @abstractmethod
    def check(self, value: Any) -> str | None:
        """Return a failure message, or None when the value passes."""


class Required(Rule):
    """Value must be present and non-empty."""

    name = "required"
    skip_none = False

    def __init__(self, message: str = "Field is required") -> None:
        self._message = message

    def check(self, value: Any) -> str | None:
        if value is None:
            return self._message
        if isinstance(value, str) and not value.strip():
            return self._message
        if isinstance(value, Sized) and not isinstance(value, str) and len(value) == 0:
            return self._message
        return None


class MinLength(Rule):
    """Length must be at least ``length``."""

    name = "min_length"

    def __init__(self, length: int) -> None:
        self._length = length

    def check(self, value: Any) -> str | None:
        if len(value) < self._length:
            return f"Must have at least {self._length} characters or items"
        return None


class MaxLength(Rule):
    """Length must be at most ``length``."""

    name = "max_length"

    def __init__(self, length: int) -> None:
        self._length = length

    def check(self, value: Any) -> str | None:
        if len(value) > self._length:
            return f"Must have at most {self._length} characters or items"
        return None


class Min(Rule):
    name = "min"

    def __init__(self, bound: float) -> None:
        self._bound = bound

    def check(self, value: Any) -> str | None:
        if value < self._bound:
            return f"Must be greater than or equal to {self._bound}"
        return None


class Max(Rule):
    name = "max"

    def __init__(self, bound: float) -> None:
        self._bound = bound

    def check(self, value: Any) -> str | None:
        if value > self._bound:
            return f"Must be less than or equal to {self._bound}"
        return None


class Pattern(Rule):
    """String must fully match a regular expression."""

    name = "pattern"

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self._pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str) or self._pattern.fullmatch(value) is None:
            return f"Must match pattern {self._pattern.pattern!r}"
        return None


class OneOf(Rule):
    name = "one_of"

    def __init__(self, choices: Collection[Any]) -> None:
        self._choices = choices

    def check(self, value: Any) -> str | None:
        if value not in self._choices:
            allowed = ", ".join(repr(c) for c in self._choices)
            return f"Must be one of: {allowed}"
        return None


class Check(Rule):
    """Ad-hoc rule from a predicate and a failure message."""

    name = "check"

    def __init__(
        self,
        predicate: Callable[[Any], bool],
        message: str = "Invalid value",
        *,
        skip_none: bool = True,
    ) -> None:
        self._predicate = predicate
        self._message = message
        self.skip_none = skip_none  # type: ignore[misc]

    def check(self, value: Any) -> str | None:
        return None if self._predicate(value) else self._message


def validate_rules(entity: Any, rules: RuleSet) -> list[FieldViolation]:
    """Default validator: evaluate ``rules`` against ``entity``'s attributes.

    Fields are checked in mapping order. Each field reports at most one
    violation, the first of its rules that fails. A field the entity does
    not have reads as None.
    """
    violations: list[FieldViolation] = []
    for field, field_rules in rules.items():
        value = getattr(entity, field, None)
        for rule in _as_sequence(field_rules):
            if value is None and rule.skip_none:
                continue
            message = rule.check(value)
            if message is not None:
                violations.append(FieldViolation(field, message, rule.name))
                break
    return violations


def _as_sequence(rules: Rule | Sequence[Rule]) -> Sequence[Rule]:
    if isinstance(rules, Rule):
        return (rules,)
    return rules
