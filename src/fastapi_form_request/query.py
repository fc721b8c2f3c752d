"""Query string type inference — int, then float, then bool, then str."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi_form_request._types import QueryValue

_INT_RE = re.compile(r"[+-]?[0-9]+")
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_INF_RE = re.compile(r"[+-]?(?:inf|infinity)", re.IGNORECASE)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(raw: str) -> bool:
    """Parse one of the accepted boolean spellings, case-sensitively.

    Accepted: ``1 t T TRUE true True`` and ``0 f F FALSE false False``.
    Raises ValueError for anything else.
    """
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean literal: {raw!r}")


def _parse_int(raw: str) -> int | None:
    if _INT_RE.fullmatch(raw) is None:
        return None
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _parse_float(raw: str) -> float | None:
    # float() also takes padding, underscores and non-ASCII digits
    if not raw.isascii() or "_" in raw or raw != raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        if _HEX_FLOAT_RE.fullmatch(raw) is None:
            return None
        try:
            value = float.fromhex(raw)
        except OverflowError:
            return None

    if math.isnan(value) and raw[0] in "+-":
        return None
    # Out of range: a finite spelling that overflowed
    if math.isinf(value) and _INF_RE.fullmatch(raw) is None:
        return None
    return value


def infer_value(raw: str) -> QueryValue:
    """Return the raw value typed as int, float, bool, or the string itself."""
    int_value = _parse_int(raw)
    if int_value is not None:
        return int_value

    float_value = _parse_float(raw)
    if float_value is not None:
        return float_value

    try:
        return parse_bool(raw)
    except ValueError:
        return raw


def _first_values(params: Any) -> dict[str, str]:
    # Starlette QueryParams.get() returns the last value for repeated keys
    if hasattr(params, "getlist"):
        return {key: params.getlist(key)[0] for key in params.keys()}

    first: dict[str, str] = {}
    for key, values in params.items():
        if isinstance(values, str):
            first[key] = values
        elif values:
            first[key] = values[0]
    return first


def infer_query(
    params: Mapping[str, str | Sequence[str]] | Any,
) -> dict[str, QueryValue]:
    """Infer a typed value for every query key, keeping only its first value.

    ``params`` is a Starlette ``QueryParams`` (or any multi-dict exposing
    ``getlist``) or a plain mapping of key to one value or a list of values.
    Keys with an empty list of values are dropped.
    """
    return {key: infer_value(raw) for key, raw in _first_values(params).items()}
