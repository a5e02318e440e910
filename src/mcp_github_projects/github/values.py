"""Turn caller-supplied values into typed ProjectV2 field payloads.

``resolve_field_value`` returns either the single-key payload accepted by
``updateProjectV2ItemFieldValue(value: ...)`` or a ``ResolutionError``.
It never raises for bad input and never calls the API.
"""

import logging
import math
import re
from typing import Any

from ..exceptions import (
    FieldNotFound,
    OptionNotFound,
    ResolutionError,
    UnsupportedFieldType,
    ValueFormatInvalid,
)
from ..models import FieldDataType, ProjectField
from .constants import DATE_FORMAT_HINT, DATE_PATTERN

logger = logging.getLogger("mcp-github-projects.values")

ResolvedValue = dict[str, Any]

_DATE_RE = re.compile(DATE_PATTERN)


def resolve_field_value(
    field: ProjectField, raw_value: Any
) -> ResolvedValue | ResolutionError:
    """Resolve ``raw_value`` against ``field``'s data type.

    Args:
        field: The field definition, as discovered from the project.
        raw_value: The value supplied by the caller. Single-select and
            iteration values are names/titles, never ids.

    Returns:
        ``{"text": ...}``, ``{"number": ...}``, ``{"date": ...}``,
        ``{"singleSelectOptionId": ...}`` or ``{"iterationId": ...}``;
        otherwise the ``ResolutionError`` describing what was expected.
    """
    match field.data_type:
        case FieldDataType.TEXT:
            return _resolve_text(field, raw_value)
        case FieldDataType.NUMBER:
            return _resolve_number(field, raw_value)
        case FieldDataType.DATE:
            return _resolve_date(field, raw_value)
        case FieldDataType.SINGLE_SELECT:
            return _resolve_single_select(field, raw_value)
        case FieldDataType.ITERATION:
            return _resolve_iteration(field, raw_value)
        case _:
            logger.debug(
                f"Field '{field.name}' has unsupported type {field.type_name}"
            )
            return UnsupportedFieldType(
                f"Field '{field.name}' has type {field.type_name}, which cannot be "
                "set by value. Supported types: TEXT, NUMBER, DATE, SINGLE_SELECT, "
                "ITERATION",
                field_name=field.name,
                raw_value=raw_value,
            )


def _resolve_text(field: ProjectField, raw_value: Any) -> ResolvedValue | ResolutionError:
    if raw_value is None:
        return ValueFormatInvalid(
            f"Field '{field.name}' needs a text value",
            field_name=field.name,
            reason="missing value",
        )
    return {"text": raw_value if isinstance(raw_value, str) else str(raw_value)}


def _resolve_number(
    field: ProjectField, raw_value: Any
) -> ResolvedValue | ResolutionError:
    number = _parse_number(raw_value)
    if number is None:
        return ValueFormatInvalid(
            f"Value '{raw_value}' for field '{field.name}' is not a number",
            field_name=field.name,
            raw_value=raw_value,
            reason="not a number",
        )
    return {"number": number}


def _parse_number(raw_value: Any) -> int | float | None:
    # bool is an int subclass; True is not a story point estimate
    if isinstance(raw_value, bool) or raw_value is None:
        return None
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        number = raw_value
    elif isinstance(raw_value, str) and raw_value.strip():
        try:
            number = float(raw_value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number) if number.is_integer() and "." not in str(raw_value) else number


def _resolve_date(field: ProjectField, raw_value: Any) -> ResolvedValue | ResolutionError:
    if not isinstance(raw_value, str) or not _DATE_RE.fullmatch(raw_value):
        return ValueFormatInvalid(
            f"Value '{raw_value}' for field '{field.name}' is not a valid date. "
            f"Expected format: {DATE_FORMAT_HINT}",
            field_name=field.name,
            raw_value=raw_value,
            reason="invalid date format",
        )
    return {"date": raw_value}


def _resolve_single_select(
    field: ProjectField, raw_value: Any
) -> ResolvedValue | ResolutionError:
    for option in field.options:
        if option.name == raw_value:
            return {"singleSelectOptionId": option.id}
    available = field.option_names()
    return OptionNotFound(
        f"Option '{raw_value}' not found in field '{field.name}'. "
        f"Available options: {', '.join(available) or '(none)'}",
        field_name=field.name,
        raw_value=raw_value,
        available=available,
    )


def _resolve_iteration(
    field: ProjectField, raw_value: Any
) -> ResolvedValue | ResolutionError:
    for iteration in field.iterations:
        if iteration.title == raw_value:
            return {"iterationId": iteration.id}
    available = field.iteration_titles()
    return OptionNotFound(
        f"Iteration '{raw_value}' not found in field '{field.name}'. "
        f"Available iterations: {', '.join(available) or '(none)'}",
        field_name=field.name,
        raw_value=raw_value,
        reason="iteration not found",
        available=available,
    )


def field_not_found(identifier: str, available: list[str], *, by: str = "name") -> FieldNotFound:
    """Build the error for a field lookup miss, listing every valid identifier."""
    return FieldNotFound(
        f"Field with {by} '{identifier}' not found in project. "
        f"Available fields: {', '.join(available) or '(none)'}",
        field_name=identifier,
        available=available,
    )
