"""Raw JSON text -> schema tree.

Parsing never raises: malformed text comes back as an invalid
`ValidationResult` with a best-effort line and column.
"""
from __future__ import annotations

import json
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List
from urllib.parse import urlparse

from .field_types import detect_field_type
from .models import JsonValue, MockSchema, ParseResult, SchemaField, ValidationResult

TEMPLATE_LENGTH_CAP = 10
MAX_NESTING_DEPTH = 50
KEY_CONFIDENCE_THRESHOLD = 0.7
PRIMITIVE_ITEM_KEY = 'item'

_EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
_UUID_RE = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$', re.IGNORECASE)
_PHONE_RE = re.compile(r'^\+?[1-9]\d{0,15}$')
_PHONE_SEPARATORS_RE = re.compile(r'[\s\-()]')
_HEX_COLOR_RE = re.compile(r'^#([0-9a-f]{3}){1,2}$', re.IGNORECASE)
_RGB_COLOR_RE = re.compile(r'^rgba?\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*(,\s*[\d.]+)?\s*\)$', re.IGNORECASE)
_COLOR_NAMES = {'red', 'blue', 'green', 'yellow', 'orange', 'purple', 'pink', 'black', 'white', 'gray', 'brown'}
_DATE_FORMATS = ('%m-%d-%Y', '%d-%m-%Y', '%d-%b-%Y')


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_finite_float(raw: str) -> float:
    number = float(raw)
    if math.isinf(number):
        raise ValueError(f"Number out of range: {raw}")
    return number


def _loads_strict(text: str) -> JsonValue:
    return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_finite_float)


def _nesting_depth(value: JsonValue) -> int:
    deepest = 0
    stack = [(value, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def _position_to_line_column(text: str, position: int):
    lines = text[:position].split('\n')
    return len(lines), len(lines[-1]) + 1


def validate_json_structure(json_text: str) -> ValidationResult:
    if json_text is None or not json_text.strip():
        return ValidationResult(is_valid=False, error="Empty JSON string")

    try:
        _loads_strict(json_text)
    except json.JSONDecodeError as exc:
        line_number, column = _position_to_line_column(json_text, exc.pos)
        return ValidationResult(is_valid=False, error=exc.msg, line_number=line_number, column=column)
    except (ValueError, RecursionError) as exc:
        return ValidationResult(is_valid=False, error=str(exc) or "Invalid JSON format")
    return ValidationResult(is_valid=True)


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def is_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def is_date(value: str) -> bool:
    if len(value) < 8 or '-' not in value:
        return False
    candidate = value[:-1] + '+00:00' if value.endswith('Z') else value
    try:
        datetime.fromisoformat(candidate)
        return True
    except ValueError:
        pass
    try:
        date.fromisoformat(candidate)
        return True
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(value, fmt)
            return True
        except ValueError:
            continue
    return False


def is_phone_number(value: str) -> bool:
    cleaned = _PHONE_SEPARATORS_RE.sub('', value)
    return bool(_PHONE_RE.match(cleaned)) and len(cleaned) >= 7


def is_color(value: str) -> bool:
    if _HEX_COLOR_RE.match(value) or _RGB_COLOR_RE.match(value):
        return True
    return value.lower() in _COLOR_NAMES


def infer_field_type(value: JsonValue, key: str) -> str:
    """Pick a semantic type for `value` stored under `key`.

    Strings trust a confident name match first, then fall back to the shape
    of the value itself.
    """
    if value is None:
        return 'string'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        best = detect_field_type(key)[0]
        if best.confidence > KEY_CONFIDENCE_THRESHOLD:
            return best.type

        if is_email(value):
            return 'email'
        if is_url(value):
            return 'url'
        if is_uuid(value):
            return 'uuid'
        if is_date(value):
            return 'date'
        if is_phone_number(value):
            return 'phone'
        if is_color(value):
            return 'color'
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return 'string'


def _array_template(items: List[Any]) -> List[SchemaField]:
    """Child fields for an array; the first element is the template."""
    if not items:
        return [SchemaField(key=PRIMITIVE_ITEM_KEY, type='string', value='')]

    first = items[0]
    if isinstance(first, dict):
        return fields_from_object(first)
    return [field_from_value(PRIMITIVE_ITEM_KEY, first)]


def field_from_value(key: str, value: JsonValue) -> SchemaField:
    if isinstance(value, dict):
        return SchemaField(key=key, type='object', fields=fields_from_object(value))
    if isinstance(value, list):
        return SchemaField(
            key=key,
            type='array',
            fields=_array_template(value),
            length=min(len(value), TEMPLATE_LENGTH_CAP),
        )
    return SchemaField(key=key, type=infer_field_type(value, key), value=value)


def fields_from_object(obj: Dict[str, Any]) -> List[SchemaField]:
    return [field_from_value(key, value) for key, value in obj.items()]


def parse_json_to_schema(json_text: str) -> ParseResult:
    validation = validate_json_structure(json_text)
    if not validation.is_valid:
        return ParseResult(schema=None, validation=validation)

    try:
        parsed = _loads_strict(json_text)
        if _nesting_depth(parsed) > MAX_NESTING_DEPTH:
            return ParseResult(
                schema=None,
                validation=ValidationResult(
                    is_valid=False,
                    error=f"JSON is nested too deeply (more than {MAX_NESTING_DEPTH} levels)",
                ),
            )

        if isinstance(parsed, list):
            schema = MockSchema(
                type='array',
                fields=_array_template(parsed),
                length=min(len(parsed), TEMPLATE_LENGTH_CAP),
            )
        elif isinstance(parsed, dict):
            schema = MockSchema(type='object', fields=fields_from_object(parsed))
        else:
            # Infer from the value alone; a synthetic key like "value" would match the price rule.
            schema = MockSchema(
                type='primitive',
                primitive_type=infer_field_type(parsed, ''),
                primitive_value=parsed,
            )
    except (ValueError, RecursionError) as exc:
        return ParseResult(
            schema=None,
            validation=ValidationResult(is_valid=False, error=f"Failed to parse JSON: {exc}"),
        )

    return ParseResult(schema=schema, validation=ValidationResult(is_valid=True))
