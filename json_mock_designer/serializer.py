from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .generator import generate_mock_data
from .json_parser import validate_json_structure
from .models import JsonValue, Literal, MockSchema, SchemaField, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_ARRAY_LENGTH = 3
INDENT = 2

STATIC_DEFAULTS: Dict[str, Any] = {
    'string': "string_value",
    'number': 123,
    'boolean': True,
    'email': "user@example.com",
    'firstName': "John",
    'lastName': "Doe",
    'fullName': "John Doe",
    'phone': "+1-234-567-8900",
    'address': "123 Main St",
    'city': "New York",
    'country': "United States",
    'zipCode': "10001",
    'company': "Acme Corp",
    'jobTitle': "Software Engineer",
    'url': "https://example.com",
    'username': "johndoe",
    'password': "password123",
    'uuid': "123e4567-e89b-12d3-a456-426614174000",
    'avatar': "https://avatars.githubusercontent.com/u/1?v=4",
    'price': 29.99,
    'currency': "USD",
    'color': "#3b82f6",
    'ip': "192.168.1.1",
    'mac': "00:1B:44:11:3A:B7",
    'domain': "example.com",
    'creditCard': "4111-1111-1111-1111",
    'iban': "GB82 WEST 1234 5698 7654 32",
    'age': 25,
    'gender': "male",
    'description': "Lorem ipsum dolor sit amet",
    'title': "Sample Title",
    'image': "https://picsum.photos/200/300",
}


def format_json_output(value: JsonValue) -> str:
    return json.dumps(value, indent=INDENT, ensure_ascii=False, allow_nan=False)


def static_value_for_field(type_name: str, value: Optional[Literal]) -> JsonValue:
    """Deterministic leaf value: the literal (coerced to the declared type) or the table default."""
    if value is not None and value != '':
        if type_name == 'number':
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return value
            try:
                number = float(value)
            except (TypeError, ValueError):
                return 0
            return int(number) if number.is_integer() else number
        if type_name == 'boolean':
            if isinstance(value, bool):
                return value
            return value in ('true', '1', 1)
        return value

    if type_name == 'date':
        return date.today().isoformat()
    return STATIC_DEFAULTS.get(type_name, "")


def _static_array(fields: List[SchemaField], length: Optional[int]) -> List[Any]:
    count = length or DEFAULT_ARRAY_LENGTH
    if len(fields) == 1 and fields[0].key == 'item':
        return [static_value_for_field(fields[0].type, fields[0].value) for _ in range(count)]
    return [_static_object(fields) for _ in range(count)]


def _static_object(fields: List[SchemaField]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for schema_field in fields:
        if not schema_field.key:
            continue
        if schema_field.type == 'object' and schema_field.fields is not None:
            result[schema_field.key] = _static_object(schema_field.fields)
        elif schema_field.type == 'array' and schema_field.fields is not None:
            result[schema_field.key] = _static_array(schema_field.fields, schema_field.length)
        else:
            result[schema_field.key] = static_value_for_field(schema_field.type, schema_field.value)
    return result


def schema_to_json(schema: MockSchema) -> str:
    """Serialize a schema with fixed per-type defaults; never raises.

    Any failure is logged and downgraded to '{}' so the editor always
    receives valid JSON text.
    """
    try:
        if schema.type == 'primitive':
            payload = static_value_for_field(schema.primitive_type or 'string', schema.primitive_value)
        elif schema.type == 'array':
            if schema.fields:
                payload = _static_array(schema.fields, schema.length)
            else:
                payload = [STATIC_DEFAULTS['string']] * DEFAULT_ARRAY_LENGTH
        else:
            payload = _static_object(schema.fields) if schema.fields else {}
        return format_json_output(payload)
    except Exception:
        logger.exception("Error converting schema to JSON")
        return "{}"


def schema_to_json_with_mock_generator(schema: MockSchema) -> str:
    """Serialize exactly what the mock generator would serve for `schema`."""
    try:
        return format_json_output(generate_mock_data(schema))
    except Exception:
        logger.exception("Error generating mock data, using static serializer")
        return schema_to_json(schema)


def format_json_text(json_text: str) -> Tuple[str, ValidationResult]:
    """Re-indent editor text; invalid text is reported, not raised.

    Returns (formatted_text, validation). On failure the original text is
    returned unchanged.
    """
    validation = validate_json_structure(json_text)
    if not validation.is_valid:
        return json_text, validation
    formatted = format_json_output(json.loads(json_text))
    return formatted, ValidationResult(is_valid=True)
