"""Schema data model shared by the detector, generator, parser and editor sync.

A schema tree describes the JSON shape a mock endpoint should return. Container
nodes (`object`/`array`) carry child `fields`; leaf nodes carry an optional
literal `value`. The dict form (`to_dict`/`from_dict`) uses the camelCase wire
names of the stored endpoint configuration.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
Literal = Union[str, int, float, bool]

CONTAINER_TYPES = ('object', 'array')
ROOT_TYPES = ('object', 'array', 'primitive')


def is_container_type(type_name: str) -> bool:
    return type_name in CONTAINER_TYPES


@dataclass
class SchemaField:
    key: str
    type: str = 'string'
    value: Optional[Literal] = None
    fields: Optional[List['SchemaField']] = None
    length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'key': self.key, 'type': self.type}
        if is_container_type(self.type):
            if self.fields is not None:
                out['fields'] = [f.to_dict() for f in self.fields]
            if self.type == 'array' and self.length is not None:
                out['length'] = self.length
        elif self.value is not None:
            out['value'] = self.value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchemaField':
        type_name = str(data.get('type') or 'string')
        if is_container_type(type_name):
            children = data.get('fields')
            return cls(
                key=str(data.get('key', '')),
                type=type_name,
                fields=[cls.from_dict(c) for c in children] if isinstance(children, list) else [],
                length=_coerce_length(data.get('length')) if type_name == 'array' else None,
            )
        return cls(key=str(data.get('key', '')), type=type_name, value=data.get('value'))


@dataclass
class MockSchema:
    type: str = 'object'
    primitive_type: Optional[str] = None
    primitive_value: Optional[Literal] = None
    fields: Optional[List[SchemaField]] = None
    length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'type': self.type}
        if self.type == 'primitive':
            if self.primitive_type is not None:
                out['primitiveType'] = self.primitive_type
            if self.primitive_value is not None:
                out['primitiveValue'] = self.primitive_value
            return out
        if self.fields is not None:
            out['fields'] = [f.to_dict() for f in self.fields]
        if self.type == 'array' and self.length is not None:
            out['length'] = self.length
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockSchema':
        if not isinstance(data, dict):
            raise ValueError("Schema must be a JSON object.")
        type_name = data.get('type') or 'object'
        if type_name not in ROOT_TYPES:
            raise ValueError(f"Unknown schema type: {type_name!r}")

        if type_name == 'primitive':
            return cls(
                type='primitive',
                primitive_type=data.get('primitiveType') or 'string',
                primitive_value=data.get('primitiveValue'),
            )

        children = data.get('fields')
        return cls(
            type=type_name,
            fields=[SchemaField.from_dict(c) for c in children] if isinstance(children, list) else None,
            length=_coerce_length(data.get('length')) if type_name == 'array' else None,
        )


@dataclass
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None
    line_number: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        """Human-readable status line for error display."""
        if self.is_valid:
            return "Valid JSON"
        location = ""
        if self.line_number is not None:
            location = f" (line {self.line_number}, column {self.column})"
        return f"{self.error or 'Invalid JSON'}{location}"


@dataclass
class ParseResult:
    schema: Optional[MockSchema]
    validation: ValidationResult = field(default_factory=lambda: ValidationResult(is_valid=True))


def schema_fingerprint(schema: Optional[MockSchema]) -> str:
    """Canonical text form used for value-equality between schemas."""
    if schema is None:
        return 'null'
    return json.dumps(schema.to_dict(), sort_keys=True, ensure_ascii=False)


def _coerce_length(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None
