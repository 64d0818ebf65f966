"""Form-side edits addressed by index path.

An index path such as '0.2.1' selects `fields[0].fields[2].fields[1]`. Every
helper returns a new schema; only the nodes along the path are copied, the
input schema is never mutated.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Callable, List, Optional, Tuple

from .models import MockSchema, SchemaField, is_container_type
from .paths import format_index_path, parse_index_path

FormRow = Tuple[str, str, str, Any, Optional[int]]


def _children(node) -> List[SchemaField]:
    if node.fields is None:
        raise ValueError(f"Schema node of type {node.type!r} has no child fields.")
    return node.fields


def _rebuild(node, positions: List[int], apply: Callable[[List[SchemaField], int], List[SchemaField]]):
    """Copy `node` with the list at the end of `positions` replaced by `apply(list, last_index)`."""
    children = _children(node)
    index = positions[0]

    if len(positions) == 1:
        return replace(node, fields=apply(list(children), index))

    if not 0 <= index < len(children):
        raise ValueError(f"Field index {index} is out of range.")
    new_children = list(children)
    new_children[index] = _rebuild(children[index], positions[1:], apply)
    return replace(node, fields=new_children)


def get_field_by_path(schema: MockSchema, path: str) -> SchemaField:
    node = schema
    for index in parse_index_path(path):
        children = _children(node)
        if not 0 <= index < len(children):
            raise ValueError(f"Field index {index} is out of range.")
        node = children[index]
    return node


def update_field_by_path(schema: MockSchema, path: str, updater: Callable[[SchemaField], SchemaField]) -> MockSchema:
    def apply(children: List[SchemaField], index: int) -> List[SchemaField]:
        if not 0 <= index < len(children):
            raise ValueError(f"Field index {index} is out of range.")
        children[index] = updater(replace(children[index]))
        return children

    return _rebuild(schema, parse_index_path(path), apply)


def add_nested_field_by_path(schema: MockSchema, path: str, new_field: Optional[SchemaField] = None) -> MockSchema:
    """Append `new_field` to the container at `path` ('' appends at the root)."""
    if new_field is None:
        new_field = SchemaField(key='', type='string', value='')

    if path is None or not str(path).strip():
        if schema.type == 'primitive':
            raise ValueError("A primitive schema has no fields.")
        return replace(schema, fields=list(schema.fields or []) + [new_field])

    target = get_field_by_path(schema, path)
    if not is_container_type(target.type):
        raise ValueError(f"Field at {path!r} is not an object or array.")

    def apply(children: List[SchemaField], index: int) -> List[SchemaField]:
        container = children[index]
        children[index] = replace(container, fields=list(container.fields or []) + [new_field])
        return children

    return _rebuild(schema, parse_index_path(path), apply)


def remove_field_by_path(schema: MockSchema, path: str) -> MockSchema:
    def apply(children: List[SchemaField], index: int) -> List[SchemaField]:
        if not 0 <= index < len(children):
            raise ValueError(f"Field index {index} is out of range.")
        return children[:index] + children[index + 1:]

    return _rebuild(schema, parse_index_path(path), apply)


def get_default_value_for_type(type_name: str) -> Any:
    """Starter literal shown when the form switches a field to `type_name`."""
    defaults = {
        'string': "sample text",
        'number': 123,
        'boolean': True,
        'email': "user@example.com",
        'url': "https://example.com",
        'uuid': "123e4567-e89b-12d3-a456-426614174000",
        'phone': "+1-555-123-4567",
        'object': {},
        'array': [],
    }
    if type_name == 'date':
        return date.today().isoformat()
    return defaults.get(type_name, "")


def change_field_type(schema_field: SchemaField, type_name: str) -> SchemaField:
    """Retype a field, keeping the container/leaf invariants."""
    if is_container_type(type_name):
        return SchemaField(
            key=schema_field.key,
            type=type_name,
            fields=schema_field.fields if schema_field.fields is not None else [],
            length=(schema_field.length or 3) if type_name == 'array' else None,
        )
    value = schema_field.value
    if value is None or is_container_type(schema_field.type):
        value = get_default_value_for_type(type_name)
    return SchemaField(key=schema_field.key, type=type_name, value=value)


def flatten_schema_rows(schema: MockSchema) -> List[FormRow]:
    """Project a schema into (path, key, type, value, length) rows, depth-first."""
    rows: List[FormRow] = []

    def walk(fields: List[SchemaField], prefix: List[int]) -> None:
        for index, schema_field in enumerate(fields):
            positions = prefix + [index]
            value = '' if schema_field.value is None else schema_field.value
            rows.append((format_index_path(positions), schema_field.key, schema_field.type, value, schema_field.length))
            if is_container_type(schema_field.type) and schema_field.fields:
                walk(schema_field.fields, positions)

    if schema.type != 'primitive':
        walk(schema.fields or [], [])
    return rows
