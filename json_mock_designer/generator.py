from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .field_types import generate_value_for_type, is_primitive_type
from .models import JsonValue, Literal, MockSchema, SchemaField
from .paths import join_index_path, join_key_path

logger = logging.getLogger(__name__)

MAX_DEPTH = 10
MAX_ARRAY_LENGTH = 50
PRIMITIVE_ITEM_KEY = 'item'


@dataclass
class GenerationContext:
    """Recursion bookkeeping for one `generate_mock_data` run."""
    depth: int = 0
    max_depth: int = MAX_DEPTH
    visited_paths: Set[str] = field(default_factory=set)

    def descend(self) -> 'GenerationContext':
        # visited_paths is shared across the whole run, not copied per branch.
        return GenerationContext(self.depth + 1, self.max_depth, self.visited_paths)


def generate_mock_data(schema: MockSchema, max_depth: int = MAX_DEPTH) -> JsonValue:
    """Turn a schema tree into a concrete JSON value.

    Literal values on `string`/`number`/`boolean` leaves are returned as-is,
    every other leaf is synthesized. Over-deep or repeated paths are cut off
    with an empty container instead of raising.
    """
    context = GenerationContext(max_depth=max_depth)

    if schema.type == 'primitive':
        return resolve_leaf(schema.primitive_type or 'string', schema.primitive_value)
    if schema.type == 'object':
        return _build_object(schema.fields or [], '', context)
    if schema.type == 'array':
        return _build_array(schema.fields or [], schema.length, '', context)

    logger.warning("Unknown schema type %r, generating null", schema.type)
    return None


def resolve_leaf(type_name: str, value: Optional[Literal]) -> JsonValue:
    if value is not None and value != '' and is_primitive_type(type_name):
        return value
    return generate_value_for_type(type_name)


def array_item_count(length: Optional[int]) -> int:
    return max(0, min(length or 1, MAX_ARRAY_LENGTH))


def _terminal_default(type_name: str) -> JsonValue:
    return [] if type_name == 'array' else {}


def _guard(path: str, context: GenerationContext) -> bool:
    if context.depth > context.max_depth:
        logger.debug("Depth limit %d reached at %r", context.max_depth, path)
        return True
    if path in context.visited_paths:
        logger.debug("Path %r already generated in this run", path)
        return True
    context.visited_paths.add(path)
    return False


def _resolve_field(schema_field: SchemaField, path: str, context: GenerationContext) -> JsonValue:
    if schema_field.type == 'object':
        if _guard(path, context):
            return _terminal_default('object')
        return _build_object(schema_field.fields or [], path, context.descend())
    if schema_field.type == 'array':
        if _guard(path, context):
            return _terminal_default('array')
        return _build_array(schema_field.fields or [], schema_field.length, path, context.descend())
    return resolve_leaf(schema_field.type, schema_field.value)


def _build_object(fields: List[SchemaField], path: str, context: GenerationContext) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for schema_field in fields:
        if not schema_field.key:
            continue
        result[schema_field.key] = _resolve_field(
            schema_field, join_key_path(path, schema_field.key), context
        )
    return result


def _build_array(fields: List[SchemaField], length: Optional[int], path: str, context: GenerationContext) -> List[Any]:
    items: List[Any] = []
    primitive_items = len(fields) == 1 and fields[0].key == PRIMITIVE_ITEM_KEY

    for index in range(array_item_count(length)):
        item_path = join_index_path(path, index)
        if primitive_items:
            # Each element is resolved on its own; synthesized items differ.
            items.append(_resolve_field(fields[0], item_path, context))
        elif _guard(item_path, context):
            items.append(_terminal_default('object'))
        else:
            items.append(_build_object(fields, item_path, context.descend()))
    return items
