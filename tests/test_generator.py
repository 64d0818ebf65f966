"""Mock data generator tests."""

from __future__ import annotations

from json_mock_designer.generator import (
    MAX_ARRAY_LENGTH,
    GenerationContext,
    _resolve_field,
    generate_mock_data,
)
from json_mock_designer.models import MockSchema, SchemaField


def _object(*fields: SchemaField) -> MockSchema:
    return MockSchema(type="object", fields=list(fields))


def _depth(value) -> int:
    depth = 0
    while isinstance(value, dict) and value:
        value = next(iter(value.values()))
        depth += 1
    return depth


def test_literal_values_pass_through_unchanged() -> None:
    schema = _object(SchemaField(key="id", type="number", value=42))

    assert generate_mock_data(schema) == {"id": 42}


def test_literal_values_are_not_coerced() -> None:
    schema = _object(
        SchemaField(key="count", type="number", value="7"),
        SchemaField(key="flag", type="boolean", value=False),
        SchemaField(key="zero", type="number", value=0),
    )

    assert generate_mock_data(schema) == {"count": "7", "flag": False, "zero": 0}


def test_smart_types_ignore_literal_values() -> None:
    schema = _object(SchemaField(key="email", type="email", value="fixed@example.com"))

    values = {generate_mock_data(schema)["email"] for _ in range(5)}

    assert "fixed@example.com" not in values
    assert all("@" in v for v in values)


def test_empty_literal_is_generated() -> None:
    value = generate_mock_data(_object(SchemaField(key="label", type="string", value="")))["label"]

    assert isinstance(value, str) and value


def test_empty_keys_are_skipped() -> None:
    schema = _object(
        SchemaField(key="", type="string", value="dropped"),
        SchemaField(key="kept", type="string", value="yes"),
    )

    assert generate_mock_data(schema) == {"kept": "yes"}


def test_nested_objects_and_arrays() -> None:
    schema = _object(
        SchemaField(
            key="user",
            type="object",
            fields=[
                SchemaField(key="id", type="number", value=1),
                SchemaField(
                    key="addresses",
                    type="array",
                    length=2,
                    fields=[SchemaField(key="zip", type="string", value="10001")],
                ),
            ],
        )
    )

    assert generate_mock_data(schema) == {
        "user": {"id": 1, "addresses": [{"zip": "10001"}, {"zip": "10001"}]}
    }


def test_array_length_is_clamped_to_fifty() -> None:
    field = SchemaField(key="rows", type="array", length=200, fields=[SchemaField(key="n", type="number", value=1)])

    assert len(generate_mock_data(_object(field))["rows"]) == MAX_ARRAY_LENGTH == 50


def test_array_length_is_respected_below_the_cap() -> None:
    field = SchemaField(key="rows", type="array", length=3, fields=[SchemaField(key="n", type="number", value=1)])

    assert generate_mock_data(_object(field))["rows"] == [{"n": 1}, {"n": 1}, {"n": 1}]


def test_missing_length_yields_one_element() -> None:
    schema = MockSchema(type="array", fields=[SchemaField(key="n", type="number", value=5)])

    assert generate_mock_data(schema) == [{"n": 5}]


def test_single_item_field_produces_primitive_list() -> None:
    schema = MockSchema(type="array", length=3, fields=[SchemaField(key="item", type="string", value="tech")])

    assert generate_mock_data(schema) == ["tech", "tech", "tech"]


def test_item_elements_are_resolved_independently() -> None:
    schema = MockSchema(type="array", length=10, fields=[SchemaField(key="item", type="uuid")])

    values = generate_mock_data(schema)

    assert len(values) == 10
    assert len(set(values)) == 10


def test_root_primitive_uses_literal_or_generator() -> None:
    assert generate_mock_data(MockSchema(type="primitive", primitive_type="number", primitive_value=3)) == 3
    assert isinstance(generate_mock_data(MockSchema(type="primitive", primitive_type="boolean")), bool)
    assert "@" in generate_mock_data(MockSchema(type="primitive", primitive_type="email", primitive_value="x"))


def test_root_array_without_fields_yields_empty_objects() -> None:
    assert generate_mock_data(MockSchema(type="array", length=2)) == [{}, {}]


def test_self_referencing_schema_terminates_at_max_depth() -> None:
    node = SchemaField(key="node", type="object", fields=[])
    node.fields.append(node)

    result = generate_mock_data(_object(node))

    # depths 0..10 expand, depth 11 is cut off with an empty object
    assert _depth(result) == 12


def test_self_referencing_array_terminates() -> None:
    loop = SchemaField(key="loop", type="array", length=2, fields=[])
    loop.fields.append(loop)

    result = generate_mock_data(_object(loop))

    assert isinstance(result["loop"], list)
    assert len(result["loop"]) == 2


def test_repeated_path_returns_terminal_default() -> None:
    context = GenerationContext()
    child = SchemaField(key="a", type="object", fields=[SchemaField(key="x", type="number", value=1)])

    assert _resolve_field(child, "a", context) == {"x": 1}
    assert _resolve_field(child, "a", context) == {}
    assert _resolve_field(SchemaField(key="a", type="array", fields=[]), "a", context) == []


def test_custom_max_depth() -> None:
    inner = SchemaField(key="c", type="object", fields=[SchemaField(key="v", type="number", value=1)])
    middle = SchemaField(key="b", type="object", fields=[inner])
    outer = SchemaField(key="a", type="object", fields=[middle])

    assert generate_mock_data(_object(outer), max_depth=1) == {"a": {"b": {"c": {}}}}
    assert generate_mock_data(_object(outer), max_depth=0) == {"a": {"b": {}}}
