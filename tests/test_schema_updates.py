"""Index-path schema edits used by the form view."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest
from json_mock_designer.models import MockSchema, SchemaField, schema_fingerprint
from json_mock_designer.schema_updates import (
    add_nested_field_by_path,
    change_field_type,
    flatten_schema_rows,
    get_default_value_for_type,
    get_field_by_path,
    remove_field_by_path,
    update_field_by_path,
)


def _schema() -> MockSchema:
    return MockSchema(
        type="object",
        fields=[
            SchemaField(key="id", type="number", value=1),
            SchemaField(
                key="user",
                type="object",
                fields=[
                    SchemaField(key="name", type="fullName"),
                    SchemaField(
                        key="tags",
                        type="array",
                        length=2,
                        fields=[SchemaField(key="item", type="string", value="x")],
                    ),
                ],
            ),
        ],
    )


def test_get_field_by_path() -> None:
    assert get_field_by_path(_schema(), "1.1.0").value == "x"


def test_update_returns_new_schema_and_leaves_input_untouched() -> None:
    schema = _schema()
    before = schema_fingerprint(schema)

    updated = update_field_by_path(schema, "1.0", lambda f: replace(f, key="displayName"))

    assert get_field_by_path(updated, "1.0").key == "displayName"
    assert schema_fingerprint(schema) == before
    # Untouched siblings are shared, not copied.
    assert updated.fields[0] is schema.fields[0]


def test_add_field_at_root_and_nested() -> None:
    schema = _schema()

    at_root = add_nested_field_by_path(schema, "")
    nested = add_nested_field_by_path(schema, "1", SchemaField(key="age", type="age"))

    assert at_root.fields[-1] == SchemaField(key="", type="string", value="")
    assert [f.key for f in nested.fields[1].fields] == ["name", "tags", "age"]
    assert len(schema.fields[1].fields) == 2


def test_add_field_rejects_leaf_targets_and_primitive_roots() -> None:
    with pytest.raises(ValueError):
        add_nested_field_by_path(_schema(), "0")
    with pytest.raises(ValueError):
        add_nested_field_by_path(MockSchema(type="primitive", primitive_type="string"), "")


def test_remove_field() -> None:
    schema = _schema()

    updated = remove_field_by_path(schema, "1.1")

    assert [f.key for f in updated.fields[1].fields] == ["name"]
    assert len(schema.fields[1].fields) == 2


@pytest.mark.parametrize("path", ["", "a.b", "5", "0.0", "1.9"])
def test_invalid_paths_raise(path: str) -> None:
    with pytest.raises(ValueError):
        remove_field_by_path(_schema(), path)


def test_flatten_rows_are_depth_first() -> None:
    rows = flatten_schema_rows(_schema())

    assert rows == [
        ("0", "id", "number", 1, None),
        ("1", "user", "object", "", None),
        ("1.0", "name", "fullName", "", None),
        ("1.1", "tags", "array", "", 2),
        ("1.1.0", "item", "string", "x", None),
    ]


def test_flatten_primitive_root_has_no_rows() -> None:
    assert flatten_schema_rows(MockSchema(type="primitive", primitive_type="number")) == []


def test_change_field_type_to_container_drops_value() -> None:
    changed = change_field_type(SchemaField(key="list", type="string", value="a"), "array")

    assert changed == SchemaField(key="list", type="array", fields=[], length=3)


def test_change_field_type_between_leaves_keeps_value() -> None:
    changed = change_field_type(SchemaField(key="n", type="string", value="5"), "number")

    assert changed == SchemaField(key="n", type="number", value="5")


def test_change_field_type_from_container_uses_default_value() -> None:
    changed = change_field_type(SchemaField(key="o", type="object", fields=[]), "boolean")

    assert changed == SchemaField(key="o", type="boolean", value=True)


def test_default_values() -> None:
    assert get_default_value_for_type("email") == "user@example.com"
    assert get_default_value_for_type("date") == date.today().isoformat()
    assert get_default_value_for_type("avatar") == ""
