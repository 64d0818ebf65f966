"""Editor sync coordinator tests, driven by a virtual clock."""

from __future__ import annotations

from typing import List

from json_mock_designer.models import MockSchema, SchemaField
from json_mock_designer.serializer import schema_to_json_with_mock_generator
from json_mock_designer.sync import (
    Debouncer,
    EditorSyncCoordinator,
    ManualScheduler,
    SyncOrigin,
)


def _schema(value: int = 1) -> MockSchema:
    return MockSchema(
        type="object",
        fields=[
            SchemaField(key="count", type="number", value=value),
            SchemaField(key="label", type="string", value="hello"),
        ],
    )


def _coordinator(received: List[MockSchema], scheduler: ManualScheduler, initial: MockSchema = None):
    return EditorSyncCoordinator(
        initial or _schema(),
        received.append,
        debounce_seconds=0.3,
        origin_window_seconds=0.05,
        scheduler=scheduler,
    )


def test_initial_text_is_serialized_schema() -> None:
    coordinator = _coordinator([], ManualScheduler())

    state = coordinator.state
    assert state.editor_text == '{\n  "count": 1,\n  "label": "hello"\n}'
    assert state.last_valid_text == state.editor_text
    assert state.origin is SyncOrigin.NONE
    assert state.validation.is_valid


def test_update_from_schema_regenerates_text_and_opens_window() -> None:
    scheduler = ManualScheduler()
    coordinator = _coordinator([], scheduler)

    coordinator.update_from_schema(_schema(5))

    state = coordinator.state
    assert '"count": 5' in state.editor_text
    assert state.origin is SyncOrigin.FROM_SCHEMA
    assert state.parse_error is None

    scheduler.advance(0.05)
    assert coordinator.state.origin is SyncOrigin.NONE


def test_identical_schema_is_ignored() -> None:
    scheduler = ManualScheduler()
    coordinator = _coordinator([], scheduler)
    coordinator.update_from_editor("[1, 2]")

    coordinator.update_from_schema(_schema(1))

    assert coordinator.state.editor_text == "[1, 2]"
    assert coordinator.state.origin is SyncOrigin.NONE


def test_editor_text_is_stored_immediately_and_debounced() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    coordinator.update_from_editor('{"a": 1}')

    assert coordinator.state.editor_text == '{"a": 1}'
    assert coordinator.has_pending_sync
    scheduler.advance(0.29)
    assert received == []

    scheduler.advance(0.02)
    assert received == [MockSchema(type="object", fields=[SchemaField(key="a", type="number", value=1)])]
    state = coordinator.state
    assert state.origin is SyncOrigin.FROM_EDITOR
    assert state.last_valid_text == '{"a": 1}'
    assert state.sync_in_progress is False


def test_last_edit_wins_within_debounce_window() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    coordinator.update_from_editor('{"a": 1}')
    scheduler.advance(0.2)
    coordinator.update_from_editor('{"b": 2}')
    scheduler.advance(0.2)
    assert received == []

    scheduler.advance(0.2)
    assert len(received) == 1
    assert received[0].fields[0].key == "b"


def test_invalid_text_is_kept_but_not_applied() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    valid_text = coordinator.state.last_valid_text

    coordinator.update_from_editor('{"a":')
    scheduler.advance(0.3)

    state = coordinator.state
    assert received == []
    assert state.editor_text == '{"a":'
    assert state.validation.is_valid is False
    assert state.parse_error
    assert state.last_valid_text == valid_text
    assert state.origin is SyncOrigin.NONE


def test_reconciliation_is_skipped_during_schema_window() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler, initial=_schema(1))
    coordinator.update_from_schema(_schema(2))

    coordinator.update_from_editor('{"echo": true}')
    coordinator.flush()

    assert received == []
    assert coordinator.state.editor_text == '{"echo": true}'


def test_schema_update_is_ignored_while_editor_change_is_applied() -> None:
    scheduler = ManualScheduler()
    coordinator = None

    def echo(schema: MockSchema) -> None:
        # The form layer re-submits what it was handed; this must not loop.
        coordinator.update_from_schema(MockSchema(type="object", fields=[]))

    coordinator = EditorSyncCoordinator(_schema(), echo, scheduler=scheduler)
    coordinator.update_from_editor('{"a": 1}')
    scheduler.advance(0.3)

    state = coordinator.state
    assert state.editor_text == '{"a": 1}'
    assert state.origin is SyncOrigin.FROM_EDITOR


def test_schema_then_editor_settles_without_oscillation() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    schema = _schema(9)
    text = schema_to_json_with_mock_generator(schema)

    coordinator.update_from_schema(schema)
    coordinator.update_from_editor(text)
    scheduler.advance(1.0)

    state = coordinator.state
    assert state.editor_text == text
    assert state.origin is SyncOrigin.NONE
    assert received == [schema]
    assert scheduler.pending == 0

    # Echoing the received schema back is a no-op.
    for echoed in received:
        coordinator.update_from_schema(echoed)
    assert coordinator.state.editor_text == text


def test_schema_update_cancels_pending_editor_parse() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    coordinator.update_from_editor('{"stale": 1}')
    coordinator.update_from_schema(_schema(3))
    scheduler.advance(1.0)

    assert received == []
    assert '"count": 3' in coordinator.state.editor_text


def test_force_sync_bypasses_debounce() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    coordinator.update_from_editor('["x"]')
    coordinator.force_sync()

    assert len(received) == 1
    assert received[0].type == "array"
    assert not coordinator.has_pending_sync
    scheduler.advance(1.0)
    assert len(received) == 1


def test_force_sync_requires_valid_state() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    coordinator.update_from_editor("{")
    scheduler.advance(0.3)

    coordinator.update_from_editor('{"a": 1}')
    coordinator.force_sync()

    assert received == []


def test_clear_error_resets_validation() -> None:
    scheduler = ManualScheduler()
    coordinator = _coordinator([], scheduler)
    coordinator.update_from_editor("{")
    scheduler.advance(0.3)

    coordinator.clear_error()

    assert coordinator.state.parse_error is None
    assert coordinator.state.validation.is_valid


def test_leaving_editor_mode_flushes_pending_text() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    coordinator.set_editor_mode(True)
    coordinator.update_from_editor('{"z": false}')

    coordinator.set_editor_mode(False)

    assert coordinator.state.editor_mode is False
    assert received[0].fields == [SchemaField(key="z", type="boolean", value=False)]


def test_callback_failure_is_reported_as_validation_error() -> None:
    scheduler = ManualScheduler()

    def broken(schema: MockSchema) -> None:
        raise RuntimeError("form unavailable")

    coordinator = EditorSyncCoordinator(_schema(), broken, scheduler=scheduler)
    coordinator.update_from_editor('{"a": 1}')
    scheduler.advance(0.3)

    state = coordinator.state
    assert state.validation.is_valid is False
    assert state.parse_error == "form unavailable"
    assert state.sync_in_progress is False


def test_schema_is_handed_out_by_value() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    coordinator.update_from_editor('{"a": 1}')
    scheduler.advance(0.3)

    received[0].fields[0].value = 99

    assert coordinator.schema.fields[0].value == 1


def test_debouncer_flush_and_cancel() -> None:
    calls: List[str] = []
    scheduler = ManualScheduler()
    debouncer = Debouncer(scheduler, 0.3, calls.append)

    debouncer("a")
    debouncer.flush()
    debouncer("b")
    debouncer.cancel()
    scheduler.advance(1.0)
    debouncer.flush()

    assert calls == ["a"]
    assert not debouncer.pending


def test_deeply_nested_text_is_reported_not_raised() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)
    valid_text = coordinator.state.last_valid_text

    coordinator.update_from_editor('{"a":' * 200 + "1" + "}" * 200)
    coordinator.force_sync()

    state = coordinator.state
    assert received == []
    assert state.validation.is_valid is False
    assert "nested too deeply" in state.parse_error
    assert state.last_valid_text == valid_text
    assert state.sync_in_progress is False


def test_schema_too_deep_to_copy_is_reported(monkeypatch) -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    def too_deep(schema):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr("json_mock_designer.sync.schema_fingerprint", too_deep)
    coordinator.update_from_editor('{"a": 1}')
    scheduler.advance(0.3)

    state = coordinator.state
    assert received == []
    assert state.validation.is_valid is False
    assert state.validation.error == "Failed to apply schema"
    assert state.parse_error == "Schema is nested too deeply"
    assert state.origin is SyncOrigin.NONE


def test_overflowing_number_never_reaches_the_editor() -> None:
    received: List[MockSchema] = []
    scheduler = ManualScheduler()
    coordinator = _coordinator(received, scheduler)

    coordinator.update_from_editor('{"a": 1e400}')
    scheduler.advance(0.3)

    assert received == []
    assert coordinator.state.validation.is_valid is False
