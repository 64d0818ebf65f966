from __future__ import annotations

import logging
import math
from copy import deepcopy
from typing import Any, List, Optional

import gradio as gr

from .config import Settings
from .generator import generate_mock_data
from .io_utils import export_schema_json, import_schema
from .models import MockSchema, SchemaField, is_container_type
from .schema_updates import (
    add_nested_field_by_path,
    change_field_type,
    flatten_schema_rows,
    remove_field_by_path,
    update_field_by_path,
)
from .serializer import format_json_text
from .sync import EditorSyncCoordinator
from .templates import (
    JSON_TEMPLATES,
    get_template_by_id,
    get_templates_by_category,
    search_templates,
)

logger = logging.getLogger(__name__)

MIN_FORM_ARRAY_LENGTH = 1
MAX_FORM_ARRAY_LENGTH = 100
DEFAULT_TEMPLATE_ID = "user-profile"
ALL_CATEGORIES = "all"
SESSION_LOADING = "Session is still loading, try again in a moment."


class DesignerSession:
    """Per-browser-session form state plus its editor sync coordinator."""

    def __init__(self, schema: MockSchema, settings: Settings):
        self.schema = deepcopy(schema)
        self.revision = 0
        self.coordinator = EditorSyncCoordinator(
            schema,
            self._on_schema_change,
            debounce_seconds=settings.debounce_seconds,
            origin_window_seconds=settings.origin_window_seconds,
        )

    def _on_schema_change(self, schema: MockSchema) -> None:
        self.schema = schema
        self.revision += 1

    def apply_form_schema(self, schema: MockSchema) -> None:
        self.schema = deepcopy(schema)
        self.coordinator.update_from_schema(schema)


def template_choices(templates=None):
    return [(f"{t.icon} {t.name}", t.id) for t in (JSON_TEMPLATES if templates is None else templates)]


def template_categories() -> List[str]:
    categories: List[str] = []
    for template in JSON_TEMPLATES:
        if template.category not in categories:
            categories.append(template.category)
    return [ALL_CATEGORIES] + categories


def filter_templates(query: Optional[str], category: Optional[str]):
    templates = JSON_TEMPLATES
    if category and category != ALL_CATEGORIES:
        templates = get_templates_by_category(category)
    if query and query.strip():
        matches = {t.id for t in search_templates(query.strip())}
        templates = [t for t in templates if t.id in matches]
    return templates


def _table_rows(table) -> List[list]:
    if table is None:
        return []
    try:
        return table.values.tolist()
    except AttributeError:
        return [list(row) for row in table]


def _is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return isinstance(raw, str) and not raw.strip()


def coerce_form_value(type_name: str, raw: Any):
    """Turn a table cell into the literal stored on a leaf field."""
    if _is_blank(raw):
        return ''
    if type_name == 'number':
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return raw
        try:
            number = float(str(raw).strip())
        except ValueError:
            return ''
        return int(number) if number.is_integer() else number
    if type_name == 'boolean':
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in ('true', '1', 'yes')
    return raw if isinstance(raw, str) else str(raw)


def clamp_form_length(raw: Any) -> int:
    if _is_blank(raw):
        return MIN_FORM_ARRAY_LENGTH
    try:
        length = int(float(raw))
    except (TypeError, ValueError):
        return MIN_FORM_ARRAY_LENGTH
    return max(MIN_FORM_ARRAY_LENGTH, min(length, MAX_FORM_ARRAY_LENGTH))


def _apply_row(schema_field: SchemaField, key: Any, type_name: Any, value: Any, length: Any) -> SchemaField:
    type_name = str(type_name or schema_field.type)
    if type_name != schema_field.type:
        schema_field = change_field_type(schema_field, type_name)
    schema_field.key = '' if _is_blank(key) else str(key)
    if schema_field.type == 'array':
        schema_field.length = clamp_form_length(length)
    elif not is_container_type(schema_field.type):
        schema_field.value = coerce_form_value(schema_field.type, value)
    return schema_field


def apply_form_rows(schema: MockSchema, rows: List[list]) -> MockSchema:
    for row in rows:
        if len(row) < 5 or _is_blank(row[0]):
            continue
        path, key, type_name, value, length = row[:5]
        schema = update_field_by_path(
            schema,
            str(path),
            lambda f, k=key, t=type_name, v=value, n=length: _apply_row(f, k, t, v, n),
        )
    return schema


def _session_outputs(session: DesignerSession, status: str):
    state = session.coordinator.state
    return (
        session,
        session.revision,
        state.editor_text,
        flatten_schema_rows(session.schema),
        state.validation.describe(),
        generate_mock_data(session.schema),
        status,
    )


def _loading_outputs(session: Optional[DesignerSession]):
    # Events can fire before demo.load has created the session.
    return (session,) + tuple(gr.update() for _ in range(5)) + (SESSION_LOADING,)


def start_session(template_id: Optional[str], settings: Settings):
    template = get_template_by_id(template_id or DEFAULT_TEMPLATE_ID) or JSON_TEMPLATES[0]
    session = DesignerSession(deepcopy(template.schema), settings)
    return _session_outputs(session, f"Loaded template: {template.name}")


def handle_template_filter(query: str, category: str):
    templates = filter_templates(query, category)
    if not templates:
        return gr.update(choices=[], value=None), "No templates match."
    return gr.update(choices=template_choices(templates)), f"{len(templates)} template(s) found."


def handle_template_select(session: Optional[DesignerSession], template_id: str, settings: Settings):
    if not template_id:
        return _loading_outputs(session) if session is None else _session_outputs(session, "No template selected.")
    template = get_template_by_id(template_id)
    if template is None:
        return start_session(None, settings) if session is None else _session_outputs(session, "Unknown template.")
    if session is None:
        return start_session(template_id, settings)
    session.apply_form_schema(deepcopy(template.schema))
    return _session_outputs(session, f"Loaded template: {template.name}")


def handle_file_import(session: Optional[DesignerSession], file_obj):
    if session is None:
        return _loading_outputs(session)
    if file_obj is None:
        return _session_outputs(session, "No file uploaded.")
    result = import_schema(file_obj)
    if not result.validation.is_valid or result.schema is None:
        return _session_outputs(session, f"Import failed: {result.validation.describe()}")
    session.apply_form_schema(result.schema)
    return _session_outputs(session, "Schema imported from file.")


def handle_editor_input(session: Optional[DesignerSession], text: str):
    if session is None:
        return SESSION_LOADING
    session.coordinator.update_from_editor(text or '')
    return "Syncing..."


def handle_editor_mode(session: Optional[DesignerSession], enabled: bool):
    """Toggle JSON editing; switching back to the form applies pending text first."""
    if session is None:
        return _loading_outputs(session)
    session.coordinator.set_editor_mode(bool(enabled))
    return _session_outputs(session, "Editing JSON text." if enabled else "Editing form fields.")


def handle_clear_error(session: Optional[DesignerSession]):
    if session is None:
        return SESSION_LOADING
    session.coordinator.clear_error()
    return session.coordinator.state.validation.describe()


def poll_sync(session: Optional[DesignerSession], seen_revision: int):
    """Push editor-derived schemas into the form once the debounce settles."""
    if session is None:
        return seen_revision, gr.update(), gr.update(), gr.update()
    state = session.coordinator.state
    status = "Syncing..." if session.coordinator.has_pending_sync else state.validation.describe()
    if session.revision == seen_revision:
        return seen_revision, gr.update(), status, gr.update()
    return session.revision, flatten_schema_rows(session.schema), status, generate_mock_data(session.schema)


def handle_form_edit(session: Optional[DesignerSession], table):
    if session is None:
        return _loading_outputs(session)
    try:
        schema = apply_form_rows(session.schema, _table_rows(table))
    except ValueError as exc:
        return _session_outputs(session, f"Form edit rejected: {exc}")
    session.apply_form_schema(schema)
    return _session_outputs(session, "Form updated.")


def handle_add_field(session: Optional[DesignerSession], path: str):
    if session is None:
        return _loading_outputs(session)
    try:
        schema = add_nested_field_by_path(session.schema, path)
    except ValueError as exc:
        return _session_outputs(session, f"Cannot add field: {exc}")
    session.apply_form_schema(schema)
    return _session_outputs(session, "Field added.")


def handle_remove_field(session: Optional[DesignerSession], path: str):
    if session is None:
        return _loading_outputs(session)
    try:
        schema = remove_field_by_path(session.schema, path)
    except ValueError as exc:
        return _session_outputs(session, f"Cannot remove field: {exc}")
    session.apply_form_schema(schema)
    return _session_outputs(session, "Field removed.")


def handle_format(session: Optional[DesignerSession]):
    if session is None:
        return gr.update(), SESSION_LOADING
    text = session.coordinator.state.editor_text
    formatted, validation = format_json_text(text)
    if not validation.is_valid:
        return text, f"Invalid JSON - cannot format: {validation.describe()}"
    if formatted == text:
        return text, "JSON is already properly formatted"
    session.coordinator.update_from_editor(formatted)
    return formatted, "JSON formatted successfully"


def handle_force_sync(session: Optional[DesignerSession]):
    if session is None:
        return _loading_outputs(session)
    session.coordinator.force_sync()
    return _session_outputs(session, "Synchronized.")


def handle_export(session: Optional[DesignerSession], file_name: str):
    if session is None:
        return None, SESSION_LOADING
    try:
        path = export_schema_json(session.schema, file_name)
    except OSError as exc:
        logger.exception("Export failed")
        return None, f"Error during export: {exc}"
    return path, f"Export successful! Saved to {path}"
