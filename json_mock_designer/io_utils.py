from __future__ import annotations

import os
import tempfile
import time
from typing import Optional

from .json_parser import parse_json_to_schema
from .models import MockSchema, ParseResult, ValidationResult
from .serializer import schema_to_json_with_mock_generator


def read_json_text(file_obj) -> str:
    """Read raw JSON text from an uploaded file or file path."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def import_schema(file_obj) -> ParseResult:
    """Build a schema from an example JSON document on disk."""
    try:
        text = read_json_text(file_obj)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        return ParseResult(schema=None, validation=ValidationResult(is_valid=False, error=f"Failed to read file: {e}"))
    return parse_json_to_schema(text)


def export_schema_json(schema: MockSchema, file_name: Optional[str] = None) -> str:
    """Write the generated preview for `schema` to a temp file and return its path."""
    if not file_name or not file_name.strip():
        file_name = f"mocklyst-schema-{int(time.time() * 1000)}"
    file_name = file_name.strip()
    if not file_name.lower().endswith('.json'):
        file_name += '.json'

    path = os.path.join(tempfile.gettempdir(), os.path.basename(file_name))
    with open(path, 'w', encoding='utf-8') as f:
        f.write(schema_to_json_with_mock_generator(schema))
    return path
