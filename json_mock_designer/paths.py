from __future__ import annotations

from typing import List


def escape_path_segment(segment: str) -> str:
    """Escape a single key segment for dot-path representation.

    - Dots are escaped as '\\.' so keys like 'gpt-3.5-turbo' remain one segment.
    - Brackets are escaped so a key like 'a[0]' is not read as an index.
    - Backslashes are escaped as '\\\\' to preserve round-tripping.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    out = segment.replace('\\', '\\\\')
    for ch in '.[]':
        out = out.replace(ch, '\\' + ch)
    return out


def join_key_path(parent: str, key: str) -> str:
    """Append an object key to a generation path: ('user', 'city') -> 'user.city'."""
    escaped = escape_path_segment(key)
    return f"{parent}.{escaped}" if parent else escaped


def join_index_path(parent: str, index: int) -> str:
    """Append an array index to a generation path: ('addresses', 2) -> 'addresses[2]'."""
    return f"{parent}[{index}]"


def parse_index_path(path: str) -> List[int]:
    """Split a form index path ('0.2.1') into integer positions.

    Raises ValueError for empty paths or non-numeric segments.
    """
    if path is None or not str(path).strip():
        raise ValueError("Field path is empty.")

    positions: List[int] = []
    for part in str(path).strip().split('.'):
        if not part.isdigit():
            raise ValueError(f"Invalid field path segment {part!r} in {path!r}.")
        positions.append(int(part))
    return positions


def format_index_path(positions: List[int]) -> str:
    return '.'.join(str(p) for p in positions)
