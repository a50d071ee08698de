"""
Parsing of list-valued text columns (tags, criticism summaries, id mappings).
The ingestion pipeline stores these as JSON arrays, plain strings or comma lists.
"""
import json
from typing import Any, List


def parse_tag_list(raw: Any) -> List[str]:
    """Tags from a JSON array string, a list, or a comma-separated string"""
    if not raw:
        return []

    if isinstance(raw, list):
        tags = raw
    elif isinstance(raw, str):
        try:
            parsed = json.loads(raw)
            tags = parsed if isinstance(parsed, list) else []
        except json.JSONDecodeError:
            tags = raw.split(",")
    else:
        return []

    return [tag.strip() for tag in tags if isinstance(tag, str) and tag.strip()]


def parse_summaries(raw: Any) -> List[str]:
    """Criticism summaries: a JSON array of strings or one plain string"""
    if not raw:
        return []

    if isinstance(raw, list):
        items = raw
    elif isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return [raw.strip()] if raw.strip() else []
        if not isinstance(parsed, list):
            return [raw.strip()]
        items = parsed
    else:
        return []

    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def flatten_id_list(raw: Any) -> List[str]:
    """
    Normalise an id mapping column to a flat list of strings.

    Handles nested arrays, JSON strings of either, and a single bare id.
    """
    if raw is None or raw == "":
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return [raw]

    if not isinstance(raw, list):
        return [str(raw)]

    ids = []
    for item in raw:
        if isinstance(item, list):
            ids.extend(str(x) for x in item if x)
        elif item:
            ids.append(str(item))
    return ids


def as_list(value: Any) -> List[Any]:
    """Wrap a scalar into a list, keep lists, map empties to []"""
    if isinstance(value, list):
        return value
    return [value] if value else []
