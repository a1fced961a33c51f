"""
Field-level Change Detection

Computes a human-readable list of what changed between two versions
of a record, and squeezes it into a one-line audit summary.

DESIGN DECISION: The diff is for people, not for replay.
Nested values are compared by their JSON serialisation, and lists are
displayed only as an item count. A FieldChange cannot be applied back
to a record.
"""

import json
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel

from marketing_budget.models.audit import FieldChange


# Always change on save and carry no meaning for a reader.
DEFAULT_IGNORED_FIELDS: frozenset[str] = frozenset({
    "updated_at",
    "created_at",
    "updatedAt",
    "createdAt",
})

EMPTY_PLACEHOLDER = "—"
EMPTY_STRING_MARKER = '""'

# Longer display values are cut, keeping summaries one readable line.
MAX_DISPLAY_LENGTH = 80
TRUNCATION_MARKER = "…"

Record = Union[Mapping[str, Any], BaseModel]


def snapshot(record: BaseModel) -> dict[str, Any]:
    """JSON-ready copy of a model, as stored in audit before/after payloads."""
    return record.model_dump(mode="json")


def _truncate(text: str) -> str:
    if len(text) <= MAX_DISPLAY_LENGTH:
        return text
    return text[:MAX_DISPLAY_LENGTH - 1] + TRUNCATION_MARKER


def display_value(value: Any) -> str:
    """Pretty-print a value for display in summaries."""
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return EMPTY_PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return _truncate(value) or EMPTY_STRING_MARKER
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return f"[{len(value)} items]"
    return _truncate(json.dumps(value, default=_json_default))


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        # 100 and 100.00 are the same amount
        return format(value.normalize(), "f")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _serialise(value: Any) -> str:
    return json.dumps(value, default=_json_default, sort_keys=True)


def _as_mapping(record: Record) -> Mapping[str, Any]:
    if isinstance(record, BaseModel):
        # Python-mode dump keeps Decimals as numbers, not formatted strings
        return record.model_dump()
    return record


def diff_changes(
    before: Record,
    after: Record,
    extra_ignore: Optional[Iterable[str]] = None,
) -> list[FieldChange]:
    """
    Compare two records and return one FieldChange per differing field.

    Only top-level keys are examined; nested values are compared by
    serialisation so deep edits still register on their parent field.

    Args:
        before: Previous version (dict or model)
        after: Updated version (dict or model)
        extra_ignore: Field names to skip on top of the timestamps
    """
    before_map = _as_mapping(before)
    after_map = _as_mapping(after)

    skip = DEFAULT_IGNORED_FIELDS
    if extra_ignore:
        skip = skip | frozenset(extra_ignore)

    keys = list(before_map)
    keys.extend(key for key in after_map if key not in before_map)

    changes = []
    for key in keys:
        if key in skip:
            continue

        old = before_map.get(key)
        new = after_map.get(key)

        # Fast path: same object or identical primitives
        if old is new:
            continue
        if type(old) is type(new) and isinstance(old, (str, int, float, bool)) and old == new:
            continue

        if _serialise(old) == _serialise(new):
            continue

        changes.append(FieldChange(
            field=key,
            from_=display_value(old),
            to=display_value(new),
        ))

    return changes


def format_field_name(field: str) -> str:
    """
    Friendlier form of a field name.

    e.g. "propertyAddress" -> "property address", "vendor_id" -> "vendor"
    """
    # The relationship is described, not the foreign key
    cleaned = re.sub(r"(?<=.)(_id|Id)$", "", field)
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", cleaned)
    return spaced.replace("_", " ").lower()


def summarise_changes(
    prefix: str,
    changes: list[FieldChange],
    max_fields: int = 4,
) -> str:
    """
    Build a one-line summary from a list of field changes.

    Example: 'Updated vendor "Acme": name Acme → Acme Corp, +2 more'
    """
    if not changes:
        return f"{prefix} (no field changes detected)"

    items = [
        f"{format_field_name(change.field)} {change.from_} → {change.to}"
        for change in changes[:max_fields]
    ]

    remaining = len(changes) - max_fields
    if remaining > 0:
        items.append(f"+{remaining} more")

    return f"{prefix}: {', '.join(items)}"
