"""Pure client-side filtering and foreign-key display joins."""

from typing import Any, Callable, Iterable, Sequence, Union

from ukt_console.app.schemas.base import record_value

SearchField = Union[str, Callable[[Any], Any]]


def _field_text(record, field: SearchField) -> str:
    value = field(record) if callable(field) else record_value(record, field)
    return "" if value is None else str(value)


def filter_records(records: Sequence, text: str, fields: Iterable[SearchField]) -> tuple:
    """Rows where any configured field contains ``text`` (case-insensitive).

    Empty text returns every row in its original order.
    """
    needle = (text or "").strip().lower()
    if not needle:
        return tuple(records)
    fields = tuple(fields)
    return tuple(
        record for record in records if any(needle in _field_text(record, field).lower() for field in fields)
    )


def filter_exact(records: Sequence, **criteria: Any) -> tuple:
    """Rows whose fields equal every given criterion; empty criteria are ignored.

    Values are compared as strings so a select box value ``"3"`` matches ``3``.
    """
    active = {name: str(value) for name, value in criteria.items() if value not in (None, "")}
    return tuple(
        record
        for record in records
        if all(str(record_value(record, name)) == value for name, value in active.items())
    )


def find_related(related: Iterable, related_key: str, value: Any):
    if value is None:
        return None
    return next((row for row in related or () if record_value(row, related_key) == value), None)


def resolve_foreign_display(
    record,
    field: str,
    related: Iterable,
    related_key: str,
    label_field: str,
    template: str = "{label}",
) -> str:
    """Join ``record[field]`` against ``related`` for display.

    Falls back to the raw foreign key when no related row matches; never raises.
    """
    key = record_value(record, field)
    row = find_related(related, related_key, key)
    if row is None:
        return "" if key is None else str(key)
    label = record_value(row, label_field)
    return template.format(key=key, label="" if label is None else label)
