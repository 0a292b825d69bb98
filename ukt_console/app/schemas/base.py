"""Shared configuration for decoded backend records."""

from pydantic import BaseModel, ConfigDict


class RecordBase(BaseModel):
    # Records are read replicas: immutable, and unknown backend fields are kept.
    model_config = ConfigDict(extra="allow", frozen=True)


def record_value(record, field: str, default=None):
    """Read a field from a decoded record or a plain mapping."""
    if isinstance(record, dict):
        return record.get(field, default)
    return getattr(record, field, default)
