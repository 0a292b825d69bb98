"""Explicit decoders for backend response envelopes."""

import logging
from typing import Any, Dict, List, Type

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaError

from ukt_console.app.core.errors import DecodeError, ServerError, flatten_error_message
from ukt_console.app.schemas.envelope import ErrorEnvelope, ListEnvelope, Page

logger = logging.getLogger(__name__)


def unwrap_collection(body: Any, resource: str) -> List[Dict[str, Any]]:
    """Return the raw rows of a list response.

    Accepted shapes: ``{data: [...]}``, ``{data: {data: [...]}}``,
    ``{data: null}`` and ``{data: {data: null}}``. Anything else is a
    ``DecodeError``.
    """
    try:
        envelope = ListEnvelope.model_validate(body)
    except SchemaError as exc:
        raise DecodeError(resource, f"unexpected response shape ({exc.error_count()} problems)") from exc

    if envelope.status == "error":
        raise DecodeError(resource, flatten_error_message(body))
    data = envelope.data
    if data is None:
        return []
    if isinstance(data, Page):
        return data.data or []
    return data


def decode_records(body: Any, schema: Type[BaseModel], resource: str) -> tuple:
    rows = unwrap_collection(body, resource)
    try:
        records = TypeAdapter(List[schema]).validate_python(rows)
    except SchemaError as exc:
        raise DecodeError(resource, f"invalid {schema.__name__} rows ({exc.error_count()} problems)") from exc
    logger.debug("Decoded %d %s rows", len(records), resource)
    return tuple(records)


def decode_mutation(body: Any, status_code: int, default_message: str) -> Dict[str, Any]:
    """Return the ``data`` payload of a mutation response or raise ``ServerError``.

    A ``status: "error"`` marker is a domain failure even on a 2xx answer.
    """
    is_marked_error = isinstance(body, dict) and body.get("status") == "error"
    if is_marked_error or status_code >= 400:
        errors = None
        if isinstance(body, dict):
            try:
                errors = ErrorEnvelope.model_validate(body).errors
            except SchemaError:
                errors = None
        message = flatten_error_message(body, default=default_message) if body else f"{default_message} (HTTP {status_code})"
        raise ServerError(message, status_code=status_code, errors=errors)

    if isinstance(body, dict) and "data" in body:
        data = body["data"]
        return data if isinstance(data, dict) else {"data": data}
    return body if isinstance(body, dict) else {}
