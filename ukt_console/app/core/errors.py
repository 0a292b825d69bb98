"""Error taxonomy for console operations."""

import json
from typing import Any, Dict, List, Optional


class ConsoleError(Exception):
    """Base class for every error raised by the console."""


class FetchError(ConsoleError):
    """A collection could not be loaded (transport or parse failure)."""

    def __init__(self, resource: str, message: str):
        super().__init__(f"Failed to load {resource}: {message}")
        self.resource = resource


class DecodeError(FetchError):
    """The backend answered with a payload shape no decoder recognises."""


class ValidationError(ConsoleError):
    """Submission blocked on the client: missing reference or required field."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ServerError(ConsoleError):
    """The backend rejected a mutation, or the mutation request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


class DialogStateError(ConsoleError):
    """A form session transition is not allowed from the current state."""


class OperationNotAllowed(ConsoleError):
    """The resource does not expose the requested operation."""


def _flatten(value: Any) -> List[str]:
    if isinstance(value, dict):
        return [item for nested in value.values() for item in _flatten(nested)]
    if isinstance(value, (list, tuple)):
        return [item for nested in value for item in _flatten(nested)]
    return [str(value)]


def flatten_error_message(body: Any, default: str = "Request failed") -> str:
    """Collapse a backend error body into one user-facing line.

    A field-keyed ``errors`` map wins over ``message``; nested values are
    joined with `` | ``.
    """
    if not isinstance(body, dict):
        return str(body) if body else default
    errors = body.get("errors")
    if errors:
        return " | ".join(_flatten(errors))
    message = body.get("message")
    if isinstance(message, (dict, list)):
        return " | ".join(_flatten(message))
    if message:
        return str(message)
    return json.dumps(body) if body else default
