"""Form field schemas and the create/edit dialog session state machine."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ukt_console.app.core.errors import DialogStateError, ValidationError
from ukt_console.app.core.time import to_date_input
from ukt_console.app.schemas.base import record_value


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN_CREATE = "open_create"
    OPEN_EDIT = "open_edit"
    SUBMITTING = "submitting"


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    DATE = "date"
    CHOICE = "choice"
    FILE = "file"


def to_number(value: Any, field: str) -> Union[int, float, None]:
    """Coerce form input to a number the way a numeric form field submits it."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number", field=field)
    return int(number) if number == number.to_integral_value() else float(number)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.TEXT
    default: Union[Any, Callable[[], Any]] = ""
    required: bool = False
    immutable: bool = False
    choices: tuple = ()

    def initial(self) -> Any:
        return self.default() if callable(self.default) else self.default

    def seed(self, value: Any) -> Any:
        if value is None:
            return self.initial()
        if self.kind == FieldKind.DATE:
            return to_date_input(value)
        return value

    def coerce(self, value: Any) -> Any:
        if self.kind == FieldKind.NUMBER:
            return to_number(value, self.name)
        if self.kind == FieldKind.INTEGER:
            number = to_number(value, self.name)
            if isinstance(number, float):
                raise ValidationError(f"{self.name} must be a whole number", field=self.name)
            return number
        if self.kind == FieldKind.DATE:
            return to_date_input(value) or None
        if self.kind == FieldKind.CHOICE and self.choices and value not in ("", None) and value not in self.choices:
            raise ValidationError(f"{self.name} must be one of {', '.join(map(str, self.choices))}", field=self.name)
        return value


class FormSchema:
    def __init__(self, fields: Iterable[FieldSpec]):
        self.fields = tuple(fields)
        self._by_name = {spec.name: spec for spec in self.fields}

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __getitem__(self, name: str) -> FieldSpec:
        return self._by_name[name]

    def defaults(self) -> Dict[str, Any]:
        return {spec.name: spec.initial() for spec in self.fields}

    def seed(self, record) -> Dict[str, Any]:
        return {spec.name: spec.seed(record_value(record, spec.name)) for spec in self.fields}

    def coerce(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {spec.name: spec.coerce(values.get(spec.name)) for spec in self.fields}

    def missing_required(self, values: Dict[str, Any]) -> List[str]:
        return [
            spec.name
            for spec in self.fields
            if spec.required and (values.get(spec.name) is None or values.get(spec.name) == "")
        ]


class FormSession:
    """One dialog session per screen.

    CLOSED -> OPEN_CREATE | OPEN_EDIT -> SUBMITTING -> CLOSED, and
    SUBMITTING -> OPEN_CREATE | OPEN_EDIT when a submission fails.
    """

    def __init__(self, schema: FormSchema):
        self.schema = schema
        self.state = DialogState.CLOSED
        self.editing = None
        self.values: Dict[str, Any] = schema.defaults()
        self.error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state in (DialogState.OPEN_CREATE, DialogState.OPEN_EDIT)

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    def _require_not_submitting(self, action: str) -> None:
        if self.state == DialogState.SUBMITTING:
            raise DialogStateError(f"Cannot {action} while a submission is in flight")

    def open_create(self) -> None:
        self._require_not_submitting("open the form")
        self.editing = None
        self.values = self.schema.defaults()
        self.error = None
        self.state = DialogState.OPEN_CREATE

    def open_edit(self, record) -> None:
        self._require_not_submitting("open the form")
        self.editing = record
        self.values = self.schema.seed(record)
        self.error = None
        self.state = DialogState.OPEN_EDIT

    def set(self, name: str, value: Any) -> None:
        if not self.is_open:
            raise DialogStateError(f"Cannot edit {name!r}: form is {self.state.value}")
        spec = self.schema[name]
        if spec.immutable and self.state == DialogState.OPEN_EDIT and value != self.values.get(name):
            raise ValidationError(f"{name} cannot be changed after creation", field=name)
        self.values[name] = value

    def update(self, **values: Any) -> None:
        for name, value in values.items():
            self.set(name, value)

    def begin_submit(self) -> Dict[str, Any]:
        if not self.is_open:
            raise DialogStateError(f"Cannot submit: form is {self.state.value}")
        missing = self.schema.missing_required(self.values)
        if missing:
            self.error = f"Required field missing: {', '.join(missing)}"
            raise ValidationError(self.error, field=missing[0])
        self.error = None
        self.state = DialogState.SUBMITTING
        return dict(self.values)

    def fail(self, message: str) -> None:
        if self.state != DialogState.SUBMITTING:
            raise DialogStateError("No submission in flight")
        self.error = message
        self.state = DialogState.OPEN_EDIT if self.is_editing else DialogState.OPEN_CREATE

    def complete(self) -> None:
        if self.state != DialogState.SUBMITTING:
            raise DialogStateError("No submission in flight")
        self._reset()

    def close(self) -> None:
        self._require_not_submitting("close the form")
        self._reset()

    def _reset(self) -> None:
        self.state = DialogState.CLOSED
        self.editing = None
        self.values = self.schema.defaults()
        self.error = None
