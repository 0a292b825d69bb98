"""Generic binding between one REST resource, its cached collection and a form dialog.

Screens subclass ``ResourceController`` and declare the endpoint, form
fields, search fields, grid columns and the collections a successful
mutation invalidates. ``build_payload`` is the hook for resolving
cross-entity references before dispatch.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ukt_console.app.client.http import ApiClient
from ukt_console.app.client.resources import ResourceEndpoint
from ukt_console.app.core.errors import FetchError, OperationNotAllowed, ServerError, ValidationError
from ukt_console.app.schemas.base import record_value
from ukt_console.app.schemas.payment import ProofUpload
from ukt_console.app.services.formatting import Column
from ukt_console.app.services.forms import FieldSpec, FormSchema, FormSession
from ukt_console.app.services.notifications import Notifier
from ukt_console.app.services.query_cache import QueryCache
from ukt_console.app.services.search import SearchField, filter_exact, filter_records, resolve_foreign_display

logger = logging.getLogger(__name__)


class ResourceController:
    endpoint: ResourceEndpoint
    fields: Tuple[FieldSpec, ...] = ()
    search_fields: Tuple[SearchField, ...] = ()
    columns: Tuple[Column, ...] = ()
    # Cache keys refreshed after a successful mutation, besides this resource.
    invalidates: Tuple[str, ...] = ()
    related_endpoints: Tuple[ResourceEndpoint, ...] = ()
    allow_create = True
    allow_update = True
    allow_delete = True

    def __init__(self, client: ApiClient, cache: QueryCache, notifier: Optional[Notifier] = None):
        self.client = client
        self.cache = cache
        self.notifier = notifier or cache.notifier or Notifier()
        self.form = FormSession(FormSchema(self.fields))
        for endpoint in (self.endpoint, *self.related_endpoints):
            self._register(endpoint)

    def _register(self, endpoint: ResourceEndpoint) -> None:
        async def loader() -> tuple:
            return await self.client.list(endpoint)

        if not self.cache.is_loaded(endpoint.key):
            self.cache.register(endpoint.key, loader)

    @property
    def key(self) -> str:
        return self.endpoint.key

    @property
    def rows(self) -> tuple:
        """The cached collection; the last good rows survive a failed reload."""
        return self.cache.peek(self.key)

    def _title(self) -> str:
        label = self.endpoint.label
        return label[:1].upper() + label[1:]

    def record_id(self, record) -> Any:
        return record_value(record, self.endpoint.id_field)

    def find(self, record_id) -> Any:
        return next((row for row in self.rows if self.record_id(row) == record_id), None)

    # Loading

    async def load(self, *, force: bool = False) -> tuple:
        try:
            return await self.cache.fetch(self.key, force=force)
        except FetchError as exc:
            self.notifier.error(str(exc))
            raise

    async def refresh(self) -> tuple:
        return await self.load(force=True)

    async def related(self, endpoint: ResourceEndpoint) -> tuple:
        if self.cache.is_loaded(endpoint.key):
            return self.cache.peek(endpoint.key)
        return await self.cache.fetch(endpoint.key)

    async def mount(self) -> tuple:
        """Load this collection and its related ones; failures degrade to cached rows."""
        keys = [self.key, *(endpoint.key for endpoint in self.related_endpoints)]
        results = await asyncio.gather(*(self.cache.fetch(key) for key in keys), return_exceptions=True)
        for key, result in zip(keys, results):
            if isinstance(result, FetchError):
                self.notifier.error(str(result))
            elif isinstance(result, BaseException):
                raise result
        return self.rows

    # Dialog lifecycle

    def open_create(self) -> FormSession:
        if not self.allow_create:
            raise OperationNotAllowed(f"Creating a {self.endpoint.label} is not supported")
        self.form.open_create()
        return self.form

    def open_edit(self, record) -> FormSession:
        if not self.allow_update:
            raise OperationNotAllowed(f"A {self.endpoint.label} cannot be edited")
        self.form.open_edit(record)
        return self.form

    def close(self) -> None:
        self.form.close()

    def set(self, name: str, value: Any) -> None:
        self.form.set(name, value)

    async def build_payload(self, values: Dict[str, Any], editing) -> Dict[str, Any]:
        return values

    async def submit(self) -> Dict[str, Any]:
        try:
            values = self.form.begin_submit()
        except ValidationError as exc:
            self.notifier.error(str(exc))
            raise
        editing = self.form.editing
        try:
            payload = self.form.schema.coerce(values)
            payload = await self.build_payload(payload, editing)
            payload, files = self._split_files(payload)
            if editing is None:
                result = await self.client.create(self.endpoint, payload, files)
            else:
                result = await self.client.update(self.endpoint, self.record_id(editing), payload, files)
        except (ValidationError, ServerError) as exc:
            self.form.fail(str(exc))
            self.notifier.error(str(exc))
            raise
        except FetchError as exc:
            error = ValidationError(f"Reference data unavailable: {exc}")
            self.form.fail(str(error))
            self.notifier.error(str(error))
            raise error from exc
        except Exception as exc:
            message = f"Failed to {'create' if editing is None else 'update'} {self.endpoint.label}: {str(exc) or exc.__class__.__name__}"
            logger.exception("Unexpected failure submitting %s", self.endpoint.label)
            self.form.fail(message)
            self.notifier.error(message)
            raise

        self.form.complete()
        self.cache.invalidate(self.key, *self.invalidates)
        action = "created" if editing is None else "updated"
        self.notifier.success(f"{self._title()} {action}")
        return result

    @staticmethod
    def _split_files(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[Dict[str, tuple]]]:
        files = {
            name: (value.filename, value.content, value.content_type)
            for name, value in payload.items()
            if isinstance(value, ProofUpload)
        }
        if not files:
            return payload, None
        return {name: value for name, value in payload.items() if name not in files}, files

    async def remove(self, record_id, *, confirmed: bool = True) -> bool:
        """Delete one row. Without confirmation nothing is dispatched."""
        if not self.allow_delete:
            raise OperationNotAllowed(f"A {self.endpoint.label} cannot be deleted")
        if not confirmed:
            logger.info("Delete of %s %s not confirmed", self.endpoint.label, record_id)
            return False
        try:
            await self.client.delete(self.endpoint, record_id)
        except ServerError as exc:
            self.notifier.error(str(exc))
            raise
        self.cache.invalidate(self.key, *self.invalidates)
        self.notifier.success(f"{self._title()} deleted")
        return True

    # Derived views

    def filtered(self, text: str = "", **criteria: Any) -> tuple:
        rows = filter_records(self.rows, text, self.search_fields)
        return filter_exact(rows, **criteria) if criteria else rows

    def display(self, record, field: str, endpoint: ResourceEndpoint, label_field: str, template: str = "{label}") -> str:
        return resolve_foreign_display(
            record, field, self.cache.peek(endpoint.key), endpoint.id_field, label_field, template
        )

    def grid(self, text: str = "", **criteria: Any) -> List[Dict[str, Any]]:
        columns: Iterable[Column] = self.columns
        return [{column.field: column.render(row) for column in columns} for row in self.filtered(text, **criteria)]
