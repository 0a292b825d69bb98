"""Async HTTP client for the billing REST backend."""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ukt_console.app.client.decoders import decode_mutation, decode_records
from ukt_console.app.client.resources import ResourceEndpoint
from ukt_console.app.core.auth import AuthContext
from ukt_console.app.core.errors import FetchError, ServerError
from ukt_console.app.core.settings import get_settings

logger = logging.getLogger(__name__)

FileParts = Mapping[str, tuple]


def _form_fields(payload: Mapping[str, Any]) -> Dict[str, str]:
    return {key: "" if value is None else str(value) for key, value in payload.items()}


class ApiClient:
    def __init__(
        self,
        auth: AuthContext,
        *,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.auth = auth
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url + "/",
            transport=transport,
            timeout=timeout if timeout is not None else settings.request_timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list(self, endpoint: ResourceEndpoint, suffix: str = "", params: Optional[Dict[str, Any]] = None) -> tuple:
        path = f"{endpoint.path}/{suffix}" if suffix else endpoint.path
        try:
            response = await self._client.get(path, params=params, headers=self.auth.headers())
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            raise FetchError(endpoint.key, str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            raise FetchError(endpoint.key, f"HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError as exc:
            raise FetchError(endpoint.key, "response is not JSON") from exc
        return decode_records(body, endpoint.schema, endpoint.key)

    async def create(self, endpoint: ResourceEndpoint, payload: Mapping[str, Any], files: Optional[FileParts] = None) -> Dict[str, Any]:
        return await self._mutate("POST", endpoint.path, payload, files, f"Failed to create {endpoint.label}")

    async def update(self, endpoint: ResourceEndpoint, record_id, payload: Mapping[str, Any], files: Optional[FileParts] = None) -> Dict[str, Any]:
        return await self._mutate("PUT", endpoint.item_path(record_id), payload, files, f"Failed to update {endpoint.label}")

    async def delete(self, endpoint: ResourceEndpoint, record_id) -> Dict[str, Any]:
        return await self._mutate("DELETE", endpoint.item_path(record_id), None, None, f"Failed to delete {endpoint.label}")

    async def post(self, path: str, payload: Mapping[str, Any], default_message: str = "Request failed") -> Dict[str, Any]:
        return await self._mutate("POST", path, payload, None, default_message)

    async def _mutate(
        self,
        method: str,
        path: str,
        payload: Optional[Mapping[str, Any]],
        files: Optional[FileParts],
        default_message: str,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": self.auth.headers()}
        if files:
            kwargs["data"] = _form_fields(payload or {})
            kwargs["files"] = dict(files)
        elif payload is not None:
            kwargs["json"] = dict(payload)

        logger.info("%s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ServerError(f"{default_message}: {str(exc) or exc.__class__.__name__}") from exc

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        return decode_mutation(body, response.status_code, default_message)
