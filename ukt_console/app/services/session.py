"""A console session: one authenticated client, one cache, every screen."""

import logging
from typing import Optional

import httpx

from ukt_console.app.client.http import ApiClient
from ukt_console.app.client.resources import ALL_ENDPOINTS
from ukt_console.app.core.auth import AuthContext
from ukt_console.app.services.bills import BillsController
from ukt_console.app.services.categories import CategoriesController
from ukt_console.app.services.category_history import CategoryHistoryController
from ukt_console.app.services.dashboard import DashboardService
from ukt_console.app.services.notifications import Notifier
from ukt_console.app.services.payments import PaymentsController
from ukt_console.app.services.query_cache import QueryCache
from ukt_console.app.services.status_logs import StatusLogsController
from ukt_console.app.services.students import StudentsController

logger = logging.getLogger(__name__)


class ConsoleSession:
    def __init__(
        self,
        auth: AuthContext,
        *,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.auth = auth
        self.client = ApiClient(auth, base_url=base_url, transport=transport, timeout=timeout)
        self.notifier = Notifier()
        self.cache = QueryCache(self.notifier)
        for endpoint in ALL_ENDPOINTS:
            self.cache.register(endpoint.key, self._loader(endpoint))

        self.students = StudentsController(self.client, self.cache, self.notifier)
        self.categories = CategoriesController(self.client, self.cache, self.notifier)
        self.bills = BillsController(self.client, self.cache, self.notifier)
        self.payments = PaymentsController(self.client, self.cache, self.notifier)
        self.status_logs = StatusLogsController(self.client, self.cache, self.notifier)
        self.category_history = CategoryHistoryController(self.client, self.cache, self.notifier)
        self.dashboard = DashboardService(self.cache, self.notifier)
        logger.debug("Console session started against %s", self.client.base_url)

    def _loader(self, endpoint):
        async def load() -> tuple:
            return await self.client.list(endpoint)

        return load

    async def __aenter__(self) -> "ConsoleSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.cache.settle()
        await self.client.aclose()
