"""Summary metrics shown on the console landing page."""

import asyncio
from dataclasses import dataclass
from typing import Sequence

from ukt_console.app.client.resources import BILLS, PAYMENTS, STUDENT_DIRECTORY
from ukt_console.app.core.errors import FetchError
from ukt_console.app.schemas.base import record_value
from ukt_console.app.schemas.bill import BILL_UNPAID
from ukt_console.app.schemas.payment import VERIFICATION_PENDING
from ukt_console.app.schemas.student import STATUS_ACTIVE
from ukt_console.app.services.notifications import Notifier
from ukt_console.app.services.query_cache import QueryCache


@dataclass(frozen=True)
class DashboardMetrics:
    total_students: int
    active_students: int
    total_bills: int
    unpaid_bills: int
    total_payments: int
    pending_payments: int


def _normalized(value) -> str:
    return str(value or "").strip().upper().replace("_", " ")


def compute_metrics(students: Sequence, bills: Sequence, payments: Sequence) -> DashboardMetrics:
    unpaid = _normalized(BILL_UNPAID)
    return DashboardMetrics(
        total_students=len(students),
        active_students=sum(1 for s in students if _normalized(record_value(s, "status_aktif")) == STATUS_ACTIVE),
        total_bills=len(bills),
        unpaid_bills=sum(1 for b in bills if _normalized(record_value(b, "status_pembayaran")) == unpaid),
        total_payments=len(payments),
        pending_payments=sum(
            1 for p in payments if _normalized(record_value(p, "status_verifikasi")) == VERIFICATION_PENDING
        ),
    )


class DashboardService:
    def __init__(self, cache: QueryCache, notifier: Notifier):
        self.cache = cache
        self.notifier = notifier

    async def load(self) -> DashboardMetrics:
        keys = (STUDENT_DIRECTORY.key, BILLS.key, PAYMENTS.key)
        results = await asyncio.gather(*(self.cache.fetch(key) for key in keys), return_exceptions=True)
        for result in results:
            if isinstance(result, FetchError):
                self.notifier.error(str(result))
            elif isinstance(result, BaseException):
                raise result
        return self.current()

    def current(self) -> DashboardMetrics:
        return compute_metrics(
            self.cache.peek(STUDENT_DIRECTORY.key),
            self.cache.peek(BILLS.key),
            self.cache.peek(PAYMENTS.key),
        )
