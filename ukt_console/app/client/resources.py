"""REST resources consumed by the console."""

from dataclasses import dataclass
from typing import Type

from pydantic import BaseModel

from ukt_console.app.schemas.bill import Bill
from ukt_console.app.schemas.category_history import CategoryHistory
from ukt_console.app.schemas.payment import Payment
from ukt_console.app.schemas.status_log import StatusLog
from ukt_console.app.schemas.student import StudentRecord
from ukt_console.app.schemas.ukt_category import UKTCategory


@dataclass(frozen=True)
class ResourceEndpoint:
    key: str
    path: str
    id_field: str
    schema: Type[BaseModel]
    label: str

    def item_path(self, record_id) -> str:
        return f"{self.path}/{record_id}"


STUDENTS = ResourceEndpoint("students", "mahasiswa", "nim", StudentRecord, "student")
# Lookup collection used by the other screens; rows carry the owning user_id.
STUDENT_DIRECTORY = ResourceEndpoint("masters", "masters", "nim", StudentRecord, "student")
UKT_CATEGORIES = ResourceEndpoint("categories", "kategori-ukt", "id_kategori_ukt", UKTCategory, "UKT category")
BILLS = ResourceEndpoint("bills", "tagihan", "id_tagihan", Bill, "bill")
PAYMENTS = ResourceEndpoint("payments", "pembayaran", "id_pembayaran", Payment, "payment")
STATUS_LOGS = ResourceEndpoint("status-logs", "log-status-mahasiswa", "id_log", StatusLog, "status change")
CATEGORY_HISTORY = ResourceEndpoint(
    "category-history", "riwayat-kategori-ukt", "id_riwayat", CategoryHistory, "category history entry"
)

ALL_ENDPOINTS = (
    STUDENTS,
    STUDENT_DIRECTORY,
    UKT_CATEGORIES,
    BILLS,
    PAYMENTS,
    STATUS_LOGS,
    CATEGORY_HISTORY,
)
