"""Tuition bill (tagihan) screen."""

import logging

from ukt_console.app.client.resources import BILLS, STUDENT_DIRECTORY, UKT_CATEGORIES
from ukt_console.app.core.errors import ServerError, ValidationError
from ukt_console.app.core.time import format_display_date
from ukt_console.app.schemas.bill import BILL_PAID, BILL_UNPAID
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column, format_currency
from ukt_console.app.services.forms import FieldKind, FieldSpec
from ukt_console.app.services.search import find_related

logger = logging.getLogger(__name__)


class BillsController(ResourceController):
    endpoint = BILLS
    related_endpoints = (STUDENT_DIRECTORY, UKT_CATEGORIES)
    fields = (
        FieldSpec("nim", required=True),
        FieldSpec("kategori_ukt_id", FieldKind.INTEGER, required=True),
        FieldSpec("semester", FieldKind.INTEGER, required=True),
        FieldSpec("tahun_akademik", required=True),
        FieldSpec("tanggal_jatuh_tempo", FieldKind.DATE, required=True),
        FieldSpec("nominal", FieldKind.NUMBER, required=True),
        FieldSpec("status_pembayaran", FieldKind.CHOICE, default=BILL_UNPAID, choices=(BILL_UNPAID, BILL_PAID)),
        FieldSpec("keterangan"),
    )
    search_fields = ("nim", "tahun_akademik", "status_pembayaran", "keterangan")

    @property
    def columns(self):
        return (
            Column("id_tagihan", "ID"),
            Column("nim", "NIM", self.student_label),
            Column("kategori_ukt_id", "Kategori", self.category_label),
            Column("semester", "Semester"),
            Column("tahun_akademik", "Tahun Akademik"),
            Column("tanggal_jatuh_tempo", "Tanggal Jatuh Tempo", lambda row: format_display_date(row.tanggal_jatuh_tempo)),
            Column("nominal", "Nominal", lambda row: format_currency(row.nominal)),
            Column("status_pembayaran", "Status Pembayaran"),
            Column("keterangan", "Keterangan"),
        )

    def student_label(self, bill) -> str:
        return self.display(bill, "nim", STUDENT_DIRECTORY, "nama", template="{key} - {label}")

    def category_label(self, bill) -> str:
        return self.display(bill, "kategori_ukt_id", UKT_CATEGORIES, "nama_kategori")

    async def build_payload(self, values, editing):
        directory = await self.related(STUDENT_DIRECTORY)
        student = find_related(directory, "nim", values.get("nim"))
        if student is None:
            raise ValidationError(f"Student {values.get('nim')} is not in the student directory", field="nim")
        return {"user_id": student.user_id, **values, "nim": student.nim}

    async def generate(self, semester: str) -> dict:
        """Ask the backend to issue bills for every active student in ``semester``."""
        semester = (semester or "").strip()
        if not semester:
            raise ValidationError("Semester is required", field="semester")
        try:
            result = await self.client.post(f"{self.endpoint.path}/generate", {"semester": semester}, "Failed to generate bills")
        except ServerError as exc:
            self.notifier.error(str(exc))
            raise
        logger.info("Generated bills for semester %s", semester)
        self.cache.invalidate(self.key)
        self.notifier.success(f"Bills generated for {semester}")
        return result
