"""UKT category change history screen."""

from ukt_console.app.client.resources import CATEGORY_HISTORY, STUDENT_DIRECTORY, UKT_CATEGORIES
from ukt_console.app.core.errors import FetchError, ValidationError
from ukt_console.app.core.time import format_display_date, to_date_input, today_input
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column
from ukt_console.app.services.forms import FieldKind, FieldSpec
from ukt_console.app.services.search import find_related


class CategoryHistoryController(ResourceController):
    endpoint = CATEGORY_HISTORY
    related_endpoints = (STUDENT_DIRECTORY, UKT_CATEGORIES)
    allow_update = False
    fields = (
        FieldSpec("nim", required=True),
        FieldSpec("id_kategori_ukt", FieldKind.INTEGER, required=True),
        FieldSpec("tanggal_perubahan", FieldKind.DATE, default=today_input, required=True),
    )

    @property
    def search_fields(self):
        return ("nim", self.student_name, self.category_name)

    @property
    def columns(self):
        return (
            Column("id_riwayat", "ID Riwayat"),
            Column("nim", "NIM"),
            Column("nama_mahasiswa", "Nama Mahasiswa", self.student_name),
            Column("id_kategori_ukt", "ID Kategori"),
            Column("nama_kategori", "Nama Kategori", self.category_name),
            Column("tanggal_perubahan", "Tanggal Perubahan", lambda row: format_display_date(row.tanggal_perubahan)),
        )

    def student_name(self, entry) -> str:
        return self.display(entry, "nim", STUDENT_DIRECTORY, "nama")

    def category_name(self, entry) -> str:
        return self.display(entry, "id_kategori_ukt", UKT_CATEGORIES, "nama_kategori")

    def filtered(self, text: str = "", nim: str = "", category="", **criteria) -> tuple:
        return super().filtered(text, nim=nim, id_kategori_ukt=category, **criteria)

    async def build_payload(self, values, editing):
        directory = await self.related(STUDENT_DIRECTORY)
        if find_related(directory, "nim", values.get("nim")) is None:
            raise ValidationError(f"Student {values.get('nim')} is not in the student directory", field="nim")
        categories = await self.related(UKT_CATEGORIES)
        if find_related(categories, "id_kategori_ukt", values.get("id_kategori_ukt")) is None:
            raise ValidationError(f"UKT category {values.get('id_kategori_ukt')} does not exist", field="id_kategori_ukt")
        return values

    async def history_for_nim(self, nim: str) -> tuple:
        try:
            return await self.client.list(self.endpoint, suffix=f"nim/{nim}")
        except FetchError as exc:
            self.notifier.error(str(exc))
            raise

    async def history_between(self, start_date, end_date) -> tuple:
        params = {"start_date": to_date_input(start_date), "end_date": to_date_input(end_date)}
        try:
            return await self.client.list(self.endpoint, suffix="date-range", params=params)
        except FetchError as exc:
            self.notifier.error(str(exc))
            raise
