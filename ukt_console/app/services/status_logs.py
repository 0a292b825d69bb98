"""Student status change history screen (append-only)."""

from ukt_console.app.client.resources import STATUS_LOGS, STUDENT_DIRECTORY, STUDENTS
from ukt_console.app.core.errors import ValidationError
from ukt_console.app.core.time import format_display_datetime, isoformat_utc, utc_now
from ukt_console.app.schemas.student import STATUS_ACTIVE, STATUS_INACTIVE
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column
from ukt_console.app.services.forms import FieldKind, FieldSpec
from ukt_console.app.services.search import find_related


class StatusLogsController(ResourceController):
    endpoint = STATUS_LOGS
    related_endpoints = (STUDENT_DIRECTORY,)
    # A status change also rewrites the student's current status.
    invalidates = (STUDENTS.key, STUDENT_DIRECTORY.key)
    allow_update = False
    allow_delete = False
    fields = (
        FieldSpec("nim", required=True),
        FieldSpec("status_awal"),
        FieldSpec("status_baru", FieldKind.CHOICE, required=True, choices=(STATUS_ACTIVE, STATUS_INACTIVE)),
    )
    search_fields = ("nim", "status_awal", "status_baru")
    columns = (
        Column("id_log", "ID"),
        Column("nim", "NIM"),
        Column("status_awal", "Previous Status"),
        Column("status_baru", "New Status"),
        Column("tanggal_perubahan", "Change Date", lambda row: format_display_datetime(row.tanggal_perubahan)),
    )

    def select_student(self, nim: str) -> None:
        """Pick the student and pre-fill the previous status from the directory."""
        student = find_related(self.cache.peek(STUDENT_DIRECTORY.key), "nim", nim)
        self.form.set("nim", nim)
        self.form.set("status_awal", (student.status_aktif or "") if student is not None else "")

    async def build_payload(self, values, editing):
        directory = await self.related(STUDENT_DIRECTORY)
        student = find_related(directory, "nim", values.get("nim"))
        if student is None:
            raise ValidationError(f"Student {values.get('nim')} is not in the student directory", field="nim")
        return {
            "nim": student.nim,
            "status_awal": values.get("status_awal") or student.status_aktif or "",
            "status_baru": values["status_baru"],
            "tanggal_perubahan": isoformat_utc(utc_now()),
        }
