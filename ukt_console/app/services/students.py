"""Student records screen."""

from ukt_console.app.client.resources import STUDENT_DIRECTORY, STUDENTS
from ukt_console.app.core.time import format_display_date, to_iso_timestamp
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column
from ukt_console.app.services.forms import FieldKind, FieldSpec

DEFAULT_IMAGE = "default.png"


class StudentsController(ResourceController):
    endpoint = STUDENTS
    invalidates = (STUDENT_DIRECTORY.key,)
    fields = (
        FieldSpec("nim", required=True, immutable=True),
        FieldSpec("nama", required=True),
        FieldSpec("email", required=True),
        FieldSpec("no_hp"),
        FieldSpec("tempat_lahir"),
        FieldSpec("tanggal_lahir", FieldKind.DATE),
        FieldSpec("alamat"),
        FieldSpec("image", default=DEFAULT_IMAGE),
    )
    search_fields = ("nama", "nim", "email")
    columns = (
        Column("nim", "NIM"),
        Column("nama", "Nama"),
        Column("email", "Email"),
        Column("no_hp", "No. HP"),
        Column("tempat_lahir", "Tempat Lahir"),
        Column("tanggal_lahir", "Tanggal Lahir", lambda row: format_display_date(row.tanggal_lahir)),
        Column("alamat", "Alamat"),
        Column("image", "Image"),
        Column("status_aktif", "Status"),
        Column("created_at", "Created At", lambda row: format_display_date(row.created_at)),
    )

    async def build_payload(self, values, editing):
        payload = dict(values)
        payload["tanggal_lahir"] = to_iso_timestamp(payload.get("tanggal_lahir"))
        if editing is not None:
            # The NIM addresses the record and never changes.
            payload["nim"] = editing.nim
        return payload
