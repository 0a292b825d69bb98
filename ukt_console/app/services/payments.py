"""Payment recording and verification screen."""

from ukt_console.app.client.resources import BILLS, PAYMENTS
from ukt_console.app.core.errors import ValidationError
from ukt_console.app.core.time import format_display_date
from ukt_console.app.schemas.payment import VERIFICATION_PENDING, VERIFICATION_STATUSES
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column, proof_url
from ukt_console.app.services.forms import FieldKind, FieldSpec
from ukt_console.app.services.search import find_related


class PaymentsController(ResourceController):
    endpoint = PAYMENTS
    related_endpoints = (BILLS,)
    fields = (
        FieldSpec("id_tagihan", FieldKind.INTEGER, required=True),
        FieldSpec("tanggal_bayar", FieldKind.DATE, required=True),
        FieldSpec("bukti_pembayaran", FieldKind.FILE, required=True),
        FieldSpec("status_verifikasi", default=VERIFICATION_PENDING),
    )
    search_fields = ("id_tagihan", "status_verifikasi", "tanggal_bayar")

    @property
    def columns(self):
        storage_url = f"{self.client.base_url}/storage"
        return (
            Column("id_pembayaran", "ID Pembayaran"),
            Column("id_tagihan", "ID Tagihan", self.bill_label),
            Column("semester", "Semester", self.bill_semester),
            Column("tanggal_bayar", "Tanggal Pembayaran", lambda row: format_display_date(row.tanggal_bayar)),
            Column("bukti_pembayaran", "Bukti Pembayaran", lambda row: proof_url(row.bukti_pembayaran, storage_url)),
            Column("status_verifikasi", "Status"),
        )

    def bill_label(self, payment) -> str:
        return self.display(payment, "id_tagihan", BILLS, "semester", template="Bill #{key} - {label}")

    def bill_semester(self, payment):
        bill = find_related(self.cache.peek(BILLS.key), "id_tagihan", payment.id_tagihan)
        return "" if bill is None else bill.semester

    async def build_payload(self, values, editing):
        bills = await self.related(BILLS)
        if find_related(bills, "id_tagihan", values.get("id_tagihan")) is None:
            raise ValidationError(f"Bill {values.get('id_tagihan')} does not exist", field="id_tagihan")
        status = str(values.get("status_verifikasi") or VERIFICATION_PENDING)
        if status.upper() not in VERIFICATION_STATUSES:
            raise ValidationError(f"Unknown verification status {status}", field="status_verifikasi")
        # A stored proof path stays a plain field; a ProofUpload is sent as multipart.
        return {**values, "status_verifikasi": status.lower()}
