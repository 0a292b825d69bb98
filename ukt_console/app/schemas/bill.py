"""Bill (tagihan) schemas."""

from decimal import Decimal
from typing import Optional

from ukt_console.app.schemas.base import RecordBase

BILL_UNPAID = "belum_lunas"
BILL_PAID = "lunas"


class Bill(RecordBase):
    id_tagihan: int
    nim: Optional[str] = None
    user_id: Optional[int] = None
    kategori_ukt_id: Optional[int] = None
    semester: Optional[int] = None
    tahun_akademik: Optional[str] = None
    tanggal_jatuh_tempo: Optional[str] = None
    nominal: Optional[Decimal] = None
    status_pembayaran: Optional[str] = None
    keterangan: Optional[str] = None
