"""UKT category change history schemas."""

from typing import Optional

from ukt_console.app.schemas.base import RecordBase


class CategoryHistory(RecordBase):
    id_riwayat: int
    nim: Optional[str] = None
    id_kategori_ukt: Optional[int] = None
    tanggal_perubahan: Optional[str] = None
