"""Student status change log schemas."""

from typing import Optional

from ukt_console.app.schemas.base import RecordBase


class StatusLog(RecordBase):
    id_log: int
    nim: Optional[str] = None
    status_awal: Optional[str] = None
    status_baru: Optional[str] = None
    tanggal_perubahan: Optional[str] = None
