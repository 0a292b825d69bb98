"""Student schemas."""

from typing import Optional

from ukt_console.app.schemas.base import RecordBase

STATUS_ACTIVE = "AKTIF"
STATUS_INACTIVE = "TIDAK AKTIF"


class StudentRecord(RecordBase):
    nim: str
    user_id: Optional[int] = None
    nama: Optional[str] = None
    email: Optional[str] = None
    no_hp: Optional[str] = None
    tempat_lahir: Optional[str] = None
    tanggal_lahir: Optional[str] = None
    alamat: Optional[str] = None
    image: Optional[str] = None
    status_aktif: Optional[str] = None
    created_at: Optional[str] = None
