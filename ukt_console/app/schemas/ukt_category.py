"""UKT category schemas."""

from decimal import Decimal
from typing import Optional

from ukt_console.app.schemas.base import RecordBase


class UKTCategory(RecordBase):
    id_kategori_ukt: int
    nama_kategori: Optional[str] = None
    nominal: Optional[Decimal] = None
