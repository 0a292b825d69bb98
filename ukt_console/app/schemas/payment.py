"""Payment (pembayaran) schemas."""

from dataclasses import dataclass
from pathlib import Path
import mimetypes
from typing import Optional

from ukt_console.app.schemas.base import RecordBase

VERIFICATION_PENDING = "MENUNGGU"
VERIFICATION_VERIFIED = "TERVERIFIKASI"
VERIFICATION_REJECTED = "DITOLAK"
VERIFICATION_STATUSES = (VERIFICATION_PENDING, VERIFICATION_VERIFIED, VERIFICATION_REJECTED)


class Payment(RecordBase):
    id_pembayaran: int
    id_tagihan: Optional[int] = None
    tanggal_bayar: Optional[str] = None
    bukti_pembayaran: Optional[str] = None
    status_verifikasi: Optional[str] = None


@dataclass(frozen=True)
class ProofUpload:
    """A locally chosen proof-of-payment file that has not been uploaded yet."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path) -> "ProofUpload":
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=content_type)
