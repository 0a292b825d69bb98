"""Request bodies accepted by the sandbox backend."""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class RequestBase(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def empty_string_to_none(cls, value):
        # Blank form fields arrive as "" and are stored as null.
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class StudentCreate(RequestBase):
    nim: str
    nama: str
    email: str
    no_hp: Optional[str] = None
    tempat_lahir: Optional[str] = None
    tanggal_lahir: Optional[str] = None
    alamat: Optional[str] = None
    image: Optional[str] = None
    status_aktif: Optional[Literal["AKTIF", "TIDAK AKTIF"]] = None


class StudentUpdate(RequestBase):
    nama: Optional[str] = None
    email: Optional[str] = None
    no_hp: Optional[str] = None
    tempat_lahir: Optional[str] = None
    tanggal_lahir: Optional[str] = None
    alamat: Optional[str] = None
    image: Optional[str] = None


class CategoryIn(RequestBase):
    nama_kategori: str
    nominal: int


class BillIn(RequestBase):
    user_id: Optional[int] = None
    nim: str
    kategori_ukt_id: int
    semester: int
    tahun_akademik: str
    tanggal_jatuh_tempo: Optional[str] = None
    nominal: int
    status_pembayaran: Optional[Literal["belum_lunas", "lunas"]] = None
    keterangan: Optional[str] = None


class GenerateBillsIn(RequestBase):
    semester: str


class PaymentIn(RequestBase):
    id_tagihan: int
    tanggal_bayar: str
    bukti_pembayaran: Optional[str] = None
    status_verifikasi: Optional[str] = None

    @field_validator("status_verifikasi")
    @classmethod
    def normalize_status(cls, value):
        if value is None:
            return value
        value = value.upper()
        if value not in ("MENUNGGU", "TERVERIFIKASI", "DITOLAK"):
            raise ValueError("must be one of MENUNGGU, TERVERIFIKASI, DITOLAK")
        return value


class StatusLogIn(RequestBase):
    nim: str
    status_awal: Optional[str] = None
    status_baru: Literal["AKTIF", "TIDAK AKTIF"]
    tanggal_perubahan: Optional[str] = None


class CategoryHistoryIn(RequestBase):
    nim: str
    id_kategori_ukt: int
    tanggal_perubahan: str
