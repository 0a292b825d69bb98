"""SQLAlchemy models for the sandbox billing backend."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from ukt_console.app.core.time import utc_now
from ukt_console.sandbox.db import Base


class Student(Base):
    __tablename__ = "mahasiswa"

    nim = Column(String(20), primary_key=True)
    user_id = Column(Integer, nullable=False, unique=True, index=True)
    nama = Column(String, nullable=False)
    email = Column(String, nullable=False)
    no_hp = Column(String, nullable=True)
    tempat_lahir = Column(String, nullable=True)
    # Dates are kept exactly as submitted.
    tanggal_lahir = Column(String, nullable=True)
    alamat = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    status_aktif = Column(String(20), nullable=False, default="AKTIF")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)


class UKTCategory(Base):
    __tablename__ = "kategori_ukt"

    id_kategori_ukt = Column(Integer, primary_key=True, index=True)
    nama_kategori = Column(String, nullable=False)
    nominal = Column(Integer, nullable=False)


class Bill(Base):
    __tablename__ = "tagihan"
    __table_args__ = (UniqueConstraint("nim", "semester", "tahun_akademik", name="uq_tagihan_semester"),)

    id_tagihan = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True)
    nim = Column(String(20), ForeignKey("mahasiswa.nim"), nullable=False, index=True)
    kategori_ukt_id = Column(Integer, ForeignKey("kategori_ukt.id_kategori_ukt"), nullable=False)
    semester = Column(Integer, nullable=False)
    tahun_akademik = Column(String(20), nullable=False)
    tanggal_jatuh_tempo = Column(String, nullable=True)
    nominal = Column(Integer, nullable=False)
    status_pembayaran = Column(String(20), nullable=False, default="belum_lunas")
    keterangan = Column(Text, nullable=True)


class Payment(Base):
    __tablename__ = "pembayaran"

    id_pembayaran = Column(Integer, primary_key=True, index=True)
    id_tagihan = Column(Integer, ForeignKey("tagihan.id_tagihan"), nullable=False, index=True)
    tanggal_bayar = Column(String, nullable=False)
    bukti_pembayaran = Column(String, nullable=True)
    status_verifikasi = Column(String(20), nullable=False, default="MENUNGGU")


class StatusLog(Base):
    __tablename__ = "log_status_mahasiswa"

    id_log = Column(Integer, primary_key=True, index=True)
    nim = Column(String(20), ForeignKey("mahasiswa.nim"), nullable=False, index=True)
    status_awal = Column(String(20), nullable=True)
    status_baru = Column(String(20), nullable=False)
    tanggal_perubahan = Column(String, nullable=False)


class CategoryHistory(Base):
    __tablename__ = "riwayat_kategori_ukt"

    id_riwayat = Column(Integer, primary_key=True, index=True)
    nim = Column(String(20), ForeignKey("mahasiswa.nim"), nullable=False, index=True)
    id_kategori_ukt = Column(Integer, ForeignKey("kategori_ukt.id_kategori_ukt"), nullable=False)
    tanggal_perubahan = Column(String, nullable=False)
