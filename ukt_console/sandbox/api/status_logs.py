"""Student status change log endpoints (append-only)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ukt_console.app.core.time import isoformat_utc, utc_now
from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import StatusLog, Student
from ukt_console.sandbox.responses import field_errors, listing, serialize, success
from ukt_console.sandbox.schemas import StatusLogIn
from ukt_console.sandbox.security import require_token

router = APIRouter(prefix="/log-status-mahasiswa", tags=["log-status-mahasiswa"], dependencies=[Depends(require_token)])


@router.get("")
async def list_status_logs(db: Session = Depends(get_db)):
    return listing(db.query(StatusLog).order_by(StatusLog.id_log).all())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_status_log(log_in: StatusLogIn, db: Session = Depends(get_db)):
    student = db.query(Student).filter(Student.nim == log_in.nim).first()
    if not student:
        return field_errors({"nim": ["The selected nim is invalid."]})
    entry = StatusLog(
        nim=student.nim,
        status_awal=log_in.status_awal or student.status_aktif,
        status_baru=log_in.status_baru,
        tanggal_perubahan=log_in.tanggal_perubahan or isoformat_utc(utc_now()),
    )
    student.status_aktif = log_in.status_baru
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return success(serialize(entry), "Student status changed")
