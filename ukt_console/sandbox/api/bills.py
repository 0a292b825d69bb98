"""Bill (tagihan) endpoints, including bulk generation for a semester."""

import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import Bill, CategoryHistory, Student, UKTCategory
from ukt_console.sandbox.responses import domain_error, field_errors, paginated, serialize, success
from ukt_console.sandbox.schemas import BillIn, GenerateBillsIn
from ukt_console.sandbox.security import require_token

router = APIRouter(prefix="/tagihan", tags=["tagihan"], dependencies=[Depends(require_token)])

SEMESTER_PATTERN = re.compile(r"^(?P<year>\d{4}/\d{4})-(?P<term>\d+)$")


def _get_bill(db: Session, bill_id: int) -> Bill:
    bill = db.query(Bill).filter(Bill.id_tagihan == bill_id).first()
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return bill


def _reference_errors(db: Session, bill_in: BillIn) -> dict:
    errors = {}
    if not db.query(Student).filter(Student.nim == bill_in.nim).first():
        errors["nim"] = ["The selected nim is invalid."]
    if not db.query(UKTCategory).filter(UKTCategory.id_kategori_ukt == bill_in.kategori_ukt_id).first():
        errors["kategori_ukt_id"] = ["The selected kategori ukt id is invalid."]
    return errors


def _duplicate_exists(db: Session, bill_in: BillIn, exclude_id: int | None = None) -> bool:
    query = db.query(Bill).filter(
        Bill.nim == bill_in.nim,
        Bill.semester == bill_in.semester,
        Bill.tahun_akademik == bill_in.tahun_akademik,
    )
    if exclude_id is not None:
        query = query.filter(Bill.id_tagihan != exclude_id)
    return query.first() is not None


@router.get("")
async def list_bills(db: Session = Depends(get_db)):
    return paginated(db.query(Bill).order_by(Bill.id_tagihan).all())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_bill(bill_in: BillIn, db: Session = Depends(get_db)):
    errors = _reference_errors(db, bill_in)
    if errors:
        return field_errors(errors)
    if _duplicate_exists(db, bill_in):
        return domain_error("A bill for this student and semester already exists")
    data = bill_in.model_dump()
    data["status_pembayaran"] = data.get("status_pembayaran") or "belum_lunas"
    bill = Bill(**data)
    db.add(bill)
    db.commit()
    db.refresh(bill)
    return success(serialize(bill), "Bill created")


@router.post("/generate")
async def generate_bills(request_in: GenerateBillsIn, db: Session = Depends(get_db)):
    match = SEMESTER_PATTERN.match(request_in.semester.strip())
    if not match:
        return field_errors({"semester": ["The semester must look like 2023/2024-1."]})
    academic_year, term = match.group("year"), int(match.group("term"))

    created = 0
    for student in db.query(Student).filter(Student.status_aktif == "AKTIF").order_by(Student.nim).all():
        latest = (
            db.query(CategoryHistory)
            .filter(CategoryHistory.nim == student.nim)
            .order_by(CategoryHistory.tanggal_perubahan.desc(), CategoryHistory.id_riwayat.desc())
            .first()
        )
        if latest is None:
            continue
        category = db.query(UKTCategory).filter(UKTCategory.id_kategori_ukt == latest.id_kategori_ukt).first()
        exists = (
            db.query(Bill)
            .filter(Bill.nim == student.nim, Bill.semester == term, Bill.tahun_akademik == academic_year)
            .first()
        )
        if category is None or exists:
            continue
        db.add(
            Bill(
                user_id=student.user_id,
                nim=student.nim,
                kategori_ukt_id=category.id_kategori_ukt,
                semester=term,
                tahun_akademik=academic_year,
                nominal=category.nominal,
                status_pembayaran="belum_lunas",
            )
        )
        created += 1
    db.commit()
    return success({"created": created}, f"{created} bills generated")


@router.put("/{bill_id}")
async def update_bill(bill_id: int, bill_in: BillIn, db: Session = Depends(get_db)):
    bill = _get_bill(db, bill_id)
    errors = _reference_errors(db, bill_in)
    if errors:
        return field_errors(errors)
    if _duplicate_exists(db, bill_in, exclude_id=bill_id):
        return domain_error("A bill for this student and semester already exists")
    data = bill_in.model_dump()
    data["status_pembayaran"] = data.get("status_pembayaran") or bill.status_pembayaran
    for field, value in data.items():
        setattr(bill, field, value)
    db.commit()
    db.refresh(bill)
    return success(serialize(bill), "Bill updated")


@router.delete("/{bill_id}")
async def delete_bill(bill_id: int, db: Session = Depends(get_db)):
    bill = _get_bill(db, bill_id)
    db.delete(bill)
    db.commit()
    return success(None, "Bill deleted")
