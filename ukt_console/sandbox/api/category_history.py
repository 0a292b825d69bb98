"""UKT category change history endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import CategoryHistory, Student, UKTCategory
from ukt_console.sandbox.responses import field_errors, listing, serialize, success
from ukt_console.sandbox.schemas import CategoryHistoryIn
from ukt_console.sandbox.security import require_token

router = APIRouter(prefix="/riwayat-kategori-ukt", tags=["riwayat-kategori-ukt"], dependencies=[Depends(require_token)])


def _ordered(query):
    return query.order_by(CategoryHistory.id_riwayat)


def _reference_errors(db: Session, history_in: CategoryHistoryIn) -> dict:
    errors = {}
    if not db.query(Student).filter(Student.nim == history_in.nim).first():
        errors["nim"] = ["The selected nim is invalid."]
    if not db.query(UKTCategory).filter(UKTCategory.id_kategori_ukt == history_in.id_kategori_ukt).first():
        errors["id_kategori_ukt"] = ["The selected id kategori ukt is invalid."]
    return errors


@router.get("")
async def list_history(db: Session = Depends(get_db)):
    return listing(_ordered(db.query(CategoryHistory)).all())


@router.get("/nim/{nim}")
async def list_history_for_student(nim: str, db: Session = Depends(get_db)):
    return listing(_ordered(db.query(CategoryHistory).filter(CategoryHistory.nim == nim)).all())


@router.get("/date-range")
async def list_history_between(start_date: str, end_date: str, db: Session = Depends(get_db)):
    # Stored values start with YYYY-MM-DD, so a prefix comparison is a date comparison.
    rows = [
        row
        for row in _ordered(db.query(CategoryHistory)).all()
        if start_date <= (row.tanggal_perubahan or "")[:10] <= end_date
    ]
    return listing(rows)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_history(history_in: CategoryHistoryIn, db: Session = Depends(get_db)):
    errors = _reference_errors(db, history_in)
    if errors:
        return field_errors(errors)
    entry = CategoryHistory(**history_in.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return success(serialize(entry), "Category history recorded")


@router.delete("/{history_id}")
async def delete_history(history_id: int, db: Session = Depends(get_db)):
    entry = db.query(CategoryHistory).filter(CategoryHistory.id_riwayat == history_id).first()
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="History entry not found")
    db.delete(entry)
    db.commit()
    return success(None, "Category history deleted")
