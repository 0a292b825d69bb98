"""Student endpoints: /mahasiswa for the students screen, /masters for lookups."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import Student
from ukt_console.sandbox.responses import field_errors, listing, paginated, serialize, success
from ukt_console.sandbox.schemas import StudentCreate, StudentUpdate
from ukt_console.sandbox.security import require_token

router = APIRouter(tags=["mahasiswa"], dependencies=[Depends(require_token)])


def _get_student(db: Session, nim: str) -> Student:
    student = db.query(Student).filter(Student.nim == nim).first()
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.get("/mahasiswa")
async def list_students(db: Session = Depends(get_db)):
    return listing(db.query(Student).order_by(Student.created_at, Student.nim).all())


@router.get("/masters")
async def list_student_directory(db: Session = Depends(get_db)):
    return paginated(db.query(Student).order_by(Student.nim).all())


@router.post("/mahasiswa", status_code=status.HTTP_201_CREATED)
async def create_student(student_in: StudentCreate, db: Session = Depends(get_db)):
    if db.query(Student).filter(Student.nim == student_in.nim).first():
        return field_errors({"nim": ["The nim has already been taken."]})
    next_user_id = (db.query(func.max(Student.user_id)).scalar() or 0) + 1
    data = student_in.model_dump()
    data["status_aktif"] = data.get("status_aktif") or "AKTIF"
    student = Student(user_id=next_user_id, **data)
    db.add(student)
    db.commit()
    db.refresh(student)
    return success(serialize(student), "Student created")


@router.put("/mahasiswa/{nim}")
async def update_student(nim: str, student_in: StudentUpdate, db: Session = Depends(get_db)):
    student = _get_student(db, nim)
    for field, value in student_in.model_dump(exclude_unset=True).items():
        setattr(student, field, value)
    db.commit()
    db.refresh(student)
    return success(serialize(student), "Student updated")


@router.delete("/mahasiswa/{nim}")
async def delete_student(nim: str, db: Session = Depends(get_db)):
    student = _get_student(db, nim)
    db.delete(student)
    db.commit()
    return success(None, "Student deleted")
