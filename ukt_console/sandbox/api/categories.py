"""UKT category endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import Bill, CategoryHistory, UKTCategory
from ukt_console.sandbox.responses import domain_error, paginated, serialize, success
from ukt_console.sandbox.schemas import CategoryIn
from ukt_console.sandbox.security import require_token

router = APIRouter(prefix="/kategori-ukt", tags=["kategori-ukt"], dependencies=[Depends(require_token)])


def _get_category(db: Session, category_id: int) -> UKTCategory:
    category = db.query(UKTCategory).filter(UKTCategory.id_kategori_ukt == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="UKT category not found")
    return category


@router.get("")
async def list_categories(db: Session = Depends(get_db)):
    return paginated(db.query(UKTCategory).order_by(UKTCategory.id_kategori_ukt).all())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(category_in: CategoryIn, db: Session = Depends(get_db)):
    category = UKTCategory(**category_in.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return success(serialize(category), "UKT category created")


@router.put("/{category_id}")
async def update_category(category_id: int, category_in: CategoryIn, db: Session = Depends(get_db)):
    category = _get_category(db, category_id)
    for field, value in category_in.model_dump().items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return success(serialize(category), "UKT category updated")


@router.delete("/{category_id}")
async def delete_category(category_id: int, db: Session = Depends(get_db)):
    category = _get_category(db, category_id)
    in_use = (
        db.query(Bill).filter(Bill.kategori_ukt_id == category_id).first()
        or db.query(CategoryHistory).filter(CategoryHistory.id_kategori_ukt == category_id).first()
    )
    if in_use:
        return domain_error("UKT category is still referenced", status.HTTP_409_CONFLICT)
    db.delete(category)
    db.commit()
    return success(None, "UKT category deleted")
