"""Payment (pembayaran) endpoints; proof of payment arrives as JSON or multipart."""

import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from ukt_console.sandbox.db import get_db
from ukt_console.sandbox.models import Bill, Payment
from ukt_console.sandbox.responses import field_errors, listing, serialize, success
from ukt_console.sandbox.schemas import PaymentIn
from ukt_console.sandbox.security import require_token

router = APIRouter(prefix="/pembayaran", tags=["pembayaran"], dependencies=[Depends(require_token)])

PROOF_DIRECTORY = "bukti_pembayaran"


def _get_payment(db: Session, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(Payment.id_pembayaran == payment_id).first()
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


async def _read_payment(request: Request) -> PaymentIn:
    content_type = request.headers.get("content-type", "")
    payload: Dict[str, Any]
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        payload = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                # Only the stored path is kept; the sandbox does not persist file bodies.
                payload[key] = f"{PROOF_DIRECTORY}/{uuid.uuid4().hex[:8]}_{value.filename}"
            else:
                payload[key] = value
    else:
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
    try:
        return PaymentIn.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.get("")
async def list_payments(db: Session = Depends(get_db)):
    return listing(db.query(Payment).order_by(Payment.id_pembayaran).all())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_payment(request: Request, db: Session = Depends(get_db)):
    payment_in = await _read_payment(request)
    if not db.query(Bill).filter(Bill.id_tagihan == payment_in.id_tagihan).first():
        return field_errors({"id_tagihan": ["The selected id tagihan is invalid."]})
    if not payment_in.bukti_pembayaran:
        return field_errors({"bukti_pembayaran": ["The bukti pembayaran field is required."]})
    data = payment_in.model_dump()
    data["status_verifikasi"] = data.get("status_verifikasi") or "MENUNGGU"
    payment = Payment(**data)
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return success(serialize(payment), "Payment recorded")


@router.put("/{payment_id}")
async def update_payment(payment_id: int, request: Request, db: Session = Depends(get_db)):
    payment = _get_payment(db, payment_id)
    payment_in = await _read_payment(request)
    if not db.query(Bill).filter(Bill.id_tagihan == payment_in.id_tagihan).first():
        return field_errors({"id_tagihan": ["The selected id tagihan is invalid."]})
    for field, value in payment_in.model_dump(exclude_none=True).items():
        setattr(payment, field, value)
    db.commit()
    db.refresh(payment)
    return success(serialize(payment), "Payment updated")


@router.delete("/{payment_id}")
async def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = _get_payment(db, payment_id)
    db.delete(payment)
    db.commit()
    return success(None, "Payment deleted")
