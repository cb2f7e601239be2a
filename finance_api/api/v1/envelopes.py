"""Envelope ("caixinha") endpoints, including installment payment"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from finance_api.api.dependencies import ensure_same_user, get_current_user_id, get_request_id
from finance_api.api.v1.schemas import (
    CreatedResponse,
    EnvelopeCreate,
    EnvelopePayment,
    EnvelopePaymentResponse,
    EnvelopeResponse,
    EnvelopeUpdate,
    MessageResponse,
)
from finance_api.domain.exceptions import NotFoundError
from finance_api.infrastructure.database.repositories import EnvelopeRepository
from finance_api.infrastructure.database.session import get_db
from finance_api.infrastructure.observability.logging import log_envelope_payment
from finance_api.infrastructure.observability.metrics import envelope_payments_counter

router = APIRouter()


@router.get("/envelopes/user/{user_id}", response_model=List[EnvelopeResponse])
def list_envelopes(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(user_id, current_user_id)
    return EnvelopeRepository(db).list_by_user(user_id)


@router.post("/envelopes", response_model=CreatedResponse, status_code=201)
def create_envelope(
    body: EnvelopeCreate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(body.user_id, current_user_id)
    envelope = EnvelopeRepository(db).create(**body.model_dump())
    db.commit()
    return CreatedResponse(id=str(envelope.id), message="Envelope created")


@router.put("/envelopes/{envelope_id}", response_model=MessageResponse)
def update_envelope(
    envelope_id: uuid.UUID,
    body: EnvelopeUpdate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Edit name, target, installment total or start date (never the paid totals)"""
    repo = EnvelopeRepository(db)
    envelope = repo.get_owned(envelope_id, current_user_id)
    if envelope is None:
        raise NotFoundError("Envelope not found")

    repo.update(envelope, body.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    return MessageResponse(message="Envelope updated")


@router.put("/envelopes/{envelope_id}/pay", response_model=EnvelopePaymentResponse)
def pay_envelope_installment(
    envelope_id: uuid.UUID,
    body: EnvelopePayment,
    request: Request,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """
    Add one installment payment to an envelope.

    amount_paid and installments_paid are incremented in a single UPDATE,
    so two concurrent payments both land.
    """
    try:
        envelope = EnvelopeRepository(db).pay_installment(envelope_id, current_user_id, body.amount)
        db.commit()
    except Exception:
        db.rollback()
        raise

    envelope_payments_counter.inc()
    log_envelope_payment(
        get_request_id(request),
        str(envelope_id),
        str(body.amount),
        str(envelope.amount_paid),
        envelope.installments_paid,
    )

    return EnvelopePaymentResponse(
        message="Installment paid",
        amount_paid=envelope.amount_paid,
        installments_paid=envelope.installments_paid,
    )


@router.delete("/envelopes/{envelope_id}", response_model=MessageResponse)
def delete_envelope(
    envelope_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    repo = EnvelopeRepository(db)
    envelope = repo.get_owned(envelope_id, current_user_id)
    if envelope is None:
        raise NotFoundError("Envelope not found")

    repo.delete(envelope)
    db.commit()
    return MessageResponse(message="Envelope deleted")
