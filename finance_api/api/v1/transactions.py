"""Transaction endpoints - single entries and monthly installment batches"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_api.api.dependencies import ensure_same_user, get_current_user_id, get_request_id, get_settings
from finance_api.api.v1.schemas import (
    CreatedResponse,
    InstallmentBatchCreate,
    InstallmentBatchResponse,
    MessageResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from finance_api.config import Settings
from finance_api.domain.exceptions import DomainValidationError, NotFoundError
from finance_api.domain.installments import plan_installments
from finance_api.infrastructure.database.repositories import (
    AccountRepository,
    CategoryRepository,
    TransactionRepository,
)
from finance_api.infrastructure.database.session import get_db
from finance_api.infrastructure.observability.logging import log_installment_batch
from finance_api.infrastructure.observability.metrics import record_installment_batch, record_transactions

router = APIRouter()

# Links that a partial update may explicitly clear with null
CLEARABLE_FIELDS = {"account_id", "custom_category_id"}


def check_references(
    db: Session,
    user_id: uuid.UUID,
    account_id: Optional[uuid.UUID],
    custom_category_id: Optional[uuid.UUID],
) -> None:
    """Linked account and category must exist and belong to the same user"""
    if account_id is not None and AccountRepository(db).get_owned(account_id, user_id) is None:
        raise NotFoundError("Account not found")
    if custom_category_id is not None and CategoryRepository(db).get_owned(custom_category_id, user_id) is None:
        raise NotFoundError("Category not found")


@router.post("/transactions", response_model=CreatedResponse, status_code=201)
def create_transaction(
    body: TransactionCreate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(body.user_id, current_user_id)
    check_references(db, body.user_id, body.account_id, body.custom_category_id)

    record = TransactionRepository(db).create(**body.model_dump())
    db.commit()
    record_transactions("single")

    return CreatedResponse(id=str(record.id), message="Transaction created")


@router.post("/transactions/installments", response_model=InstallmentBatchResponse, status_code=201)
def create_installments(
    body: InstallmentBatchCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    app_settings: Settings = Depends(get_settings),
):
    """
    Split one purchase into monthly installments and persist them together.

    Flow:
    1. Plan drafts (value policy, monthly dates, numbered descriptions)
    2. Insert every draft in one database transaction
    3. Commit; any failure rolls back the whole batch
    """
    ensure_same_user(body.user_id, current_user_id)
    check_references(db, body.user_id, body.account_id, body.custom_category_id)

    policy = body.split_policy or app_settings.installment_split_policy
    batch = plan_installments(
        total_value=body.total_value,
        count=body.count,
        start_date=body.start_date,
        category=body.category,
        kind=body.kind,
        description=body.description,
        is_recurring=body.is_recurring,
        user_id=str(body.user_id),
        policy=policy,
        absorb_remainder=body.absorb_remainder,
    )

    repo = TransactionRepository(db)
    try:
        records = repo.create_installments(
            batch.drafts,
            account_id=body.account_id,
            custom_category_id=body.custom_category_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    record_installment_batch(policy, len(records))
    log_installment_batch(
        get_request_id(request),
        str(body.user_id),
        batch.installment_group_id,
        len(records),
        policy,
        str(body.total_value),
    )

    return InstallmentBatchResponse(
        ids=[str(r.id) for r in records],
        installment_group_id=batch.installment_group_id,
        count=len(records),
        split_policy=policy,
        message=f"{len(records)} installments created",
    )


@router.get("/transactions/user/{user_id}", response_model=List[TransactionResponse])
def list_transactions(
    user_id: uuid.UUID,
    is_paid: Optional[bool] = Query(None, description="Only paid / unpaid"),
    account_id: Optional[uuid.UUID] = Query(None, description="Only this account"),
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """List a user's transactions, most recent date first"""
    ensure_same_user(user_id, current_user_id)
    return TransactionRepository(db).list_by_user(user_id, is_paid=is_paid, account_id=account_id)


@router.get("/transactions/group/{group_id}", response_model=List[TransactionResponse])
def list_installment_group(
    group_id: str,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    records = TransactionRepository(db).list_by_group(current_user_id, group_id)
    if not records:
        raise NotFoundError("Installment group not found")
    return records


@router.put("/transactions/{transaction_id}", response_model=MessageResponse)
def update_transaction(
    transaction_id: uuid.UUID,
    body: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    repo = TransactionRepository(db)
    record = repo.get_owned(transaction_id, current_user_id)
    if record is None:
        raise NotFoundError("Transaction not found")

    values = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key in CLEARABLE_FIELDS
    }

    count = values.get("installment_count", record.installment_count)
    index = values.get("installment_index", record.installment_index)
    if index > count:
        raise DomainValidationError("installment_index must not exceed installment_count")

    check_references(db, current_user_id, values.get("account_id"), values.get("custom_category_id"))

    repo.update(record, values)
    db.commit()
    return MessageResponse(message="Transaction updated")


@router.delete("/transactions/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    repo = TransactionRepository(db)
    record = repo.get_owned(transaction_id, current_user_id)
    if record is None:
        raise NotFoundError("Transaction not found")

    repo.delete(record)
    db.commit()
    return MessageResponse(message="Transaction deleted")
