"""Account/card endpoints and the real-time balance projection"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_api.api.dependencies import ensure_same_user, get_current_user_id
from finance_api.api.v1.schemas import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    BalanceResponse,
    MessageResponse,
)
from finance_api.domain.balance import calculate_balance
from finance_api.domain.exceptions import ConflictError, NotFoundError
from finance_api.infrastructure.database.repositories import (
    AccountRepository,
    TransactionRepository,
    account_to_domain,
    transaction_to_domain,
)
from finance_api.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/accounts/user/{user_id}", response_model=List[AccountResponse])
def list_accounts(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(user_id, current_user_id)
    return AccountRepository(db).list_by_user(user_id)


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    body: AccountCreate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    ensure_same_user(body.user_id, current_user_id)
    account = AccountRepository(db).create(**body.model_dump())
    db.commit()
    db.refresh(account)
    return account


@router.put("/accounts/{account_id}", response_model=MessageResponse)
def update_account(
    account_id: uuid.UUID,
    body: AccountUpdate,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    repo = AccountRepository(db)
    account = repo.get_owned(account_id, current_user_id)
    if account is None:
        raise NotFoundError("Account not found")

    repo.update(account, body.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    return MessageResponse(message="Account updated")


@router.delete("/accounts/{account_id}", response_model=MessageResponse)
def delete_account(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Delete an account that no transaction references"""
    repo = AccountRepository(db)
    account = repo.get_owned(account_id, current_user_id)
    if account is None:
        raise NotFoundError("Account not found")

    count = TransactionRepository(db).count(account_id=account_id)
    if count > 0:
        raise ConflictError(f"Cannot delete: {count} transactions use this account", count=count)

    repo.delete(account)
    db.commit()
    return MessageResponse(message="Account deleted")


@router.get("/accounts/{account_id}/balance", response_model=BalanceResponse)
def get_account_balance(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """
    Project outstanding exposure from the account's unpaid transactions.

    Returns:
        Credit cards: limit, available credit and utilization percent
        (null when the limit is zero). Other kinds: available balance.
    """
    account = account_to_domain(AccountRepository(db).get_owned(account_id, current_user_id))
    unpaid = []
    if account is not None:
        unpaid = [transaction_to_domain(t) for t in TransactionRepository(db).list_unpaid_for_account(account_id)]

    # Missing account raises InvalidAccountError -> 404
    return calculate_balance(account, unpaid)
