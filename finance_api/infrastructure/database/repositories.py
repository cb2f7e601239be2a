"""Data access layer for finance entities"""

import uuid
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from finance_api.domain.exceptions import NotFoundError
from finance_api.domain.models import Account, Transaction, TransactionDraft
from finance_api.infrastructure.database.models import (
    AccountRecord,
    Base,
    CustomCategoryRecord,
    EnvelopeRecord,
    TransactionRecord,
    UserRecord,
)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Create / find / update / delete / count by filter for one table

    Repositories flush but never commit; the caller owns the transaction.
    """

    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> ModelT:
        record = self.model(**fields)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get(self, record_id: uuid.UUID) -> Optional[ModelT]:
        return self.db.get(self.model, record_id)

    def get_owned(self, record_id: uuid.UUID, user_id: uuid.UUID) -> Optional[ModelT]:
        """Fetch a record only if it belongs to ``user_id``"""
        record = self.get(record_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    def find(self, *order_by: Any, **filters: Any) -> List[ModelT]:
        query = select(self.model).filter_by(**filters)
        if order_by:
            query = query.order_by(*order_by)
        return list(self.db.scalars(query).all())

    def find_one(self, **filters: Any) -> Optional[ModelT]:
        return self.db.scalars(select(self.model).filter_by(**filters).limit(1)).first()

    def update(self, record: ModelT, values: Dict[str, Any]) -> ModelT:
        for key, value in values.items():
            setattr(record, key, value)
        self.db.flush()
        return record

    def delete(self, record: ModelT) -> None:
        self.db.delete(record)
        self.db.flush()

    def count(self, **filters: Any) -> int:
        query = select(func.count()).select_from(self.model).filter_by(**filters)
        return self.db.scalar(query) or 0


class UserRepository(Repository[UserRecord]):
    """Repository for registered users"""

    model = UserRecord

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        return self.find_one(email=email)


class TransactionRepository(Repository[TransactionRecord]):
    """Repository for transactions and installment groups"""

    model = TransactionRecord

    def create_installments(
        self,
        drafts: Iterable[TransactionDraft],
        account_id: Optional[uuid.UUID] = None,
        custom_category_id: Optional[uuid.UUID] = None,
    ) -> List[TransactionRecord]:
        """Insert a whole installment batch in the current transaction

        Nothing is visible until the caller commits; a rollback discards every slice.
        """
        records = [
            TransactionRecord(
                user_id=uuid.UUID(str(d.user_id)),
                value=d.value,
                category=d.category,
                kind=d.kind,
                date=d.date,
                description=d.description,
                is_recurring=d.is_recurring,
                is_paid=d.is_paid,
                installment_count=d.installment_count,
                installment_index=d.installment_index,
                installment_group_id=d.installment_group_id,
                account_id=account_id,
                custom_category_id=custom_category_id,
            )
            for d in drafts
        ]
        self.db.add_all(records)
        self.db.flush()
        return records

    def list_by_user(
        self,
        user_id: uuid.UUID,
        is_paid: Optional[bool] = None,
        account_id: Optional[uuid.UUID] = None,
    ) -> List[TransactionRecord]:
        """Fetch a user's transactions, newest date first"""
        filters: Dict[str, Any] = {"user_id": user_id}
        if is_paid is not None:
            filters["is_paid"] = is_paid
        if account_id is not None:
            filters["account_id"] = account_id
        return self.find(
            TransactionRecord.date.desc(),
            TransactionRecord.created_at.desc(),
            **filters,
        )

    def list_by_group(self, user_id: uuid.UUID, group_id: str) -> List[TransactionRecord]:
        return self.find(
            TransactionRecord.installment_index.asc(),
            user_id=user_id,
            installment_group_id=group_id,
        )

    def list_unpaid_for_account(self, account_id: uuid.UUID) -> List[TransactionRecord]:
        return self.find(account_id=account_id, is_paid=False)


class EnvelopeRepository(Repository[EnvelopeRecord]):
    """Repository for envelopes"""

    model = EnvelopeRecord

    def list_by_user(self, user_id: uuid.UUID) -> List[EnvelopeRecord]:
        return self.find(EnvelopeRecord.created_at.desc(), user_id=user_id)

    def pay_installment(self, envelope_id: uuid.UUID, user_id: uuid.UUID, amount) -> EnvelopeRecord:
        """
        Record one installment payment as a single atomic UPDATE.

        The increment happens in SQL, so concurrent payments on the same
        envelope serialize on the row and none of them is lost.

        Raises:
            NotFoundError: no envelope with this id for this user
        """
        stmt = (
            update(EnvelopeRecord)
            .where(EnvelopeRecord.id == envelope_id, EnvelopeRecord.user_id == user_id)
            .values(
                amount_paid=EnvelopeRecord.amount_paid + amount,
                installments_paid=EnvelopeRecord.installments_paid + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Envelope not found")

        envelope = self.get(envelope_id)
        self.db.refresh(envelope)
        return envelope


class AccountRepository(Repository[AccountRecord]):
    """Repository for accounts and cards"""

    model = AccountRecord

    def list_by_user(self, user_id: uuid.UUID) -> List[AccountRecord]:
        return self.find(AccountRecord.created_at.desc(), user_id=user_id)


class CategoryRepository(Repository[CustomCategoryRecord]):
    """Repository for custom categories"""

    model = CustomCategoryRecord

    def list_by_user(self, user_id: uuid.UUID) -> List[CustomCategoryRecord]:
        return self.find(CustomCategoryRecord.created_at.desc(), user_id=user_id)

    def get_by_name(self, user_id: uuid.UUID, name: str) -> Optional[CustomCategoryRecord]:
        return self.find_one(user_id=user_id, name=name)


def account_to_domain(record: Optional[AccountRecord]) -> Optional[Account]:
    if record is None:
        return None
    return Account(
        id=str(record.id),
        name=record.name,
        kind=record.kind,
        credit_limit=record.credit_limit,
        current_balance=record.current_balance,
    )


def transaction_to_domain(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=str(record.id),
        value=record.value,
        kind=record.kind,
        is_paid=record.is_paid,
        account_id=str(record.account_id) if record.account_id else None,
    )
