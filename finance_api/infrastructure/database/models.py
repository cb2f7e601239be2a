"""SQLAlchemy ORM models for users and their finance records"""

import uuid
from sqlalchemy import (
    Column,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(12, 2)


class UserRecord(Base):
    """Registered user"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AccountRecord(Base):
    """Bank account, card or cash wallet"""

    __tablename__ = "accounts"
    __table_args__ = (
        Index("ix_accounts_user_active", "user_id", "active"),
        Index("ix_accounts_user_kind", "user_id", "kind"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    kind = Column(String(20), nullable=False)
    credit_limit = Column(MONEY, nullable=False, default=0)
    current_balance = Column(MONEY, nullable=False, default=0)
    color = Column(String(7), nullable=False, default="#3B82F6")
    icon = Column(Text, nullable=False, default="CreditCard")
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CustomCategoryRecord(Base):
    """User-defined category, name unique per user"""

    __tablename__ = "custom_categories"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_custom_categories_user_name"),
        Index("ix_custom_categories_user_kind", "user_id", "kind"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    icon = Column(Text, nullable=False, default="Tag")
    color = Column(String(7), nullable=False, default="#6B7280")
    kind = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Expense or income, possibly one slice of an installment group"""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_date", "user_id", "date"),
        Index("ix_transactions_user_kind", "user_id", "kind"),
        Index("ix_transactions_user_paid", "user_id", "is_paid"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    value = Column(MONEY, nullable=False)
    category = Column(Text, nullable=False)
    kind = Column(String(10), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False, default="")
    is_recurring = Column(Boolean, nullable=False, default=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    installment_count = Column(Integer, nullable=False, default=1)
    installment_index = Column(Integer, nullable=False, default=1)
    account_id = Column(Uuid, ForeignKey("accounts.id"), nullable=True, index=True)
    custom_category_id = Column(Uuid, ForeignKey("custom_categories.id"), nullable=True, index=True)
    installment_group_id = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class EnvelopeRecord(Base):
    """Savings / payment-plan bucket ("caixinha")"""

    __tablename__ = "envelopes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    total_target = Column(MONEY, nullable=False)
    amount_paid = Column(MONEY, nullable=False, default=0)
    installment_count_total = Column(Integer, nullable=False)
    installments_paid = Column(Integer, nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
