"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

TransactionKind = Literal["expense", "income"]
AccountKind = Literal["credit_card", "debit_card", "checking", "savings", "cash"]
CategoryKind = Literal["fixed", "variable", "income"]
SplitPolicy = Literal["divide", "repeat"]

# Surrounding whitespace is dropped before the length check
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

DateType = date

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class MessageResponse(BaseModel):
    message: str


class CreatedResponse(BaseModel):
    id: str
    message: str = "Created"


# ---------------------------------------------------------------- auth


class RegisterRequest(BaseModel):
    """Request body for POST /v1/auth/register"""

    name: NonBlankStr = Field(..., max_length=200)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    """Request body for POST /v1/auth/login"""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(UserResponse):
    """Identity plus bearer token"""

    token: str


# ---------------------------------------------------------------- transactions


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    user_id: uuid.UUID
    value: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    category: NonBlankStr
    kind: TransactionKind
    date: DateType
    description: str = ""
    is_recurring: bool = False
    is_paid: bool = False
    installment_count: int = Field(1, ge=1)
    installment_index: int = Field(1, ge=1)
    account_id: Optional[uuid.UUID] = None
    custom_category_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def check_installment_index(self):
        if self.installment_index > self.installment_count:
            raise ValueError("installment_index must not exceed installment_count")
        return self


class InstallmentBatchCreate(BaseModel):
    """Request body for POST /v1/transactions/installments"""

    user_id: uuid.UUID
    total_value: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    count: int = Field(..., ge=1, le=360)
    start_date: date
    category: NonBlankStr
    kind: TransactionKind
    description: str = ""
    is_recurring: bool = False
    account_id: Optional[uuid.UUID] = None
    custom_category_id: Optional[uuid.UUID] = None
    split_policy: Optional[SplitPolicy] = None
    absorb_remainder: bool = False


class InstallmentBatchResponse(BaseModel):
    ids: List[str]
    installment_group_id: Optional[str] = None
    count: int
    split_policy: SplitPolicy
    message: str


class TransactionUpdate(BaseModel):
    """Partial update; omitted fields are left untouched"""

    value: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    category: Optional[NonBlankStr] = None
    kind: Optional[TransactionKind] = None
    date: Optional[DateType] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    is_paid: Optional[bool] = None
    installment_count: Optional[int] = Field(None, ge=1)
    installment_index: Optional[int] = Field(None, ge=1)
    account_id: Optional[uuid.UUID] = None
    custom_category_id: Optional[uuid.UUID] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    value: float
    category: str
    kind: str
    date: DateType
    description: str
    is_recurring: bool
    is_paid: bool
    installment_count: int
    installment_index: int
    account_id: Optional[uuid.UUID] = None
    custom_category_id: Optional[uuid.UUID] = None
    installment_group_id: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------- envelopes


class EnvelopeCreate(BaseModel):
    """Request body for POST /v1/envelopes"""

    user_id: uuid.UUID
    name: NonBlankStr
    total_target: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    installment_count_total: int = Field(..., ge=1)
    start_date: date


class EnvelopeUpdate(BaseModel):
    """Editable envelope fields; paid totals only move through /pay"""

    name: Optional[NonBlankStr] = None
    total_target: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    installment_count_total: Optional[int] = Field(None, ge=1)
    start_date: Optional[date] = None


class EnvelopePayment(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class EnvelopePaymentResponse(BaseModel):
    message: str
    amount_paid: float
    installments_paid: int


class EnvelopeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    total_target: float
    amount_paid: float
    installment_count_total: int
    installments_paid: int
    start_date: date
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------- accounts


class AccountCreate(BaseModel):
    """Request body for POST /v1/accounts"""

    user_id: uuid.UUID
    name: NonBlankStr
    kind: AccountKind
    credit_limit: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    current_balance: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
    color: str = Field("#3B82F6", pattern=HEX_COLOR)
    icon: str = "CreditCard"
    active: bool = True


class AccountUpdate(BaseModel):
    name: Optional[NonBlankStr] = None
    kind: Optional[AccountKind] = None
    credit_limit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    current_balance: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = None
    active: Optional[bool] = None


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    kind: str
    credit_limit: float
    current_balance: float
    color: str
    icon: str
    active: bool
    created_at: Optional[datetime] = None


class BalanceResponse(BaseModel):
    """Response for GET /v1/accounts/{account_id}/balance"""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    name: str
    kind: str
    current_balance: float
    total_unpaid: float
    unpaid_count: int
    credit_limit: Optional[float] = None
    available: Optional[float] = None
    utilization_percent: Optional[float] = None
    available_balance: Optional[float] = None


# ---------------------------------------------------------------- categories


class CategoryCreate(BaseModel):
    """Request body for POST /v1/categories"""

    user_id: uuid.UUID
    name: NonBlankStr = Field(..., max_length=100)
    icon: str = "Tag"
    color: str = Field("#6B7280", pattern=HEX_COLOR)
    kind: CategoryKind


class CategoryUpdate(BaseModel):
    name: Optional[NonBlankStr] = Field(None, max_length=100)
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    kind: Optional[CategoryKind] = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    icon: str
    color: str
    kind: str
    created_at: Optional[datetime] = None
