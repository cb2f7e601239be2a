"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

TRANSACTION_KINDS = ("expense", "income")
SPLIT_POLICIES = ("divide", "repeat")


@dataclass
class TransactionDraft:
    """Transaction ready to be persisted (no id yet)"""

    user_id: str
    value: Decimal
    category: str
    kind: str  # "expense" or "income"
    date: date
    description: str
    is_recurring: bool = False
    is_paid: bool = False
    installment_count: int = 1
    installment_index: int = 1
    installment_group_id: Optional[str] = None


@dataclass
class Transaction:
    """Stored transaction as seen by balance calculations"""

    id: str
    value: Decimal
    kind: str
    is_paid: bool = False
    account_id: Optional[str] = None


@dataclass
class Account:
    """Account or card snapshot"""

    id: str
    name: str
    kind: str
    credit_limit: Decimal = Decimal("0")
    current_balance: Decimal = Decimal("0")


@dataclass
class BalanceReport:
    """Read-time exposure projection for one account"""

    account_id: str
    name: str
    kind: str
    current_balance: Decimal
    total_unpaid: Decimal
    unpaid_count: int = 0
    # credit_card only
    credit_limit: Optional[Decimal] = None
    available: Optional[Decimal] = None
    utilization_percent: Optional[Decimal] = None
    # every other kind
    available_balance: Optional[Decimal] = None


@dataclass
class InstallmentBatch:
    """Ordered drafts produced from one logical purchase"""

    drafts: List[TransactionDraft] = field(default_factory=list)
    installment_group_id: Optional[str] = None
    policy: str = "divide"

    @property
    def total(self) -> Decimal:
        return sum((d.value for d in self.drafts), Decimal("0"))
