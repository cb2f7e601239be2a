"""Account exposure calculation - available balance and credit utilization"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from finance_api.domain.exceptions import InvalidAccountError
from finance_api.domain.models import Account, BalanceReport, Transaction

ONE_DECIMAL = Decimal("0.1")


def total_unpaid(transactions: Iterable[Transaction]) -> Decimal:
    """Expenses add to the outstanding amount, incomes offset it"""
    return sum(
        (t.value if t.kind == "expense" else -t.value for t in transactions),
        Decimal("0"),
    )


def utilization_percent(outstanding: Decimal, limit: Decimal) -> Optional[Decimal]:
    """Share of the credit limit in use, or None when there is no limit to divide by"""
    if limit == 0:
        return None
    return (outstanding / limit * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def calculate_balance(account: Optional[Account], unpaid_transactions: Iterable[Transaction]) -> BalanceReport:
    """
    Project real-time exposure for an account.

    The caller supplies the unpaid transactions linked to the account;
    no further filtering happens here.

    Raises:
        InvalidAccountError: account is None
    """
    if account is None:
        raise InvalidAccountError("Account not found")

    unpaid = list(unpaid_transactions)
    outstanding = total_unpaid(unpaid)

    report = BalanceReport(
        account_id=account.id,
        name=account.name,
        kind=account.kind,
        current_balance=account.current_balance,
        total_unpaid=outstanding,
        unpaid_count=len(unpaid),
    )

    if account.kind == "credit_card":
        report.credit_limit = account.credit_limit
        report.available = account.credit_limit - outstanding
        report.utilization_percent = utilization_percent(outstanding, account.credit_limit)
    else:
        report.available_balance = account.current_balance - outstanding

    return report
