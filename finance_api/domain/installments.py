"""Installment plan generation for split purchases"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finance_api.domain.exceptions import DomainValidationError
from finance_api.domain.models import (
    InstallmentBatch,
    SPLIT_POLICIES,
    TRANSACTION_KINDS,
    TransactionDraft,
)
from finance_api.utils.date_utils import generate_month_range, new_group_token

CENT = Decimal("0.01")


def installment_value(total_value: Decimal, count: int, policy: str = "divide") -> Decimal:
    """Per-installment value under the given split policy"""
    if policy == "repeat" or count == 1:
        return total_value
    return (total_value / count).quantize(CENT, rounding=ROUND_HALF_UP)


def installment_description(description: str | None, index: int, count: int) -> str:
    if description and description.strip():
        return f"{description.strip()} ({index}/{count})"
    return f"Parcela {index}/{count}"


def plan_installments(
    total_value: Decimal | float | str,
    count: int,
    start_date: date,
    category: str,
    kind: str,
    description: str | None,
    is_recurring: bool,
    user_id: str,
    policy: str = "divide",
    absorb_remainder: bool = False,
) -> InstallmentBatch:
    """
    Expand one purchase into ``count`` monthly installment drafts.

    Policies:
    - divide (default): each installment is total / count rounded to cents.
      The rounding remainder is dropped unless ``absorb_remainder`` is set,
      in which case the last installment carries it.
    - repeat: each installment carries the full total (separate future charges).

    Dates are start_date + (i - 1) months, clamped to month end when the
    target month is shorter. Every generated draft is unpaid.

    Example:
        100.00 / 3 -> [33.33, 33.33, 33.33]            (sum 99.99)
        100.00 / 3, absorb_remainder -> [33.33, 33.33, 33.34]

    Raises:
        DomainValidationError: count < 1, negative total, unknown kind or policy
    """
    total_value = Decimal(str(total_value))
    if count < 1:
        raise DomainValidationError("Installment count must be at least 1")
    if total_value < 0:
        raise DomainValidationError("Total value must not be negative")
    if kind not in TRANSACTION_KINDS:
        raise DomainValidationError(f"Invalid kind: {kind}")
    if policy not in SPLIT_POLICIES:
        raise DomainValidationError(f"Invalid split policy: {policy}")

    if count == 1:
        draft = TransactionDraft(
            user_id=user_id,
            value=total_value,
            category=category,
            kind=kind,
            date=start_date,
            description=description or "",
            is_recurring=is_recurring,
            is_paid=False,
        )
        return InstallmentBatch(drafts=[draft], installment_group_id=None, policy=policy)

    value = installment_value(total_value, count, policy)
    group_id = new_group_token()

    drafts = []
    for i, due_date in enumerate(generate_month_range(start_date, count), start=1):
        amount = value
        if policy == "divide" and absorb_remainder and i == count:
            amount = total_value - value * (count - 1)

        drafts.append(
            TransactionDraft(
                user_id=user_id,
                value=amount,
                category=category,
                kind=kind,
                date=due_date,
                description=installment_description(description, i, count),
                is_recurring=is_recurring,
                is_paid=False,
                installment_count=count,
                installment_index=i,
                installment_group_id=group_id,
            )
        )

    return InstallmentBatch(drafts=drafts, installment_group_id=group_id, policy=policy)
