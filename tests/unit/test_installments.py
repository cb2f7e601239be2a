"""Unit tests for installment plan generation"""

import pytest
from datetime import date
from decimal import Decimal
from finance_api.domain.exceptions import DomainValidationError
from finance_api.domain.installments import plan_installments

USER_ID = "7d3f7f0e-8a52-4d8b-9d0e-1b8f5c2a6e11"


def make_plan(total="300.00", count=3, start=date(2024, 1, 15), description="Notebook", **kwargs):
    return plan_installments(
        total_value=Decimal(total),
        count=count,
        start_date=start,
        category="Electronics",
        kind="expense",
        description=description,
        is_recurring=False,
        user_id=USER_ID,
        **kwargs,
    )


def test_single_installment_keeps_full_value():
    """Test count == 1 carries the exact total and no group id"""
    batch = make_plan(total="123.45", count=1)

    assert len(batch.drafts) == 1
    draft = batch.drafts[0]
    assert draft.value == Decimal("123.45")
    assert draft.installment_count == 1
    assert draft.installment_index == 1
    assert draft.is_paid is False
    assert draft.description == "Notebook"
    assert batch.installment_group_id is None


def test_divide_policy_equal_split():
    """Test evenly divisible total"""
    batch = make_plan(total="300.00", count=3)

    assert [d.value for d in batch.drafts] == [Decimal("100.00")] * 3
    assert batch.total == Decimal("300.00")


def test_divide_policy_drops_remainder():
    """Test rounding remainder is lost by default, within count x 0.01"""
    batch = make_plan(total="100.00", count=3)

    assert [d.value for d in batch.drafts] == [Decimal("33.33")] * 3
    assert abs(batch.total - Decimal("100.00")) <= Decimal("0.01") * 3


def test_divide_policy_absorb_remainder_preserves_sum():
    """Test last installment absorbs remainder when asked"""
    batch = make_plan(total="100.00", count=3, absorb_remainder=True)

    assert [d.value for d in batch.drafts] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert batch.total == Decimal("100.00")


def test_divide_policy_rounds_half_up():
    batch = make_plan(total="0.05", count=2)
    assert batch.drafts[0].value == Decimal("0.03")


def test_repeat_policy_keeps_total_per_installment():
    """Test repeat policy treats installments as separate full charges"""
    batch = make_plan(total="59.90", count=4, policy="repeat")

    assert all(d.value == Decimal("59.90") for d in batch.drafts)
    assert batch.policy == "repeat"


def test_indexes_and_descriptions():
    batch = make_plan(count=3)

    assert [d.installment_index for d in batch.drafts] == [1, 2, 3]
    assert all(d.installment_count == 3 for d in batch.drafts)
    assert [d.description for d in batch.drafts] == [
        "Notebook (1/3)",
        "Notebook (2/3)",
        "Notebook (3/3)",
    ]


def test_blank_description_uses_parcela():
    batch = make_plan(count=2, description="")
    assert [d.description for d in batch.drafts] == ["Parcela 1/2", "Parcela 2/2"]


def test_monthly_dates_strictly_increasing():
    """Test dates advance one calendar month at a time"""
    batch = make_plan(count=4, start=date(2024, 11, 10))

    assert [d.date for d in batch.drafts] == [
        date(2024, 11, 10),
        date(2024, 12, 10),
        date(2025, 1, 10),
        date(2025, 2, 10),
    ]


def test_month_end_clamps_and_recovers():
    """Test Jan 31 clamps to Feb 29 in a leap year and returns to Mar 31"""
    batch = make_plan(count=3, start=date(2024, 1, 31))

    assert [d.date for d in batch.drafts] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]


def test_group_id_shared_and_unique_per_call():
    first = make_plan(count=3)
    second = make_plan(count=3)

    assert first.installment_group_id is not None
    assert {d.installment_group_id for d in first.drafts} == {first.installment_group_id}
    assert first.installment_group_id != second.installment_group_id


def test_generated_installments_always_unpaid():
    batch = make_plan(count=5)
    assert all(d.is_paid is False for d in batch.drafts)


@pytest.mark.parametrize("count", [1, 2, 7, 12, 24])
def test_count_matches_drafts(count):
    batch = make_plan(count=count)
    assert len(batch.drafts) == count
    assert [d.installment_index for d in batch.drafts] == list(range(1, count + 1))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"count": 0},
        {"total": "-1.00"},
        {"policy": "weird"},
    ],
)
def test_invalid_input_rejected(kwargs):
    with pytest.raises(DomainValidationError):
        make_plan(**kwargs)


def test_invalid_kind_rejected():
    with pytest.raises(DomainValidationError):
        plan_installments(
            total_value=Decimal("10"),
            count=2,
            start_date=date(2024, 1, 1),
            category="x",
            kind="transfer",
            description="",
            is_recurring=False,
            user_id=USER_ID,
        )


@pytest.mark.parametrize("count,expected", [(1, [Decimal("100.10")]), (2, [Decimal("50.05")] * 2)])
def test_float_total_has_no_binary_noise(count, expected):
    """Test a float total is read by its decimal text, not its binary value"""
    batch = plan_installments(
        total_value=100.1,
        count=count,
        start_date=date(2024, 1, 15),
        category="Electronics",
        kind="expense",
        description="Notebook",
        is_recurring=False,
        user_id=USER_ID,
    )

    assert [d.value for d in batch.drafts] == expected
    assert batch.drafts[0].value.as_tuple().exponent >= -2
