"""Installment splitting for charges paid in parts"""

from typing import List
from edunexia_charges.domain.models import Installment, InstallmentPlan
from edunexia_charges.domain.exceptions import ArithmeticInconsistencyError, ChargeValidationError


def validate_installment_count(count: int) -> None:
    """Reject non-integer or non-positive installment counts"""
    if isinstance(count, bool) or not isinstance(count, int):
        raise ChargeValidationError("installment_count", "Installment count must be an integer")
    if count < 1:
        raise ChargeValidationError("installment_count", "Installment count must be at least 1")


def split_installments(total_cents: int, count: int) -> InstallmentPlan:
    """
    Split a charge total into `count` installments.

    Requirements:
    - Every installment but the last is floor(total / count)
    - Last installment absorbs the rounding remainder (< count cents)
    - Sum of installments equals the total exactly

    Args:
        total_cents: Charge total, >= 0
        count: Number of installments, >= 1

    Returns:
        InstallmentPlan with installments labeled "Installment i of count"

    Example:
        R$ 100,00 in 3 → [33.33, 33.33, 33.34]
        10000 cents // 3 = 3333 base, remainder 1
        Last installment: 3333 + 1 = 3334
    """
    validate_installment_count(count)
    if total_cents < 0:
        raise ChargeValidationError("value", "Charge value cannot be negative")

    base_amount = total_cents // count
    remainder = total_cents - base_amount * count

    installments: List[Installment] = []
    for number in range(1, count + 1):
        # Last installment absorbs remainder to ensure exact total
        amount = base_amount + (remainder if number == count else 0)
        installments.append(
            Installment(
                number=number,
                description=f"Installment {number} of {count}",
                amount_cents=amount,
            )
        )

    plan = InstallmentPlan(
        count=count,
        per_installment_cents=base_amount,
        remainder_adjustment_cents=remainder,
        installments=tuple(installments),
    )
    verify_plan(plan, total_cents)
    return plan


def verify_plan(plan: InstallmentPlan, total_cents: int) -> None:
    """Raise if the plan does not reconstruct the total to the cent"""
    installment_sum = sum(inst.amount_cents for inst in plan.installments)
    if installment_sum != total_cents or plan.total_cents != total_cents or len(plan.installments) != plan.count:
        raise ArithmeticInconsistencyError(
            f"Installments sum to {installment_sum} cents, expected {total_cents}"
        )
