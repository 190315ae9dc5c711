"""Discount, fine and interest evaluation for on-screen previews

Evaluated amounts are advisory. The submitted charge total is never modified;
the gateway applies the rules against the actual payment date.
"""

from decimal import Decimal
from typing import Union

from edunexia_charges.domain.models import DiscountRule, FineRule, InterestRule, RuleType
from edunexia_charges.domain.money import round_cents, to_cents
from edunexia_charges.domain.exceptions import ChargeValidationError

DAYS_PER_MONTH = 30


def _clamp(amount_cents: int, base_cents: int) -> int:
    return max(0, min(amount_cents, base_cents))


def _percentage_of(base_cents: int, percent: Decimal) -> int:
    return round_cents(Decimal(base_cents) * percent / 100)


def validate_rule(rule: Union[DiscountRule, FineRule, InterestRule], field: str) -> None:
    """Reject negative rule values and negative discount windows"""
    if rule.value < 0:
        raise ChargeValidationError(field, f"{field.capitalize()} value cannot be negative")
    if isinstance(rule, DiscountRule) and rule.due_date_limit_days < 0:
        raise ChargeValidationError(field, "Discount day limit cannot be negative")


def evaluate(rule: Union[DiscountRule, FineRule], base_cents: int) -> int:
    """
    Convert a discount or fine rule into cents against a base value.

    FIXED values are reais; PERCENTAGE values are percent of the base.
    The result is clamped to [0, base_cents]. Disabled rules evaluate to 0.
    """
    if not rule.enabled:
        return 0
    field = "discount" if isinstance(rule, DiscountRule) else "fine"
    validate_rule(rule, field)

    if rule.type == RuleType.FIXED:
        amount = to_cents(rule.value, field=field)
    else:
        amount = _percentage_of(base_cents, rule.value)
    return _clamp(amount, base_cents)


def evaluate_interest(rule: InterestRule, base_cents: int) -> int:
    """Monthly interest amount; interest is always a percentage rate"""
    if not rule.enabled:
        return 0
    validate_rule(rule, "interest")
    return _clamp(_percentage_of(base_cents, rule.value), base_cents)


def discounted_value(base_cents: int, discount: DiscountRule) -> int:
    """Amount due when the discount applies"""
    return base_cents - evaluate(discount, base_cents)


def late_payment_preview(base_cents: int, fine: FineRule, interest: InterestRule, days_late: int) -> int:
    """
    Extra amount owed when paying `days_late` days after the due date.

    Fine is charged once; interest accrues pro rata over a 30-day month.
    """
    if days_late <= 0:
        return 0
    fine_cents = evaluate(fine, base_cents)
    monthly_interest = evaluate_interest(interest, base_cents)
    interest_cents = round_cents(Decimal(monthly_interest) * days_late / DAYS_PER_MONTH)
    return fine_cents + _clamp(interest_cents, base_cents)
