"""Unit tests for discount, fine and interest evaluation"""

import pytest
from decimal import Decimal
from edunexia_charges.domain.models import DiscountRule, FineRule, InterestRule, RuleType
from edunexia_charges.domain.rules import discounted_value, evaluate, evaluate_interest, late_payment_preview
from edunexia_charges.domain.exceptions import ChargeValidationError


def test_evaluate_disabled_rule_is_zero():
    rule = DiscountRule(enabled=False, type=RuleType.FIXED, value=Decimal("10"))
    assert evaluate(rule, 10000) == 0


def test_evaluate_fixed_discount():
    rule = DiscountRule(enabled=True, type=RuleType.FIXED, value=Decimal("12.50"))
    assert evaluate(rule, 10000) == 1250


def test_evaluate_percentage_discount():
    rule = DiscountRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("5"))
    assert evaluate(rule, 10000) == 500


def test_evaluate_percentage_rounds_half_up():
    """2.5% of R$ 0,99 = 2.475 cents -> 2 cents; 1.5% of R$ 1,00 = 1.5 cents -> 2 cents"""
    assert evaluate(FineRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("2.5")), 99) == 2
    assert evaluate(FineRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("1.5")), 100) == 2


def test_evaluate_percentage_clamped_to_base():
    """A discount over 100% never exceeds the base value"""
    rule = DiscountRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("150"))
    assert evaluate(rule, 5000) == 5000


def test_evaluate_fixed_clamped_to_base():
    rule = DiscountRule(enabled=True, type=RuleType.FIXED, value=Decimal("80"))
    assert evaluate(rule, 5000) == 5000
    assert discounted_value(5000, rule) == 0


def test_evaluate_negative_value_rejected():
    rule = FineRule(enabled=True, type=RuleType.FIXED, value=Decimal("-1"))
    with pytest.raises(ChargeValidationError) as exc_info:
        evaluate(rule, 10000)
    assert exc_info.value.field == "fine"


def test_evaluate_interest_is_percentage():
    rule = InterestRule(enabled=True, value=Decimal("1"))
    assert evaluate_interest(rule, 10000) == 100


def test_discounted_value_does_not_touch_base():
    rule = DiscountRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("10"), due_date_limit_days=3)
    assert discounted_value(20000, rule) == 18000


def test_late_payment_preview():
    """2% fine plus 1% a month pro rata over 15 days"""
    fine = FineRule(enabled=True, type=RuleType.PERCENTAGE, value=Decimal("2"))
    interest = InterestRule(enabled=True, value=Decimal("1"))

    assert late_payment_preview(10000, fine, interest, days_late=15) == 200 + 50
    assert late_payment_preview(10000, fine, interest, days_late=0) == 0
