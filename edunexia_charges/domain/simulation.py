"""Charge simulation shown on the summary step and the simulate endpoint"""

from dataclasses import dataclass
from typing import Dict, List

from edunexia_charges.domain.models import BillingMethod, ChargeDraft, InstallmentPlan
from edunexia_charges.domain.installments import split_installments
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.money import format_brl
from edunexia_charges.domain import rules


@dataclass
class ChargeSimulation:
    """Advisory figures for a draft; nothing here is submitted"""

    total_cents: int
    plan: InstallmentPlan
    net_value_per_installment: Dict[BillingMethod, int]
    net_value_last_installment: Dict[BillingMethod, int]
    discount_cents: int
    discounted_total_cents: int
    fine_cents: int
    monthly_interest_cents: int

    def display_lines(self) -> List[str]:
        lines = [f"Total: {format_brl(self.total_cents)}"]
        for inst in self.plan.installments:
            lines.append(f"{inst.description}: {format_brl(inst.amount_cents)}")
        for method, net in self.net_value_per_installment.items():
            lines.append(f"Net per installment ({method.value}): {format_brl(net)}")
        # Last installment carries the split remainder
        if self.plan.remainder_adjustment_cents > 0:
            for method, net in self.net_value_last_installment.items():
                lines.append(f"Net last installment ({method.value}): {format_brl(net)}")
        if self.discount_cents:
            lines.append(f"Discount: {format_brl(self.discount_cents)} (pay {format_brl(self.discounted_total_cents)})")
        if self.fine_cents:
            lines.append(f"Late fine: {format_brl(self.fine_cents)}")
        if self.monthly_interest_cents:
            lines.append(f"Interest per month: {format_brl(self.monthly_interest_cents)}")
        return lines


def simulate(draft: ChargeDraft, calculator: NetValueCalculator) -> ChargeSimulation:
    """Split the draft total, preview rules and net value per selected rail"""
    count = draft.installment_count if draft.installment_enabled else 1
    plan = split_installments(draft.value_cents, count)
    last_cents = plan.installments[-1].amount_cents

    total = draft.value_cents
    discount_cents = rules.evaluate(draft.discount, total)

    return ChargeSimulation(
        total_cents=total,
        plan=plan,
        net_value_per_installment=calculator.net_values(plan.per_installment_cents, draft.billing_methods),
        net_value_last_installment=calculator.net_values(last_cents, draft.billing_methods),
        discount_cents=discount_cents,
        discounted_total_cents=total - discount_cents,
        fine_cents=rules.evaluate(draft.fine, total),
        monthly_interest_cents=rules.evaluate_interest(draft.interest, total),
    )
