"""Charge payload assembly - validated draft in, gateway-ready request out"""

from typing import Any, Dict, List

from edunexia_charges.domain.models import BillingMethod, ChargeDraft, ChargeRequest, RuleType
from edunexia_charges.domain.installments import split_installments, validate_installment_count
from edunexia_charges.domain.money import from_cents, to_cents
from edunexia_charges.domain.rules import validate_rule
from edunexia_charges.domain.exceptions import ChargeValidationError

DEFAULT_MAX_INSTALLMENTS = 12

# Gateway rail codes per billing method
RAIL_CODES = {
    BillingMethod.BOLETO_PIX: ("BOLETO", "PIX"),
    BillingMethod.CREDIT_CARD: ("CREDIT_CARD",),
}


def validate_info(draft: ChargeDraft) -> None:
    """Customer, value, description and due date"""
    if not draft.customer_id or not draft.customer_id.strip():
        raise ChargeValidationError("customer_id", "Select the customer for the charge")
    if draft.value_cents < 0:
        raise ChargeValidationError("value", "Charge value cannot be negative")
    if draft.value_cents == 0 and not draft.free_value:
        raise ChargeValidationError("value", "Enter the charge value")
    if not draft.description or not draft.description.strip():
        raise ChargeValidationError("description", "Enter the charge description")
    if draft.due_date is None:
        raise ChargeValidationError("due_date", "Enter the charge due date")


def validate_payment_options(draft: ChargeDraft, max_installments: int = DEFAULT_MAX_INSTALLMENTS) -> None:
    """Billing methods and installment count"""
    if not draft.billing_methods:
        raise ChargeValidationError("billing_methods", "Select at least one billing method")
    if draft.installment_enabled:
        validate_installment_count(draft.installment_count)
        if draft.installment_count > max_installments:
            raise ChargeValidationError(
                "installment_count", f"Installment count cannot exceed {max_installments}"
            )


def validate_rules(draft: ChargeDraft) -> None:
    """Rule values are non-negative and a discount never exceeds the charge"""
    if draft.discount.enabled:
        validate_rule(draft.discount, "discount")
        discount = draft.discount
        if discount.type == RuleType.PERCENTAGE and discount.value > 100:
            raise ChargeValidationError("discount", "Discount cannot exceed 100%")
        if (
            discount.type == RuleType.FIXED
            and not draft.free_value
            and to_cents(discount.value, field="discount") > draft.value_cents
        ):
            raise ChargeValidationError("discount", "Discount cannot exceed the charge value")
    if draft.fine.enabled:
        validate_rule(draft.fine, "fine")
    if draft.interest.enabled:
        validate_rule(draft.interest, "interest")


def _active(rule):
    # Enabled rules with a zero value are not sent
    return rule if rule.enabled and rule.value > 0 else None


def assemble_charge(draft: ChargeDraft, max_installments: int = DEFAULT_MAX_INSTALLMENTS) -> ChargeRequest:
    """
    Build the ChargeRequest for a draft.

    Raises the first ChargeValidationError found; nothing is partially built.
    The installment plan is omitted for single charges and rules are included
    only when enabled with a non-zero value.
    """
    validate_info(draft)
    validate_payment_options(draft, max_installments)
    validate_rules(draft)

    installment_plan = None
    if draft.installment_enabled and draft.installment_count > 1:
        installment_plan = split_installments(draft.value_cents, draft.installment_count)

    return ChargeRequest(
        customer_id=draft.customer_id.strip(),
        total_cents=draft.value_cents,
        description=draft.description.strip(),
        due_date=draft.due_date,
        billing_methods=frozenset(draft.billing_methods),
        installment_plan=installment_plan,
        discount=_active(draft.discount),
        fine=_active(draft.fine),
        interest=_active(draft.interest),
        external_reference=draft.external_reference or None,
    )


def billing_type(methods) -> str:
    """Comma-joined gateway rail list, e.g. 'BOLETO,PIX,CREDIT_CARD'"""
    rails: List[str] = []
    for method in sorted(methods, key=lambda m: m.value):
        rails.extend(RAIL_CODES[method])
    return ",".join(rails)


def to_gateway_payload(request: ChargeRequest) -> Dict[str, Any]:
    """Serialize a ChargeRequest as the gateway JSON body"""
    payload: Dict[str, Any] = {
        "customerId": request.customer_id,
        "value": float(from_cents(request.total_cents)),
        "description": request.description,
        "dueDate": request.due_date.isoformat(),
        "billingType": billing_type(request.billing_methods),
    }

    if request.installment_plan is not None:
        payload["installmentCount"] = request.installment_plan.count
        payload["installmentValue"] = float(from_cents(request.installment_plan.per_installment_cents))

    if request.discount is not None:
        discount = request.discount
        payload["discount"] = {
            "value": _rule_value(discount.value, discount.type.value, "discount"),
            "dueDateLimitDays": discount.due_date_limit_days,
            "type": discount.type.value,
        }

    if request.fine is not None:
        payload["fine"] = {
            "value": _rule_value(request.fine.value, request.fine.type.value, "fine"),
            "type": request.fine.type.value,
        }

    if request.interest is not None:
        payload["interest"] = {"value": float(request.interest.value), "type": "PERCENTAGE"}

    if request.external_reference:
        payload["externalReference"] = request.external_reference

    return payload


def _rule_value(value, rule_type: str, field: str) -> float:
    # Fixed amounts travel as reais with two places
    if rule_type == "FIXED":
        return float(from_cents(to_cents(value, field=field)))
    return float(value)
