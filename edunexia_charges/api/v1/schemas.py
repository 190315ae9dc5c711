"""Pydantic schemas for API request/response validation"""

import dataclasses
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from edunexia_charges.domain.models import (
    BillingMethod,
    ChargeDraft,
    DiscountRule,
    FineRule,
    InterestRule,
    RuleType,
)
from edunexia_charges.domain.simulation import ChargeSimulation


class DiscountSchema(BaseModel):
    enabled: bool = False
    type: RuleType = RuleType.FIXED
    value: Decimal = Decimal("0")
    due_date_limit_days: int = 0

    def to_domain(self) -> DiscountRule:
        return DiscountRule(**self.model_dump())


class FineSchema(BaseModel):
    enabled: bool = False
    type: RuleType = RuleType.PERCENTAGE
    value: Decimal = Decimal("0")

    def to_domain(self) -> FineRule:
        return FineRule(**self.model_dump())


class InterestSchema(BaseModel):
    """Monthly percentage rate"""

    enabled: bool = False
    value: Decimal = Decimal("0")

    def to_domain(self) -> InterestRule:
        return InterestRule(**self.model_dump())


DRAFT_FIELDS = {f.name for f in dataclasses.fields(ChargeDraft)}
RULE_FIELDS = {"discount", "fine", "interest"}
NULLABLE_FIELDS = {"due_date", "external_reference"}


def to_draft_changes(fields: Dict[str, Any], schema: BaseModel) -> Dict[str, Any]:
    """Map schema fields onto ChargeDraft keyword arguments"""
    changes: Dict[str, Any] = {}
    for name, value in fields.items():
        if name not in DRAFT_FIELDS:
            continue
        if value is None and name not in NULLABLE_FIELDS:
            continue
        if name in RULE_FIELDS:
            changes[name] = getattr(schema, name).to_domain()
        elif name == "billing_methods":
            changes[name] = frozenset(BillingMethod(m) for m in value)
        else:
            changes[name] = value
    return changes


class ChargeDraftSchema(BaseModel):
    """Charge fields as captured by the form"""

    customer_id: str = ""
    description: str = ""
    value_cents: int = Field(0, description="Charge total in cents")
    free_value: bool = False
    due_date: Optional[date] = None
    billing_methods: List[BillingMethod] = Field(default_factory=list)
    installment_enabled: bool = False
    installment_count: int = 1
    discount: DiscountSchema = Field(default_factory=DiscountSchema)
    fine: FineSchema = Field(default_factory=FineSchema)
    interest: InterestSchema = Field(default_factory=InterestSchema)
    external_reference: Optional[str] = None

    def to_draft(self) -> ChargeDraft:
        return ChargeDraft(**to_draft_changes(dict(self), self))

    @classmethod
    def from_draft(cls, draft: ChargeDraft) -> "ChargeDraftSchema":
        return cls(
            customer_id=draft.customer_id,
            description=draft.description,
            value_cents=draft.value_cents,
            free_value=draft.free_value,
            due_date=draft.due_date,
            billing_methods=sorted(draft.billing_methods, key=lambda m: m.value),
            installment_enabled=draft.installment_enabled,
            installment_count=draft.installment_count,
            discount=DiscountSchema(**vars(draft.discount)),
            fine=FineSchema(**vars(draft.fine)),
            interest=InterestSchema(**vars(draft.interest)),
            external_reference=draft.external_reference,
        )


class ChargeCreateRequest(ChargeDraftSchema):
    """Request body for POST /v1/charges"""

    idempotency_key: Optional[str] = None


class InstallmentSchema(BaseModel):
    number: int
    description: str
    amount_cents: int


class SimulationResponse(BaseModel):
    """Response for POST /v1/charges/simulate"""

    total_cents: int
    installment_count: int
    per_installment_cents: int
    remainder_adjustment_cents: int
    installments: List[InstallmentSchema]
    net_value_per_installment: Dict[BillingMethod, int]
    net_value_last_installment: Dict[BillingMethod, int]
    discount_cents: int
    discounted_total_cents: int
    fine_cents: int
    monthly_interest_cents: int
    display: List[str]

    @classmethod
    def from_simulation(cls, simulation: ChargeSimulation) -> "SimulationResponse":
        plan = simulation.plan
        return cls(
            total_cents=simulation.total_cents,
            installment_count=plan.count,
            per_installment_cents=plan.per_installment_cents,
            remainder_adjustment_cents=plan.remainder_adjustment_cents,
            installments=[InstallmentSchema(**vars(inst)) for inst in plan.installments],
            net_value_per_installment=simulation.net_value_per_installment,
            net_value_last_installment=simulation.net_value_last_installment,
            discount_cents=simulation.discount_cents,
            discounted_total_cents=simulation.discounted_total_cents,
            fine_cents=simulation.fine_cents,
            monthly_interest_cents=simulation.monthly_interest_cents,
            display=simulation.display_lines(),
        )


class ChargeResponse(BaseModel):
    """Gateway charge as returned by the charge endpoints"""

    charge_id: str
    status: str
    value_cents: int
    invoice_url: Optional[str] = None
    net_value_cents: Optional[int] = None


class CustomerSchema(BaseModel):
    id: str
    name: str
    cpf_cnpj: str


class CustomerListResponse(BaseModel):
    customers: List[CustomerSchema]


class WizardCreateRequest(BaseModel):
    step_gating: Optional[bool] = None


class WizardUpdateRequest(BaseModel):
    """Partial field update; only fields present in the body change"""

    customer_id: Optional[str] = None
    description: Optional[str] = None
    value_cents: Optional[int] = None
    free_value: Optional[bool] = None
    due_date: Optional[date] = None
    billing_methods: Optional[List[BillingMethod]] = None
    installment_enabled: Optional[bool] = None
    installment_count: Optional[int] = None
    discount: Optional[DiscountSchema] = None
    fine: Optional[FineSchema] = None
    interest: Optional[InterestSchema] = None
    external_reference: Optional[str] = None

    def to_changes(self) -> Dict[str, Any]:
        return to_draft_changes(self.model_dump(exclude_unset=True), self)


class WizardResponse(BaseModel):
    wizard_id: str
    state: str
    step: int
    draft: ChargeDraftSchema
    last_error: Optional[str] = None
    charge_id: Optional[str] = None
