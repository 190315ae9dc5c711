"""Domain models - pure Python dataclasses representing billing entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class RuleType(str, Enum):
    """How a discount or fine value is interpreted"""

    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


class BillingMethod(str, Enum):
    """Accepted payment rails"""

    BOLETO_PIX = "BOLETO_PIX"
    CREDIT_CARD = "CREDIT_CARD"


@dataclass(frozen=True)
class DiscountRule:
    """Early-payment discount forwarded to the gateway"""

    enabled: bool = False
    type: RuleType = RuleType.FIXED
    value: Decimal = Decimal("0")  # reais for FIXED, percent for PERCENTAGE
    due_date_limit_days: int = 0


@dataclass(frozen=True)
class FineRule:
    """Late-payment fine forwarded to the gateway"""

    enabled: bool = False
    type: RuleType = RuleType.PERCENTAGE
    value: Decimal = Decimal("0")


@dataclass(frozen=True)
class InterestRule:
    """Monthly interest rate (percent) forwarded to the gateway"""

    enabled: bool = False
    value: Decimal = Decimal("0")


@dataclass(frozen=True)
class Installment:
    """Single payment in an installment plan"""

    number: int
    description: str
    amount_cents: int


@dataclass(frozen=True)
class InstallmentPlan:
    """Split of a charge total into ordered installments"""

    count: int
    per_installment_cents: int
    remainder_adjustment_cents: int
    installments: Tuple[Installment, ...]

    @property
    def total_cents(self) -> int:
        return self.per_installment_cents * self.count + self.remainder_adjustment_cents


@dataclass(frozen=True)
class ChargeDraft:
    """Charge fields as captured by the form or the payment-link wizard"""

    customer_id: str = ""
    description: str = ""
    value_cents: int = 0
    free_value: bool = False  # payer chooses the amount
    due_date: Optional[date] = None
    billing_methods: FrozenSet[BillingMethod] = field(default_factory=frozenset)
    installment_enabled: bool = False
    installment_count: int = 1
    discount: DiscountRule = field(default_factory=DiscountRule)
    fine: FineRule = field(default_factory=FineRule)
    interest: InterestRule = field(default_factory=InterestRule)
    external_reference: Optional[str] = None


@dataclass(frozen=True)
class ChargeRequest:
    """Validated charge ready for the gateway"""

    customer_id: str
    total_cents: int
    description: str
    due_date: date
    billing_methods: FrozenSet[BillingMethod]
    installment_plan: Optional[InstallmentPlan] = None
    discount: Optional[DiscountRule] = None
    fine: Optional[FineRule] = None
    interest: Optional[InterestRule] = None
    external_reference: Optional[str] = None


@dataclass
class ChargeResult:
    """Gateway response for a created or fetched charge"""

    id: str
    status: str
    value_cents: int
    invoice_url: Optional[str] = None
    net_value_cents: Optional[int] = None


@dataclass
class Customer:
    """Entry of the gateway customer directory"""

    id: str
    name: str
    cpf_cnpj: str
