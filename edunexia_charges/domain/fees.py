"""Net value received per billing method after the gateway fee"""

from decimal import Decimal
from typing import Dict, Iterable, Mapping, Union

from edunexia_charges.domain.models import BillingMethod
from edunexia_charges.domain.money import round_cents
from edunexia_charges.domain.exceptions import ChargeValidationError


class NetValueCalculator:
    """Applies per-rail fee rates, e.g. {"BOLETO_PIX": 0.04, "CREDIT_CARD": 0.05}"""

    def __init__(self, fee_rates: Mapping[Union[str, BillingMethod], Union[Decimal, float, str]]):
        self.fee_rates: Dict[BillingMethod, Decimal] = {}
        for method, rate in fee_rates.items():
            rate = Decimal(str(rate))
            if not Decimal("0") <= rate < Decimal("1"):
                raise ValueError(f"Fee rate for {method} must be in [0, 1), got {rate}")
            self.fee_rates[BillingMethod(method)] = rate

    def fee_rate(self, method: BillingMethod) -> Decimal:
        try:
            return self.fee_rates[method]
        except KeyError:
            raise ChargeValidationError("billing_methods", f"No fee rate configured for {method.value}") from None

    def net_value(self, gross_cents: int, method: BillingMethod) -> int:
        """gross * (1 - feeRate), rounded to the cent"""
        return round_cents(Decimal(gross_cents) * (1 - self.fee_rate(method)))

    def net_values(self, gross_cents: int, methods: Iterable[BillingMethod]) -> Dict[BillingMethod, int]:
        return {method: self.net_value(gross_cents, method) for method in sorted(methods, key=lambda m: m.value)}
