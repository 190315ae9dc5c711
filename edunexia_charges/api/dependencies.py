"""Dependency injection for FastAPI endpoints"""

import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from fastapi import Request
from edunexia_charges.config import settings
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.wizard import PaymentLinkWizard
from edunexia_charges.infrastructure.clients.gateway import GatewayClient
from edunexia_charges.infrastructure.clients.customers import CustomerDirectoryClient


class WizardRegistry:
    """
    In-process wizard sessions keyed by id; not persisted.

    Sessions idle for longer than ttl_seconds are dropped, and once
    max_sessions is reached the least recently used one is evicted.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = settings.wizard_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_sessions = settings.wizard_max_sessions if max_sessions is None else max_sessions
        self._clock = clock
        self._wizards: "OrderedDict[str, Tuple[float, PaymentLinkWizard]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._wizards)

    def create(self, step_gating: Optional[bool] = None) -> Tuple[str, PaymentLinkWizard]:
        self._purge_expired()
        while self._wizards and len(self._wizards) >= self.max_sessions:
            self._wizards.popitem(last=False)

        wizard_id = str(uuid.uuid4())
        wizard = PaymentLinkWizard(
            step_gating=settings.wizard_step_gating if step_gating is None else step_gating,
            max_installments=settings.max_installments,
        )
        self._wizards[wizard_id] = (self._clock(), wizard)
        return wizard_id, wizard

    def get(self, wizard_id: str) -> Optional[PaymentLinkWizard]:
        self._purge_expired()
        entry = self._wizards.get(wizard_id)
        if entry is None:
            return None
        # Touching a session keeps it alive
        self._wizards[wizard_id] = (self._clock(), entry[1])
        self._wizards.move_to_end(wizard_id)
        return entry[1]

    def discard(self, wizard_id: str) -> None:
        self._wizards.pop(wizard_id, None)

    def _purge_expired(self) -> None:
        cutoff = self._clock() - self.ttl_seconds
        # Oldest access first
        while self._wizards:
            wizard_id, (touched_at, _) = next(iter(self._wizards.items()))
            if touched_at > cutoff:
                break
            del self._wizards[wizard_id]


_wizard_registry = WizardRegistry()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_gateway_client() -> GatewayClient:
    """Provide payment gateway client instance"""
    return GatewayClient()


def get_customer_client() -> CustomerDirectoryClient:
    """Provide customer directory client instance"""
    return CustomerDirectoryClient()


def get_fee_calculator() -> NetValueCalculator:
    """Net value calculator built from the configured fee rates"""
    return NetValueCalculator(settings.fee_rates)


def get_wizard_registry() -> WizardRegistry:
    return _wizard_registry
