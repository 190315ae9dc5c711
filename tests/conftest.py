"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from fastapi.testclient import TestClient
from edunexia_charges.api.main import create_app
from edunexia_charges.api.dependencies import WizardRegistry, get_gateway_client, get_wizard_registry
from edunexia_charges.domain.models import BillingMethod, ChargeDraft, ChargeRequest, ChargeResult
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.exceptions import GatewayError


class FakeGateway:
    """Records submissions instead of calling the payment gateway"""

    def __init__(self, error: Optional[GatewayError] = None):
        self.error = error
        self.requests: List[ChargeRequest] = []
        self.idempotency_keys: List[Optional[str]] = []

    async def create_charge(self, request: ChargeRequest, idempotency_key: Optional[str] = None) -> ChargeResult:
        self.requests.append(request)
        self.idempotency_keys.append(idempotency_key)
        if self.error is not None:
            raise self.error
        return ChargeResult(id=f"pay_{len(self.requests)}", status="PENDING", value_cents=request.total_cents)


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def calculator() -> NetValueCalculator:
    return NetValueCalculator({"BOLETO_PIX": Decimal("0.04"), "CREDIT_CARD": Decimal("0.05")})


@pytest.fixture
def valid_draft() -> ChargeDraft:
    """Draft that passes every assembler requirement"""
    return ChargeDraft(
        customer_id="cus_000005219613",
        description="Enrollment - Pedagogy",
        value_cents=10000,
        due_date=date.today() + timedelta(days=7),
        billing_methods=frozenset({BillingMethod.BOLETO_PIX}),
    )


@pytest.fixture
def client(fake_gateway: FakeGateway) -> TestClient:
    """Create FastAPI test client with a fake gateway and fresh wizard registry"""
    app = create_app()
    registry = WizardRegistry()

    app.dependency_overrides[get_gateway_client] = lambda: fake_gateway
    app.dependency_overrides[get_wizard_registry] = lambda: registry
    return TestClient(app)
